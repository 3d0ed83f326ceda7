"""Failure messages for strict matching calls."""

from typing import Sequence

from uparse.terminals import Terminal, TerminalRef


def _render(ref: TerminalRef) -> str:
    if isinstance(ref, Terminal):
        return ref.display()
    return ref


def build_message(
    terms: Sequence[TerminalRef],
    any_mode: bool,
    failed_index: int,
    failed_pos: int,
) -> str:
    """
    Build "expected ..." for a failed call.

    Lists the terminals from ``failed_index`` onward. Kinds are shown as
    ``<name>``, literal text as is. "one of: " is added when several
    alternatives were tried (any mode), and "at position N" (1-based)
    when the failure is past the start of the line.
    """
    msg = "expected "
    if any_mode and failed_index < len(terms) - 1:
        msg += "one of: "
    msg += ", ".join(_render(t) for t in terms[failed_index:])
    if failed_pos > 0:
        msg += f" at position {failed_pos + 1}"
    return msg


def point_at(line: str, pos: int) -> str:
    """The line with a caret under ``pos`` on the next line."""
    pos = max(0, min(pos, len(line)))
    return f"{line}\n{' ' * pos}^"
