import re
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, Optional

from uparse.config import get_settings
from uparse.diagnostics import build_message
from uparse.errors import IntegrityError, ParseError
from uparse.log import get_logger
from uparse.terminals import (
    Kind,
    Terminal,
    TerminalRef,
    TerminalRegistry,
    default_registry,
)

logger = get_logger(__name__)

# ASCII classes only
_SPACE = re.compile(r"[ \t\n\r\v\f]*")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_IDENT_WILDCARD = re.compile(r"[A-Za-z_?*\[][A-Za-z0-9_?*\[!\-\]]*")
_WILDCARD_FLAG = re.compile(r"[?*\[]")
_DIGITS = re.compile(r"[0-9]+")
_WORD = re.compile(r"[^ \t\n\r\v\f]+")

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
DIGITS = "0123456789"

INT_MAX = 2**63 - 1
INT_MAX_DIGITS = len(str(INT_MAX))


class Mode(Enum):
    ANY = "any"  # first terminal that matches wins
    ALL = "all"  # every terminal, in sequence


# ---------------- results ----------------
class Capture:
    """What one terminal matched in the most recent call."""

    __slots__ = ("term", "start", "length", "value", "_line")

    def __init__(self):
        self.term: Optional[Terminal] = None
        self.start = 0
        self.length = 0
        self.value = None
        self._line = ""

    def reset(self, term: Terminal, line: str, start: int) -> None:
        self.term = term
        self._line = line
        self.start = start
        self.length = 0
        self.value = None

    @property
    def text(self) -> str:
        return self._line[self.start : self.start + self.length]

    def substr(self, limit: int) -> str:
        """The matched text, cut to at most ``limit`` characters."""
        if limit < 0:
            raise ValueError("limit must not be negative")
        return self.text[:limit]

    def __repr__(self):
        return f"Capture({self.term!r}, {self.text!r}, value={self.value!r})"


class Recovery:
    """Outcome of a ``Scanner.recovery()`` block; true if it caught an error."""

    __slots__ = ("failed", "message", "pos")

    def __init__(self):
        self.failed = False
        self.message: Optional[str] = None
        self.pos: Optional[int] = None

    def __bool__(self):
        return self.failed


# ---------------- scanner ----------------
class Scanner:
    """
    Matches terminals against one line of text at a time.

    The caller feeds a line, then drives the scan with ``accept``,
    ``accept_all``, ``expect`` and ``expect_all``. Each call either commits
    the cursor past what it matched or leaves it where it was. Results of
    the last call are in ``captures``.

    Strict calls and fatal conditions (unterminated string, integer
    overflow, errors raised by user terminals) raise ``ParseError``, which
    unwinds to the innermost ``recovery()`` block.
    """

    def __init__(
        self,
        line: Optional[str] = None,
        registry: Optional[TerminalRegistry] = None,
        max_captures: Optional[int] = None,
        max_message: Optional[int] = None,
    ):
        settings = get_settings()
        self.registry = registry if registry is not None else default_registry
        if max_captures is None:
            max_captures = settings.max_captures
        self.max_message = (
            max_message if max_message is not None else settings.max_message
        )
        self.captures: List[Capture] = [Capture() for _ in range(max_captures)]

        self.line: Optional[str] = None
        self.pos = 0
        self.matched = -1
        self.failed_index = 0
        self.failed_pos = 0

        self._recovery: Optional[Recovery] = None
        self._message = ""

        self._matchers = {
            Kind.END_OF_INPUT: self._match_eol,
            Kind.QUOTED_STRING: self._match_string,
            Kind.IDENTIFIER: self._match_ident,
            Kind.IDENTIFIER_WILDCARD: self._match_identwc,
            Kind.INTEGER: self._match_integer,
            Kind.WORD: self._match_word,
            Kind.USER: self._match_user,
            Kind.LITERAL: self._match_literal,
        }

        if line is not None:
            self.feed(line)

    # line handling
    def feed(self, line: str) -> None:
        """Start scanning ``line``; a trailing newline is dropped."""
        if not isinstance(line, str):
            raise TypeError(f"line must be str, got {type(line).__name__}")
        if line.endswith("\r\n"):
            line = line[:-2]
        elif line.endswith("\n"):
            line = line[:-1]
        if "\0" in line:
            raise ValueError("line must not contain NUL characters")
        self.line = line
        self.pos = 0
        self.matched = -1
        self.failed_index = 0
        self.failed_pos = 0

    @property
    def at_end(self) -> bool:
        return self.line is not None and self.pos >= len(self.line)

    @property
    def rest(self) -> str:
        return "" if self.line is None else self.line[self.pos :]

    def skip_whitespace(self) -> None:
        self.pos = self._skip_space(self.pos)

    def _skip_space(self, pos: int) -> int:
        return _SPACE.match(self.line, pos).end()

    def _char(self, pos: int) -> str:
        return self.line[pos] if pos < len(self.line) else ""

    # conditional forms
    def accept(self, *terms: TerminalRef) -> bool:
        """Take the first terminal that matches; False if none do."""
        return self.match(Mode.ANY, *terms)

    def accept_all(self, *terms: TerminalRef) -> bool:
        """Match every terminal in order; False (and no progress) otherwise."""
        return self.match(Mode.ALL, *terms)

    def expect(self, *terms: TerminalRef) -> None:
        """Like ``accept``, but a failure raises "expected ..."."""
        if not self.match(Mode.ANY, *terms):
            self._fail(terms, any_mode=True)

    def expect_all(self, *terms: TerminalRef) -> None:
        """Like ``accept_all``, but a failure raises "expected ..."."""
        if not self.match(Mode.ALL, *terms):
            self._fail(terms, any_mode=False)

    def _fail(self, terms, any_mode: bool) -> None:
        msg = build_message(terms, any_mode, self.failed_index, self.failed_pos)
        self._raise(msg, self.failed_pos)

    # core matcher
    def match(self, mode: Mode, *terms: TerminalRef) -> bool:
        """
        Match ``terms`` at the cursor.

        ANY: each terminal is tried from the same start, the first that
        matches commits the cursor and sets ``matched`` to its index. If none
        match the cursor stays put and ``failed_index`` is 0.

        ALL: terminals match one after another. On the first failure the
        cursor goes back to where the call started and ``failed_index`` /
        ``failed_pos`` tell which terminal failed and where.

        Leading whitespace is skipped before each terminal and trailing
        whitespace after each match. ``captures[i]`` holds the result for
        ``terms[i]``.
        """
        if self.line is None:
            raise IntegrityError("no line fed to the scanner")
        if len(terms) > len(self.captures):
            raise IntegrityError(
                f"{len(terms)} terminals given, at most {len(self.captures)} allowed"
            )

        resolved = [self.registry.resolve(t) for t in terms]
        start = self.pos
        for i, term in enumerate(resolved):
            self.captures[i].reset(term, self.line, start)

        all_mode = mode is Mode.ALL
        self.matched = -1
        self.failed_pos = start
        lp = start
        for i, term in enumerate(resolved):
            lp = self._skip_space(lp)
            self.captures[i].start = lp
            end = self._matchers[term.kind](term, lp, i)

            if end is None:
                if all_mode:
                    self.failed_index = i
                    self.failed_pos = lp
                    self.pos = start
                    return False
                lp = start
                continue

            end = self._skip_space(end)
            if all_mode:
                lp = end
                continue
            self.pos = end
            self.matched = i
            return True

        if all_mode:
            self.pos = lp
            return True
        self.failed_index = 0
        self.pos = start
        return False

    # per-kind matchers: return the end of the match, or None
    def _match_eol(self, term: Terminal, lp: int, i: int) -> Optional[int]:
        return lp if lp >= len(self.line) else None

    def _match_string(self, term: Terminal, lp: int, i: int) -> Optional[int]:
        line = self.line
        if self._char(lp) != '"':
            return None
        end = lp + 1
        while end < len(line):
            if line[end] == '"' and line[end - 1] != "\\":
                break
            end += 1
        if end >= len(line):
            self.error("unterminated string")
        slot = self.captures[i]
        slot.start = lp + 1
        slot.length = end - lp - 1
        return end + 1

    def _match_ident(self, term: Terminal, lp: int, i: int) -> Optional[int]:
        m = _IDENT.match(self.line, lp)
        if not m:
            return None
        self.captures[i].length = m.end() - lp
        return m.end()

    def _match_identwc(self, term: Terminal, lp: int, i: int) -> Optional[int]:
        m = _IDENT_WILDCARD.match(self.line, lp)
        # plain identifiers belong to ident
        if not m or not _WILDCARD_FLAG.search(m.group(0)):
            return None
        self.captures[i].length = m.end() - lp
        return m.end()

    def _match_integer(self, term: Terminal, lp: int, i: int) -> Optional[int]:
        m = _DIGITS.match(self.line, lp)
        if not m:
            return None
        digits = m.group(0).lstrip("0") or "0"
        if len(digits) > INT_MAX_DIGITS or int(digits) > INT_MAX:
            self.error("integer overflow")
        slot = self.captures[i]
        slot.length = m.end() - lp
        slot.value = int(digits)
        return m.end()

    def _match_word(self, term: Terminal, lp: int, i: int) -> Optional[int]:
        m = _WORD.match(self.line, lp)
        if not m:
            return None
        self.captures[i].length = m.end() - lp
        return m.end()

    def _match_user(self, term: Terminal, lp: int, i: int) -> Optional[int]:
        rest = self.line[lp:]
        used = term.callback(self, rest, i)
        if (
            isinstance(used, bool)
            or not isinstance(used, int)
            or used < 0
            or used > len(rest)
        ):
            raise IntegrityError(
                f"terminal {term.name!r} returned {used!r} for {len(rest)} characters"
            )
        if used == 0:
            return None
        self.captures[i].length = used
        return lp + used

    def _match_literal(self, term: Terminal, lp: int, i: int) -> Optional[int]:
        text = term.text
        if not self.line.startswith(text, lp):
            return None
        end = lp + len(text)
        last, following = text[-1], self._char(end)
        # a literal may not stop in the middle of a word or a number
        if following:
            if last in LETTERS and following in LETTERS:
                return None
            if last in DIGITS and following in DIGITS:
                return None
        self.captures[i].length = len(text)
        return end

    # error propagation
    @property
    def message(self) -> str:
        """The most recent error message."""
        return self._message

    @contextmanager
    def recovery(self) -> Iterator[Recovery]:
        """
        Establish the recovery point for a unit of work, usually a line.

        A ``ParseError`` raised inside the block ends it; the message is kept
        in ``message`` and on the yielded ``Recovery``. Blocks may nest, only
        the innermost one catches, and the outer one is active again once the
        inner block exits.
        """
        saved = self._recovery
        point = Recovery()
        self._recovery = point
        try:
            yield point
        except ParseError as exc:
            point.failed = True
            point.message = exc.message
            point.pos = exc.pos
            self._message = exc.message
            logger.debug("parse_abandoned", message=exc.message, pos=exc.pos)
        finally:
            self._recovery = saved

    def error(self, fmt: str, *args) -> None:
        """Abandon the current parse with a ``%``-formatted message."""
        self._raise(fmt % args if args else fmt, self.pos)

    def _raise(self, message: str, pos: int) -> None:
        message = message[: self.max_message]
        if self._recovery is None:
            raise IntegrityError(f"error raised with no recovery point: {message}")
        self._message = message
        logger.debug("parse_error", message=message, pos=pos, line=self.line)
        raise ParseError(message, pos)
