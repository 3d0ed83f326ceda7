from enum import Enum
from typing import Any, Callable, List, Optional, Union

from uparse.config import get_settings
from uparse.errors import IntegrityError
from uparse.log import get_logger

logger = get_logger(__name__)


class Kind(Enum):
    END_OF_INPUT = "end of line"
    QUOTED_STRING = "quoted string"
    IDENTIFIER = "identifier"
    IDENTIFIER_WILDCARD = "identifier+glob"
    INTEGER = "integer"
    WORD = "word"
    USER = "user"
    LITERAL = "literal"


# ---------------- terminal variants ----------------
class Terminal:
    """A matchable category of input.

    The kind tag decides how a terminal matches, so literal text that
    happens to read "integer" is never confused with the ``integer``
    built-in. Only ``Literal()`` and ``TerminalRegistry.register()`` should
    create new instances; the built-ins are the module constants below.
    """

    __slots__ = ("kind", "name", "callback", "text")

    def __init__(
        self,
        kind: Kind,
        name: Optional[str] = None,
        callback: Optional[Callable[..., int]] = None,
        text: Optional[str] = None,
    ):
        self.kind = kind
        self.name = name if name is not None else kind.value
        self.callback = callback
        self.text = text

    @property
    def is_literal(self) -> bool:
        return self.kind is Kind.LITERAL

    def display(self) -> str:
        """How the terminal reads in an "expected ..." message."""
        if self.is_literal:
            return self.text
        return f"<{self.name}>"

    def __repr__(self):
        if self.is_literal:
            return f"Literal({self.text!r})"
        if self.kind is Kind.USER:
            return f"Terminal(USER, {self.name!r})"
        return f"Terminal({self.kind.name})"


def Literal(text: str) -> Terminal:
    """A terminal that matches ``text`` verbatim."""
    if not isinstance(text, str):
        raise TypeError(f"literal text must be str, got {type(text).__name__}")
    if not text:
        raise ValueError("literal text must not be empty")
    return Terminal(Kind.LITERAL, name=text, text=text)


# built-in terminals
eol = Terminal(Kind.END_OF_INPUT)
string = Terminal(Kind.QUOTED_STRING)
ident = Terminal(Kind.IDENTIFIER)
identwc = Terminal(Kind.IDENTIFIER_WILDCARD)
integer = Terminal(Kind.INTEGER)
word = Terminal(Kind.WORD)

BUILTINS = (eol, string, ident, identwc, integer, word)

TerminalRef = Union[Terminal, str]


# ---------------- registry ----------------
class TerminalRegistry:
    """Append-only catalog of user-defined terminals.

    Each name may be registered once. Handles returned by ``register`` are
    resolved by identity, never by name.
    """

    def __init__(self, capacity: Optional[int] = None):
        if capacity is None:
            capacity = get_settings().max_user_terminals
        self.capacity = capacity
        self._terms: List[Terminal] = []

    def __len__(self):
        return len(self._terms)

    def __iter__(self):
        return iter(self._terms)

    def register(self, name: str, callback: Callable[..., int]) -> Terminal:
        """Add a user terminal and return its handle.

        ``callback(scanner, text, index) -> int`` gets the unscanned rest of
        the line and the capture slot index, and returns how many characters
        it consumed (0 for no match).
        """
        if not callable(callback):
            raise IntegrityError(f"terminal {name!r} needs a callable callback")
        if any(t.name == name for t in self._terms):
            raise IntegrityError(f"terminal {name!r} is already registered")
        if len(self._terms) >= self.capacity:
            raise IntegrityError(
                f"terminal registry full ({self.capacity}), cannot add {name!r}"
            )
        term = Terminal(Kind.USER, name=name, callback=callback)
        self._terms.append(term)
        logger.debug("terminal_registered", terminal=name, count=len(self._terms))
        return term

    def is_known(self, term: Any) -> bool:
        """True for the built-ins and for handles this registry issued."""
        if any(term is b for b in BUILTINS):
            return True
        return any(term is t for t in self._terms)

    def resolve(self, ref: TerminalRef) -> Terminal:
        """Turn a terminal reference into the terminal to match.

        Strings are always literal text. Terminal objects must be a built-in,
        a literal, or a handle issued by this registry.
        """
        if isinstance(ref, str):
            return Literal(ref)
        if not isinstance(ref, Terminal):
            raise TypeError(f"not a terminal reference: {ref!r}")
        if ref.kind is Kind.LITERAL:
            return ref
        if not self.is_known(ref):
            raise IntegrityError(f"terminal {ref.name!r} is not registered here")
        if ref.kind is Kind.USER and ref.callback is None:
            raise IntegrityError(f"terminal {ref.name!r} has no callback")
        return ref

    def reset(self) -> None:
        """Forget every user terminal."""
        self._terms.clear()


default_registry = TerminalRegistry()


def register(name: str, callback: Callable[..., int]) -> Terminal:
    """Register a user terminal with the default registry."""
    return default_registry.register(name, callback)
