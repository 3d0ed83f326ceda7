"""uparse: terminal matching for hand-written single-line parsers."""

from uparse.config import Settings, get_settings
from uparse.core import Capture, Mode, Recovery, Scanner
from uparse.diagnostics import build_message, point_at
from uparse.errors import IntegrityError, ParseError
from uparse.log import configure_logging
from uparse.terminals import (
    Kind,
    Literal,
    Terminal,
    TerminalRegistry,
    default_registry,
    eol,
    ident,
    identwc,
    integer,
    register,
    string,
    word,
)

__all__ = [
    "Capture",
    "IntegrityError",
    "Kind",
    "Literal",
    "Mode",
    "ParseError",
    "Recovery",
    "Scanner",
    "Settings",
    "Terminal",
    "TerminalRegistry",
    "build_message",
    "configure_logging",
    "default_registry",
    "eol",
    "get_settings",
    "ident",
    "identwc",
    "integer",
    "point_at",
    "register",
    "string",
    "word",
]
