from typing import Optional


class ParseError(Exception):
    """A parse of the current line was abandoned.

    Raised through ``Scanner.error`` and caught by the innermost
    ``Scanner.recovery()`` block.
    """

    def __init__(self, message: str, pos: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.pos = pos


class IntegrityError(RuntimeError):
    """Misuse of the engine itself: full registry, unknown terminal handle,
    missing callback, or an error raised with no recovery point active.

    Recovery points never catch this.
    """
