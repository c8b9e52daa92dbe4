"""Error types raised by the linking engine.

None of these are fatal to a run. The batch runner turns them into
per-document error counts and the synthesizer skips the offending title.
"""


class BacklinkerError(Exception):
    """Base class for engine errors."""


class TransientIOError(BacklinkerError):
    """A document store read or write failed (possibly after retries)."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class ConfigurationError(BacklinkerError):
    """A configuration entry is malformed and has been ignored."""


class PatternCompilationError(BacklinkerError):
    """A title could not be compiled into a matcher."""

    def __init__(self, title: str, reason: str):
        self.title = title
        super().__init__(f"Cannot compile pattern for '{title}': {reason}")
