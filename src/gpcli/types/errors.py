"""Exceptions raised by the session engine and its collaborators."""


class GPCliError(Exception):
    """Base exception for gpcli errors."""

    pass


class HistoryError(GPCliError):
    """A history reference could not be resolved.

    Raised before any remote call is made.
    """

    message = "history error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidIndex(HistoryError):
    """Malformed `@` reference, e.g. `@0`, `@x` or a bare `@`."""

    message = "invalid index"


class IndexOutOfRange(HistoryError):
    """Well-formed reference beyond the retained history."""

    message = "index out of range"


class NoPreviousMeasurements(HistoryError):
    """No measurement has been created in this session yet."""

    message = "no previous measurements found"


class ClientError(GPCliError):
    """A call to the measurement API failed.

    `show_help` is set for usage-format failures (e.g. invalid parameters),
    where the CLI should print command help alongside the message.
    """

    def __init__(self, message: str, show_help: bool = False):
        super().__init__(message)
        self.show_help = show_help


class RenderError(GPCliError):
    """Writing results to the terminal failed."""

    pass


class ValidationError(GPCliError):
    """A request was rejected locally, before reaching the API."""

    pass
