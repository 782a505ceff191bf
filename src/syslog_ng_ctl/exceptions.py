"""
Exception classes for the syslog-ng control client.

Failures fall into three groups:
- Transport errors: ControlChannelError and subclasses (socket missing,
  I/O failure, timeout, broken framing)
- Protocol errors: CommandFailedError when the daemon answers with an
  error status, UnexpectedResponseError when the answer cannot be classified
- Parse errors: StatLineError per bad stats row, aggregated into a single
  StatsParseError for one response

Per project patterns:
- Store context data in attributes for error handling
- Include descriptive message with relevant details
"""

from collections.abc import Sequence


class ControlError(Exception):
    """Base class for every error raised by syslog_ng_ctl."""


class ControlChannelError(ControlError):
    """
    Raised when the control socket exchange itself fails.

    Attributes:
        socket_path: Path of the control socket that was used
        reason: Short description of the failure
    """

    def __init__(self, socket_path: str, reason: str) -> None:
        self.socket_path = socket_path
        self.reason = reason
        super().__init__(f"control socket {socket_path}: {reason}")


class ControlSocketUnavailableError(ControlChannelError):
    """Raised when the socket path is missing or nothing is listening on it."""


class ControlChannelTimeoutError(ControlChannelError):
    """
    Raised when the exchange did not complete in time.

    Attributes:
        timeout: The timeout in seconds that was exceeded
    """

    def __init__(self, socket_path: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(socket_path, f"no complete response within {timeout:g}s")


class MalformedResponseError(ControlChannelError):
    """
    Raised when the peer closed the connection before the end-of-response marker.

    Attributes:
        partial: Whatever was received before the connection closed
    """

    def __init__(self, socket_path: str, partial: str) -> None:
        self.partial = partial
        super().__init__(socket_path, "connection closed before end of response")


class CommandFailedError(ControlError):
    """
    Raised when the daemon reports that a command failed.

    Attributes:
        command: The command that was sent
        message: The daemon's message, unmodified
    """

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        self.message = message
        super().__init__(f"{command} failed: {message}")


class UnexpectedResponseError(ControlError):
    """
    Raised when a response carries no recognisable status.

    Attributes:
        command: The command that was sent
        response: The raw response text
    """

    def __init__(self, command: str, response: str) -> None:
        self.command = command
        self.response = response
        super().__init__(f"unexpected response to {command}: {response!r}")


class StatLineError(ControlError, ValueError):
    """
    Raised for a single stats line that cannot be parsed.

    Attributes:
        line: The offending raw line
    """

    def __init__(self, line: str, detail: str | None = None) -> None:
        self.line = line
        message = f"invalid stat line: {line!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidStatLineError(StatLineError):
    """Raised when a line has the wrong field count or a malformed state field."""


class InvalidStatNumberError(StatLineError):
    """
    Raised when the counter field is not an unsigned 64-bit decimal.

    Attributes:
        value: The field text that failed to parse
    """

    def __init__(self, line: str, value: str) -> None:
        self.value = value
        super().__init__(line, f"cannot parse {value!r} as unsigned 64-bit integer")


class StatsParseError(ExceptionGroup):
    """
    Aggregate of every line error found in one stats response.

    Each constituent exception keeps its own message and raw line, so no
    failure is lost when several rows are malformed.
    """

    def __new__(cls, errors: Sequence[StatLineError]):
        return super().__new__(cls, f"{len(errors)} invalid stat line(s)", list(errors))

    def __init__(self, errors: Sequence[StatLineError]) -> None:
        super().__init__(f"{len(errors)} invalid stat line(s)", list(errors))

    def derive(self, excs):
        return StatsParseError(excs)

    @property
    def lines(self) -> list[str]:
        """Raw text of each rejected line, in response order."""
        return [exc.line for exc in self.exceptions]
