"""
Control channel to the daemon's administrative socket.

The daemon speaks a line-oriented text protocol over a Unix domain stream
socket. A client writes one command line and reads the reply until a line
consisting solely of "." marks the end of the response:

    > STATS
    < SourceName;SourceId;SourceInstance;State;Type;Number
    < src.file;s_file#0;/var/log/messages;a;processed;1234
    < .

Key design decisions:
- ControlChannel is a Protocol, so fakes for testing only need a matching
  send_command coroutine
- A fresh connection per command: concurrent callers never interleave on one
  socket, and a cancelled exchange never leaves a half-read stream behind
- Fails loudly: every transport problem is raised, never retried
"""

import asyncio
import logging
from typing import Protocol, runtime_checkable

from syslog_ng_ctl.exceptions import (
    ControlChannelError,
    ControlChannelTimeoutError,
    ControlSocketUnavailableError,
    MalformedResponseError,
)

logger = logging.getLogger(__name__)

# Line that terminates every multi-line response
END_OF_RESPONSE = "."

# Prefixes of a status line; a lone status line may end a response without "."
STATUS_PREFIXES = ("OK", "FAIL", "ERROR")

DEFAULT_TIMEOUT = 10.0

# Stats tables can be large; allow long instance names on a single row
STREAM_LIMIT = 1024 * 1024


@runtime_checkable
class ControlChannel(Protocol):
    """
    Protocol for anything that can exchange one command for one response.

    Implementations return the response text with framing removed (no
    end-of-response marker) and raise ControlChannelError subclasses on
    transport failures.
    """

    async def send_command(self, command: str) -> str:
        """
        Send a single-line command and return the complete response.

        Args:
            command: Command text without line terminator

        Returns:
            Response text, each line terminated by a newline
        """
        ...


def _join_lines(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def is_status_line(line: str) -> bool:
    """True if the line is an OK/FAIL/ERROR status line."""
    return any(
        line == prefix or line.startswith(f"{prefix} ") for prefix in STATUS_PREFIXES
    )


class UnixSocketControlChannel:
    """
    ControlChannel over the daemon's Unix domain control socket.

    Example:
        channel = UnixSocketControlChannel("/var/lib/syslog-ng/syslog-ng.ctl")
        response = await channel.send_command("STATS")
    """

    def __init__(self, socket_path: str, timeout: float | None = DEFAULT_TIMEOUT) -> None:
        """
        Args:
            socket_path: Filesystem path of the control socket
            timeout: Seconds allowed for connect, send and receive together,
                None to wait indefinitely
        """
        self.socket_path = socket_path
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"UnixSocketControlChannel(socket_path={self.socket_path!r}, timeout={self.timeout!r})"

    async def send_command(self, command: str) -> str:
        """
        Open a connection, send the command and read the whole response.

        Raises:
            ValueError: Command contains a line break
            ControlSocketUnavailableError: Socket missing or refusing connections
            ControlChannelTimeoutError: Exchange exceeded the timeout
            MalformedResponseError: Connection closed before end of response
            ControlChannelError: Any other I/O failure
        """
        if "\n" in command or "\r" in command:
            raise ValueError(f"command must be a single line: {command!r}")

        try:
            async with asyncio.timeout(self.timeout):
                return await self._exchange(command)
        except TimeoutError:
            raise ControlChannelTimeoutError(self.socket_path, self.timeout) from None

    async def _exchange(self, command: str) -> str:
        try:
            reader, writer = await asyncio.open_unix_connection(
                self.socket_path, limit=STREAM_LIMIT
            )
        except (FileNotFoundError, ConnectionRefusedError) as e:
            raise ControlSocketUnavailableError(
                self.socket_path, e.strerror or str(e)
            ) from e
        except OSError as e:
            raise ControlChannelError(self.socket_path, e.strerror or str(e)) from e

        try:
            logger.debug("sending %s to %s", command, self.socket_path)
            writer.write(f"{command}\n".encode("utf-8"))
            await writer.drain()
            response = await self._read_response(reader)
            logger.debug(
                "received %d bytes in response to %s", len(response), command
            )
            return response
        except ValueError as e:
            # StreamReader.readline reports an over-long line as ValueError
            raise ControlChannelError(self.socket_path, str(e)) from e
        except OSError as e:
            raise ControlChannelError(self.socket_path, e.strerror or str(e)) from e
        finally:
            # Runs on cancellation too; the connection is never reused
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug("error closing %s: %s", self.socket_path, e)

    async def _read_response(self, reader: asyncio.StreamReader) -> str:
        lines: list[str] = []
        while True:
            raw = await reader.readline()
            if not raw:
                # EOF: acceptable only after a lone status line
                if len(lines) == 1 and is_status_line(lines[0]):
                    return f"{lines[0]}\n"
                raise MalformedResponseError(self.socket_path, _join_lines(lines))

            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            if line == END_OF_RESPONSE:
                return _join_lines(lines)
            lines.append(line)
