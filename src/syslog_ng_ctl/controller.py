"""
Administrative commands over a control channel.

The Controller encodes each supported command, classifies the daemon's reply
and returns a typed result. Replies either start with a status line

    OK Config reload successful
    FAIL Error parsing configuration

or, for STATS, carry the stats table directly. A FAIL/ERROR status is
raised as CommandFailedError with the daemon's message unchanged.

Per project patterns:
- The channel is injected, the Controller never creates or owns connections
- Failures are raised to the caller, nothing is retried
"""

import logging
from dataclasses import dataclass

from syslog_ng_ctl.channel import ControlChannel, is_status_line
from syslog_ng_ctl.exceptions import CommandFailedError, UnexpectedResponseError
from syslog_ng_ctl.metrics import DEFAULT_NAMESPACE, stats_to_metric_families
from syslog_ng_ctl.stats import parse_stats
from syslog_ng_ctl.types import PrometheusStats, StatsResponse

logger = logging.getLogger(__name__)

PING = "PING"
RELOAD = "RELOAD"
LICENSE = "LICENSE"
STATS = "STATS"

ERROR_STATUSES = ("FAIL", "ERROR")


@dataclass
class Reply:
    """
    A response split into its status line and payload.

    Attributes:
        status: "OK", "FAIL", "ERROR", or None when there is no status line
        message: Text after the status word on the status line
        payload: Lines after the status line (the whole response if no status)
    """

    status: str | None
    message: str
    payload: str

    @classmethod
    def parse(cls, response: str) -> "Reply":
        first, _, rest = response.partition("\n")
        if not is_status_line(first):
            return cls(status=None, message="", payload=response)
        status, _, message = first.partition(" ")
        return cls(status=status, message=message, payload=rest)

    @property
    def failed(self) -> bool:
        return self.status in ERROR_STATUSES

    def error_message(self) -> str:
        """Daemon's error text: status message plus any following lines."""
        return "\n".join(part for part in (self.message, self.payload.rstrip("\n")) if part)


@dataclass
class Controller:
    """
    syslog-ng control client with an injected channel.

    Example:
        controller = Controller(UnixSocketControlChannel("/var/lib/syslog-ng/syslog-ng.ctl"))
        await controller.ping()
        result = await controller.stats()
        for stat in result.stats:
            print(stat.source_id, stat.type, stat.number)

    Cancellation: every operation is a coroutine; cancelling it (directly or
    through asyncio.timeout) abandons the exchange and the channel discards
    its connection.
    """

    channel: ControlChannel

    async def _send(self, command: str) -> Reply:
        response = await self.channel.send_command(command)
        reply = Reply.parse(response)
        if reply.failed:
            logger.debug("%s rejected by daemon: %s", command, reply.message)
            raise CommandFailedError(command, reply.error_message())
        return reply

    async def _send_expecting_ok(self, command: str) -> Reply:
        reply = await self._send(command)
        if reply.status is None and reply.payload.strip():
            raise UnexpectedResponseError(command, reply.payload)
        return reply

    async def ping(self) -> None:
        """
        Check that the daemon answers on its control socket.

        Raises:
            ControlChannelError: Transport failure
            CommandFailedError: Daemon reported an error
            UnexpectedResponseError: Reply had no recognisable status
        """
        await self._send_expecting_ok(PING)

    async def reload(self) -> None:
        """
        Ask the daemon to reload its configuration.

        Raises:
            ControlChannelError: Transport failure
            CommandFailedError: Daemon rejected the reload (message kept intact)
            UnexpectedResponseError: Reply had no recognisable status
        """
        await self._send_expecting_ok(RELOAD)

    async def get_license_info(self) -> str:
        """
        Fetch the daemon's license information.

        The content is opaque and returned as-is, minus the status word and
        the trailing newline.

        Raises:
            ControlChannelError: Transport failure
            CommandFailedError: Daemon reported an error
        """
        reply = await self._send(LICENSE)
        if reply.status is None:
            return reply.payload.rstrip("\n")
        return "\n".join(
            part for part in (reply.message, reply.payload.rstrip("\n")) if part
        )

    async def stats(self) -> StatsResponse:
        """
        Fetch and parse the daemon's counters.

        Malformed rows do not fail the call: they are collected in
        StatsResponse.error while every other row is returned. Use
        StatsResponse.raise_for_errors() for all-or-nothing semantics.

        Raises:
            ControlChannelError: Transport failure
            CommandFailedError: Daemon reported an error
        """
        reply = await self._send(STATS)
        result = parse_stats(reply.payload)
        if result.error is not None:
            logger.debug(
                "%d stats line(s) rejected", len(result.error.exceptions)
            )
        return result

    async def stats_prometheus(self, namespace: str = DEFAULT_NAMESPACE) -> PrometheusStats:
        """
        Fetch the daemon's counters as Prometheus counter families.

        Args:
            namespace: Metric name prefix

        Raises:
            Same as stats()
        """
        result = await self.stats()
        return PrometheusStats(
            families=stats_to_metric_families(result.stats, namespace=namespace),
            error=result.error,
        )
