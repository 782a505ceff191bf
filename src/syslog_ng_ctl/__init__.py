"""
Control client for a running syslog-ng daemon.

This package talks to the daemon's administrative control socket. It includes:

- Controller: ping, reload, license info and stats commands
- UnixSocketControlChannel: the Unix domain socket transport
- Stats parser with per-line error aggregation
- Prometheus projection of the daemon's counters
"""

from syslog_ng_ctl.channel import ControlChannel, UnixSocketControlChannel
from syslog_ng_ctl.config import Settings
from syslog_ng_ctl.controller import Controller
from syslog_ng_ctl.exceptions import (
    CommandFailedError,
    ControlChannelError,
    ControlChannelTimeoutError,
    ControlError,
    ControlSocketUnavailableError,
    InvalidStatLineError,
    InvalidStatNumberError,
    MalformedResponseError,
    StatLineError,
    StatsParseError,
    UnexpectedResponseError,
)
from syslog_ng_ctl.metrics import render_metric_families, stats_to_metric_families
from syslog_ng_ctl.stats import parse_stat_line, parse_stats
from syslog_ng_ctl.types import PrometheusStats, SourceState, Stat, StatsResponse

__all__ = [
    # Client
    "Controller",
    "ControlChannel",
    "UnixSocketControlChannel",
    "Settings",
    # Result types
    "Stat",
    "SourceState",
    "StatsResponse",
    "PrometheusStats",
    # Parsing and encoding
    "parse_stats",
    "parse_stat_line",
    "stats_to_metric_families",
    "render_metric_families",
    # Errors
    "ControlError",
    "ControlChannelError",
    "ControlSocketUnavailableError",
    "ControlChannelTimeoutError",
    "MalformedResponseError",
    "CommandFailedError",
    "UnexpectedResponseError",
    "StatLineError",
    "InvalidStatLineError",
    "InvalidStatNumberError",
    "StatsParseError",
]
