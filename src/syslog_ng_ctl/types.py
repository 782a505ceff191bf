"""
Result types returned by the Controller.

Stat records are internal value objects, so they are frozen dataclasses
rather than Pydantic models: nothing here is validated from untrusted JSON,
the stats parser is the only producer.
"""

from dataclasses import dataclass, field
from enum import Enum

from prometheus_client.core import Metric

from syslog_ng_ctl.exceptions import StatsParseError


class SourceState(str, Enum):
    """
    Lifecycle state of the element reporting a counter.

    The daemon reports a single letter:
    - a: active, backed by the running configuration
    - d: dynamic, created and destroyed at runtime
    - o: orphaned, its configuration object no longer exists
    """

    ACTIVE = "a"
    DYNAMIC = "d"
    ORPHANED = "o"

    @classmethod
    def _missing_(cls, value: object) -> "SourceState | None":
        # Unknown single letters are kept so a newer daemon does not break parsing
        if isinstance(value, str) and len(value) == 1:
            member = str.__new__(cls, value)
            member._name_ = f"UNKNOWN_{value}"
            member._value_ = value
            return member
        return None


@dataclass(frozen=True)
class Stat:
    """
    One counter reported by the daemon at a point in time.

    Attributes:
        source_name: Kind of element, e.g. "src.file" or "dst.network"
        source_id: Configuration identifier, e.g. "s_file#0"
        source_instance: Instance detail such as a file name (may be empty)
        source_state: Lifecycle state of the element
        type: Counter name, e.g. "processed" or "dropped"
        number: Counter value (unsigned 64 bit)
    """

    source_name: str
    source_id: str
    source_instance: str
    source_state: SourceState
    type: str
    number: int

    @property
    def key(self) -> tuple[str, str, str, str]:
        """Identity of the counter across polls, without state and value."""
        return (self.source_name, self.source_id, self.source_instance, self.type)


@dataclass
class StatsResponse:
    """
    Parsed STATS response.

    Rows that failed to parse are absent from ``stats`` and present in
    ``error``; every data line ends up in exactly one of the two.

    Attributes:
        stats: Successfully parsed records in response order
        error: Aggregate of the line errors, None when every line parsed
    """

    stats: list[Stat] = field(default_factory=list)
    error: StatsParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_errors(self) -> None:
        """Raise the aggregated parse error, if any line was rejected."""
        if self.error is not None:
            raise self.error


@dataclass
class PrometheusStats:
    """
    STATS response projected to Prometheus metric families.

    Attributes:
        families: Counter families, one per stat type, in first-seen order
        error: Aggregate of the line errors from parsing, as in StatsResponse
    """

    families: list[Metric] = field(default_factory=list)
    error: StatsParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_errors(self) -> None:
        """Raise the aggregated parse error, if any line was rejected."""
        if self.error is not None:
            raise self.error
