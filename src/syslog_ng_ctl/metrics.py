"""
Prometheus projection of parsed stats.

Each stat type becomes one counter family, e.g. every "processed" row ends up
as a sample of syslogng_processed_total. The remaining record fields are
carried as labels so that series stay distinguishable (label order in the
rendered line depends on the prometheus_client release):

    syslogng_processed_total{source_name="src.file",source_id="s_file#0",
        source_instance="/var/log/messages",type="processed",state="a"} 1234.0

Family order follows the first appearance of each type in the input and
sample order follows the input, so consecutive scrapes diff cleanly.

Records are never merged. If one poll reports the same label set twice, both
samples are emitted as duplicate series and a Prometheus server keeps only
one of them.
"""

import re
from collections.abc import Iterable

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily, Metric

from syslog_ng_ctl.types import Stat

DEFAULT_NAMESPACE = "syslogng"

LABEL_NAMES = ["source_name", "source_id", "source_instance", "type", "state"]

# Anything outside the metric name character set
_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_:]")


def metric_name(namespace: str, stat_type: str) -> str:
    """
    Build a valid metric name for a stat type.

    Disallowed characters become underscores and a trailing "_total" is
    dropped. A name that would start with a digit gets a leading underscore.
    """
    name = _INVALID_NAME_CHARS.sub("_", f"{namespace}_{stat_type}" if namespace else stat_type)
    # Counter exposition appends "_total" itself
    name = name.removesuffix("_total")
    if not name or name[0].isdigit():
        name = f"_{name}"
    return name


def stat_labels(stat: Stat) -> list[str]:
    """Label values for a record, in LABEL_NAMES order."""
    return [
        stat.source_name,
        stat.source_id,
        stat.source_instance,
        stat.type,
        stat.source_state.value,
    ]


def stats_to_metric_families(
    stats: Iterable[Stat], namespace: str = DEFAULT_NAMESPACE
) -> list[Metric]:
    """
    Group stat records into counter families by type.

    Args:
        stats: Parsed records
        namespace: Prefix for every metric name

    Returns:
        One CounterMetricFamily per distinct type, in first-seen order
    """
    # Keyed by family name, distinct types may sanitize to the same name
    families: dict[str, CounterMetricFamily] = {}
    for stat in stats:
        name = metric_name(namespace, stat.type)
        family = families.get(name)
        if family is None:
            family = CounterMetricFamily(
                name,
                f"syslog-ng {stat.type} counter",
                labels=LABEL_NAMES,
            )
            families[name] = family
        family.add_metric(stat_labels(stat), float(stat.number))
    return list(families.values())


class _StaticCollector:
    """Collector that yields a fixed list of families once."""

    def __init__(self, families: list[Metric]) -> None:
        self._families = families

    def collect(self) -> Iterable[Metric]:
        return iter(self._families)


def render_metric_families(families: list[Metric]) -> str:
    """
    Serialize families in the Prometheus text exposition format.

    A private registry is used so the process-wide default registry (and its
    process/platform collectors) never leaks into the output.
    """
    registry = CollectorRegistry(auto_describe=False)
    registry.register(_StaticCollector(families))
    return generate_latest(registry).decode("utf-8")
