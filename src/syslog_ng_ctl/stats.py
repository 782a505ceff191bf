"""
Parser for the daemon's STATS response.

The response is a semicolon-separated table:

    SourceName;SourceId;SourceInstance;State;Type;Number
    src.file;s_file#0;/var/log/messages;a;processed;1234
    dst.network;d_net#0;tcp,10.0.0.1:514;a;dropped;0

Rows are independent, so a malformed row is reported and skipped while the
rest of the table is still returned. An exporter that publishes partial data
keeps its other series alive when one row is garbled.
"""

from syslog_ng_ctl.exceptions import (
    InvalidStatLineError,
    InvalidStatNumberError,
    StatLineError,
    StatsParseError,
)
from syslog_ng_ctl.types import SourceState, Stat, StatsResponse

# Header sent by the daemon; only its presence is assumed, the content is not checked
STATS_HEADER = "SourceName;SourceId;SourceInstance;State;Type;Number"

FIELD_SEPARATOR = ";"
FIELD_COUNT = 6
MAX_COUNTER = 2**64 - 1


def parse_counter(line: str, value: str) -> int:
    """
    Parse the Number field as an unsigned 64-bit decimal.

    int() alone accepts signs, whitespace and underscores, so the field is
    checked to be plain ASCII digits first.
    """
    if not value or not (value.isascii() and value.isdigit()):
        raise InvalidStatNumberError(line, value)
    number = int(value)
    if number > MAX_COUNTER:
        raise InvalidStatNumberError(line, value)
    return number


def parse_stat_line(line: str) -> Stat:
    """
    Parse one data row of the STATS table.

    Args:
        line: Raw row without line terminator

    Returns:
        The parsed Stat record

    Raises:
        InvalidStatLineError: Field count is not 6 or state is not a single byte
        InvalidStatNumberError: Number is not an unsigned 64-bit decimal
    """
    fields = line.split(FIELD_SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise InvalidStatLineError(line)

    source_name, source_id, source_instance, state, stat_type, number = fields
    # The state is a single byte on the wire; multibyte characters and the
    # U+FFFD left by undecodable bytes do not qualify
    if len(state.encode("utf-8", errors="surrogatepass")) != 1:
        raise InvalidStatLineError(line)

    return Stat(
        source_name=source_name,
        source_id=source_id,
        source_instance=source_instance,
        source_state=SourceState(state),
        type=stat_type,
        number=parse_counter(line, number),
    )


def parse_stats(text: str) -> StatsResponse:
    """
    Parse a complete STATS response body.

    The first line is the column header and is discarded without checking
    its content. Every other line is parsed independently; failures are
    collected into one StatsParseError instead of aborting.

    Args:
        text: Response body, header line first

    Returns:
        StatsResponse with the parsed records and the aggregated error
        (None when every line parsed)
    """
    if text.endswith("\r\n"):
        text = text[:-2]
    elif text.endswith("\n"):
        text = text[:-1]
    if not text:
        return StatsResponse()

    # str.splitlines() would also break on form feeds and unicode separators
    lines = text.split("\n")[1:]

    stats: list[Stat] = []
    errors: list[StatLineError] = []
    for line in lines:
        line = line.removesuffix("\r")
        try:
            stats.append(parse_stat_line(line))
        except StatLineError as e:
            errors.append(e)

    return StatsResponse(
        stats=stats,
        error=StatsParseError(errors) if errors else None,
    )
