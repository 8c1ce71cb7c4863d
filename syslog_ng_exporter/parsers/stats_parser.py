"""Parser for lines of the syslog-ng STATS dump."""

from ..utils.errors import InsufficientFieldsError, InvalidObjectTypeError, InvalidValueError
from ..utils.metrics import StatRecord

FIELD_COUNT = 6
MIN_OBJECT_TYPE_LENGTH = 4


def parse_stat_line(line: str) -> StatRecord:
    """
    Parse one STATS line into a StatRecord.

    Args:
        line: Raw line from the control socket, newline included or not

    Returns:
        StatRecord: Positional fields of the line

    Raises:
        InsufficientFieldsError: Fewer than six `;`-delimited fields
        InvalidObjectTypeError: Object type shorter than four characters
        InvalidValueError: Last field is not a number

    Example STATS line:
        dst.file;d_mesg#0;/var/log/messages;a;dropped;0
    """
    parts = line.strip().split(";", FIELD_COUNT - 1)
    if len(parts) < FIELD_COUNT:
        raise InsufficientFieldsError(f"insufficient parts: {len(parts)} < {FIELD_COUNT}")

    object_type, stat_id, instance, state, metric, raw_value = parts

    if len(object_type) < MIN_OBJECT_TYPE_LENGTH:
        raise InvalidObjectTypeError(f"invalid name: {object_type}")

    try:
        value = float(raw_value)
    except ValueError as e:
        raise InvalidValueError(f"invalid value {raw_value!r}: {e}") from e

    return StatRecord(
        object_type=object_type,
        id=stat_id,
        instance=instance,
        state=state,
        metric=metric,
        value=value,
    )
