"""Map parsed STATS records onto exported Prometheus metric families."""

from enum import Enum
from typing import Dict, Optional, Tuple

from ..utils.metrics import MetricEmission, MetricFamily, MetricKind, StatRecord

NAMESPACE = "syslog_ng"

SOURCE_LABELS = ("type", "id", "source")
DESTINATION_LABELS = ("type", "id", "destination")


class ObjectKind(Enum):
    """Category of a STATS object type, derived from its 4-character prefix."""

    SOURCE = "source"
    DESTINATION = "destination"
    OTHER = "other"


# global, center and anything unrecognised fall through to OTHER
_PREFIXES: Dict[str, ObjectKind] = {
    "src.": ObjectKind.SOURCE,
    "sour": ObjectKind.SOURCE,
    "dst.": ObjectKind.DESTINATION,
    "dest": ObjectKind.DESTINATION,
}


def _family(name: str, documentation: str, kind: MetricKind, labels: Tuple[str, ...]) -> MetricFamily:
    return MetricFamily(
        name=f"{NAMESPACE}_{name}",
        documentation=documentation,
        kind=kind,
        label_names=labels,
    )


SOURCE_CONNECTIONS = _family(
    "source_connections_total",
    "Number of source connections.",
    MetricKind.COUNTER, SOURCE_LABELS,
)
SOURCE_PROCESSED = _family(
    "source_messages_processed_total",
    "Number of messages processed by this source.",
    MetricKind.COUNTER, SOURCE_LABELS,
)
DESTINATION_PROCESSED = _family(
    "destination_messages_processed_total",
    "Number of messages processed by this destination.",
    MetricKind.COUNTER, DESTINATION_LABELS,
)
DESTINATION_DROPPED = _family(
    "destination_messages_dropped_total",
    "Number of messages dropped by this destination due to store overflow.",
    MetricKind.COUNTER, DESTINATION_LABELS,
)
DESTINATION_STORED = _family(
    "destination_messages_stored_total",
    "Number of messages currently stored for this destination.",
    MetricKind.GAUGE, DESTINATION_LABELS,
)
DESTINATION_WRITTEN = _family(
    "destination_messages_written_total",
    "Number of messages successfully written by this destination.",
    MetricKind.COUNTER, DESTINATION_LABELS,
)
DESTINATION_MEMORY = _family(
    "destination_bytes_stored_total",
    "Bytes of memory currently used to store messages for this destination.",
    MetricKind.GAUGE, DESTINATION_LABELS,
)

STAT_FAMILIES = (
    SOURCE_CONNECTIONS,
    SOURCE_PROCESSED,
    DESTINATION_PROCESSED,
    DESTINATION_DROPPED,
    DESTINATION_STORED,
    DESTINATION_WRITTEN,
    DESTINATION_MEMORY,
)

RULES: Dict[Tuple[ObjectKind, str], MetricFamily] = {
    (ObjectKind.SOURCE, "processed"): SOURCE_PROCESSED,
    (ObjectKind.SOURCE, "connections"): SOURCE_CONNECTIONS,
    (ObjectKind.DESTINATION, "dropped"): DESTINATION_DROPPED,
    (ObjectKind.DESTINATION, "processed"): DESTINATION_PROCESSED,
    (ObjectKind.DESTINATION, "written"): DESTINATION_WRITTEN,
    (ObjectKind.DESTINATION, "stored"): DESTINATION_STORED,
    (ObjectKind.DESTINATION, "queued"): DESTINATION_STORED,
    (ObjectKind.DESTINATION, "memory_usage"): DESTINATION_MEMORY,
}


def object_kind(object_type: str) -> ObjectKind:
    """
    Classify an object type by its first four characters.

    Args:
        object_type: Object type field of a STATS line (e.g. "src.file", "destination")

    Returns:
        ObjectKind: SOURCE, DESTINATION or OTHER
    """
    return _PREFIXES.get(object_type[:4], ObjectKind.OTHER)


def classify(record: StatRecord) -> Optional[MetricEmission]:
    """
    Select the metric family for a record.

    Args:
        record: Parsed STATS record

    Returns:
        MetricEmission labelled with (object_type, id, instance), or None
        when no rule matches the record's kind and metric name
    """
    family = RULES.get((object_kind(record.object_type), record.metric))
    if family is None:
        return None

    return MetricEmission(
        family=family,
        value=record.value,
        labels=(record.object_type, record.id, record.instance),
    )
