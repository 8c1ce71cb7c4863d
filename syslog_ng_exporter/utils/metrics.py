"""Data structures produced by the parsers and collectors."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .status import CommandStatus


@dataclass(frozen=True)
class StatRecord:
    """One parsed line of STATS output."""

    object_type: str
    id: str
    instance: str
    state: str
    metric: str
    value: float


class MetricKind(Enum):
    """Prometheus value type of a metric family."""

    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MetricFamily:
    """Name, type and label schema of an exported metric."""

    name: str
    documentation: str
    kind: MetricKind
    label_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MetricEmission:
    """A single labelled sample destined for a metric family."""

    family: MetricFamily
    value: float
    labels: Tuple[str, str, str]

    @property
    def kind(self) -> MetricKind:
        return self.family.kind


@dataclass
class StatsPass:
    """Result of one STATS collection pass."""

    emissions: List[MetricEmission]
    up: bool
    error: Optional[str] = None


@dataclass
class CommandResult:
    """Aggregate outcome of one RELOAD or HEALTHCHECK session."""

    message: Optional[str] = None
    error_messages: List[str] = field(default_factory=list)
    data: Dict[str, str] = field(default_factory=dict)

    @property
    def status(self) -> CommandStatus:
        """Failed iff any error was recorded."""
        if self.error_messages:
            return CommandStatus.FAILED
        return CommandStatus.SUCCESS

    def to_payload(self) -> Dict[str, object]:
        """
        Build the JSON payload returned to HTTP callers.

        Optional keys are omitted when they carry nothing.

        Returns:
            dict: Payload with status, message, error_messages and data
        """
        payload: Dict[str, object] = {"status": self.status.value}
        if self.message is not None:
            payload["message"] = self.message
        if self.error_messages:
            payload["error_messages"] = list(self.error_messages)
        if self.data:
            payload["data"] = dict(self.data)
        return payload
