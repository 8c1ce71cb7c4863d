"""Status enumerations shared by collectors and the HTTP layer."""

from enum import Enum


class CommandStatus(Enum):
    """Outcome of a control command session."""

    SUCCESS = "success"
    FAILED = "failed"


class Command(Enum):
    """Commands understood by the syslog-ng control socket."""

    STATS = "STATS"
    RELOAD = "RELOAD"
    HEALTHCHECK = "HEALTHCHECK"

    def to_wire(self) -> bytes:
        """
        Encode command as a request line.

        Returns:
            bytes: Command token terminated by a newline
        """
        return f"{self.value}\n".encode("ascii")
