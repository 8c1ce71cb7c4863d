"""Parsers for RELOAD and HEALTHCHECK responses from the control socket."""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..utils.errors import UnsupportedCommandError
from ..utils.metrics import CommandResult
from ..utils.status import Command

RELOAD_ACK = "OK Config reload successful"
RELOAD_FAILED = "failed to reload"


@dataclass(frozen=True)
class ResponseLine:
    """What a single response line contributes to a CommandResult."""

    message: Optional[str] = None
    data: Optional[Tuple[str, str]] = None
    error: Optional[str] = None


def parse_reload_line(line_no: int, line: str) -> ResponseLine:
    """
    Parse a RELOAD response line.

    Example of a RELOAD response:
        OK Config reload successful
        .

    Args:
        line_no: 0-based index of the line within the response (unused)
        line: Raw response line

    Returns:
        ResponseLine: The line as message, plus an error unless acknowledged
    """
    message = line.rstrip("\r\n")
    if RELOAD_ACK in line:
        return ResponseLine(message=message)
    return ResponseLine(message=message, error=RELOAD_FAILED)


def parse_healthcheck_line(line_no: int, line: str) -> ResponseLine:
    """
    Parse a HEALTHCHECK response line.

    Example of a HEALTHCHECK response:
        OK syslogng_io_worker_latency_seconds 6.0819000000000002e-05
        syslogng_mainloop_io_worker_roundtrip_latency_seconds 0.000114926
        syslogng_internal_events_queue_usage_ratio 0
        .

    Args:
        line_no: 0-based index of the line within the response
        line: Raw response line

    Returns:
        ResponseLine: A key/value data point, the OK status, or an error
    """
    parts = line.strip().split(None, 2)

    if line_no == 0 and len(parts) == 3 and parts[0] == "OK":
        return ResponseLine(message="OK", data=(parts[1], parts[2]))

    if len(parts) == 2:
        return ResponseLine(data=(parts[0], parts[1]))

    return ResponseLine(
        error=f"error: invalid/unexpected results, line: {line_no}: {line.rstrip()}"
    )


LineParser = Callable[[int, str], ResponseLine]

PARSERS: Dict[Command, LineParser] = {
    Command.RELOAD: parse_reload_line,
    Command.HEALTHCHECK: parse_healthcheck_line,
}


def parser_for(command: Command) -> LineParser:
    """
    Look up the response grammar for a command.

    Raises:
        UnsupportedCommandError: If the command has no response parser
    """
    try:
        return PARSERS[command]
    except KeyError:
        raise UnsupportedCommandError(f"unsupported command: {command.value}") from None


def apply_response_line(result: CommandResult, parsed: ResponseLine) -> None:
    """Fold one parsed response line into the aggregate result."""
    if parsed.message is not None:
        result.message = parsed.message
    if parsed.data is not None:
        key, value = parsed.data
        result.data[key] = value
    if parsed.error is not None:
        result.error_messages.append(parsed.error)
