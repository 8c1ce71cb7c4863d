"""Control socket connection and line reader shared by all collectors."""

import io
import logging
import socket
import time
from typing import BinaryIO, Iterator, Optional

from ..config.models import SocketConfig
from ..utils.errors import ControlSocketError
from ..utils.status import Command

SENTINEL = "."


class _DeadlineSocketIO(io.RawIOBase):
    """Raw byte stream over a ControlConnection, re-arming the deadline before every recv."""

    def __init__(self, connection: "ControlConnection"):
        self._connection = connection

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        return self._connection.recv_into(buffer)


class ControlConnection:
    """
    Unix stream connection to the syslog-ng control socket.

    Every operation is bounded by one absolute deadline fixed at connect
    time. The remaining time is applied before each underlying send and
    recv, so a stalled or trickling daemon cannot hold a session longer
    than the configured timeout in total.
    """

    def __init__(self, sock: socket.socket, deadline: float):
        self._sock = sock
        self._deadline = deadline
        self._file: BinaryIO = io.BufferedReader(_DeadlineSocketIO(self))

    def _apply_deadline(self) -> None:
        remaining = self._deadline - time.monotonic()
        if remaining <= 0:
            raise TimeoutError("control socket deadline exceeded")
        self._sock.settimeout(remaining)

    def write(self, data: bytes) -> None:
        self._apply_deadline()
        self._sock.sendall(data)

    def recv_into(self, buffer) -> int:
        self._apply_deadline()
        return self._sock.recv_into(buffer)

    def readline(self) -> bytes:
        return self._file.readline()

    def close(self) -> None:
        try:
            self._file.close()
        finally:
            self._sock.close()


class LineReader:
    """
    Lazy, single-pass reader of response lines.

    Iteration stops at the sentinel line (first character "."), at EOF, or
    at the first read error, which is kept in `error`. An incomplete
    trailing line at EOF is dropped.
    """

    def __init__(self, stream, logger: Optional[logging.Logger] = None):
        """
        Initialize line reader.

        Args:
            stream: Object with a readline() method returning bytes
            logger: Optional logger instance
        """
        self._stream = stream
        self._done = False
        self.error: Optional[OSError] = None
        self.logger = logger or logging.getLogger(__name__)

    def read_header(self) -> str:
        """
        Read the first line of a response.

        Returns:
            str: Header line

        Raises:
            ControlSocketError: If the header cannot be read completely
        """
        try:
            raw = self._stream.readline()
        except OSError as e:
            self._done = True
            raise ControlSocketError(f"Error reading header from control socket: {e}") from e

        if not raw.endswith(b"\n"):
            self._done = True
            raise ControlSocketError("Error reading header from control socket: unexpected EOF")

        return raw.decode("utf-8", errors="replace")

    def __iter__(self) -> Iterator[str]:
        while not self._done:
            try:
                raw = self._stream.readline()
            except OSError as e:
                self.logger.debug(f"Read from control socket ended: {e}")
                self.error = e
                break

            line = raw.decode("utf-8", errors="replace")
            if line.startswith(SENTINEL):
                self.logger.debug("Reached end of output")
                break
            if not line.endswith("\n"):
                self.logger.debug("Reached EOF before sentinel")
                break

            yield line

        self._done = True


class SocketHelper:
    """Helper class for control socket operations."""

    @staticmethod
    def create_client(config: SocketConfig, logger: logging.Logger) -> ControlConnection:
        """
        Connect to the control socket and start the session deadline.

        Args:
            config: Socket configuration
            logger: Logger instance

        Returns:
            ControlConnection: Connected client

        Raises:
            ControlSocketError: If connection fails
        """
        deadline = time.monotonic() + config.timeout_seconds
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)

        try:
            logger.debug(f"Connecting to {config.path}")
            sock.settimeout(config.timeout_seconds)
            sock.connect(config.path)
        except OSError as e:
            sock.close()
            raise ControlSocketError(f"Error connecting to syslog-ng: {e}") from e

        return ControlConnection(sock, deadline)

    @staticmethod
    def send_command(
        client: ControlConnection,
        command: Command,
        logger: Optional[logging.Logger] = None
    ) -> None:
        """
        Write a command request line.

        Args:
            client: Connected client
            command: Command to send
            logger: Optional logger instance

        Raises:
            ControlSocketError: If the write fails or the deadline passes
        """
        try:
            client.write(command.to_wire())
        except OSError as e:
            raise ControlSocketError(f"Error writing to control socket: {e}") from e

        if logger:
            logger.debug(f"Sent command: {command.value}")

    @staticmethod
    def close_client(client: ControlConnection, logger: Optional[logging.Logger] = None) -> None:
        """
        Close control socket connection.

        Args:
            client: Connected client
            logger: Optional logger instance
        """
        try:
            client.close()
        except OSError as e:
            if logger:
                logger.warning(f"Error closing control socket: {e}")
