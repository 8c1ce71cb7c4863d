"""RELOAD and HEALTHCHECK command sessions."""

import logging

from ..config.models import SocketConfig
from ..parsers.command_parser import apply_response_line, parser_for
from ..utils.errors import ControlSocketError
from ..utils.metrics import CommandResult
from ..utils.status import Command
from .base import BaseCollector
from .socket_helper import LineReader, SocketHelper


class CommandCollector(BaseCollector):
    """Issues one control command and gathers its response."""

    def __init__(self, config: SocketConfig, command: Command, logger: logging.Logger):
        """
        Initialize command collector.

        Args:
            config: Control socket configuration
            command: RELOAD or HEALTHCHECK
            logger: Logger instance

        Raises:
            UnsupportedCommandError: If command has no response grammar
        """
        super().__init__(config, logger)
        self.command = command
        self._parse_line = parser_for(command)

    def collect(self) -> CommandResult:
        """
        Send the command and fold every response line into a result.

        Returns:
            CommandResult: Status, message, errors and data of the response

        Raises:
            ControlSocketError: If the socket cannot be reached, written or
                read before the deadline
        """
        self.logger.info(f"Processing command: {self.command.value}")
        result = CommandResult()

        client = self._connect()
        try:
            SocketHelper.send_command(client, self.command, self.logger)
            self.logger.info(f"Sent command: {self.command.value}")

            reader = LineReader(client, self.logger)
            for line_no, line in enumerate(reader):
                self.logger.debug(f"Command response line {line_no}: {line.rstrip()}")
                apply_response_line(result, self._parse_line(line_no, line))
        finally:
            SocketHelper.close_client(client, self.logger)

        if reader.error is not None:
            raise ControlSocketError(f"Error reading {self.command.value} response: {reader.error}")

        if result.error_messages:
            self.logger.warning(
                f"Command {self.command.value} failed: {'; '.join(result.error_messages)}"
            )
        return result
