"""STATS collection session over the syslog-ng control socket."""

from typing import List
import logging

from ..config.models import SocketConfig
from ..parsers.stats_classifier import classify
from ..parsers.stats_parser import parse_stat_line
from ..utils.errors import StatParseError
from ..utils.metrics import MetricEmission, StatsPass
from ..utils.status import Command
from .base import BaseCollector, safe_collect
from .socket_helper import LineReader, SocketHelper


class StatsCollector(BaseCollector):
    """Collector for the per-source and per-destination counters of syslog-ng."""

    def __init__(self, config: SocketConfig, logger: logging.Logger):
        """
        Initialize STATS collector.

        Args:
            config: Control socket configuration
            logger: Logger instance
        """
        super().__init__(config, logger)

    @safe_collect
    def collect(self) -> StatsPass:
        """
        Run one STATS pass.

        Returns:
            StatsPass: Classified emissions and whether syslog-ng was reachable
        """
        client = self._connect()
        try:
            SocketHelper.send_command(client, Command.STATS, self.logger)

            reader = LineReader(client, self.logger)
            reader.read_header()

            emissions = self._drain(reader)
        finally:
            SocketHelper.close_client(client, self.logger)

        self.logger.debug(f"STATS pass produced {len(emissions)} sample(s)")
        return StatsPass(emissions=emissions, up=True)

    def _drain(self, reader: LineReader) -> List[MetricEmission]:
        """
        Parse and classify every line up to the sentinel.

        Args:
            reader: Line reader positioned after the header

        Returns:
            List[MetricEmission]: One emission per recognised line
        """
        emissions = []
        for line in reader:
            try:
                record = parse_stat_line(line)
            except StatParseError as e:
                self.logger.debug(f"Skipping STATS line: {e}")
                continue

            emission = classify(record)
            if emission is not None:
                emissions.append(emission)

        return emissions
