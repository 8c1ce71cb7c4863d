"""Base collector abstract class for control socket sessions."""

from abc import ABC, abstractmethod
from typing import Any
import logging
from functools import wraps

from ..config.models import SocketConfig
from ..utils.metrics import StatsPass
from .socket_helper import ControlConnection, SocketHelper


class BaseCollector(ABC):
    """Abstract base class for all collectors."""

    def __init__(self, config: SocketConfig, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            config: Control socket configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    def collect(self) -> Any:
        """
        Run one session against the control socket.

        Note:
            Each call opens its own connection; nothing is shared between
            calls, so sessions are safe to run from several threads.
        """
        pass

    def _connect(self) -> ControlConnection:
        """
        Open a connection to the configured control socket.

        Raises:
            ControlSocketError: If the socket cannot be reached
        """
        return SocketHelper.create_client(self.config, self.logger)


def safe_collect(func):
    """
    Decorator turning a failed STATS pass into a liveness-false result.

    Args:
        func: Collector method to wrap

    Returns:
        Wrapped function that catches exceptions and reports up=False
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except Exception as e:
            self.logger.error(f"Error scraping syslog-ng: {e}", exc_info=True)
            return StatsPass(emissions=[], up=False, error=str(e))
    return wrapper
