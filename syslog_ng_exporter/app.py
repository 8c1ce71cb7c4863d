"""WSGI application exposing metrics and the RELOAD/HEALTHCHECK commands."""

import json
import logging
from typing import Dict

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_client.core import CollectorRegistry
from werkzeug.wrappers import Request, Response

from .collectors.command_collector import CommandCollector
from .config.models import ExporterConfig
from .utils.errors import ControlSocketError
from .utils.status import Command

COMMAND_ROUTES: Dict[str, Command] = {
    "/reload": Command.RELOAD,
    "/healthcheck": Command.HEALTHCHECK,
}

LANDING_PAGE = """<html>
<head><title>Syslog-NG Exporter/API</title></head>
<body>
<h1>Syslog-NG Exporter/API</h1>
<ul>
    <li><a href='{metrics}'>Metrics</a></li>
    <li><a href='/reload'>Reload</a></li>
    <li><a href='/healthcheck'>Healthcheck</a></li>
</ul>
</body>
</html>
"""


def json_error(message: str, status: int, logger: logging.Logger) -> Response:
    """
    Format an error as a JSON payload.

    Falls back to the raw error text once if the payload cannot be encoded.

    Args:
        message: Error description
        status: HTTP status code
        logger: Logger instance

    Returns:
        Response: JSON error response
    """
    logger.info(message)
    try:
        body = json.dumps({"message": message, "status": "failed"}) + "\n"
    except (TypeError, ValueError) as e:
        logger.error(f"critical error: {e}")
        return Response(f"critical error: {e}", status=status, mimetype="text/plain")

    response = Response(body, status=status, content_type="application/json; charset=utf-8")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


class ExporterApp:
    """WSGI application for the syslog-ng exporter."""

    def __init__(self, config: ExporterConfig, registry: CollectorRegistry, logger: logging.Logger):
        """
        Initialize application.

        Args:
            config: Exporter configuration
            registry: Registry rendered on the metrics endpoint
            logger: Logger instance
        """
        self.config = config
        self.registry = registry
        self.logger = logger.getChild(self.__class__.__name__)

    def __call__(self, environ, start_response):
        request = Request(environ)
        return self.dispatch(request)(environ, start_response)

    def dispatch(self, request: Request) -> Response:
        if request.path == self.config.telemetry.endpoint:
            return self.metrics()

        command = COMMAND_ROUTES.get(request.path)
        if command is not None:
            return self.run_command(command)

        if request.path == "/":
            return Response(
                LANDING_PAGE.format(metrics=self.config.telemetry.endpoint),
                mimetype="text/html",
            )

        return Response("Not Found\n", status=404)

    def metrics(self) -> Response:
        """Render the registry in Prometheus text format."""
        return Response(generate_latest(self.registry), content_type=CONTENT_TYPE_LATEST)

    def run_command(self, command: Command) -> Response:
        """
        Run one command session and encode its result.

        Returns:
            Response: 200 with the result payload, or 500 on transport and
            encoding failures
        """
        collector = CommandCollector(self.config.socket, command, self.logger)

        try:
            result = collector.collect()
        except ControlSocketError as e:
            return json_error(str(e), 500, self.logger)

        try:
            body = json.dumps(result.to_payload()) + "\n"
        except (TypeError, ValueError) as e:
            return json_error(f"error: marshalling payload: {e}", 500, self.logger)

        return Response(body, mimetype="application/json")
