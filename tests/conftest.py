"""Shared pytest configuration and fixtures."""

import os
import shutil
import socketserver
import tempfile
import threading
import time

import pytest

from syslog_ng_exporter.config.models import SocketConfig
from syslog_ng_exporter.utils.logger import setup_logger


STATS_RESPONSE = """SourceName;SourceId;SourceInstance;State;Type;Number
dst.file;d_mesg#0;/var/log/messages;a;dropped;0
dst.file;d_mesg#0;/var/log/messages;a;processed;610
dst.file;d_mesg#0;/var/log/messages;a;stored;0
destination;d_spol;;a;processed;0
src.internal;s_sys#2;;a;processed;72
src.internal;s_sys#2;;a;stamp;1556092051
center;;received;a;processed;72
src.unix-dgram;s_sys#0;/run/systemd/journal/syslog;a;processed;675
src.unix-dgram;s_sys#0;/run/systemd/journal/syslog;a;stamp;1556092606
destination;d_mesg;;a;processed;610
destination;d_mail;;a;processed;0
destination;d_auth;;a;processed;51
destination;d_mlal;;a;processed;0
center;;queued;a;processed;797
src.none;;;a;processed;0
src.none;;;a;stamp;0
destination;d_cron;;a;processed;111
global;payload_reallocs;;a;processed;88
global;sdata_updates;;a;processed;0
dst.file;d_kern#0;/var/log/kern;o;dropped;0
dst.file;d_kern#0;/var/log/kern;o;processed;25
dst.file;d_kern#0;/var/log/kern;o;stored;0
src.host;;l261767-vm;d;processed;772
src.host;;l261767-vm;d;stamp;1556092606
dst.file;d_cron#0;/var/log/cron;o;dropped;0
dst.file;d_cron#0;/var/log/cron;o;processed;111
dst.file;d_cron#0;/var/log/cron;o;stored;0
src.file;s_sys#1;/dev/kmsg;a;processed;25
src.file;s_sys#1;/dev/kmsg;a;stamp;1556091325
destination;d_boot;;a;processed;0
destination;d_kern;;a;processed;25
global;msg_clones;;a;processed;0
source;s_sys;;a;processed;72
dst.file;d_auth#0;/var/log/secure;a;dropped;0
dst.file;d_auth#0;/var/log/secure;a;processed;51
dst.file;d_auth#0;/var/log/secure;a;stored;0
src.tcp;s_net;afsocket_sd.(stream,AF_INET(0.0.0.0:514));a;connections;0
src.network;s_net;afsocket_sd.(stream,AF_INET(0.0.0.0:601));a;connections;0
."""

RELOAD_RESPONSE = "OK Config reload successful\n.\n"

HEALTHCHECK_RESPONSE = """OK syslogng_io_worker_latency_seconds 6.08e-05
syslogng_mainloop_io_worker_roundtrip_latency_seconds 0.000114926
.
"""

DEFAULT_RESPONSES = {
    "STATS": STATS_RESPONSE,
    "RELOAD": RELOAD_RESPONSE,
    "HEALTHCHECK": HEALTHCHECK_RESPONSE,
}


class MockControlSocket:
    """
    Threaded Unix socket server imitating the syslog-ng control socket.

    Replies to each request line with the canned response registered for
    that command, then closes the connection. Unknown commands get an
    empty response. With `trickle` set, the response is sent one byte per
    `trickle` seconds.
    """

    def __init__(self, path: str):
        self.path = path
        self.responses = dict(DEFAULT_RESPONSES)
        self.delay = 0.0
        self.trickle = 0.0
        self.requests = []

        mock = self

        class Handler(socketserver.StreamRequestHandler):
            def handle(self):
                command = self.rfile.readline().decode("utf-8").strip()
                mock.requests.append(command)
                if mock.delay:
                    time.sleep(mock.delay)
                payload = mock.responses.get(command, "").encode("utf-8")
                if not mock.trickle:
                    self.wfile.write(payload)
                    return
                # One byte at a time until the client hangs up
                try:
                    for i in range(len(payload)):
                        self.wfile.write(payload[i:i + 1])
                        time.sleep(mock.trickle)
                except OSError:
                    return

        self.server = socketserver.ThreadingUnixStreamServer(path, Handler)
        self.server.daemon_threads = True
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    def start(self):
        self.thread.start()

    def stop(self):
        self.server.shutdown()
        self.server.server_close()


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test", "DEBUG")


@pytest.fixture
def socket_dir():
    """Short temporary directory; AF_UNIX paths are limited to ~100 bytes."""
    path = tempfile.mkdtemp(prefix="sng")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def control_socket(socket_dir):
    """Running mock control socket server."""
    server = MockControlSocket(os.path.join(socket_dir, "syslog-ng.ctl"))
    server.start()
    yield server
    server.stop()


@pytest.fixture
def socket_config(control_socket):
    """Socket configuration pointing at the mock control socket."""
    return SocketConfig(path=control_socket.path, timeout_seconds=1.0)


@pytest.fixture
def missing_socket_config(socket_dir):
    """Socket configuration pointing at a path nobody listens on."""
    return SocketConfig(path=os.path.join(socket_dir, "absent.ctl"), timeout_seconds=1.0)
