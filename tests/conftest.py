"""
Module with global fixtures
"""
import os
import subprocess
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from ec2_userdata import settings, steps
from ec2_userdata.logs import logger as package_logger

MOCK_TOKEN = "mock-imdsv2-token"

INSTANCE_METADATA = {
    "instance-id": "i-123",
    "instance-type": "t2.micro",
    "placement/availability-zone": "us-east-1a",
    "public-hostname": "example.com",
    "local-hostname": "ip-10-0-0-12.ec2.internal",
}


class FakeIMDSHandler(BaseHTTPRequestHandler):
    """Implements the IMDSv2 token-then-query protocol over `server.metadata`."""

    def do_PUT(self):
        if self.path != "/latest/api/token" or not self.headers.get("X-aws-ec2-metadata-token-ttl-seconds"):
            self._reply(400 if self.path == "/latest/api/token" else 404)
            return
        self.server.token_requests += 1
        self._reply(200, MOCK_TOKEN)

    def do_GET(self):
        if self.headers.get("X-aws-ec2-metadata-token") != MOCK_TOKEN:
            self._reply(401)
            return
        prefix = "/latest/meta-data/"
        key = self.path[len(prefix) :] if self.path.startswith(prefix) else None
        if key in self.server.metadata:
            self._reply(200, self.server.metadata[key])
        else:
            self._reply(404)

    def _reply(self, status, body=""):
        data = body.encode()
        self.send_response(status)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        pass


class WebRootHandler(BaseHTTPRequestHandler):
    """Serves `server.web_root/index.html` like httpd would."""

    def do_GET(self):
        index_path = os.path.join(self.server.web_root, "index.html")
        if not os.path.isfile(index_path):
            self.send_response(403)
            self.end_headers()
            return
        with open(index_path, "rb") as f:
            data = f.read()
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        pass


def _serve(handler, **attributes):
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    for name, value in attributes.items():
        setattr(server, name, value)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server


@pytest.fixture(name="imds_server")
def imds_server_fixture():
    server = _serve(FakeIMDSHandler, metadata=dict(INSTANCE_METADATA), token_requests=0)
    server.url = f"http://127.0.0.1:{server.server_address[1]}"
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture(name="unreachable_url")
def unreachable_url_fixture():
    """URL of a port on which nothing listens"""
    server = ThreadingHTTPServer(("127.0.0.1", 0), BaseHTTPRequestHandler)
    port = server.server_address[1]
    server.server_close()
    return f"http://127.0.0.1:{port}"


@pytest.fixture(name="web_server")
def web_server_fixture(tmp_path):
    web_root = tmp_path / "html"
    web_root.mkdir()
    server = _serve(WebRootHandler, web_root=str(web_root))
    server.url = f"http://127.0.0.1:{server.server_address[1]}"
    yield server
    server.shutdown()
    server.server_close()


class CommandRecorder:
    """Stands in for `subprocess.run`: records every command and fails the ones registered in `failures`."""

    def __init__(self):
        self.commands = []
        self.failures = {}

    def fail(self, *command, returncode=1):
        self.failures[tuple(command)] = returncode

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        returncode = self.failures.get(tuple(command), 0)
        stdout = ""
        if command[:2] == ["systemctl", "is-active"]:
            stdout = "active\n" if returncode == 0 else "failed\n"
        return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr="")

    def ran(self, *command):
        return list(command) in self.commands


@pytest.fixture(name="commands")
def commands_fixture(monkeypatch):
    recorder = CommandRecorder()
    monkeypatch.setattr(steps.subprocess, "run", recorder)
    return recorder


@pytest.fixture(name="host")
def host_fixture(monkeypatch, tmp_path, imds_server, web_server):
    """Points every path and URL of the provisioners at temporary locations and local fake servers"""
    monkeypatch.setattr(settings, "IMDS_ENDPOINT", imds_server.url)
    monkeypatch.setattr(settings, "WEB_ROOT", web_server.web_root)
    monkeypatch.setattr(settings, "LOCAL_URL", web_server.url)
    monkeypatch.setattr(settings, "LOG_FILE", str(tmp_path / "log" / "user_data.log"))
    monkeypatch.setattr(settings, "SETUP_LOG_FILE", str(tmp_path / "log" / "setup.log"))
    monkeypatch.setattr(settings, "VERIFY_DELAY", 0)
    monkeypatch.setattr(settings, "VERIFY_TIMEOUT", 2)
    monkeypatch.setattr(settings, "IMDS_TIMEOUT", 2)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
