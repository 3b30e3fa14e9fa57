"""
Tests for post-deployment checks
"""
import os

from ec2_userdata import verify
from ec2_userdata.steps import StepKind


def _publish(web_server, html):
    with open(os.path.join(web_server.web_root, "index.html"), "w") as f:
        f.write(html)


def test_http_status(web_server):
    assert verify.http_status(web_server.url) == 403
    _publish(web_server, "<h1>Hello World from host</h1>")
    assert verify.http_status(web_server.url) == 200


def test_http_status_unreachable(unreachable_url):
    assert verify.http_status(unreachable_url, timeout=1) == 0


def test_count_marker(web_server):
    _publish(web_server, "<title>Hello AWS</title>\n<h1>Hello AWS</h1>\n<p>other</p>\n")
    assert verify.count_marker(web_server.url, "Hello AWS") == 2
    assert verify.count_marker(web_server.url, "Hello World") == 0


def test_checks_are_advisory(unreachable_url):
    status = verify.check_http_status(unreachable_url, timeout=1)
    content = verify.check_content("Hello AWS", url=unreachable_url, timeout=1)

    assert status.kind is StepKind.FAILURE
    assert status.message == "Web server not responding correctly (HTTP 000)"
    assert content.kind is StepKind.FAILURE


def test_checks_pass(web_server):
    _publish(web_server, "<h1>Hello AWS from example.com</h1>")
    assert verify.check_http_status(web_server.url).ok
    assert verify.check_content("Hello AWS", url=web_server.url).ok
