"""
Chequeos posteriores al despliegue contra el servidor web local. Nunca cambian el exit status.
"""

import requests

from . import settings
from .steps import check_step


def http_status(url, timeout=None):
    """Status code de un GET a `url`, 0 si nadie responde."""
    try:
        response = requests.get(url, timeout=timeout or settings.VERIFY_TIMEOUT)
    except requests.RequestException:
        return 0
    return response.status_code


def count_marker(url, marker, timeout=None):
    """Cantidad de líneas del body que contienen `marker`."""
    try:
        response = requests.get(url, timeout=timeout or settings.VERIFY_TIMEOUT)
    except requests.RequestException:
        return 0
    return sum(1 for line in response.text.splitlines() if marker in line)


def check_http_status(url=None, timeout=None):
    url = url or settings.LOCAL_URL
    code = http_status(url, timeout=timeout)
    return check_step(
        "http-check",
        code == 200,
        "Web server is responding correctly (HTTP 200)",
        f"Web server not responding correctly (HTTP {code:03d})",
        error=f"HTTP {code:03d}",
    )


def check_content(marker, url=None, timeout=None):
    url = url or settings.LOCAL_URL
    matches = count_marker(url, marker, timeout=timeout)
    return check_step(
        "content-check",
        matches > 0,
        "HTML content is being served correctly",
        "HTML content not found in response",
        error=f"'{marker}' not found at {url}",
    )
