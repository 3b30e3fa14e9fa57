"""
User data mínimo: instala httpd, actualiza el sistema, levanta el servicio y publica
"Hello World from <hostname>".
"""

import logging
import os
import socket
import sys

from . import settings, steps
from .logs import setup_logging
from .webpage import render_minimal, write_page

LOGGER = logging.getLogger(__name__)


def provision():
    steps.install_package(settings.PACKAGE)
    steps.update_packages()
    steps.start_service(settings.SERVICE)
    steps.enable_service(settings.SERVICE)

    index_path = os.path.join(settings.WEB_ROOT, settings.INDEX_NAME)
    error = None
    try:
        write_page(index_path, render_minimal(socket.getfqdn()))
    except OSError as e:
        error = str(e)
    steps.check_step(
        "html-create",
        error is None and os.path.isfile(index_path),
        "HTML file created successfully",
        "Failed to create HTML file",
        error=error,
    )
    return index_path


def main():
    setup_logging()
    try:
        provision()
    except steps.ProvisioningAborted as e:
        LOGGER.info("Provisioning aborted at step '%s'", e.result.step)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
