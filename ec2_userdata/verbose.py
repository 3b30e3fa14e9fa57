"""
User data completo:
- Lee instance-id, instance-type y availability zone desde IMDSv2
- Actualiza el sistema, instala httpd, lo arranca y lo habilita
- Genera /var/www/html/index.html con los datos de la instancia
- Ajusta dueño y permisos del webroot y reinicia httpd
- Verifica que el servidor responde 200 y que sirve "Hello AWS"
- Deja todo en /var/log/user_data.log y un resumen en /var/log/setup.log
"""

import logging
import os
import sys
import time
from datetime import datetime

from . import imds, settings, steps, verify
from .logs import setup_logging
from .webpage import render_status_page, write_page

LOGGER = logging.getLogger(__name__)


def now():
    """Hora local con el mismo formato que `date`."""
    return datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y")


def retrieve_dns():
    dns, is_public = imds.get_instance_dns()
    if is_public:
        LOGGER.info("Instance DNS: %s", dns)
    else:
        LOGGER.info("Using local hostname: %s", dns)
    result = steps.check_step(
        "dns-lookup",
        imds.is_available(dns),
        f"Instance DNS resolved: {dns}",
        "Instance DNS could not be resolved",
        error=dns or "empty response",
        warn=True,
    )
    return result, dns


def create_page(index_path, dns, identity):
    html = render_status_page(
        dns=dns,
        instance_id=identity.instance_id,
        instance_type=identity.instance_type,
        availability_zone=identity.availability_zone,
        updated_at=now(),
    )
    error = None
    try:
        write_page(index_path, html)
    except OSError as e:
        error = str(e)

    result = steps.check_step(
        "html-create",
        error is None and os.path.isfile(index_path),
        "HTML file created successfully",
        "Failed to create HTML file",
        error=error,
    )
    LOGGER.info("HTML file size: %d bytes", os.path.getsize(index_path))
    return result


def write_summary(path, log_file, identity, dns):
    summary_dir = os.path.dirname(path)
    if summary_dir:
        os.makedirs(summary_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"Simple HTML site setup completed at {now()}\n")
        f.write(f"User data execution log: {log_file}\n")
        f.write(f"Instance ID: {identity.instance_id}\n")
        f.write(f"Instance DNS: {dns}\n")


def provision(started):
    """Corre todos los pasos en orden. Devuelve la lista de `StepResult`; un paso FATAL que falla lanza
    `ProvisioningAborted`.
    """
    results = []
    web_root = settings.WEB_ROOT
    index_path = os.path.join(web_root, settings.INDEX_NAME)

    LOGGER.info("Retrieving instance metadata...")
    identity = imds.get_instance_identity()
    LOGGER.info("Instance ID: %s", identity.instance_id)
    LOGGER.info("Instance Type: %s", identity.instance_type)
    LOGGER.info("Availability Zone: %s", identity.availability_zone)

    LOGGER.info("Step 1: Updating system packages")
    results.append(steps.update_packages())

    LOGGER.info("Step 2: Installing %s web server", settings.PACKAGE)
    results.append(steps.install_package(settings.PACKAGE))

    LOGGER.info("Step 3: Starting and enabling %s service", settings.SERVICE)
    results.append(steps.start_service(settings.SERVICE))
    results.append(steps.enable_service(settings.SERVICE))

    LOGGER.info("Step 4: Retrieving instance DNS")
    dns_result, dns = retrieve_dns()
    results.append(dns_result)

    LOGGER.info("Step 5: Creating HTML webpage")
    results.append(create_page(index_path, dns, identity))

    LOGGER.info("Step 6: Setting file permissions")
    results.append(steps.set_ownership(web_root, settings.WEB_OWNER))
    results.append(steps.set_permissions(web_root, settings.WEB_MODE))

    LOGGER.info("Step 7: Restarting %s service after content setup", settings.SERVICE)
    results.append(steps.restart_service(settings.SERVICE))

    LOGGER.info("Step 8: Verifying web server accessibility")
    time.sleep(settings.VERIFY_DELAY)
    results.append(verify.check_http_status(settings.LOCAL_URL))
    LOGGER.info("%s service status: %s", settings.SERVICE, steps.service_status(settings.SERVICE))

    LOGGER.info("Step 9: Testing HTML content delivery")
    results.append(verify.check_content(settings.VERBOSE_MARKER, url=settings.LOCAL_URL))

    LOGGER.info("=== User Data Script Execution Completed ===")
    LOGGER.info("Total execution time: %d seconds", time.monotonic() - started)
    LOGGER.info("Final status: SUCCESS")
    LOGGER.info("Website URL: http://%s", dns)
    LOGGER.info("Log file location: %s", settings.LOG_FILE)

    try:
        write_summary(settings.SETUP_LOG_FILE, settings.LOG_FILE, identity, dns)
    except OSError as e:
        LOGGER.info("❌ Failed to write setup summary %s: %s", settings.SETUP_LOG_FILE, e)
    return results


def main():
    started = time.monotonic()
    setup_logging(settings.LOG_FILE)
    LOGGER.info("=== Starting User Data Script Execution ===")
    LOGGER.info("Script started at: %s", now())

    try:
        provision(started)
    except steps.ProvisioningAborted as e:
        LOGGER.info("Provisioning aborted at step '%s'", e.result.step)
        return 1

    try:
        os.chmod(settings.LOG_FILE, int(settings.LOG_FILE_MODE, 8))
    except OSError as e:
        LOGGER.info("❌ Failed to set permissions on %s: %s", settings.LOG_FILE, e)

    LOGGER.info("User data script finished successfully!")
    LOGGER.info("Script ended at: %s", now())
    return 0


if __name__ == "__main__":
    sys.exit(main())
