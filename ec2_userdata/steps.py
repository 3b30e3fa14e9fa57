"""
Pasos de aprovisionamiento (yum, systemctl, chown, chmod) con su política explícita:

- FATAL: si falla se corta todo el aprovisionamiento (ProvisioningAborted)
- ADVISORY: si falla se deja el ❌ en el log y se sigue
"""

import enum
import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

LOGGER = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


class StepKind(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    WARNING = "warning"


class Policy(enum.Enum):
    FATAL = "fatal"
    ADVISORY = "advisory"


STEP_POLICY = {
    "system-update": Policy.FATAL,
    "package-install": Policy.FATAL,
    "service-start": Policy.FATAL,
    "service-enable": Policy.ADVISORY,
    "dns-lookup": Policy.ADVISORY,
    "html-create": Policy.FATAL,
    "set-ownership": Policy.ADVISORY,
    "set-permissions": Policy.ADVISORY,
    "service-restart": Policy.FATAL,
    "http-check": Policy.ADVISORY,
    "content-check": Policy.ADVISORY,
}


@dataclass
class StepResult:
    step: str
    kind: StepKind
    message: str
    error: Optional[str] = None

    @property
    def ok(self):
        return self.kind is StepKind.SUCCESS


class ProvisioningAborted(Exception):
    """Se lanza cuando falla un paso FATAL, lleva el `StepResult` del paso."""

    def __init__(self, result):
        super().__init__(f"{result.step}: {result.message}")
        self.result = result


def policy_for(step):
    try:
        return STEP_POLICY[step]
    except KeyError:
        raise ValueError(f"Unknown provisioning step '{step}'") from None


def run_command(command):
    """Corre el comando y espera a que termine. Si el ejecutable no existe devuelve exit status 127."""
    try:
        return subprocess.run(command, check=False, capture_output=True, text=True)
    except FileNotFoundError as e:
        return subprocess.CompletedProcess(command, COMMAND_NOT_FOUND, stdout="", stderr=str(e))


def check_step(step, ok, success, failure, error=None, warn=False):
    """Deja el resultado del paso en el log y aplica su política.

    :param warn: reportar una falla ADVISORY como warning en vez de failure
    :raises ProvisioningAborted: si falló un paso FATAL
    """
    if ok:
        LOGGER.info("✅ %s", success)
        return StepResult(step, StepKind.SUCCESS, success)

    policy = policy_for(step)
    LOGGER.info("❌ %s", failure)
    if error:
        LOGGER.info("%s: %s", step, error)

    kind = StepKind.WARNING if warn and policy is Policy.ADVISORY else StepKind.FAILURE
    result = StepResult(step, kind, failure, error)
    if policy is Policy.FATAL:
        raise ProvisioningAborted(result)
    return result


def log_output(output):
    for line in (output or "").splitlines():
        if line.strip():
            LOGGER.info("%s", line.rstrip())


def run_step(step, command, success, failure):
    """Corre un comando como paso de aprovisionamiento. Su salida queda en el log (como el `tee` del
    user data); si falla, stderr va como error del paso.
    """
    completed = run_command(command)
    log_output(completed.stdout)
    error = None
    if completed.returncode == 0:
        log_output(completed.stderr)
    else:
        error = (completed.stderr or "").strip() or f"exit status {completed.returncode}"
    return check_step(step, completed.returncode == 0, success, failure, error=error)


# ------------------- Paquetes -------------------
def update_packages():
    return run_step(
        "system-update", ["yum", "update", "-y"], "System update completed successfully", "System update failed"
    )


def install_package(package):
    return run_step(
        "package-install",
        ["yum", "install", "-y", package],
        f"{package} installed successfully",
        f"{package} installation failed",
    )


# ------------------- Servicios -------------------
def start_service(service):
    return run_step(
        "service-start",
        ["systemctl", "start", service],
        f"{service} service started successfully",
        f"Failed to start {service} service",
    )


def enable_service(service):
    return run_step(
        "service-enable",
        ["systemctl", "enable", service],
        f"{service} service enabled for auto-start",
        f"Failed to enable {service} service",
    )


def restart_service(service):
    return run_step(
        "service-restart",
        ["systemctl", "restart", service],
        f"{service} service restarted successfully",
        f"Failed to restart {service} service",
    )


def service_status(service):
    """Estado que imprime `systemctl is-active` (active, inactive, failed, ...)."""
    completed = run_command(["systemctl", "is-active", service])
    return (completed.stdout or "").strip() or "unknown"


# ------------------- Archivos -------------------
def set_ownership(path, owner):
    return run_step(
        "set-ownership", ["chown", "-R", owner, path], f"Ownership set to {owner}", "Failed to set ownership"
    )


def set_permissions(path, mode):
    return run_step(
        "set-permissions", ["chmod", "-R", mode, path], f"Permissions set to {mode}", "Failed to set permissions"
    )
