"""
Cliente mínimo del Instance Metadata Service v2: primero se pide un token (PUT) y con ese token se
consulta la ruta de metadata (GET). Un solo intento por llamada, sin reintentos ni cache.
"""

import logging
from collections import namedtuple

import requests

from . import settings

LOGGER = logging.getLogger(__name__)

TOKEN_PATH = "/latest/api/token"
METADATA_PATH = "/latest/meta-data/"
TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"
TOKEN_HEADER = "X-aws-ec2-metadata-token"

METADATA_UNAVAILABLE = "Unable to retrieve metadata"

InstanceIdentity = namedtuple("InstanceIdentity", ["instance_id", "instance_type", "availability_zone"])


def _timeout(timeout):
    # solo connect timeout, como `curl --connect-timeout`; la lectura no tiene límite
    return (timeout or settings.IMDS_TIMEOUT, None)


def get_token(endpoint=None, ttl=None, timeout=None):
    """Pide un token de sesión; si el servicio no responde devuelve un string vacío."""
    endpoint = endpoint or settings.IMDS_ENDPOINT
    try:
        response = requests.put(
            endpoint.rstrip("/") + TOKEN_PATH,
            headers={TTL_HEADER: str(ttl or settings.IMDS_TOKEN_TTL)},
            timeout=_timeout(timeout),
        )
        response.raise_for_status()
    except requests.RequestException as e:
        LOGGER.debug("IMDSv2 token request failed: %s", e)
        return ""
    return response.text.strip()


def get_metadata(path, endpoint=None, timeout=None):
    """Lee un valor de metadata, por ejemplo `instance-id` o `placement/availability-zone`.

    Sin token devuelve el centinela `METADATA_UNAVAILABLE`. Con token pero sin poder leer el valor devuelve
    un string vacío.
    """
    endpoint = endpoint or settings.IMDS_ENDPOINT
    token = get_token(endpoint=endpoint, timeout=timeout)
    if not token:
        return METADATA_UNAVAILABLE

    try:
        response = requests.get(
            endpoint.rstrip("/") + METADATA_PATH + path.lstrip("/"),
            headers={TOKEN_HEADER: token},
            timeout=_timeout(timeout),
        )
        response.raise_for_status()
    except requests.RequestException as e:
        LOGGER.debug("IMDSv2 request for %s failed: %s", path, e)
        return ""
    return response.text


def is_available(value):
    return bool(value) and value != METADATA_UNAVAILABLE


def get_instance_identity(endpoint=None):
    return InstanceIdentity(
        instance_id=get_metadata("instance-id", endpoint=endpoint),
        instance_type=get_metadata("instance-type", endpoint=endpoint),
        availability_zone=get_metadata("placement/availability-zone", endpoint=endpoint),
    )


def get_instance_dns(endpoint=None):
    """Hostname público de la instancia; si no hay, el hostname local.

    :return: el par `(dns, is_public)`
    """
    dns = get_metadata("public-hostname", endpoint=endpoint)
    if is_available(dns):
        return dns, True
    return get_metadata("local-hostname", endpoint=endpoint), False
