"""
Logging del arranque: cada línea con timestamp, a stdout y al archivo de log (como `tee -a`).
"""

import logging
import os
import sys

LOG_FORMAT = "[%(asctime)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("ec2_userdata")


def setup_logging(log_file=None):
    """Configura el logger del paquete: stdout y, si se pasa, `log_file` en modo append.

    Los handlers de una llamada anterior se cierran y se reemplazan, así correr dos veces un
    aprovisionador en el mismo proceso no duplica líneas.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger
