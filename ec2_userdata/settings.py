"""
Parámetros del aprovisionamiento. Cada valor se puede sobreescribir con una
variable de entorno EC2_USERDATA_<NOMBRE>.
"""

import os


def _env(name, default):
    return os.environ.get(f"EC2_USERDATA_{name}", default)


# ------------------- Metadata (IMDSv2) -------------------
IMDS_ENDPOINT       = _env("IMDS_ENDPOINT", "http://169.254.169.254")
IMDS_TOKEN_TTL      = int(_env("IMDS_TOKEN_TTL", "21600"))
IMDS_TIMEOUT        = float(_env("IMDS_TIMEOUT", "5"))

# ------------------- Servidor web -------------------
PACKAGE             = _env("PACKAGE", "httpd")
SERVICE             = _env("SERVICE", "httpd")
WEB_ROOT            = _env("WEB_ROOT", "/var/www/html")
INDEX_NAME          = "index.html"
WEB_OWNER           = _env("WEB_OWNER", "apache:apache")
WEB_MODE            = _env("WEB_MODE", "755")

# ------------------- Logs -------------------
LOG_FILE            = _env("LOG_FILE", "/var/log/user_data.log")
SETUP_LOG_FILE      = _env("SETUP_LOG_FILE", "/var/log/setup.log")
LOG_FILE_MODE       = _env("LOG_FILE_MODE", "644")

# ------------------- Verificación -------------------
LOCAL_URL           = _env("LOCAL_URL", "http://localhost")
VERIFY_DELAY        = float(_env("VERIFY_DELAY", "5"))
VERIFY_TIMEOUT      = float(_env("VERIFY_TIMEOUT", "10"))
VERBOSE_MARKER      = "Hello AWS"

# ------------------- Lanzamiento EC2 -------------------
REGION              = _env("REGION", "us-east-1")
INSTANCE_TYPE       = _env("INSTANCE_TYPE", "t2.micro")
INSTANCE_PROFILE    = _env("INSTANCE_PROFILE", "LabInstanceProfile")
INSTANCE_NAME       = _env("INSTANCE_NAME", "webserver-userdata")
SECURITY_GROUP_NAME = _env("SECURITY_GROUP_NAME", "web-sg-userdata")
AMI_PARAMETER       = _env("AMI_PARAMETER", "/aws/service/ami-amazon-linux-latest/al2023-ami-kernel-6.1-x86_64")
VARIANT             = _env("VARIANT", "verbose")
PIP_SPEC            = _env("PIP_SPEC", "ec2-userdata")
REMOTE_CHECK_DELAY  = float(_env("REMOTE_CHECK_DELAY", "90"))
