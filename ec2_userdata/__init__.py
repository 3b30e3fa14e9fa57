"""
Aprovisionamiento de instancias EC2 al arranque (User Data): httpd, metadata IMDSv2 y página de estado.
"""

__version__ = "0.1.0"
