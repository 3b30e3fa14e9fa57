"""
Páginas HTML que sirve httpd. Los valores de metadata se insertan tal cual, sin escapar.
"""

import os
from string import Template

MINIMAL_TEMPLATE = Template("<h1>Hello World from $hostname</h1>\n")

STATUS_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
    <title>Hello AWS from $dns</title>
    <style>
        body {
            font-family: Arial, sans-serif;
            text-align: center;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            margin: 0;
            padding: 50px;
            min-height: 100vh;
            display: flex;
            flex-direction: column;
            justify-content: center;
        }
        h1 {
            font-size: 3rem;
            margin-bottom: 20px;
        }
        .dns-info {
            background: rgba(255,255,255,0.1);
            padding: 20px;
            border-radius: 10px;
            margin: 20px auto;
            max-width: 600px;
        }
        .metadata-info {
            background: rgba(255,255,255,0.05);
            padding: 15px;
            border-radius: 5px;
            margin: 10px 0;
            font-size: 0.9rem;
        }
    </style>
</head>
<body>
    <h1>Hello AWS from $dns</h1>
    <div class="dns-info">
        <p><strong>Instance DNS:</strong> $dns</p>
        <p><strong>Status:</strong> ✅ Online</p>
        <p><strong>Last Updated:</strong> $updated_at</p>
        <div class="metadata-info">
            <p><strong>Instance ID:</strong> $instance_id</p>
            <p><strong>Instance Type:</strong> $instance_type</p>
            <p><strong>Availability Zone:</strong> $availability_zone</p>
        </div>
    </div>
</body>
</html>
"""
)


def render_minimal(hostname):
    return MINIMAL_TEMPLATE.substitute(hostname=hostname)


def render_status_page(dns, instance_id, instance_type, availability_zone, updated_at):
    return STATUS_TEMPLATE.substitute(
        dns=dns,
        instance_id=instance_id,
        instance_type=instance_type,
        availability_zone=availability_zone,
        updated_at=updated_at,
    )


def write_page(path, html):
    """Sobreescribe `path` con la página y devuelve su tamaño en bytes."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    data = html.encode("utf-8")
    with open(path, "wb") as f:
        f.write(data)
    return len(data)
