"""
Lanza una instancia EC2 cuyo User Data instala este paquete y corre uno de los aprovisionadores
(minimal o verbose) en el arranque.
"""

import sys
import time

import boto3
from botocore.exceptions import ClientError

from . import settings
from .verify import http_status

VARIANTS = ("minimal", "verbose")

USER_DATA_TEMPLATE = """#!/bin/bash
yum install -y python3-pip
pip3 install {pip_spec}
ec2-userdata-{variant}
"""


def build_user_data(variant, pip_spec=None):
    if variant not in VARIANTS:
        raise ValueError(f"Unknown user data variant '{variant}', expected one of {VARIANTS}")
    return USER_DATA_TEMPLATE.format(pip_spec=pip_spec or settings.PIP_SPEC, variant=variant)


def latest_ami(ssm, parameter=None):
    return ssm.get_parameter(Name=parameter or settings.AMI_PARAMETER)["Parameter"]["Value"]


# ------------------- Security Group -------------------
def ensure_security_group(ec2, name, vpc_id=None):
    params = {"GroupName": name, "Description": "Permitir trafico web desde cualquier IP"}
    if vpc_id:
        params["VpcId"] = vpc_id

    try:
        sg_id = ec2.create_security_group(**params)["GroupId"]
        print(f"✓ Security Group creado: {sg_id}")
        ec2.authorize_security_group_ingress(
            GroupId=sg_id,
            IpPermissions=[
                {"IpProtocol": "tcp", "FromPort": 80, "ToPort": 80, "IpRanges": [{"CidrIp": "0.0.0.0/0"}]}
            ],
        )
        print("✓ Regla HTTP agregada")
    except ClientError as e:
        if e.response["Error"]["Code"] != "InvalidGroup.Duplicate":
            raise
        filters = [{"Name": "group-name", "Values": [name]}]
        if vpc_id:
            filters.append({"Name": "vpc-id", "Values": [vpc_id]})
        sg_id = ec2.describe_security_groups(Filters=filters)["SecurityGroups"][0]["GroupId"]
        print(f"ℹ Security Group ya existe: {sg_id}")
    return sg_id


# ------------------- Instancia -------------------
def launch_instance(ec2, ami, sg_id, user_data, instance_type=None, instance_profile=None, name=None):
    """Lanza una instancia con el User Data dado y espera a que esté running.

    :return: el par `(instance_id, public_ip)`; `public_ip` es None si la instancia no tiene IP pública
    """
    run = ec2.run_instances(
        ImageId=ami,
        InstanceType=instance_type or settings.INSTANCE_TYPE,
        MinCount=1,
        MaxCount=1,
        SecurityGroupIds=[sg_id],
        IamInstanceProfile={"Name": instance_profile or settings.INSTANCE_PROFILE},
        UserData=user_data,
        TagSpecifications=[
            {"ResourceType": "instance", "Tags": [{"Key": "Name", "Value": name or settings.INSTANCE_NAME}]}
        ],
    )
    instance_id = run["Instances"][0]["InstanceId"]
    print(f"✓ Instancia creada: {instance_id}. Esperando estado running...")
    ec2.get_waiter("instance_running").wait(InstanceIds=[instance_id])

    desc = ec2.describe_instances(InstanceIds=[instance_id])
    public_ip = desc["Reservations"][0]["Instances"][0].get("PublicIpAddress")
    return instance_id, public_ip


def check_remote(public_ip, delay=None):
    delay = settings.REMOTE_CHECK_DELAY if delay is None else delay
    print(f"⏳ Esperando {delay:.0f}s a que termine el User Data...")
    time.sleep(delay)
    code = http_status(f"http://{public_ip}")
    print(f"Código HTTP: {code:03d}")
    return code


def main():
    ec2 = boto3.client("ec2", region_name=settings.REGION)
    ssm = boto3.client("ssm", region_name=settings.REGION)

    user_data = build_user_data(settings.VARIANT)
    ami = latest_ami(ssm)
    sg_id = ensure_security_group(ec2, settings.SECURITY_GROUP_NAME)
    instance_id, public_ip = launch_instance(ec2, ami, sg_id, user_data)

    if not public_ip:
        print("⚠ No se pudo obtener IP pública")
        return 1

    print(f"\n🌐 Accede a: http://{public_ip}")
    if check_remote(public_ip) != 200:
        print(f"⚠ {instance_id} todavía no responde, revisar /var/log/user_data.log en la instancia")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
