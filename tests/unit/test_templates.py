import base64
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from clusterprobe.templates import (
    TemplateValues,
    build_template_request,
    load_ssh_public_key,
    operating_system_of,
    render_kubeconfig,
    render_template,
    timestamp,
    write_kubeconfig,
)

TEMPLATES_DIR = Path(__file__).parent.parent.parent.joinpath("templates")

SIMPLE_TEMPLATE = """
provider_name: google
description: {{ Description }}
configuration:
  variable:
    workers:
      default:
        kubernetes_version: {{ WorkerKubernetesVersion }}
        os: {{ OS }}
"""


def test_timestamp():
    assert timestamp(datetime(2019, 8, 1, 13, 5, 9, tzinfo=timezone.utc)) == "20190801130509"
    assert len(timestamp()) == 14


def test_template_values():
    values = TemplateValues.for_version("1.15.3", "ssh-rsa AAAA")
    assert values.MasterKubernetesVersion == "1.15.3"
    assert values.WorkerKubernetesVersion == "1.15.3"
    assert values.Description == "e2e-1.15.3"
    assert values.SSHPublicKey == "ssh-rsa AAAA"


def test_render_template(tmp_path):
    path = tmp_path.joinpath("template.yaml.j2")
    path.write_text(SIMPLE_TEMPLATE)
    rendered = render_template(
        path, {"Description": "e2e", "WorkerKubernetesVersion": "1.15.3", "OS": "ubuntu"}
    )
    assert "kubernetes_version: 1.15.3" in rendered

    with pytest.raises(RuntimeError):
        # undefined values are an error
        render_template(path, {"Description": "e2e"})
    with pytest.raises(RuntimeError):
        render_template(tmp_path.joinpath("missing.yaml.j2"), {})


def test_load_ssh_public_key(tmp_path):
    assert load_ssh_public_key() == ""
    key_file = tmp_path.joinpath("id_rsa.pub")
    key_file.write_text("ssh-rsa AAAA e2e@test\n")
    assert load_ssh_public_key(filename=str(key_file)) == "ssh-rsa AAAA e2e@test\n"
    b64 = base64.b64encode(b"ssh-rsa BBBB").decode("utf-8")
    assert load_ssh_public_key(b64=b64) == "ssh-rsa BBBB"
    with pytest.raises(RuntimeError):
        load_ssh_public_key(filename=str(key_file), b64=b64)
    with pytest.raises(RuntimeError):
        load_ssh_public_key(b64="not base64!")


def test_operating_system_of():
    assert (
        operating_system_of(
            {"configuration": {"variable": {"pool": {"default": {"os": "centos"}}}}}
        )
        == "centos"
    )
    with pytest.raises(RuntimeError):
        operating_system_of({"configuration": {"variable": {"pool": {"default": {}}}}})
    with pytest.raises(RuntimeError):
        operating_system_of({"configuration": {}})


def test_build_template_request():
    values = TemplateValues.for_version("1.15.3", "ssh-rsa AAAA")
    req = build_template_request(TEMPLATES_DIR.joinpath("digital_ocean.yaml.j2"), values)
    assert req["provider_name"] == "digital_ocean"
    assert req["description"] == "e2e-1.15.3-ubuntu"
    variables = req["configuration"]["variable"]
    assert variables["masters"]["default"]["kubernetes_version"] == "1.15.3"
    assert variables["workers"]["default"]["kubernetes_mode"] == "worker"
    droplets = req["configuration"]["resource"]["digitalocean_droplet"]
    assert droplets["masters"]["ssh_keys"] == ["ssh-rsa AAAA"]
    assert droplets["workers"]["name"] == f"e2e-worker-{values.Timestamp}"


def test_build_template_request_without_ssh_key():
    values = TemplateValues.for_version("1.14.6")
    req = build_template_request(TEMPLATES_DIR.joinpath("digital_ocean.yaml.j2"), values)
    assert "ssh_keys" not in req["configuration"]["resource"]["digitalocean_droplet"]["masters"]


def test_build_template_request_invalid(tmp_path):
    path = tmp_path.joinpath("list.yaml.j2")
    path.write_text("- {{ Description }}\n")
    with pytest.raises(RuntimeError):
        build_template_request(path, TemplateValues.for_version("1.15.3"))


def test_kubeconfig(tmp_path):
    kubeconfig = yaml.safe_load(
        render_kubeconfig("org", "cluster", "token", "https://proxy.test")
    )
    assert kubeconfig["current-context"] == "cs-e2e-test-ctx"
    assert (
        kubeconfig["clusters"][0]["cluster"]["server"]
        == "https://proxy.test/v3/organizations/org/clusters/cluster/k8sapi/proxy"
    )
    assert kubeconfig["users"][0]["user"]["token"] == "token"

    target = tmp_path.joinpath("nested", "kube.conf")
    path = write_kubeconfig(target, "org", "cluster", "token", "https://proxy.test")
    assert path == str(target)
    assert yaml.safe_load(target.read_text()) == kubeconfig
