import dataclasses

import pytest

from clusterprobe.context import ProvisionContext, RunContext, ScaleContext, WriteOnce


def test_write_once():
    cell = WriteOnce("cluster ID")
    assert not cell.is_set
    with pytest.raises(RuntimeError):
        cell.get()
    assert cell.set("abc") == "abc"
    assert cell.is_set
    assert cell.get() == "abc"
    with pytest.raises(RuntimeError) as e:
        cell.set("def")
    assert "abc" in str(e.value)
    assert cell.get() == "abc"


def test_provision_context(config):
    context = ProvisionContext(
        config=config, organization_id="org", kubeconfig_filename="/tmp/kube.conf"
    )
    with pytest.raises(dataclasses.FrozenInstanceError):
        context.organization_id = "other"  # type: ignore
    context.template_id.set("tmpl")
    context.cluster_id.set("cluster")
    assert context.template_id.get() == "tmpl"
    assert context.cluster_id.get() == "cluster"
    assert not context.kube_api.is_set

    # cells are not shared between contexts
    other = ProvisionContext(
        config=config, organization_id="org", kubeconfig_filename="/tmp/kube.conf"
    )
    assert not other.cluster_id.is_set


def test_scale_context(config):
    run = RunContext(
        config=config, organization_id="org", cluster_id="cluster", kube_api=None
    )
    context = ScaleContext(run=run)
    context.node_pool_id.set("pool")
    with pytest.raises(RuntimeError):
        context.node_pool_id.set("other-pool")
    with pytest.raises(dataclasses.FrozenInstanceError):
        run.cluster_id = "other"  # type: ignore
