"""Tests for the Kubernetes workload provisioner and pod rendering."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from topology_registry.utils.kubernetes import (
    NETWORKS_ANNOTATION,
    PARAMS_ANNOTATION,
    KubernetesProvisioner,
    label_value,
    load_template,
    render_workload,
    workload_name,
)

PARAMS = {
    "uuid": "4b6bd2a4-0a4f-4c2e-9c1e-8a4ad6b1f0c1",
    "owner_uuid": "930896af-bf8c-48d4-885c-6573a94b1853",
    "image_uuid": "fd2cc906-8938-11e3-beab-4359c665ac99",
    "brand": "joyent-minimal",
    "ram": 256,
    "networks": ["cda22a50-15bd-43cf-b379-be0cbac60cb4"],
    "server_uuid": "44454c4c-4800-1034-804a-b2c04f354d31",
    "LOG_LEVEL": "debug",
    "not-an-env-name": "x",
}

IMAGE_TEMPLATE = "registry.local/images/{image_uuid}:latest"


class TestRenderWorkload:

    def test_render_should_map_params_onto_pod(self) -> None:
        manifest = render_workload(PARAMS, "topology", IMAGE_TEMPLATE, load_template())

        metadata = manifest["metadata"]
        assert manifest["kind"] == "Pod"
        assert metadata["name"] == PARAMS["uuid"]
        assert metadata["namespace"] == "topology"
        assert metadata["labels"]["topology-registry/owner"] == PARAMS["owner_uuid"]
        assert metadata["labels"]["topology-registry/brand"] == "joyent-minimal"
        assert metadata["annotations"][NETWORKS_ANNOTATION] == "cda22a50-15bd-43cf-b379-be0cbac60cb4"
        assert json.loads(metadata["annotations"][PARAMS_ANNOTATION]) == PARAMS

        spec = manifest["spec"]
        container = spec["containers"][0]
        assert spec["nodeName"] == PARAMS["server_uuid"]
        assert container["image"] == f"registry.local/images/{PARAMS['image_uuid']}:latest"
        assert container["resources"]["limits"]["memory"] == "256Mi"

    def test_render_should_expose_valid_names_as_env(self) -> None:
        manifest = render_workload(PARAMS, "topology", IMAGE_TEMPLATE, load_template())

        env = {item["name"]: item["value"] for item in manifest["spec"]["containers"][0]["env"]}
        assert env["LOG_LEVEL"] == "debug"
        assert env["ram"] == "256"
        assert env["networks"] == json.dumps(PARAMS["networks"])
        assert "not-an-env-name" not in env

    def test_render_should_not_modify_template(self) -> None:
        template = load_template()
        original = json.dumps(template, sort_keys=True)

        render_workload(PARAMS, "topology", IMAGE_TEMPLATE, template)

        assert json.dumps(template, sort_keys=True) == original

    def test_render_should_keep_names_valid_for_kubernetes(self) -> None:
        params = {**PARAMS, "uuid": PARAMS["uuid"].upper(), "image_uuid": "library/nginx:1.25"}

        manifest = render_workload(params, "topology", IMAGE_TEMPLATE, load_template())

        metadata = manifest["metadata"]
        assert metadata["name"] == PARAMS["uuid"]
        assert metadata["labels"]["topology-registry/image"] == label_value("library/nginx:1.25")
        assert json.loads(metadata["annotations"][PARAMS_ANNOTATION])["image_uuid"] == "library/nginx:1.25"


class TestNames:

    def test_workload_name_should_lower_case_uuid(self) -> None:
        assert workload_name("4B6BD2A4-0A4F-4C2E-9C1E-8A4AD6B1F0C1") == "4b6bd2a4-0a4f-4c2e-9c1e-8a4ad6b1f0c1"

    @pytest.mark.parametrize("uuid", ["my_instance", "-leading-dash", "x" * 64, "inst.1"])
    def test_invalid_workload_name_should_be_replaced_by_digest(self, uuid: str) -> None:
        name = workload_name(uuid)

        assert name.startswith("workload-")
        assert len(name) <= 63
        assert name == workload_name(uuid)

    def test_valid_label_value_should_be_kept(self) -> None:
        assert label_value("joyent-minimal") == "joyent-minimal"

    @pytest.mark.parametrize("value", ["library/nginx:1.25", "y" * 64, "trailing-"])
    def test_invalid_label_value_should_be_replaced_by_digest(self, value: str) -> None:
        digest = label_value(value)

        assert digest != value
        assert len(digest) == 16
        assert digest.isalnum()


class TestKubernetesProvisioner:

    @pytest.mark.asyncio
    async def test_create_workload_should_create_pod(self) -> None:
        core_v1 = MagicMock()
        core_v1.create_namespaced_pod.return_value = SimpleNamespace(
            metadata=SimpleNamespace(name=PARAMS["uuid"], namespace="topology", uid="pod-uid")
        )

        with patch("topology_registry.utils.kubernetes.config.new_client_from_config") as new_client, \
                patch("topology_registry.utils.kubernetes.client.CoreV1Api", return_value=core_v1):
            provisioner = KubernetesProvisioner("~/.kube/config", "topology", IMAGE_TEMPLATE)
            handle = await provisioner.create_workload(PARAMS)

        new_client.assert_called_once()
        call = core_v1.create_namespaced_pod.call_args
        assert call.kwargs["namespace"] == "topology"
        assert call.kwargs["body"]["metadata"]["name"] == PARAMS["uuid"]
        assert (handle.name, handle.namespace, handle.uid) == (PARAMS["uuid"], "topology", "pod-uid")

    @pytest.mark.asyncio
    async def test_api_error_should_propagate(self) -> None:
        from kubernetes.client.rest import ApiException

        core_v1 = MagicMock()
        core_v1.create_namespaced_pod.side_effect = ApiException(status=409, reason="AlreadyExists")

        with patch("topology_registry.utils.kubernetes.config.new_client_from_config"), \
                patch("topology_registry.utils.kubernetes.client.CoreV1Api", return_value=core_v1):
            provisioner = KubernetesProvisioner("~/.kube/config", "topology", IMAGE_TEMPLATE)
            with pytest.raises(ApiException):
                await provisioner.create_workload(PARAMS)
