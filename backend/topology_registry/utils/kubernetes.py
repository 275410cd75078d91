"""Kubernetes workload provisioning."""
import asyncio
import copy
import hashlib
import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml
from kubernetes import client, config

logger = logging.getLogger(__name__)

TEMPLATE_PATH = os.path.join(os.path.dirname(__file__), "..", "templates", "workload.yaml")

LABEL_PREFIX = "topology-registry"
PARAMS_ANNOTATION = f"{LABEL_PREFIX}/params"
NETWORKS_ANNOTATION = "k8s.v1.cni.cncf.io/networks"

ENV_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
LABEL_VALUE = re.compile(r"^(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?$")
MAX_NAME_LENGTH = 63


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:16]


def workload_name(uuid: str) -> str:
    """Pod name for an instance.

    The lower-cased uuid when that is a valid DNS label, otherwise a stable
    name derived from a digest of it.
    """
    name = uuid.lower()
    if len(name) <= MAX_NAME_LENGTH and DNS_LABEL.match(name):
        return name
    return f"workload-{_digest(uuid)}"


def label_value(value: Any) -> str:
    """The value itself if Kubernetes accepts it as a label value, else a digest."""
    value = str(value)
    if len(value) <= MAX_NAME_LENGTH and LABEL_VALUE.match(value):
        return value
    return _digest(value)


@dataclass
class WorkloadHandle:
    """Identifies a workload created by the provisioner."""
    name: str
    namespace: str
    uid: Optional[str] = None


def load_template(path: str = TEMPLATE_PATH) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f)


def render_workload(
    params: Dict[str, Any],
    namespace: str,
    image_template: str,
    template: Dict[str, Any],
) -> Dict[str, Any]:
    """Build a Pod manifest for a flat parameter set.

    The pod is named after the instance uuid and labelled with the owner,
    image and brand; values Kubernetes would reject are replaced by digests
    and the originals kept in the params annotation. ``ram`` (MiB) becomes the
    memory limit, ``networks`` the Multus networks annotation and
    ``server_uuid`` the node the pod is pinned to. Parameters whose names
    are valid environment variable names are exposed to the container.
    """
    manifest = copy.deepcopy(template)

    metadata = manifest.setdefault("metadata", {})
    metadata["name"] = workload_name(params["uuid"])
    metadata["namespace"] = namespace

    labels = metadata.setdefault("labels", {})
    labels[f"{LABEL_PREFIX}/instance"] = label_value(params["uuid"])
    labels[f"{LABEL_PREFIX}/owner"] = label_value(params["owner_uuid"])
    labels[f"{LABEL_PREFIX}/image"] = label_value(params["image_uuid"])
    if params.get("brand"):
        labels[f"{LABEL_PREFIX}/brand"] = label_value(params["brand"])

    annotations = metadata.setdefault("annotations", {})
    annotations[PARAMS_ANNOTATION] = json.dumps(params, sort_keys=True, default=str)
    if params.get("networks"):
        annotations[NETWORKS_ANNOTATION] = ",".join(params["networks"])

    spec = manifest["spec"]
    if params.get("server_uuid"):
        spec["nodeName"] = params["server_uuid"]

    container = spec["containers"][0]
    container["image"] = image_template.format(image_uuid=params["image_uuid"])
    if params.get("ram"):
        limits = container.setdefault("resources", {}).setdefault("limits", {})
        limits["memory"] = f"{params['ram']}Mi"

    container["env"] = [
        {"name": key, "value": value if isinstance(value, str) else json.dumps(value)}
        for key, value in sorted(params.items())
        if ENV_NAME.match(key)
    ]

    return manifest


class KubernetesProvisioner:
    """Creates workloads as pods in a single namespace."""

    def __init__(
        self,
        kubeconfig_path: str,
        namespace: str,
        image_template: str,
        template: Optional[Dict[str, Any]] = None,
    ):
        self.kubeconfig_path = os.path.expanduser(kubeconfig_path)
        self.namespace = namespace
        self.image_template = image_template
        self.template = template or load_template()
        self._api_client: Optional[client.ApiClient] = None

    def _core_v1(self) -> client.CoreV1Api:
        if self._api_client is None:
            self._api_client = config.new_client_from_config(config_file=self.kubeconfig_path)
        return client.CoreV1Api(self._api_client)

    def _create_pod_sync(self, manifest: Dict[str, Any]):
        """Synchronous pod creation - runs in a thread."""
        core_v1 = self._core_v1()
        return core_v1.create_namespaced_pod(namespace=self.namespace, body=manifest)

    async def create_workload(self, params: Dict[str, Any]) -> WorkloadHandle:
        manifest = render_workload(params, self.namespace, self.image_template, self.template)
        name = manifest["metadata"]["name"]

        logger.info(f"Creating pod {name} in namespace {self.namespace}")
        pod = await asyncio.to_thread(self._create_pod_sync, manifest)

        return WorkloadHandle(
            name=pod.metadata.name,
            namespace=pod.metadata.namespace,
            uid=pod.metadata.uid,
        )
