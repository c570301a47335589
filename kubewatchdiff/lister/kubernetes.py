"""Kubernetes resource lister using the kubernetes-asyncio dynamic client.

``kind`` may be a Kind (``Deployment``), a plural resource name
(``deployments``) or a dotted ``<plural>.<group>`` (``deployments.apps``).
Passing ``api_version`` pins the group/version when a Kind is ambiguous.
"""

from __future__ import annotations

import time
from typing import Any

import structlog
from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]
from kubernetes_asyncio.dynamic import DynamicClient  # type: ignore[import-untyped]
from kubernetes_asyncio.dynamic.exceptions import ResourceNotFoundError  # type: ignore[import-untyped]

from kubewatchdiff.errors import ClusterConfigError
from kubewatchdiff.models.resources import ListedResource
from kubewatchdiff.observability.metrics import list_duration_seconds

_log = structlog.get_logger(component="lister.kubernetes")


async def load_kube_config(context: str = "") -> None:
    """Configure the default client from in-cluster config or kubeconfig.

    Raises ClusterConfigError when neither source is usable.
    """
    try:
        # load_incluster_config() is synchronous in kubernetes-asyncio
        k8s_config.load_incluster_config()
        _log.info("k8s client configured from in-cluster service account")
    except k8s_config.ConfigException:
        try:
            # load_kube_config() is async in kubernetes-asyncio
            await k8s_config.load_kube_config(context=context or None)
        except (k8s_config.ConfigException, OSError) as exc:
            raise ClusterConfigError(context, exc) from exc
        _log.info("k8s client configured from kubeconfig", context=context or "<current>")


class KubernetesResourceLister:
    """:class:`~kubewatchdiff.lister.base.ResourceLister` over a live cluster."""

    def __init__(self, api_client: Any, api_version: str = "") -> None:
        self._api_client = api_client
        self._api_version = api_version
        self._dynamic: Any = None

    @classmethod
    async def create(cls, context: str = "", api_version: str = "") -> KubernetesResourceLister:
        """Load kube config and return a lister owning a fresh ApiClient."""
        await load_kube_config(context)
        return cls(k8s_client.ApiClient(), api_version=api_version)

    async def close(self) -> None:
        await self._api_client.close()

    async def __aenter__(self) -> KubernetesResourceLister:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def list(
        self,
        kind: str,
        namespace: str = "",
        label_selector: str = "",
        field_selector: str = "",
    ) -> list[ListedResource]:
        """List every resource of *kind* matching the selectors.

        Raises whatever the client raises (ApiException, discovery errors);
        the poll driver wraps it with the kind.
        """
        started = time.monotonic()
        resource = await self._resolve(kind)

        kwargs: dict[str, str] = {}
        if namespace and resource.namespaced:
            kwargs["namespace"] = namespace
        if label_selector:
            kwargs["label_selector"] = label_selector
        if field_selector:
            kwargs["field_selector"] = field_selector

        response = await self._dynamic.get(resource, **kwargs)
        body = response.to_dict()

        items: list[ListedResource] = []
        for item in body.get("items") or []:
            # List responses omit apiVersion/kind on each item.
            item.setdefault("apiVersion", resource.group_version)
            item.setdefault("kind", resource.kind)
            items.append(ListedResource.from_document(item))

        elapsed = time.monotonic() - started
        list_duration_seconds.labels(kind=resource.kind).observe(elapsed)
        _log.debug(
            "resources_listed",
            kind=resource.kind,
            namespace=namespace,
            count=len(items),
            elapsed_ms=int(elapsed * 1000),
        )
        return items

    async def _resolve(self, kind: str) -> Any:
        """Find the API resource for *kind* via discovery."""
        if self._dynamic is None:
            self._dynamic = await DynamicClient(self._api_client)
        resources = self._dynamic.resources

        if self._api_version:
            return await resources.get(api_version=self._api_version, kind=kind)
        if "." in kind:
            name, group = kind.split(".", 1)
            return await resources.get(name=name, group=group)
        try:
            return await resources.get(kind=kind)
        except ResourceNotFoundError:
            return await resources.get(name=kind.lower())
