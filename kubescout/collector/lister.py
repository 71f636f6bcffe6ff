"""Live collection of raw objects via kubernetes-asyncio.

Each resource type is listed independently. A failure for one type (RBAC
denial, CRD not installed, transient API error) is logged and that type
contributes nothing; the engine only ever sees complete lists.
"""

from __future__ import annotations

from typing import Any

from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]

from kubescout.observability.logging import get_logger

_logger = get_logger("collector.lister")


class ClusterConfigError(RuntimeError):
    """Raised when neither in-cluster nor kubeconfig credentials can be loaded."""


# (apiVersion, kind, API class, list method suffix)
TYPED_RESOURCES: tuple[tuple[str, str, str, str], ...] = (
    ("apps/v1", "Deployment", "AppsV1Api", "deployment"),
    ("apps/v1", "ReplicaSet", "AppsV1Api", "replica_set"),
    ("apps/v1", "StatefulSet", "AppsV1Api", "stateful_set"),
    ("apps/v1", "DaemonSet", "AppsV1Api", "daemon_set"),
    ("v1", "Pod", "CoreV1Api", "pod"),
    ("v1", "Service", "CoreV1Api", "service"),
    ("v1", "ConfigMap", "CoreV1Api", "config_map"),
    ("v1", "Secret", "CoreV1Api", "secret"),
    ("networking.k8s.io/v1", "Ingress", "NetworkingV1Api", "ingress"),
)

# (group, version, plural)
CUSTOM_RESOURCES: tuple[tuple[str, str, str], ...] = (
    ("source.toolkit.fluxcd.io", "v1", "gitrepositories"),
    ("kustomize.toolkit.fluxcd.io", "v1", "kustomizations"),
    ("helm.toolkit.fluxcd.io", "v2", "helmreleases"),
    ("argoproj.io", "v1alpha1", "applications"),
)


async def load_kubernetes_config() -> None:
    """Configure the client from the in-cluster service account, else kubeconfig."""
    try:
        k8s_config.load_incluster_config()
    except k8s_config.ConfigException:
        try:
            await k8s_config.load_kube_config()
        except (k8s_config.ConfigException, OSError) as exc:
            raise ClusterConfigError(f"no usable Kubernetes configuration: {exc}") from exc
        _logger.info("k8s_config_loaded", source="kubeconfig")
    else:
        _logger.info("k8s_config_loaded", source="in-cluster")


async def _list_typed(
    api_client: Any,
    api_version: str,
    kind: str,
    api_class: str,
    suffix: str,
    namespace: str | None,
) -> list[dict[str, Any]]:
    api = getattr(k8s_client, api_class)(api_client)
    if namespace:
        result = await getattr(api, f"list_namespaced_{suffix}")(namespace)
    else:
        result = await getattr(api, f"list_{suffix}_for_all_namespaces")()
    items = api_client.sanitize_for_serialization(result).get("items") or []
    for item in items:
        # List responses omit per-item type metadata.
        item["apiVersion"] = api_version
        item["kind"] = kind
    return items


async def _list_custom(
    api_client: Any,
    group: str,
    version: str,
    plural: str,
    namespace: str | None,
) -> list[dict[str, Any]]:
    api = k8s_client.CustomObjectsApi(api_client)
    if namespace:
        result = await api.list_namespaced_custom_object(group, version, namespace, plural)
    else:
        result = await api.list_cluster_custom_object(group, version, plural)
    return list(result.get("items") or [])


async def collect_objects(namespace: str | None = None) -> list[dict[str, Any]]:
    """List every supported resource type and return raw object dicts."""
    await load_kubernetes_config()
    objects: list[dict[str, Any]] = []
    async with k8s_client.ApiClient() as api_client:
        for api_version, kind, api_class, suffix in TYPED_RESOURCES:
            try:
                items = await _list_typed(api_client, api_version, kind, api_class, suffix, namespace)
            except Exception as exc:
                _logger.warning("list_failed", kind=kind, error=str(exc))
                continue
            objects.extend(items)

        for group, version, plural in CUSTOM_RESOURCES:
            try:
                items = await _list_custom(api_client, group, version, plural, namespace)
            except Exception as exc:
                # CRD not installed is the common case here.
                _logger.debug("list_failed", resource=f"{plural}.{group}", error=str(exc))
                continue
            objects.extend(items)

    _logger.info("objects_collected", count=len(objects), namespace=namespace or "*")
    return objects
