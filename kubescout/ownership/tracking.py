"""Argo CD tracking-id annotation parsing.

Two formats are in the wild:

1. ``<app-identifier>:<group>/<kind>:<resource-namespace>/<resource-name>``
   e.g. ``example.guestbook:apps/Deployment:guestbook/guestbook-ui``
2. ``<app-namespace>:<app-name>`` (older installations)

In format 1 the app identifier may be ``<app-namespace>.<app-name>``, but Argo
CD application names may themselves contain dots, so the prefix cannot be
split reliably. The whole identifier is kept as the application name and the
application namespace defaults to ``argocd``.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ARGOCD_NAMESPACE = "argocd"


@dataclass(frozen=True)
class TrackingRef:
    """The owning Application resolved from a tracking-id."""

    app_name: str
    app_namespace: str


def parse_tracking_id(tracking_id: str) -> TrackingRef | None:
    """Parse a tracking-id annotation value.

    Returns None when the value cannot be parsed; callers decide how to
    classify an unparseable annotation.
    """
    parts = tracking_id.split(":", 3)
    if len(parts) < 2:
        return None

    if "/" in parts[1]:
        app_name = parts[0]
        if not app_name:
            return None
        return TrackingRef(app_name=app_name, app_namespace=DEFAULT_ARGOCD_NAMESPACE)

    app_namespace = parts[0] or DEFAULT_ARGOCD_NAMESPACE
    app_name = parts[1]
    if not app_name:
        return None
    return TrackingRef(app_name=app_name, app_namespace=app_namespace)
