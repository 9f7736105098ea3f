"""Resource naming helpers that keep generated names DNS-safe."""

from __future__ import annotations

import re

MAX_NAME_LENGTH = 63
SEPARATOR = "-"

_DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


def fullname(
    app_name: str,
    environment: str | None = None,
    flavor: str | None = None,
    region: str | None = None,
    *,
    override: str | None = None,
) -> str:
    """Compose a Kubernetes resource name from its components.

    Components are joined with ``-`` in the order app, environment, flavor,
    region, skipping empty ones. The result is truncated to 63 characters and
    never ends with a separator. A non-empty ``override`` replaces the
    composed name but is still truncated.
    """
    if override:
        return _truncate(override)
    if not app_name:
        raise ValueError("app_name is required to build a resource name")

    parts = [part for part in (app_name, environment, flavor, region) if part]
    return _truncate(SEPARATOR.join(parts))


def is_dns_label(value: str) -> bool:
    """Return True when ``value`` is a valid RFC 1123 label."""
    return len(value) <= MAX_NAME_LENGTH and bool(_DNS_LABEL.match(value))


def _truncate(name: str) -> str:
    return name[:MAX_NAME_LENGTH].rstrip(SEPARATOR)


__all__ = ["MAX_NAME_LENGTH", "fullname", "is_dns_label"]
