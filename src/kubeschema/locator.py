"""Schema URL derivation for Kubernetes resources.

The schema host publishes one file per kind and API version::

    {base}/{version}-standalone-strict/{kind}{suffix}.json

    apiVersion  "v1"    "apps/v1"   "apiextensions.k8s.io/v1beta1"
    suffix      "-v1"   "-apps-v1"  "-apiextensions-v1beta1"

Everything here is pure so the URL contract can be tested without
network access.
"""

from kubeschema.constants import (
    DEFAULT_KUBERNETES_VERSION,
    SCHEMA_VARIANT_SUFFIX,
)


def normalize_version(version: str | None) -> str:
    """Return the version as used in schema directory names.

    Args:
        version: Kubernetes version such as ``"1.18.0"`` or ``"master"``

    Returns:
        ``"master"`` unchanged (also for an empty version), otherwise the
        version with a ``v`` prefix to match the Kubernetes release tags

    """
    if not version or version == DEFAULT_KUBERNETES_VERSION:
        return DEFAULT_KUBERNETES_VERSION
    return f"v{version}"


def kind_suffix(api_version: str) -> str:
    """Return the file name suffix for an ``apiVersion`` value.

    Args:
        api_version: Resource ``apiVersion``, e.g. ``"storage.k8s.io/v1"``

    Returns:
        Suffix such as ``"-storage-v1"``

    """
    group_parts = api_version.split("/")
    group = group_parts[0].split(".")[0].lower()
    if len(group_parts) == 1:
        return f"-{group}"
    return f"-{group}-{group_parts[1].lower()}"


def schema_url(
    kind: str,
    api_version: str,
    *,
    kubernetes_version: str | None,
    base_url: str,
) -> str:
    """Build the schema URL for a resource.

    Args:
        kind: Resource ``kind``
        api_version: Resource ``apiVersion``
        kubernetes_version: Kubernetes version to validate against
        base_url: Schema host location

    Returns:
        Absolute schema URL

    """
    version = normalize_version(kubernetes_version)
    return (
        f"{base_url.rstrip('/')}/{version}{SCHEMA_VARIANT_SUFFIX}/"
        f"{kind.lower()}{kind_suffix(api_version)}.json"
    )
