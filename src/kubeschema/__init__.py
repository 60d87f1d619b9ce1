"""Top-level package for kubeschema.

Validates Kubernetes resource manifests against the JSON schemas
published for each Kubernetes version.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("kubeschema")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
