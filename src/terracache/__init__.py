"""terracache: legacy Terraform state parsing and a local registry cache.

Two pieces live here:

- ``terracache.remotestate``: decode legacy ``terraform.tfstate`` documents
  into typed models and tell whether they point at a remote backend.
- ``terracache.cache``: the FastAPI-based cache server, including the
  ``/.well-known/terraform.json`` service discovery endpoint.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
