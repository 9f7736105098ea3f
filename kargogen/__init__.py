"""Per-service GitOps promotion resource generator."""

__version__ = "0.1.0"
