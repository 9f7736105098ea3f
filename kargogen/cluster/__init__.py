"""Cluster access adapters."""

from .kubectl import ApplyError, ClusterClient, ConnectivityError, KubectlClient

__all__ = ["ApplyError", "ClusterClient", "ConnectivityError", "KubectlClient"]
