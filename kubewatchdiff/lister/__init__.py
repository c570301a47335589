"""Resource listers consumed by the poll driver.

Submodules
----------
base       -- ResourceLister protocol.
kubernetes -- KubernetesResourceLister backed by the kubernetes-asyncio dynamic client.
"""

from kubewatchdiff.lister.base import ResourceLister

__all__ = ["ResourceLister"]
