"""Resource observation for shootwatch.

Exports:
    ShootObserver      -- Lists Gardener Shoots via kubernetes-asyncio.
    cluster_from_shoot -- Convert one raw Shoot object into a Cluster.
"""

from shootwatch.observer.shoots import ShootObserver, cluster_from_shoot

__all__ = ["ShootObserver", "cluster_from_shoot"]
