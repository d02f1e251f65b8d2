"""
Dual-persistence sync core.

The persistence gateway serves entries from the remote store when it can
and from the on-device mirror when it cannot; the connectivity prober
reports whether the remote store is reachable.
"""

from .gateway import GatewayResult, PersistenceGateway, ServedFrom
from .prober import ConnectivityProber

__all__ = [
    "PersistenceGateway",
    "GatewayResult",
    "ServedFrom",
    "ConnectivityProber",
]
