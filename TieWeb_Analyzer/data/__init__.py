"""
Data layer for TieWeb: random network generators and networkx conversion.
"""

from .generators import (
    barabasi_albert,
    erdos_renyi,
    generate_network,
    lattice,
    regular,
    ring_lattice,
    watts_strogatz,
)
from .networkx_bridge import from_networkx, to_networkx

__all__ = [
    "erdos_renyi",
    "watts_strogatz",
    "barabasi_albert",
    "regular",
    "ring_lattice",
    "lattice",
    "generate_network",
    "to_networkx",
    "from_networkx",
]
