"""Lattice core — the graph store and the stateless readers over it."""

from mindlattice.lattice.store import DEFAULT_CAPACITY, MAX_NODE_DEPTH, LatticeStore

__all__ = ["DEFAULT_CAPACITY", "MAX_NODE_DEPTH", "LatticeStore"]
