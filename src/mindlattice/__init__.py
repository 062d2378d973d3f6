"""mindlattice — in-memory memory-graph lattice with a CLI front end."""

__version__ = "1.0.0"

LATTICE_VERSION = "1.0.0-synapse"
