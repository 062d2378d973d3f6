"""Infrastructure layer — workspace wiring, graph view and snapshot files."""
