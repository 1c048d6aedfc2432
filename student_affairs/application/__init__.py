"""Application layer: ports and orchestrating services."""
