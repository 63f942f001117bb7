"""CLI commands for modgraph."""
