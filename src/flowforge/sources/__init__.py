"""Topology file loading, normalization and persistence."""
