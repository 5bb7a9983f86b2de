"""Constraint checks on the topology."""
