"""Derivations: endpoints, gateways, routes, firewall rules and apply."""
