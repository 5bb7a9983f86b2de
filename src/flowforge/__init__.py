"""flowforge: derive routes and firewall rules from a network topology."""

__version__ = "0.1.0"
