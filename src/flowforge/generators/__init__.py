"""Text renderers for generated routes and firewall rules."""
