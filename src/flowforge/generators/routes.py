"""Routing document generator."""

from __future__ import annotations

from flowforge.derivations.routes import RouteItem
from flowforge.generators.document import render_document


def format_routes(routes_by_server: dict[str, list[RouteItem]], env_tag: str) -> str:
    """Render route commands (warnings included) per server."""
    sections = {
        name: [item.cmd for item in items]
        for name, items in routes_by_server.items()
    }
    return render_document(f"Routing — including return route (Env: {env_tag})", sections)
