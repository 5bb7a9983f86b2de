"""Merge generated routes and firewall rules into server records.

Application is idempotent: an incoming item is skipped when a
structurally equal record is already stored on the server (or was added
earlier in the same call). Warning route items are never stored, and
items for servers missing from the topology are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowforge.derivations.firewall import FirewallItem
from flowforge.derivations.routes import RouteItem
from flowforge.models.topology import Topology

NOTHING_NEW_MSG = "No new entries — everything already exists."


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of an apply call."""

    ok: bool
    msg: str
    routes_added: int = 0
    rules_added: int = 0


def apply_artifacts_to_servers(
    topology: Topology,
    routes_by_server: dict[str, list[RouteItem]] | None,
    firewall_by_server: dict[str, list[FirewallItem]] | None,
) -> ApplyResult:
    """Append new route and firewall records to each affected server."""
    route_count = 0
    rule_count = 0

    for name, items in (routes_by_server or {}).items():
        server = topology.server_by_name(name)
        if server is None:
            continue
        existing = set(server.routes)
        for item in items or []:
            if item.is_warning:
                continue
            record = item.to_record()
            if record in existing:
                continue
            server.routes.append(record)
            existing.add(record)
            route_count += 1

    for name, items in (firewall_by_server or {}).items():
        server = topology.server_by_name(name)
        if server is None:
            continue
        existing_rules = set(server.firewall_rules)
        for item in items or []:
            record = item.to_record()
            if record in existing_rules:
                continue
            server.firewall_rules.append(record)
            existing_rules.add(record)
            rule_count += 1

    if not route_count and not rule_count:
        return ApplyResult(ok=True, msg=NOTHING_NEW_MSG)
    return ApplyResult(
        ok=True,
        msg=f"Saved: {route_count} route(s), {rule_count} firewall rule(s).",
        routes_added=route_count,
        rules_added=rule_count,
    )
