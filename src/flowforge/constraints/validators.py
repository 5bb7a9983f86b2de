"""Constraint predicates on a normalized Topology.

Key Constraints: unique keys per collection.
Reference Constraints: soft references that point nowhere (warnings,
    since derivations treat them as "no match").
Address Constraints: CIDRs and octets that cannot yield host addresses.
Prerequisites: what the generator needs before it can run at all.
"""

from __future__ import annotations

from collections import Counter

from flowforge.constraints.errors import ValidationResult
from flowforge.models.topology import Topology
from flowforge.utils.ip import cidr_to_base


# ---------------------------------------------------------------------------
# Key Constraints
# ---------------------------------------------------------------------------

def _duplicates(keys: list[str]) -> list[str]:
    return sorted(k for k, n in Counter(keys).items() if n > 1 and k)


def validate_keys(topology: Topology) -> ValidationResult:
    """Check unique keys and the one-scope-per-(env, zone) rule.

    Checks:
    - Environment tags, VLAN names, service and server names are unique
    - Every entity has its key set
    - A VLAN has at most one scope per (env, zone) pair
    """
    result = ValidationResult()

    collections = [
        ("env", [e.tag for e in topology.envs]),
        ("zone", [z.tag for z in topology.zones]),
        ("vlan", [v.name for v in topology.vlans]),
        ("service", [s.name for s in topology.services]),
        ("server", [s.name for s in topology.servers]),
    ]
    for kind, keys in collections:
        for key in _duplicates(keys):
            result.error(
                f"duplicate_{kind}",
                f"Duplicate {kind} key {key!r}",
                entity=f"{kind}:{key}",
            )
        missing = sum(1 for k in keys if not k)
        if missing:
            result.error(
                f"missing_{kind}_key",
                f"{missing} {kind}(s) without a name/tag",
            )

    for vlan in topology.vlans:
        pairs = [(s.env_tag, s.zone_tag) for s in vlan.scopes]
        for env_tag, zone_tag in sorted(p for p, n in Counter(pairs).items() if n > 1):
            result.error(
                "duplicate_scope",
                f"More than one scope for ({env_tag}, {zone_tag})",
                entity=f"vlan:{vlan.name}",
                field="scopes",
            )

    return result


# ---------------------------------------------------------------------------
# Reference Constraints
# ---------------------------------------------------------------------------

def validate_references(topology: Topology) -> ValidationResult:
    """Report soft references to entities that do not exist."""
    result = ValidationResult()

    env_tags = {e.tag for e in topology.envs}
    zone_tags = {z.tag for z in topology.zones}
    vlan_names = {v.name for v in topology.vlans}
    service_names = {s.name for s in topology.services}

    for zone in topology.zones:
        for tag in zone.env_tags:
            if tag not in env_tags:
                result.warning(
                    "unknown_env", f"Unknown environment {tag!r}",
                    entity=f"zone:{zone.tag}", field="envTags",
                )

    for vlan in topology.vlans:
        for scope in vlan.scopes:
            if scope.env_tag not in env_tags:
                result.warning(
                    "unknown_env", f"Scope references unknown environment {scope.env_tag!r}",
                    entity=f"vlan:{vlan.name}", field="scopes",
                )
            if scope.zone_tag not in zone_tags:
                result.warning(
                    "unknown_zone", f"Scope references unknown zone {scope.zone_tag!r}",
                    entity=f"vlan:{vlan.name}", field="scopes",
                )

    for firewall in topology.firewalls:
        for scope in firewall.scopes:
            if scope.env_tag not in env_tags:
                result.warning(
                    "unknown_env", f"Scope references unknown environment {scope.env_tag!r}",
                    entity=f"firewall:{firewall.name}", field="scopes",
                )
            if scope.zone_tag not in zone_tags:
                result.warning(
                    "unknown_zone", f"Scope references unknown zone {scope.zone_tag!r}",
                    entity=f"firewall:{firewall.name}", field="scopes",
                )

    for service in topology.services:
        for item in service.port_items:
            if not item.usable:
                result.warning(
                    "unknown_protocol", f"No rules can be generated for protocol {item.label!r}",
                    entity=f"service:{service.name}", field="portItems",
                )

    for server in topology.servers:
        entity = f"server:{server.name}"
        for tag in server.envs:
            if tag not in env_tags:
                result.warning("unknown_env", f"Unknown environment {tag!r}", entity, "envs")
        for name in server.vlans:
            if name not in vlan_names:
                result.warning("unknown_vlan", f"Unknown VLAN {name!r}", entity, "vlans")
        for name in server.services:
            if name not in service_names:
                result.warning("unknown_service", f"Unknown service {name!r}", entity, "services")

    return result


# ---------------------------------------------------------------------------
# Address Constraints
# ---------------------------------------------------------------------------

def validate_addresses(topology: Topology) -> ValidationResult:
    """Report VLAN CIDRs and server octets that cannot derive addresses."""
    result = ValidationResult()

    for vlan in topology.vlans:
        if cidr_to_base(vlan.cidr) is None:
            result.warning(
                "invalid_cidr", f"CIDR {vlan.cidr!r} is not A.B.C.D/N",
                entity=f"vlan:{vlan.name}", field="cidr",
            )
        if not vlan.iface:
            result.warning(
                "missing_iface", "No interface name; routes will use <iface>",
                entity=f"vlan:{vlan.name}", field="iface",
            )

    for server in topology.servers:
        if server.host_octet is None:
            result.warning(
                "invalid_octet", "Octet missing or outside 1..254",
                entity=f"server:{server.name}", field="octet",
            )

    return result


# ---------------------------------------------------------------------------
# Prerequisites
# ---------------------------------------------------------------------------

def check_prerequisites(topology: Topology) -> ValidationResult:
    """Check the topology has what artifact generation needs.

    Requires at least one environment, zone, VLAN, service and server,
    and every server to have a name, octet, environment and VLAN.
    """
    result = ValidationResult()

    required = [
        ("envs", "environments", topology.envs),
        ("zones", "zones", topology.zones),
        ("vlans", "networks/VLANs", topology.vlans),
        ("services", "services", topology.services),
        ("servers", "servers", topology.servers),
    ]
    for key, label, items in required:
        if not items:
            result.error(f"no_{key}", f"No {label} defined", field=key)

    for server in topology.servers:
        if not (server.name and server.host_octet is not None and server.envs and server.vlans):
            result.error(
                "incomplete_server",
                "Server configuration incomplete (name/octet/environment/VLAN)",
                entity=f"server:{server.name}",
            )

    return result


def validate_all(topology: Topology) -> ValidationResult:
    """Run every constraint group."""
    result = ValidationResult()
    result.merge(validate_keys(topology))
    result.merge(validate_references(topology))
    result.merge(validate_addresses(topology))
    result.merge(check_prerequisites(topology))
    return result
