"""Environment scoping: which servers and VLANs a request may use."""

from __future__ import annotations

from flowforge.models.topology import Topology


def servers_in_env(topology: Topology, env_tag: str) -> list[str]:
    """Sorted names of servers that belong to the environment."""
    if not env_tag:
        return []
    return sorted(s.name for s in topology.servers if s.in_env(env_tag))


def vlans_in_env(topology: Topology, env_tag: str) -> list[str]:
    """Sorted names of VLANs with at least one scope in the environment."""
    if not env_tag:
        return []
    return sorted(v.name for v in topology.vlans if v.has_env(env_tag))


def firewalled_zones(topology: Topology, env_tag: str) -> set[str]:
    """Zone tags covered by any firewall scope for the environment."""
    zones: set[str] = set()
    for firewall in topology.firewalls:
        zones |= firewall.zones_for_env(env_tag)
    return zones


def firewalled_vlan_names_in_env(topology: Topology, env_tag: str) -> list[str]:
    """Sorted names of VLANs eligible as routing hops in an environment.

    A VLAN is eligible when one of its scopes matches the environment
    and a zone some firewall covers in that environment. When no
    firewall covers any zone of the environment, every VLAN in the
    environment is eligible.
    """
    if not env_tag:
        return []

    zones = firewalled_zones(topology, env_tag)
    if not zones:
        return vlans_in_env(topology, env_tag)

    return sorted(
        v.name for v in topology.vlans
        if any(s.env_tag == env_tag and s.zone_tag in zones for s in v.scopes)
    )


def auto_select_via_vlan(topology: Topology, env_tag: str) -> str:
    """Return the only eligible routing VLAN, or '' if there are 0 or 2+."""
    names = firewalled_vlan_names_in_env(topology, env_tag)
    if len(names) == 1:
        return names[0]
    return ""
