"""Endpoint resolution and address derivation.

An endpoint is one side of a flow: a single server, or a VLAN together
with its member servers in the requested environment.

Server address selection (server_primary_ip), in priority order:
1. The via-VLAN hint, if the server is a member of it
2. The management VLAN 'Cfg-Net', if the server is a member of it
3. The server's first assigned VLAN

Each step is skipped when it yields no address (unknown VLAN, bad CIDR,
invalid octet).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from flowforge.models.addressing import AddressSpec
from flowforge.models.host import Server
from flowforge.models.network import VLAN
from flowforge.models.topology import Topology
from flowforge.utils.ip import derive_host_ip

MANAGEMENT_VLAN = "Cfg-Net"


class EndpointKind(enum.Enum):
    """What an endpoint selector refers to."""

    SERVER = "server"
    VLAN = "vlan"


@dataclass
class Endpoint:
    """A resolved flow participant.

    Attributes:
        kind: SERVER or VLAN
        servers: Servers acting for this endpoint. Exactly one for
            SERVER endpoints; the VLAN's members in the environment
            (possibly none) for VLAN endpoints.
        vlan: The VLAN for VLAN endpoints, else None
    """

    kind: EndpointKind
    servers: list[Server] = field(default_factory=list)
    vlan: VLAN | None = None

    @property
    def server_names(self) -> list[str]:
        return [s.name for s in self.servers]


def resolve_endpoint(
    topology: Topology,
    kind: EndpointKind | str,
    value: str,
    env_tag: str,
) -> Endpoint | None:
    """Resolve a (type, value, env) selection to an Endpoint.

    Returns None if the type is unknown or the named server/VLAN does
    not exist. A VLAN with no members in the environment still resolves.
    """
    try:
        kind = EndpointKind(kind)
    except ValueError:
        return None

    if kind is EndpointKind.SERVER:
        server = topology.server_by_name(value)
        if server is None:
            return None
        return Endpoint(kind=kind, servers=[server])

    vlan = topology.vlan_by_name(value)
    if vlan is None:
        return None
    members = [
        s for s in topology.servers
        if s.on_vlan(value) and s.in_env(env_tag)
    ]
    return Endpoint(kind=kind, servers=members, vlan=vlan)


def server_ip_on_vlan(topology: Topology, server: Server, vlan_name: str) -> str:
    """Derive the server's address on a VLAN, or '' if not derivable."""
    vlan = topology.vlan_by_name(vlan_name)
    if vlan is None:
        return ""
    return derive_host_ip(vlan.cidr, server.host_octet)


def server_primary_ip(topology: Topology, server: Server, via_vlan_hint: str = "") -> str:
    """Select the address that represents a server in rules and routes."""
    if server.host_octet is None:
        return ""

    hint = (via_vlan_hint or "").strip()
    candidates: list[str] = []
    if hint and server.on_vlan(hint):
        candidates.append(hint)
    if server.on_vlan(MANAGEMENT_VLAN):
        candidates.append(MANAGEMENT_VLAN)
    if server.vlans:
        candidates.append(server.vlans[0])

    for vlan_name in candidates:
        ip = server_ip_on_vlan(topology, server, vlan_name)
        if ip:
            return ip
    return ""


def endpoint_to_specs(
    topology: Topology,
    endpoint: Endpoint,
    via_vlan_hint: str = "",
) -> list[AddressSpec]:
    """Return the address specs traffic toward this endpoint targets.

    Always a single spec at present.
    """
    if endpoint.kind is EndpointKind.VLAN and endpoint.vlan is not None:
        return [AddressSpec.cidr(endpoint.vlan.cidr)]
    server = endpoint.servers[0] if endpoint.servers else None
    ip = server_primary_ip(topology, server, via_vlan_hint) if server else ""
    return [AddressSpec.host(ip)]


def endpoint_to_addr(
    topology: Topology,
    endpoint: Endpoint,
    via_vlan_hint: str = "",
) -> str:
    """Return the single address text used in firewall rules."""
    return endpoint_to_specs(topology, endpoint, via_vlan_hint)[0].value
