"""Firewall rule derivation between two endpoints.

Forward rules model the flow src -> dst: every source server gets an
'out' rule and every destination server an 'in' rule, both carrying the
same addresses. Bidirectional mode appends the mirrored flow dst -> src
('out' on destination servers, 'in' on source servers) with a
'(reverse)' comment suffix.

A TCP/UDP service yields one rule set per concrete protocol.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowforge.derivations.endpoint import Endpoint, endpoint_to_addr
from flowforge.models.host import Direction, FirewallRuleRecord
from flowforge.models.protocol import Protocol
from flowforge.models.topology import Topology

REVERSE_SUFFIX = " (reverse)"
REVERSE_COMMENT = "reverse"


@dataclass(frozen=True)
class FirewallItem:
    """One generated firewall rule for one server."""

    dir: Direction
    src: str
    dst: str
    proto: Protocol
    ports: str
    env_tag: str
    comment: str = ""

    def to_record(self) -> FirewallRuleRecord:
        return FirewallRuleRecord(
            dir=self.dir.value,
            src=self.src,
            dst=self.dst,
            proto=self.proto.value,
            ports=self.ports,
            env_tag=self.env_tag,
            comment=self.comment,
        )


def reverse_comment(comment: str) -> str:
    """Mark a comment as belonging to the return flow.

    >>> reverse_comment('postgres')
    'postgres (reverse)'
    >>> reverse_comment('')
    'reverse'
    """
    return f"{comment}{REVERSE_SUFFIX}" if comment else REVERSE_COMMENT


def _add_flow(
    by_server: dict[str, list[FirewallItem]],
    sender: Endpoint,
    receiver: Endpoint,
    src_addr: str,
    dst_addr: str,
    proto: Protocol,
    ports: str,
    env_tag: str,
    comment: str,
) -> None:
    """Emit 'out' rules on the sender and 'in' rules on the receiver."""
    for server in sender.servers:
        by_server.setdefault(server.name, []).append(FirewallItem(
            Direction.OUT, src_addr, dst_addr, proto, ports, env_tag, comment,
        ))
    for server in receiver.servers:
        by_server.setdefault(server.name, []).append(FirewallItem(
            Direction.IN, src_addr, dst_addr, proto, ports, env_tag, comment,
        ))


def build_firewall_items_forward(
    topology: Topology,
    src: Endpoint,
    dst: Endpoint,
    env_tag: str,
    proto: Protocol | str,
    ports: str,
    comment: str,
    via_vlan_hint: str = "",
) -> dict[str, list[FirewallItem]]:
    """Build rules for the src -> dst flow only."""
    proto = Protocol.parse(proto)
    ports = (ports or "").strip()
    comment = comment or ""
    src_addr = endpoint_to_addr(topology, src, via_vlan_hint)
    dst_addr = endpoint_to_addr(topology, dst, via_vlan_hint)

    by_server: dict[str, list[FirewallItem]] = {}
    for p in proto.expand():
        _add_flow(by_server, src, dst, src_addr, dst_addr, p, ports, env_tag, comment)
    return by_server


def build_firewall_items_bidirectional(
    topology: Topology,
    src: Endpoint,
    dst: Endpoint,
    env_tag: str,
    proto: Protocol | str,
    ports: str,
    comment: str,
    via_vlan_hint: str = "",
) -> dict[str, list[FirewallItem]]:
    """Build rules for the src -> dst flow and its dst -> src mirror."""
    proto = Protocol.parse(proto)
    ports = (ports or "").strip()
    comment = comment or ""
    src_addr = endpoint_to_addr(topology, src, via_vlan_hint)
    dst_addr = endpoint_to_addr(topology, dst, via_vlan_hint)

    by_server: dict[str, list[FirewallItem]] = {}
    for p in proto.expand():
        _add_flow(by_server, src, dst, src_addr, dst_addr, p, ports, env_tag, comment)
        _add_flow(
            by_server, dst, src, dst_addr, src_addr, p, ports, env_tag,
            reverse_comment(comment),
        )
    return by_server


def merge_items(
    merged: dict[str, list[FirewallItem]],
    part: dict[str, list[FirewallItem]],
) -> None:
    """Append part's per-server items to merged (no deduplication)."""
    for name, items in part.items():
        merged.setdefault(name, []).extend(items)


def build_firewall_for_services(
    topology: Topology,
    src: Endpoint,
    dst: Endpoint,
    env_tag: str,
    services: list,
    via_vlan_hint: str = "",
    bidirectional: bool = False,
) -> dict[str, list[FirewallItem]]:
    """Build rules for every selected service entry and merge them.

    Args:
        services: ServiceSelection entries (anything with proto, ports,
            comment and service_name attributes).
        bidirectional: Also emit the reverse flow for each entry.
    """
    build = build_firewall_items_bidirectional if bidirectional else build_firewall_items_forward

    merged: dict[str, list[FirewallItem]] = {}
    for entry in services:
        comment = (entry.comment or entry.service_name or "").strip()
        merge_items(merged, build(
            topology, src, dst, env_tag, entry.proto, entry.ports, comment, via_vlan_hint,
        ))
    return merged
