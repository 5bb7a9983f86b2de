"""Data models for the network topology."""

from flowforge.models.addressing import AddressKind, AddressSpec
from flowforge.models.host import (
    Direction,
    FirewallRuleRecord,
    Roles,
    RouteRecord,
    Server,
)
from flowforge.models.network import (
    VLAN,
    Environment,
    Firewall,
    FirewallScope,
    Scope,
    Zone,
)
from flowforge.models.protocol import Protocol
from flowforge.models.service import PortItem, Service
from flowforge.models.topology import Topology

__all__ = [
    "AddressKind",
    "AddressSpec",
    "Direction",
    "Environment",
    "Firewall",
    "FirewallRuleRecord",
    "FirewallScope",
    "PortItem",
    "Protocol",
    "Roles",
    "RouteRecord",
    "Scope",
    "Server",
    "Service",
    "Topology",
    "VLAN",
    "Zone",
]
