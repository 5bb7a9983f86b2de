"""The topology store: every entity the derivations read from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from flowforge.models.host import Server
from flowforge.models.network import VLAN, Environment, Firewall, Zone
from flowforge.models.service import Service


@dataclass
class Topology:
    """The normalized configuration graph.

    Built once by sources.normalize.normalize_config and passed
    explicitly to every derivation. Lookups are by key and return None
    for unknown keys; dangling references are not errors.

    Attributes:
        envs: Environments, keyed by tag
        zones: Zones, keyed by tag
        vlans: VLANs, keyed by name
        firewalls: Firewalls
        services: Services, keyed by name
        servers: Servers, keyed by name; the only entities the apply
            step mutates
        meta: Opaque application metadata, preserved on save
        debian: Opaque Debian provisioning settings, preserved on save
        provisioning: Opaque provisioning choices, preserved on save
    """

    envs: list[Environment] = field(default_factory=list)
    zones: list[Zone] = field(default_factory=list)
    vlans: list[VLAN] = field(default_factory=list)
    firewalls: list[Firewall] = field(default_factory=list)
    services: list[Service] = field(default_factory=list)
    servers: list[Server] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)
    debian: dict[str, Any] = field(default_factory=dict)
    provisioning: dict[str, Any] = field(default_factory=dict)

    def env_by_tag(self, tag: str) -> Environment | None:
        for env in self.envs:
            if env.tag == tag:
                return env
        return None

    def zone_by_tag(self, tag: str) -> Zone | None:
        for zone in self.zones:
            if zone.tag == tag:
                return zone
        return None

    def vlan_by_name(self, name: str) -> VLAN | None:
        """Look up a VLAN by its name (e.g. 'App-Net')."""
        for vlan in self.vlans:
            if vlan.name == name:
                return vlan
        return None

    def service_by_name(self, name: str) -> Service | None:
        for service in self.services:
            if service.name == name:
                return service
        return None

    def server_by_name(self, name: str) -> Server | None:
        """Look up a server by its name."""
        for server in self.servers:
            if server.name == name:
                return server
        return None

    def servers_sorted(self) -> list[Server]:
        return sorted(self.servers, key=lambda s: s.name)
