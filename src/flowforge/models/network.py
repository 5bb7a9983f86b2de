"""Network topology models: environments, zones, VLANs and firewalls."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Environment:
    """A deployment tier such as PRD or DEV.

    Attributes:
        name: Human-readable name (e.g. 'Production')
        tag: Short unique key referenced by every other entity (e.g. 'PRD')
        domain: Optional DNS domain for FQDN construction
        comment: Free-form note
    """

    name: str
    tag: str
    domain: str = ""
    comment: str = ""

    def __str__(self) -> str:
        return f"{self.name} ({self.tag})" if self.name and self.name != self.tag else self.tag


@dataclass(frozen=True)
class Zone:
    """A logical security grouping (e.g. DMZ, CORE) spanning environments."""

    name: str
    tag: str
    env_tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Scope:
    """A VLAN's binding to one (environment, zone) pair.

    Carries the gateways hosts on this VLAN use in that environment.
    Both tags are soft references: a tag that matches no Environment or
    Zone is kept and simply never matches anything.
    """

    env_tag: str
    zone_tag: str
    gw_default: str = ""
    gw_fallback: str = ""


@dataclass(frozen=True)
class VLAN:
    """A VLAN definition.

    Attributes:
        name: Unique key (e.g. 'App-Net'); servers reference VLANs by name
        vlan_id: VLAN tag as entered (kept as text, may be empty)
        cidr: Subnet in dotted CIDR form (e.g. '10.1.1.0/24')
        iface: Interface name hosts use on this VLAN (e.g. 'ens192')
        scopes: Per (env, zone) gateway bindings, at most one per pair
    """

    name: str
    vlan_id: str = ""
    cidr: str = ""
    iface: str = ""
    scopes: tuple[Scope, ...] = ()

    def has_env(self, env_tag: str) -> bool:
        """True if any scope binds this VLAN to the environment."""
        return any(s.env_tag == env_tag for s in self.scopes)

    def __str__(self) -> str:
        return f"{self.name} ({self.cidr})" if self.cidr else self.name


@dataclass(frozen=True)
class FirewallScope:
    """An (environment, zone) pair covered by a firewall boundary."""

    env_tag: str
    zone_tag: str


@dataclass
class Firewall:
    """A firewall and the (env, zone) pairs it sits in front of.

    Only used to decide which VLANs are eligible as routing hops.
    """

    name: str
    scopes: list[FirewallScope] = field(default_factory=list)

    def zones_for_env(self, env_tag: str) -> set[str]:
        return {s.zone_tag for s in self.scopes if s.env_tag == env_tag and s.zone_tag}
