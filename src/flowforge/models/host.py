"""Server models and the route/firewall records persisted on them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from flowforge.utils.ip import parse_octet


class Direction(enum.Enum):
    """Firewall rule direction, seen from the server the rule lives on."""

    IN = "in"
    OUT = "out"

    @property
    def chain(self) -> str:
        """nftables chain the rule is added to."""
        return "input" if self is Direction.IN else "output"


@dataclass(frozen=True)
class RouteRecord:
    """A route stored on a server.

    Records compare structurally; two records are duplicates exactly
    when every field is equal.
    """

    dst: str
    via_vlan: str = ""
    gateway: str = ""
    dev: str = ""
    metric: int | str = ""
    env_tag: str = ""
    comment: str = ""


@dataclass(frozen=True)
class FirewallRuleRecord:
    """A firewall rule stored on a server.

    ``dir`` is 'in' or 'out'; ``proto`` is the concrete lower-case
    protocol name ('tcp', 'udp', 'any').
    """

    dir: str
    src: str
    dst: str
    proto: str = ""
    ports: str = ""
    env_tag: str = ""
    comment: str = ""


@dataclass(frozen=True)
class Roles:
    """Infrastructure roles a server provides to its environment."""

    dns: bool = False
    ntp: bool = False


@dataclass
class Server:
    """A server with its memberships and stored artifacts.

    Attributes:
        name: Unique key
        os: Operating system family ('debian', 'openvms', ...)
        octet: Last IPv4 octet as stored, kept verbatim even when it is
            not a usable value; see host_octet
        envs: Environment tags the server belongs to
        vlans: VLAN names in assignment order; the first one is the
            fallback for routing and addressing
        services: Service names the server offers
        routes: Routes applied from generator output
        firewall_rules: Firewall rules applied from generator output
        roles: DNS/NTP role flags
    """

    name: str
    os: str = "debian"
    octet: str = ""
    envs: list[str] = field(default_factory=list)
    vlans: list[str] = field(default_factory=list)
    services: list[str] = field(default_factory=list)
    routes: list[RouteRecord] = field(default_factory=list)
    firewall_rules: list[FirewallRuleRecord] = field(default_factory=list)
    roles: Roles = field(default_factory=Roles)

    @property
    def host_octet(self) -> int | None:
        """The octet combined with VLAN CIDR bases, or None if not in 1..254."""
        return parse_octet(self.octet)

    def in_env(self, env_tag: str) -> bool:
        return env_tag in self.envs

    def on_vlan(self, vlan_name: str) -> bool:
        return vlan_name in self.vlans
