"""Route derivation between two endpoints.

Routes are always generated in both directions: every source server
gets a route toward each destination spec, and every destination server
gets the return route toward each source spec. This is independent of
whether firewall rules are generated bidirectionally.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowforge.derivations.endpoint import Endpoint, endpoint_to_specs
from flowforge.derivations.gateway import select_gateway
from flowforge.models.addressing import AddressSpec
from flowforge.models.host import RouteRecord, Server
from flowforge.models.topology import Topology

GATEWAY_PLACEHOLDER = "<gateway>"
IFACE_PLACEHOLDER = "<iface>"


@dataclass(frozen=True)
class RouteItem:
    """One generated route for one server.

    ``cmd`` is the rendered shell command, or a '#' comment line when
    the server has no VLAN to route through. In that case dst, gateway
    and dev are empty.
    """

    cmd: str
    dst: str
    via_vlan: str
    gateway: str
    dev: str
    metric: int
    env_tag: str
    comment: str = ""

    @property
    def is_warning(self) -> bool:
        return self.cmd.startswith("#")

    def to_record(self) -> RouteRecord:
        return RouteRecord(
            dst=self.dst,
            via_vlan=self.via_vlan,
            gateway=self.gateway,
            dev=self.dev,
            metric=self.metric,
            env_tag=self.env_tag,
            comment=self.comment,
        )


def build_route_item(
    topology: Topology,
    server: Server,
    dest: AddressSpec,
    env_tag: str,
    metric: int,
    via_vlan: str,
    comment: str = "",
) -> RouteItem:
    """Build the route a server needs to reach a destination.

    The outbound VLAN is via_vlan when the server is a member, else the
    server's first VLAN.
    """
    preferred = (via_vlan or "").strip()
    if preferred and server.on_vlan(preferred):
        vlan_name = preferred
    else:
        vlan_name = server.vlans[0] if server.vlans else ""
    vlan = topology.vlan_by_name(vlan_name) if vlan_name else None

    if vlan is None:
        return RouteItem(
            cmd=f"# WARN: {server.name} has no VLAN for routing.",
            dst="",
            via_vlan=vlan_name,
            gateway="",
            dev="",
            metric=metric,
            env_tag=env_tag,
            comment=comment or "",
        )

    gw = select_gateway(vlan, env_tag)
    dev = vlan.iface or IFACE_PLACEHOLDER
    via = gw.default or GATEWAY_PLACEHOLDER
    fallback = f" # fallback: {gw.fallback}" if gw.fallback else ""

    return RouteItem(
        cmd=f"ip route add {dest.value} via {via} dev {dev} metric {metric}{fallback}",
        dst=dest.value,
        via_vlan=vlan_name,
        gateway=via,
        dev=dev,
        metric=metric,
        env_tag=env_tag,
        comment=comment or "",
    )


def build_routes_with_reverse(
    topology: Topology,
    src: Endpoint,
    dst: Endpoint,
    env_tag: str,
    metric: int,
    via_vlan: str,
    comment: str = "",
) -> dict[str, list[RouteItem]]:
    """Build forward and return routes, grouped by server name.

    Servers appear in the order they are first touched: source servers
    first, then destination servers. A server on both sides collects
    both its forward and reverse routes.
    """
    per_server: dict[str, list[RouteItem]] = {}

    dst_specs = endpoint_to_specs(topology, dst, via_vlan)
    src_specs = endpoint_to_specs(topology, src, via_vlan)

    for server in src.servers:
        for spec in dst_specs:
            per_server.setdefault(server.name, []).append(
                build_route_item(topology, server, spec, env_tag, metric, via_vlan, comment)
            )

    for server in dst.servers:
        for spec in src_specs:
            per_server.setdefault(server.name, []).append(
                build_route_item(topology, server, spec, env_tag, metric, via_vlan, comment)
            )

    return per_server
