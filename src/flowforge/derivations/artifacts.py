"""Artifact generation: one request in, routes + firewall rules out.

This is the entry point the CLI drives. It resolves both endpoints,
runs the route and firewall builders independently and renders their
output. Unresolvable endpoints are reported through
GenerationResult.error; everything else degrades to placeholders or
warning lines inside the output.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flowforge.derivations.endpoint import resolve_endpoint
from flowforge.derivations.firewall import FirewallItem, build_firewall_for_services
from flowforge.derivations.routes import RouteItem, build_routes_with_reverse
from flowforge.generators.csv_export import build_csv
from flowforge.generators.firewall import format_firewall_rules
from flowforge.generators.routes import format_routes
from flowforge.models.protocol import Protocol
from flowforge.models.service import Service
from flowforge.models.topology import Topology

DEFAULT_METRIC = 100
RESOLUTION_ERROR = "Source/destination could not be resolved."


def parse_metric(value: int | str | None, default: int = DEFAULT_METRIC) -> int:
    """Parse a route metric; anything non-numeric (or zero) gives the default.

    >>> parse_metric('200')
    200
    >>> parse_metric('abc')
    100
    >>> parse_metric(None, default=50)
    50
    """
    if isinstance(value, bool):
        return default
    try:
        metric = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return metric or default


@dataclass(frozen=True)
class ServiceSelection:
    """One selected service port item.

    Attributes:
        service_name: Name of the service the item came from
        proto: Protocol of the item (TCP_UDP expands later)
        ports: Port text as stored on the service
        comment: Comment carried into every generated rule
    """

    service_name: str
    proto: Protocol
    ports: str
    comment: str = ""

    @classmethod
    def from_service(cls, service: Service, index: int | None = None) -> list[ServiceSelection]:
        """Build selections for one port item (by index) or all of them.

        An out-of-range index is clamped to the nearest item. Items with a
        protocol rules cannot be generated for are skipped, so a service
        without usable port items yields an empty list.
        """
        items = service.port_items
        if not items:
            return []
        if index is not None:
            items = [items[max(0, min(index, len(items) - 1))]]
        items = [item for item in items if item.usable]
        return [
            cls(
                service_name=service.name,
                proto=item.proto,
                ports=item.value,
                comment=service.label,
            )
            for item in items
        ]


@dataclass
class GenerationRequest:
    """What the user asked to generate."""

    env: str
    src_type: str
    src_value: str
    dst_type: str
    dst_value: str
    via_vlan: str = ""
    metric: int = DEFAULT_METRIC
    bidirectional: bool = False
    services: list[ServiceSelection] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Generated artifacts, or an error when endpoints didn't resolve."""

    routes_text: str = ""
    firewall_text: str = ""
    csv: str = ""
    routes_by_server: dict[str, list[RouteItem]] = field(default_factory=dict)
    firewall_by_server: dict[str, list[FirewallItem]] = field(default_factory=dict)
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


def validate_request(request: GenerationRequest) -> str:
    """Check that the request is complete; return an error message or ''."""
    if not request.env:
        return "Environment must be selected."
    if not request.src_value or not request.dst_value:
        return "Source and destination must be selected."
    if not request.via_vlan:
        return "Route via must be selected."
    if not request.services:
        return "Add at least one service."
    return ""


def generate_artifacts(topology: Topology, request: GenerationRequest) -> GenerationResult:
    """Derive routes, firewall rules and their text renderings."""
    env = request.env
    src = resolve_endpoint(topology, request.src_type, request.src_value, env)
    dst = resolve_endpoint(topology, request.dst_type, request.dst_value, env)
    if src is None or dst is None:
        return GenerationResult(error=RESOLUTION_ERROR)

    via = (request.via_vlan or "").strip()

    # Routes don't depend on the service list
    routes_by_server = build_routes_with_reverse(
        topology, src, dst, env, request.metric, via, "",
    )
    firewall_by_server = build_firewall_for_services(
        topology, src, dst, env, request.services, via, request.bidirectional,
    )

    return GenerationResult(
        routes_text=format_routes(routes_by_server, env),
        firewall_text=format_firewall_rules(firewall_by_server, env, request.bidirectional),
        csv=build_csv(
            routes_by_server, env,
            request.src_type, request.src_value,
            request.dst_type, request.dst_value,
        ),
        routes_by_server=routes_by_server,
        firewall_by_server=firewall_by_server,
    )
