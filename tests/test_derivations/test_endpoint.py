"""Tests for endpoint resolution and server address selection."""

from flowforge.derivations.endpoint import (
    MANAGEMENT_VLAN,
    EndpointKind,
    endpoint_to_addr,
    endpoint_to_specs,
    resolve_endpoint,
    server_ip_on_vlan,
    server_primary_ip,
)
from flowforge.models.addressing import SERVER_IP_PLACEHOLDER, AddressKind
from flowforge.sources.normalize import normalize_config


def _mgmt_topology():
    return normalize_config({
        "vlans": [
            {"name": "App-Net", "cidr": "10.1.1.0/24"},
            {"name": MANAGEMENT_VLAN, "cidr": "10.1.0.0/24"},
            {"name": "Broken", "cidr": "not-a-cidr"},
        ],
        "servers": [
            {"name": "app01", "octet": 11, "envs": ["PRD"], "vlans": ["App-Net", "Cfg-Net", "Broken"]},
        ],
    })


class TestResolveEndpoint:
    def test_server(self, topology):
        endpoint = resolve_endpoint(topology, "server", "app01", "PRD")
        assert endpoint.kind is EndpointKind.SERVER
        assert endpoint.server_names == ["app01"]
        assert endpoint.vlan is None

    def test_vlan_members_filtered_by_env(self, topology):
        prd = resolve_endpoint(topology, "vlan", "Db-Net", "PRD")
        dev = resolve_endpoint(topology, EndpointKind.VLAN, "Db-Net", "DEV")
        assert prd.server_names == ["db01"]
        assert dev.server_names == ["devdb"]
        assert prd.vlan.cidr == "10.1.2.0/24"

    def test_vlan_without_members_resolves(self, topology):
        endpoint = resolve_endpoint(topology, "vlan", "App-Net", "DEV")
        assert endpoint is not None
        assert endpoint.servers == []

    def test_unknown_names(self, topology):
        assert resolve_endpoint(topology, "server", "ghost", "PRD") is None
        assert resolve_endpoint(topology, "vlan", "Nope", "PRD") is None

    def test_unknown_kind(self, topology):
        assert resolve_endpoint(topology, "host", "app01", "PRD") is None


class TestServerPrimaryIp:
    def test_hint_preferred_when_member(self):
        topology = _mgmt_topology()
        server = topology.server_by_name("app01")
        assert server_primary_ip(topology, server, "App-Net") == "10.1.1.11"

    def test_management_vlan_beats_first_vlan(self):
        topology = _mgmt_topology()
        server = topology.server_by_name("app01")
        assert server_primary_ip(topology, server) == "10.1.0.11"

    def test_hint_ignored_when_not_member(self, topology):
        server = topology.server_by_name("db01")
        assert server_primary_ip(topology, server, "App-Net") == "10.1.2.21"

    def test_unusable_hint_skipped(self):
        topology = _mgmt_topology()
        server = topology.server_by_name("app01")
        assert server_primary_ip(topology, server, "Broken") == "10.1.0.11"

    def test_no_octet(self, topology):
        server = topology.server_by_name("app01")
        server.octet = ""
        assert server_primary_ip(topology, server, "App-Net") == ""

    def test_ip_on_unknown_vlan(self, topology):
        server = topology.server_by_name("app01")
        assert server_ip_on_vlan(topology, server, "Nope") == ""


class TestEndpointToSpecs:
    def test_vlan_endpoint_is_cidr(self, topology):
        endpoint = resolve_endpoint(topology, "vlan", "Db-Net", "PRD")
        specs = endpoint_to_specs(topology, endpoint)
        assert len(specs) == 1
        assert specs[0].kind is AddressKind.CIDR
        assert specs[0].value == "10.1.2.0/24"

    def test_server_endpoint_is_host(self, topology):
        endpoint = resolve_endpoint(topology, "server", "app01", "PRD")
        assert endpoint_to_addr(topology, endpoint, "App-Net") == "10.1.1.11/32"

    def test_unaddressable_server_is_placeholder(self, topology):
        topology.server_by_name("app01").vlans = []
        endpoint = resolve_endpoint(topology, "server", "app01", "PRD")
        assert endpoint_to_addr(topology, endpoint) == SERVER_IP_PLACEHOLDER
