"""Tests for the Topology container and entity models."""

from flowforge.models.host import Direction, RouteRecord, Server
from flowforge.models.network import VLAN, Environment, Firewall, FirewallScope, Scope
from flowforge.models.service import PortItem, Service
from flowforge.models.protocol import Protocol


class TestLookups:
    def test_lookup_by_key(self, topology):
        assert topology.env_by_tag("PRD").name == "Production"
        assert topology.zone_by_tag("CORE").name == "Core"
        assert topology.vlan_by_name("Db-Net").cidr == "10.1.2.0/24"
        assert topology.service_by_name("postgres").port_items[0].value == "5432"
        assert topology.server_by_name("db01").octet == "21"
        assert topology.server_by_name("db01").host_octet == 21

    def test_unknown_keys_return_none(self, topology):
        assert topology.env_by_tag("QA") is None
        assert topology.zone_by_tag("DMZ") is None
        assert topology.vlan_by_name("Nope") is None
        assert topology.service_by_name("smtp") is None
        assert topology.server_by_name("ghost") is None

    def test_servers_sorted(self, topology):
        assert [s.name for s in topology.servers_sorted()] == ["app01", "db01", "devdb"]


class TestEntities:
    def test_vlan_has_env(self):
        vlan = VLAN(name="A", scopes=(Scope("PRD", "CORE"),))
        assert vlan.has_env("PRD")
        assert not vlan.has_env("DEV")

    def test_firewall_zones_for_env(self):
        fw = Firewall(name="fw", scopes=[
            FirewallScope("PRD", "CORE"),
            FirewallScope("PRD", "DMZ"),
            FirewallScope("DEV", "CORE"),
        ])
        assert fw.zones_for_env("PRD") == {"CORE", "DMZ"}
        assert fw.zones_for_env("QA") == set()

    def test_environment_str(self):
        assert str(Environment(name="Production", tag="PRD")) == "Production (PRD)"
        assert str(Environment(name="PRD", tag="PRD")) == "PRD"

    def test_server_membership(self):
        server = Server(name="s", envs=["PRD"], vlans=["A", "B"])
        assert server.in_env("PRD")
        assert not server.in_env("DEV")
        assert server.on_vlan("B")
        assert not server.on_vlan("C")

    def test_direction_chain(self):
        assert Direction.IN.chain == "input"
        assert Direction.OUT.chain == "output"

    def test_route_records_compare_structurally(self):
        a = RouteRecord(dst="10.0.0.1/32", metric=100)
        b = RouteRecord(dst="10.0.0.1/32", metric=100)
        assert a == b
        assert len({a, b}) == 1

    def test_service_label(self):
        assert Service(name="web", comment="HTTP(S)").label == "web — HTTP(S)"
        assert Service(name="postgres").label == "postgres"

    def test_port_item(self):
        item = PortItem(proto=Protocol.TCP, value="80,443")
        assert item.proto is Protocol.TCP
        assert item.label == "TCP"
        assert item.usable

    def test_unknown_port_item_keeps_name(self):
        item = PortItem(proto=None, value="47", raw_proto="GRE")
        assert item.label == "GRE"
        assert not item.usable
