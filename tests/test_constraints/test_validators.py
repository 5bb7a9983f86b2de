"""Tests for topology constraint validators."""

from flowforge.constraints.validators import (
    check_prerequisites,
    validate_addresses,
    validate_all,
    validate_keys,
    validate_references,
)
from flowforge.models.network import VLAN, Scope
from flowforge.models.topology import Topology
from flowforge.sources.normalize import normalize_config


class TestSampleTopology:
    def test_clean(self, topology):
        result = validate_all(topology)
        assert result.violations == []


class TestValidateKeys:
    def test_duplicate_names(self):
        topology = normalize_config({
            "servers": [{"name": "a"}, {"name": "a"}, {"name": ""}],
        })
        result = validate_keys(topology)
        assert "duplicate_server" in result.codes
        assert "missing_server_key" in result.codes
        assert result.has_errors

    def test_duplicate_scope_on_hand_built_topology(self):
        topology = Topology(vlans=[VLAN(name="A", scopes=(
            Scope("PRD", "CORE", "10.0.0.1"),
            Scope("PRD", "CORE", "10.0.0.2"),
        ))])
        result = validate_keys(topology)
        assert result.codes == {"duplicate_scope"}
        assert result.errors[0].entity == "vlan:A"


class TestValidateReferences:
    def test_dangling_references_are_warnings(self, raw_topology):
        raw_topology["servers"][0]["envs"].append("QA")
        raw_topology["servers"][0]["vlans"].append("Nope")
        raw_topology["servers"][0]["services"] = ["smtp"]
        raw_topology["vlans"][0]["scopes"].append({"envTag": "PRD", "zoneTag": "DMZ"})
        result = validate_references(normalize_config(raw_topology))

        assert result.codes == {"unknown_env", "unknown_vlan", "unknown_service", "unknown_zone"}
        assert not result.has_errors

    def test_firewall_scope_references(self):
        topology = normalize_config({
            "firewalls": [{"name": "fw", "scopes": [{"envTag": "X", "zoneTag": "Y"}]}],
        })
        assert validate_references(topology).codes == {"unknown_env", "unknown_zone"}

    def test_unknown_protocol_warned(self):
        topology = normalize_config({
            "services": [{"name": "gre", "portItems": [{"proto": "GRE", "value": "47"}]}],
        })
        result = validate_references(topology)
        assert result.codes == {"unknown_protocol"}
        assert result.warnings[0].entity == "service:gre"
        assert not result.has_errors


class TestValidateAddresses:
    def test_bad_cidr_and_missing_iface(self):
        topology = normalize_config({"vlans": [{"name": "A", "cidr": "10.0.0.0"}]})
        result = validate_addresses(topology)
        assert result.codes == {"invalid_cidr", "missing_iface"}

    def test_invalid_octet(self):
        topology = normalize_config({"servers": [{"name": "s", "octet": "0"}]})
        result = validate_addresses(topology)
        assert result.codes == {"invalid_octet"}
        assert result.warnings[0].entity == "server:s"


class TestCheckPrerequisites:
    def test_empty_topology(self):
        result = check_prerequisites(Topology())
        assert result.codes == {"no_envs", "no_zones", "no_vlans", "no_services", "no_servers"}

    def test_incomplete_server(self, raw_topology):
        raw_topology["servers"].append({"name": "half", "octet": "5", "envs": ["PRD"]})
        result = check_prerequisites(normalize_config(raw_topology))
        assert result.codes == {"incomplete_server"}
        assert result.errors[0].entity == "server:half"
