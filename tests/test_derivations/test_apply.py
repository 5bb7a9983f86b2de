"""Tests for applying generated artifacts to server records."""

from flowforge.derivations.apply import NOTHING_NEW_MSG, apply_artifacts_to_servers
from flowforge.derivations.artifacts import GenerationRequest, ServiceSelection, generate_artifacts
from flowforge.derivations.firewall import FirewallItem
from flowforge.derivations.routes import RouteItem
from flowforge.models.host import Direction
from flowforge.models.protocol import Protocol


def _generate(topology):
    request = GenerationRequest(
        env="PRD",
        src_type="server",
        src_value="app01",
        dst_type="server",
        dst_value="db01",
        via_vlan="App-Net",
        services=ServiceSelection.from_service(topology.service_by_name("postgres")),
    )
    return generate_artifacts(topology, request)


class TestApply:
    def test_first_apply_stores_everything(self, topology):
        result = _generate(topology)
        applied = apply_artifacts_to_servers(
            topology, result.routes_by_server, result.firewall_by_server,
        )
        assert applied.ok
        assert applied.routes_added == 2
        assert applied.rules_added == 2
        assert applied.msg == "Saved: 2 route(s), 2 firewall rule(s)."

        app01 = topology.server_by_name("app01")
        assert app01.routes[0].dst == "10.1.2.21/32"
        assert app01.firewall_rules[0].dir == "out"

    def test_second_apply_is_noop(self, topology):
        result = _generate(topology)
        apply_artifacts_to_servers(topology, result.routes_by_server, result.firewall_by_server)
        again = apply_artifacts_to_servers(
            topology, result.routes_by_server, result.firewall_by_server,
        )
        assert again.ok
        assert again.msg == NOTHING_NEW_MSG
        assert len(topology.server_by_name("db01").routes) == 1
        assert len(topology.server_by_name("db01").firewall_rules) == 1

    def test_duplicates_within_one_call(self, topology):
        item = FirewallItem(Direction.IN, "a", "b", Protocol.TCP, "1", "PRD")
        applied = apply_artifacts_to_servers(topology, {}, {"app01": [item, item]})
        assert applied.rules_added == 1

    def test_separator_in_fields_keeps_distinct_rules(self, topology):
        rules = [
            FirewallItem(Direction.IN, "a", "b", Protocol.TCP, "1", "PRD", "x|y"),
            FirewallItem(Direction.IN, "a", "b", Protocol.TCP, "1|x", "PRD", "y"),
            FirewallItem(Direction.IN, "a", "b", Protocol.TCP, "", "PRD", "a|b"),
            FirewallItem(Direction.IN, "a", "b", Protocol.TCP, "|b", "PRD", "a"),
        ]
        applied = apply_artifacts_to_servers(topology, {}, {"app01": rules})
        assert applied.rules_added == 4
        assert len(topology.server_by_name("app01").firewall_rules) == 4

    def test_warnings_not_stored(self, topology):
        warning = RouteItem("# WARN: app01 has no VLAN for routing.", "", "", "", "", 100, "PRD")
        applied = apply_artifacts_to_servers(topology, {"app01": [warning]}, {})
        assert applied.msg == NOTHING_NEW_MSG
        assert topology.server_by_name("app01").routes == []

    def test_unknown_server_ignored(self, topology):
        item = FirewallItem(Direction.IN, "a", "b", Protocol.TCP, "1", "PRD")
        applied = apply_artifacts_to_servers(topology, None, {"ghost": [item]})
        assert applied.ok
        assert applied.rules_added == 0

    def test_loaded_records_deduplicate(self, topology):
        """Records read back from JSON compare equal to fresh ones."""
        from flowforge.sources.normalize import normalize_config, topology_to_dict

        result = _generate(topology)
        apply_artifacts_to_servers(topology, result.routes_by_server, result.firewall_by_server)
        reloaded = normalize_config(topology_to_dict(topology))

        again = apply_artifacts_to_servers(
            reloaded, result.routes_by_server, result.firewall_by_server,
        )
        assert again.msg == NOTHING_NEW_MSG
