"""Tests for the per-server document layout and the route renderer."""

from flowforge.derivations.routes import RouteItem
from flowforge.generators.document import render_document
from flowforge.generators.routes import format_routes


def _route(cmd):
    return RouteItem(cmd=cmd, dst="", via_vlan="", gateway="", dev="", metric=100, env_tag="PRD")


class TestRenderDocument:
    def test_empty(self):
        assert render_document("Title", {}) == "# Title\n"

    def test_sections_sorted(self):
        text = render_document("T", {"b": ["y"], "a": ["x1", "x2"]})
        assert text == "# T\n\n## a\nx1\nx2\n\n## b\ny\n"

    def test_no_escaping(self):
        text = render_document("T", {"s": ["via <gateway> dev <iface>"]})
        assert "via <gateway> dev <iface>" in text


class TestFormatRoutes:
    def test_title_and_order(self):
        text = format_routes(
            {"web02": [_route("ip route add b")], "db01": [_route("ip route add a")]},
            "DEV",
        )
        assert text.splitlines() == [
            "# Routing — including return route (Env: DEV)",
            "",
            "## db01",
            "ip route add a",
            "",
            "## web02",
            "ip route add b",
        ]

    def test_warnings_included(self):
        text = format_routes({"s": [_route("# WARN: s has no VLAN for routing.")]}, "PRD")
        assert "# WARN: s has no VLAN for routing." in text
