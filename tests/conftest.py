"""Shared test fixtures for flowforge."""

import copy

import pytest

from flowforge.sources.normalize import normalize_config


# Two PRD servers on separate VLANs behind one firewall, plus a DEV
# server sharing Db-Net so environment filtering is observable.
RAW_TOPOLOGY = {
    "envs": [
        {"name": "Production", "tag": "PRD", "domain": "prd.example.net"},
        {"name": "Development", "tag": "DEV"},
    ],
    "zones": [
        {"name": "Core", "tag": "CORE", "envTags": ["PRD", "DEV"]},
    ],
    "vlans": [
        {
            "name": "App-Net",
            "vlanId": "20",
            "cidr": "10.1.1.0/24",
            "iface": "ens192",
            "scopes": [
                {"envTag": "PRD", "zoneTag": "CORE", "gwDefault": "10.1.1.1", "gwFallback": "10.1.1.2"},
                {"envTag": "DEV", "zoneTag": "CORE", "gwDefault": "10.9.1.1", "gwFallback": ""},
            ],
        },
        {
            "name": "Db-Net",
            "vlanId": "30",
            "cidr": "10.1.2.0/24",
            "iface": "ens224",
            "scopes": [
                {"envTag": "PRD", "zoneTag": "CORE", "gwDefault": "10.1.2.1", "gwFallback": ""},
            ],
        },
    ],
    "firewalls": [
        {"name": "fw-core", "scopes": [{"envTag": "PRD", "zoneTag": "CORE"}]},
    ],
    "services": [
        {"name": "postgres", "comment": "", "portItems": [{"proto": "TCP", "value": "5432"}]},
        {"name": "dns", "comment": "", "portItems": [{"proto": "TCP/UDP", "value": "53"}]},
        {"name": "web", "comment": "HTTP(S)", "portItems": [
            {"proto": "TCP", "value": "80"},
            {"proto": "TCP", "value": "443"},
        ]},
        {"name": "icmp", "comment": "", "portItems": [{"proto": "ANY", "value": "-"}]},
    ],
    "servers": [
        {"name": "app01", "octet": "11", "envs": ["PRD"], "vlans": ["App-Net"]},
        {"name": "db01", "octet": "21", "envs": ["PRD"], "vlans": ["Db-Net"]},
        {"name": "devdb", "octet": "31", "envs": ["DEV"], "vlans": ["Db-Net"]},
    ],
}


@pytest.fixture
def raw_topology():
    """Return a fresh copy of the raw topology document."""
    return copy.deepcopy(RAW_TOPOLOGY)


@pytest.fixture
def topology(raw_topology):
    """Return the normalized sample topology."""
    return normalize_config(raw_topology)
