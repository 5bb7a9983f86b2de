"""Topology JSON normalization.

Converts any previously saved topology document into the canonical
model in a single pass, and serializes the model back to the canonical
JSON shape. Legacy shapes accepted:

- environments given as bare tag strings
- zones with 'envs' instead of 'envTags'
- VLANs with 'id'/'interface' and a 'gateways' map instead of 'scopes'
- firewalls with an 'envs' list instead of 'scopes'
- services given as bare name strings, or with a single proto/ports pair
- servers with 'environments'/'networks'/'fwRules' aliases

No derivation happens here; entries that cannot be normalized are
dropped.
"""

from __future__ import annotations

from typing import Any

from flowforge.models.host import (
    FirewallRuleRecord,
    Roles,
    RouteRecord,
    Server,
)
from flowforge.models.network import (
    VLAN,
    Environment,
    Firewall,
    FirewallScope,
    Scope,
    Zone,
)
from flowforge.models.protocol import Protocol
from flowforge.models.service import PortItem, Service
from flowforge.models.topology import Topology

# Zone assigned to scopes migrated from env-only legacy fields.
LEGACY_ZONE_TAG = "CORE"

DEFAULT_APP_NAME = "FlowForge LE"
DEFAULT_TAGLINE = "Where network flows are forged."
DEFAULT_DEBIAN = {
    "udevPath": "/etc/udev/rules.d/10-flowforge-ifnames.rules",
    "disablePredictable": True,
}
_LEGACY_UDEV_TOKEN = "x4infra"


def _text(value: Any) -> str:
    """Coerce a JSON scalar to stripped text; None becomes ''."""
    if value is None:
        return ""
    return str(value).strip()


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _first_list(data: dict, *keys: str) -> list:
    """Return the first key whose value is a list, else []."""
    for key in keys:
        if isinstance(data.get(key), list):
            return data[key]
    return []


def _names(values: list) -> list[str]:
    """Stringify a list of names, dropping empties but keeping order."""
    return [_text(v) for v in values if _text(v)]


def port_value_to_string(value: Any) -> str:
    """Normalize a port value to the single-string form.

    >>> port_value_to_string(['80', 443])
    '80,443'
    >>> port_value_to_string({'from': 20000, 'to': 20100})
    '20000-20100'
    >>> port_value_to_string(' 22 ')
    '22'
    """
    if isinstance(value, list):
        return ",".join(_text(v) for v in value if _text(v))
    if isinstance(value, dict):
        lo = next((value[k] for k in ("from", "start", "min") if value.get(k) is not None), None)
        hi = next((value[k] for k in ("to", "end", "max") if value.get(k) is not None), None)
        if lo is not None and hi is not None:
            return f"{_text(lo)}-{_text(hi)}"
    return _text(value)


# ---------------------------------------------------------------------------
# Environments and zones
# ---------------------------------------------------------------------------

def _normalize_env(raw: Any) -> Environment | None:
    if not raw:
        return None
    if isinstance(raw, str):
        return Environment(name=raw, tag=raw)
    if not isinstance(raw, dict):
        return None
    return Environment(
        name=_text(raw.get("name")),
        tag=_text(raw.get("tag")),
        domain=_text(raw.get("domain")),
        comment=_text(raw.get("comment")),
    )


def _normalize_zone(raw: Any) -> Zone | None:
    if not isinstance(raw, dict) or not raw:
        return None
    return Zone(
        name=_text(raw.get("name")),
        tag=_text(raw.get("tag")),
        env_tags=tuple(_names(_first_list(raw, "envTags", "envs"))),
    )


# ---------------------------------------------------------------------------
# VLANs and firewalls
# ---------------------------------------------------------------------------

def _normalize_scopes(raw_vlan: dict) -> tuple[Scope, ...]:
    """Build VLAN scopes, migrating the legacy 'gateways' map.

    Keeps only the first scope per (env, zone) pair.
    """
    scopes: list[Scope] = []
    if isinstance(raw_vlan.get("scopes"), list):
        for s in raw_vlan["scopes"]:
            if not isinstance(s, dict):
                continue
            scopes.append(Scope(
                env_tag=_text(s.get("envTag")),
                zone_tag=_text(s.get("zoneTag")),
                gw_default=_text(s.get("gwDefault")),
                gw_fallback=_text(s.get("gwFallback")),
            ))
    elif isinstance(raw_vlan.get("gateways"), dict):
        for env_tag, gw in raw_vlan["gateways"].items():
            gw = gw if isinstance(gw, dict) else {}
            scopes.append(Scope(
                env_tag=_text(env_tag),
                zone_tag=LEGACY_ZONE_TAG,
                gw_default=_text(gw.get("default")),
                gw_fallback=_text(gw.get("fallback")),
            ))

    unique: list[Scope] = []
    seen: set[tuple[str, str]] = set()
    for scope in scopes:
        key = (scope.env_tag, scope.zone_tag)
        if key in seen:
            continue
        seen.add(key)
        unique.append(scope)
    return tuple(unique)


def _normalize_vlan(raw: Any) -> VLAN | None:
    if not isinstance(raw, dict):
        return None
    vlan_id = raw.get("vlanId")
    if vlan_id is None:
        vlan_id = raw.get("id")
    return VLAN(
        name=_text(raw.get("name")),
        vlan_id=_text(vlan_id),
        cidr=_text(raw.get("cidr")),
        iface=_text(raw.get("iface") or raw.get("interface")),
        scopes=_normalize_scopes(raw),
    )


def _normalize_firewall(raw: Any) -> Firewall | None:
    if not isinstance(raw, dict):
        return None
    if isinstance(raw.get("scopes"), list):
        scopes = [
            FirewallScope(env_tag=_text(s.get("envTag")), zone_tag=_text(s.get("zoneTag")))
            for s in raw["scopes"]
            if isinstance(s, dict)
        ]
    else:
        scopes = [
            FirewallScope(env_tag=tag, zone_tag=LEGACY_ZONE_TAG)
            for tag in _names(_list(raw.get("envs")))
        ]
    return Firewall(name=_text(raw.get("name")), scopes=scopes)


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

def _normalize_port_item(raw: Any) -> PortItem | None:
    if not isinstance(raw, dict):
        return None
    value = raw.get("value")
    if value is None:
        value = raw.get("ports")
    text = port_value_to_string(value)
    if not text:
        return None
    try:
        proto = Protocol.parse(raw.get("proto"))
    except ValueError:
        # Kept for saving; no rules are generated for it
        return PortItem(proto=None, value=text, raw_proto=_text(raw.get("proto")).upper())
    return PortItem(proto=proto, value=text)


def _normalize_service(raw: Any) -> Service | None:
    if not raw:
        return None
    if isinstance(raw, str):
        return Service(name=raw)
    if not isinstance(raw, dict):
        return None

    raw_items = _list(raw.get("portItems"))
    if not raw_items:
        legacy_ports = raw.get("ports") or raw.get("port")
        if legacy_ports:
            raw_items = [{"proto": raw.get("proto") or "TCP", "value": legacy_ports}]

    items = [item for item in map(_normalize_port_item, raw_items) if item is not None]
    return Service(
        name=_text(raw.get("name")),
        comment=_text(raw.get("comment") or raw.get("description")),
        port_items=items,
    )


# ---------------------------------------------------------------------------
# Servers
# ---------------------------------------------------------------------------

def _parse_metric(value: Any) -> int | str:
    """Stored metrics are ints; anything unparseable is kept as text."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(_text(value))
    except ValueError:
        return _text(value)


def _normalize_route(raw: Any) -> RouteRecord | None:
    if not isinstance(raw, dict):
        return None
    return RouteRecord(
        dst=_text(raw.get("dst")),
        via_vlan=_text(raw.get("viaVlan")),
        gateway=_text(raw.get("gateway")),
        dev=_text(raw.get("dev")),
        metric=_parse_metric(raw.get("metric")),
        env_tag=_text(raw.get("envTag")),
        comment=_text(raw.get("comment")),
    )


def _normalize_rule(raw: Any) -> FirewallRuleRecord | None:
    if not isinstance(raw, dict):
        return None
    return FirewallRuleRecord(
        dir=_text(raw.get("dir")).lower(),
        src=_text(raw.get("src")),
        dst=_text(raw.get("dst")),
        proto=_text(raw.get("proto")).lower(),
        ports=_text(raw.get("ports")),
        env_tag=_text(raw.get("envTag")),
        comment=_text(raw.get("comment")),
    )


def _normalize_server(raw: Any) -> Server | None:
    if not isinstance(raw, dict) or not raw:
        return None
    roles = raw.get("roles") if isinstance(raw.get("roles"), dict) else {}
    routes = [r for r in map(_normalize_route, _list(raw.get("routes"))) if r]
    rules = [
        r for r in map(_normalize_rule, _first_list(raw, "firewallRules", "fwRules"))
        if r
    ]
    return Server(
        name=_text(raw.get("name")),
        os=(_text(raw.get("os")) or "debian").lower(),
        octet=_text(raw.get("octet")),
        envs=_names(_first_list(raw, "envs", "environments")),
        vlans=_names(_first_list(raw, "vlans", "networks")),
        services=_names(_list(raw.get("services"))),
        routes=routes,
        firewall_rules=rules,
        roles=Roles(dns=bool(roles.get("dns")), ntp=bool(roles.get("ntp"))),
    )


# ---------------------------------------------------------------------------
# Settings containers
# ---------------------------------------------------------------------------

def _normalize_meta(raw: Any) -> dict[str, Any]:
    meta = dict(raw) if isinstance(raw, dict) else {}
    if not meta.get("app"):
        meta["app"] = DEFAULT_APP_NAME
    if not meta.get("tagline"):
        meta["tagline"] = DEFAULT_TAGLINE
    return meta


def _normalize_debian(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict) or not raw:
        return dict(DEFAULT_DEBIAN)
    debian = dict(raw)
    udev_path = debian.get("udevPath")
    if isinstance(udev_path, str) and _LEGACY_UDEV_TOKEN in udev_path:
        debian["udevPath"] = udev_path.replace(_LEGACY_UDEV_TOKEN, "flowforge")
    return debian


def normalize_config(data: dict[str, Any] | None) -> Topology:
    """Normalize a raw topology document into a Topology.

    Accepts None or an empty dict (yielding an empty topology).
    """
    data = data or {}

    def _collect(key: str, fn):
        return [item for item in map(fn, _list(data.get(key))) if item is not None]

    return Topology(
        envs=_collect("envs", _normalize_env),
        zones=_collect("zones", _normalize_zone),
        vlans=_collect("vlans", _normalize_vlan),
        firewalls=_collect("firewalls", _normalize_firewall),
        services=_collect("services", _normalize_service),
        servers=_collect("servers", _normalize_server),
        meta=_normalize_meta(data.get("meta")),
        debian=_normalize_debian(data.get("debian")),
        provisioning=dict(data["provisioning"]) if isinstance(data.get("provisioning"), dict) else {},
    )


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def route_to_dict(route: RouteRecord) -> dict[str, Any]:
    return {
        "dst": route.dst,
        "viaVlan": route.via_vlan,
        "gateway": route.gateway,
        "dev": route.dev,
        "metric": route.metric,
        "envTag": route.env_tag,
        "comment": route.comment,
    }


def rule_to_dict(rule: FirewallRuleRecord) -> dict[str, Any]:
    return {
        "dir": rule.dir,
        "src": rule.src,
        "dst": rule.dst,
        "proto": rule.proto,
        "ports": rule.ports,
        "envTag": rule.env_tag,
        "comment": rule.comment,
    }


def topology_to_dict(topology: Topology) -> dict[str, Any]:
    """Serialize a Topology to the canonical JSON document shape."""
    return {
        "meta": dict(topology.meta),
        "debian": dict(topology.debian),
        "envs": [
            {"name": e.name, "tag": e.tag, "comment": e.comment, "domain": e.domain}
            for e in topology.envs
        ],
        "zones": [
            {"name": z.name, "tag": z.tag, "envTags": list(z.env_tags)}
            for z in topology.zones
        ],
        "vlans": [
            {
                "name": v.name,
                "vlanId": v.vlan_id,
                "cidr": v.cidr,
                "iface": v.iface,
                "scopes": [
                    {
                        "envTag": s.env_tag,
                        "zoneTag": s.zone_tag,
                        "gwDefault": s.gw_default,
                        "gwFallback": s.gw_fallback,
                    }
                    for s in v.scopes
                ],
            }
            for v in topology.vlans
        ],
        "firewalls": [
            {
                "name": f.name,
                "scopes": [{"envTag": s.env_tag, "zoneTag": s.zone_tag} for s in f.scopes],
            }
            for f in topology.firewalls
        ],
        "services": [
            {
                "name": s.name,
                "comment": s.comment,
                "portItems": [{"proto": p.label, "value": p.value} for p in s.port_items],
            }
            for s in topology.services
        ],
        "servers": [
            {
                "name": s.name,
                "octet": s.octet,
                "os": s.os,
                "envs": list(s.envs),
                "vlans": list(s.vlans),
                "services": list(s.services),
                "routes": [route_to_dict(r) for r in s.routes],
                "firewallRules": [rule_to_dict(r) for r in s.firewall_rules],
                "roles": {"dns": s.roles.dns, "ntp": s.roles.ntp},
            }
            for s in topology.servers
        ],
        "provisioning": dict(topology.provisioning),
    }
