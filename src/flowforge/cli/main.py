"""CLI entry point for flowforge.

Subcommands:
    info       Show configuration and a summary of the topology.
    validate   Run constraint checks on the topology.
    via-vlans  List VLANs eligible as routing hops in an environment.
    generate   Derive routes and firewall rules between two endpoints.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from flowforge.utils import terminal


def _load_config(args: argparse.Namespace):
    """Load config, handling errors."""
    from flowforge.config import load_config

    config_path = getattr(args, "config", None)
    try:
        return load_config(config_path)
    except FileNotFoundError:
        path = config_path or "flowforge.toml"
        terminal.error(f"config file not found: {path}")
        sys.exit(1)


def _open_store(args: argparse.Namespace, config):
    """Return the TopologyStore for the config (or --topology override)."""
    from flowforge.sources.store import TopologyStore

    if getattr(args, "topology", None):
        return TopologyStore(Path(args.topology))
    return TopologyStore(config.topology.path, config.topology.default)


def _load_topology(store):
    """Load the topology, exiting on malformed files."""
    from flowforge.sources.store import TopologyLoadError

    try:
        return store.load()
    except TopologyLoadError as e:
        terminal.error(str(e))
        sys.exit(1)


def _parse_endpoint(text: str) -> tuple[str, str]:
    """Split 'TYPE:NAME' into (type, name); a bare name is a server.

    >>> _parse_endpoint('vlan:Db-Net')
    ('vlan', 'Db-Net')
    >>> _parse_endpoint('app01')
    ('server', 'app01')
    """
    kind, sep, name = text.partition(":")
    if sep and kind.lower() in ("server", "vlan"):
        return kind.lower(), name.strip()
    return "server", text.strip()


def _parse_service(text: str) -> tuple[str, int | None]:
    """Split 'NAME[:INDEX]' into (name, index).

    >>> _parse_service('dns:1')
    ('dns', 1)
    >>> _parse_service('postgres')
    ('postgres', None)
    """
    name, sep, index = text.rpartition(":")
    if sep and index.isdigit():
        return name, int(index)
    return text, None


# ---------------------------------------------------------------------------
# Subcommand: info
# ---------------------------------------------------------------------------

def cmd_info(args: argparse.Namespace) -> int:
    """Show configuration and topology summary."""
    config = _load_config(args)
    store = _open_store(args, config)
    topology = _load_topology(store)

    source = store.source()
    print(f"Topology: {source if source else '(empty internal default)'}")
    print(f"Save to:  {store.path}")
    print()

    print("Environments:")
    for env in topology.envs:
        domain = f", domain={env.domain}" if env.domain else ""
        print(f"  {env.tag}: {env.name}{domain}")
    print()

    print("VLANs:")
    for vlan in topology.vlans:
        scopes = ", ".join(
            f"{s.env_tag}/{s.zone_tag} gw={s.gw_default or '-'}" for s in vlan.scopes
        )
        print(f"  {vlan.name}: {vlan.cidr} dev={vlan.iface or '-'} [{scopes}]")
    print()

    print("Services:")
    for service in topology.services:
        ports = ", ".join(f"{p.label} {p.value}" for p in service.port_items)
        print(f"  {service.name}: {ports or '-'}")
    print()

    print("Servers:")
    for server in topology.servers_sorted():
        print(
            f"  {server.name}: octet={server.octet or '-'} "
            f"envs={','.join(server.envs) or '-'} vlans={','.join(server.vlans) or '-'} "
            f"routes={len(server.routes)} rules={len(server.firewall_rules)}"
        )
    print()

    print("Generator:")
    print(f"  metric: {config.generator.metric}")
    print(f"  bidirectional: {config.generator.bidirectional}")

    return 0


# ---------------------------------------------------------------------------
# Subcommand: validate
# ---------------------------------------------------------------------------

def cmd_validate(args: argparse.Namespace) -> int:
    """Run constraint validation on the topology."""
    from flowforge.constraints.validators import validate_all

    config = _load_config(args)
    topology = _load_topology(_open_store(args, config))
    result = validate_all(topology)

    print(f"Servers: {len(topology.servers)}")
    print(f"VLANs:   {len(topology.vlans)}")
    print()
    print(result.report())

    return 1 if result.has_errors else 0


# ---------------------------------------------------------------------------
# Subcommand: via-vlans
# ---------------------------------------------------------------------------

def cmd_via_vlans(args: argparse.Namespace) -> int:
    """List VLANs usable as route-via hops for an environment."""
    from flowforge.derivations.scoping import firewalled_vlan_names_in_env

    config = _load_config(args)
    topology = _load_topology(_open_store(args, config))

    names = firewalled_vlan_names_in_env(topology, args.env)
    if not names:
        terminal.warning(f"no routable VLANs in environment {args.env!r}")
        return 1
    for name in names:
        print(name)
    return 0


# ---------------------------------------------------------------------------
# Subcommand: generate
# ---------------------------------------------------------------------------

def _collect_services(topology, specs: list[str]):
    """Turn NAME[:INDEX] arguments into ServiceSelections.

    Returns (selections, error_message).
    """
    from flowforge.derivations.artifacts import ServiceSelection

    selections = []
    for spec in specs:
        name, index = _parse_service(spec)
        service = topology.service_by_name(name)
        if service is None:
            return [], f"unknown service {name!r}"
        picked = ServiceSelection.from_service(service, index)
        if not picked:
            terminal.warning(f"service {name!r} has no usable port items, skipped")
        selections.extend(picked)
    return selections, ""


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate routes and firewall rules, optionally applying them."""
    from flowforge.derivations.apply import apply_artifacts_to_servers
    from flowforge.derivations.artifacts import (
        GenerationRequest,
        generate_artifacts,
        parse_metric,
        validate_request,
    )
    from flowforge.derivations.scoping import (
        auto_select_via_vlan,
        firewalled_vlan_names_in_env,
    )

    config = _load_config(args)
    store = _open_store(args, config)
    topology = _load_topology(store)

    src_type, src_value = _parse_endpoint(args.src)
    dst_type, dst_value = _parse_endpoint(args.dst)

    via = args.via or auto_select_via_vlan(topology, args.env)
    if via and via not in firewalled_vlan_names_in_env(topology, args.env):
        terminal.warning(f"VLAN {via!r} is not a firewalled VLAN in {args.env!r}")

    services, err = _collect_services(topology, args.service or [])
    if err:
        terminal.error(err)
        return 1

    bidirectional = config.generator.bidirectional
    if args.bidirectional is not None:
        bidirectional = args.bidirectional

    request = GenerationRequest(
        env=args.env,
        src_type=src_type,
        src_value=src_value,
        dst_type=dst_type,
        dst_value=dst_value,
        via_vlan=via,
        metric=parse_metric(args.metric, config.generator.metric),
        bidirectional=bidirectional,
        services=services,
    )

    err = validate_request(request)
    if err:
        terminal.error(err)
        return 1

    result = generate_artifacts(topology, request)
    if not result.ok:
        terminal.error(result.error)
        return 1

    print(result.routes_text)
    print(result.firewall_text)

    csv_path = args.csv or config.generator.csv_output
    if csv_path:
        Path(csv_path).write_text(result.csv + "\n", encoding="utf-8")
        terminal.success(f"CSV written to {csv_path}")

    if args.apply:
        applied = apply_artifacts_to_servers(
            topology, result.routes_by_server, result.firewall_by_server,
        )
        if not applied.ok:
            terminal.error(applied.msg)
            return 1
        if applied.routes_added or applied.rules_added:
            store.save(topology)
        terminal.success(applied.msg)

    return 0


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="flowforge",
        description="Derive routes and firewall rules from a network topology.",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to flowforge.toml (default: ./flowforge.toml)",
    )
    parser.add_argument(
        "-t", "--topology",
        help="Topology JSON file to use instead of the configured one",
    )

    subparsers = parser.add_subparsers(dest="command")

    # info
    subparsers.add_parser("info", help="Show configuration and topology summary")

    # validate
    subparsers.add_parser("validate", help="Run constraint validation")

    # via-vlans
    via_parser = subparsers.add_parser("via-vlans", help="List routable VLANs for an environment")
    via_parser.add_argument("--env", required=True, help="Environment tag")

    # generate
    gen_parser = subparsers.add_parser("generate", help="Generate routes and firewall rules")
    gen_parser.add_argument("--env", required=True, help="Environment tag")
    gen_parser.add_argument(
        "--src", required=True,
        help="Source endpoint: server:NAME, vlan:NAME or a bare server name",
    )
    gen_parser.add_argument(
        "--dst", required=True,
        help="Destination endpoint: server:NAME, vlan:NAME or a bare server name",
    )
    gen_parser.add_argument(
        "--via",
        help="VLAN to route via (default: the only routable VLAN, if there is one)",
    )
    gen_parser.add_argument("--metric", help="Route metric (default from config)")
    gen_parser.add_argument(
        "--bidirectional", action=argparse.BooleanOptionalAction, default=None,
        help="Also generate reverse firewall rules",
    )
    gen_parser.add_argument(
        "-s", "--service", action="append",
        help="Service NAME or NAME:INDEX for a single port item (repeatable)",
    )
    gen_parser.add_argument("--csv", help="Write route commands as CSV to this file")
    gen_parser.add_argument(
        "--apply", action="store_true",
        help="Store the generated routes and rules on the servers",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "validate": cmd_validate,
        "via-vlans": cmd_via_vlans,
        "generate": cmd_generate,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
