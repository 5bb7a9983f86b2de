"""nftables firewall document generator.

Each item becomes one line:

    add rule inet filter <input|output> ip saddr <src> ip daddr <dst>
        [<proto> dport { <ports> }] accept [comment "<text>"]

The dport clause is only emitted for tcp/udp rules with ports. Double
quotes are stripped from comments so they cannot break the quoting.
"""

from __future__ import annotations

from flowforge.derivations.firewall import FirewallItem
from flowforge.generators.document import render_document


def format_rule(item: FirewallItem) -> str:
    """Render a single firewall item as an nft command."""
    dport = ""
    if item.ports and item.proto.has_ports:
        dport = f" {item.proto.value} dport {{ {item.ports} }}"
    comment = ""
    if item.comment:
        comment = ' comment "{}"'.format(item.comment.replace('"', ''))
    return (
        f"add rule inet filter {item.dir.chain} "
        f"ip saddr {item.src} ip daddr {item.dst}{dport} accept{comment}"
    )


def format_firewall_rules(
    firewall_by_server: dict[str, list[FirewallItem]],
    env_tag: str,
    bidirectional: bool,
) -> str:
    """Render firewall rules per server."""
    mode = "bidirektional" if bidirectional else "einseitig"
    sections = {
        name: [format_rule(item) for item in items]
        for name, items in (firewall_by_server or {}).items()
    }
    return render_document(f"Firewall — {mode} (Env: {env_tag})", sections)
