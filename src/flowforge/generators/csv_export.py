"""CSV export of generated route commands.

One row per route command, servers in sorted order. Warning lines are
not commands and are left out. The command column is always quoted;
the other columns only when they contain a comma, quote or line break.
"""

from __future__ import annotations

from flowforge.derivations.routes import RouteItem

CSV_HEADER = "type,scope,env,srcType,src,dstType,dst,server,command"

_SPECIAL = (",", '"', "\n", "\r")


def _quote(text: str) -> str:
    """Quote a CSV field, doubling embedded quotes.

    >>> _quote('say "hi" now')
    '"say ""hi"" now"'
    """
    return '"' + text.replace('"', '""') + '"'


def _field(text: str) -> str:
    """Quote a field only if it would otherwise break the row.

    >>> _field('app01')
    'app01'
    >>> _field('a,b')
    '"a,b"'
    """
    if any(c in text for c in _SPECIAL):
        return _quote(text)
    return text


def build_csv(
    routes_by_server: dict[str, list[RouteItem]],
    env_tag: str,
    src_type: str,
    src_value: str,
    dst_type: str,
    dst_value: str,
) -> str:
    """Build the CSV text (no trailing newline)."""
    lines = [CSV_HEADER]
    for server_name in sorted(routes_by_server):
        for item in routes_by_server[server_name]:
            if not item.cmd or item.is_warning:
                continue
            fields = [
                "route",
                "per-server",
                env_tag,
                src_type,
                src_value,
                dst_type,
                dst_value,
                server_name,
            ]
            lines.append(",".join([_field(f) for f in fields] + [_quote(item.cmd)]))
    return "\n".join(lines)
