"""IPv4 helpers for deriving host addresses from VLAN CIDRs.

Every function here is total: malformed input yields ``None`` or ``""``
rather than an exception, so callers can substitute placeholders.
"""

from __future__ import annotations

import ipaddress
import re

_CIDR_RE = re.compile(r'^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})/(\d{1,2})$')
_PREFIX_RE = re.compile(r'/(\d{1,2})$')


def cidr_to_base(cidr: str | None) -> str | None:
    """Return the first three octets of a dotted CIDR.

    >>> cidr_to_base('10.20.30.0/24')
    '10.20.30'
    >>> cidr_to_base(' 192.168.1.0/16 ')
    '192.168.1'
    >>> cidr_to_base('10.20.30.0') is None
    True
    >>> cidr_to_base(None) is None
    True
    """
    m = _CIDR_RE.match(str(cidr or '').strip())
    if not m:
        return None
    return f"{m.group(1)}.{m.group(2)}.{m.group(3)}"


def cidr_to_netmask(cidr: str | None) -> str:
    """Return the dotted netmask for the prefix length of a CIDR.

    >>> cidr_to_netmask('10.0.0.0/24')
    '255.255.255.0'
    >>> cidr_to_netmask('10.0.0.0/16')
    '255.255.0.0'
    >>> cidr_to_netmask('10.0.0.0/0')
    '0.0.0.0'
    >>> cidr_to_netmask('10.0.0.0/33')
    ''
    >>> cidr_to_netmask('garbage')
    ''
    """
    m = _PREFIX_RE.search(str(cidr or '').strip())
    if not m:
        return ''
    bits = int(m.group(1))
    if bits > 32:
        return ''
    return str(ipaddress.IPv4Network(f"0.0.0.0/{bits}").netmask)


def parse_octet(value: int | str | None) -> int | None:
    """Parse a host octet, returning None unless it lies in 1..254.

    >>> parse_octet('11')
    11
    >>> parse_octet(254)
    254
    >>> parse_octet(0) is None
    True
    >>> parse_octet('x') is None
    True
    """
    if isinstance(value, bool) or value is None:
        return None
    try:
        octet = int(str(value).strip())
    except ValueError:
        return None
    if octet < 1 or octet > 254:
        return None
    return octet


def derive_host_ip(cidr: str | None, octet: int | str | None) -> str:
    """Combine a VLAN CIDR base with a host octet.

    >>> derive_host_ip('10.20.30.0/24', 5)
    '10.20.30.5'
    >>> derive_host_ip('10.20.30.0/24', 0)
    ''
    >>> derive_host_ip('10.20.30.0/24', 255)
    ''
    >>> derive_host_ip('not-a-cidr', 5)
    ''
    """
    base = cidr_to_base(cidr)
    if not base:
        return ''
    host = parse_octet(octet)
    if host is None:
        return ''
    return f"{base}.{host}"
