"""Transport protocol selector for services and firewall rules."""

from __future__ import annotations

import enum

_ALIASES = {
    "tcp": "tcp",
    "udp": "udp",
    "tcp/udp": "tcp/udp",
    "udp/tcp": "tcp/udp",
    "tcpudp": "tcp/udp",
    "any": "any",
    "all": "any",
}


class Protocol(enum.Enum):
    """A service protocol.

    TCP_UDP is a shorthand that expands into one TCP and one UDP rule.
    """

    TCP = "tcp"
    UDP = "udp"
    TCP_UDP = "tcp/udp"
    ANY = "any"

    @classmethod
    def parse(cls, raw: str | Protocol | None) -> Protocol:
        """Parse a protocol name, case-insensitively.

        An empty value means TCP.

        >>> Protocol.parse('TCP/UDP')
        <Protocol.TCP_UDP: 'tcp/udp'>
        >>> Protocol.parse('udp/tcp')
        <Protocol.TCP_UDP: 'tcp/udp'>
        >>> Protocol.parse('')
        <Protocol.TCP: 'tcp'>
        >>> Protocol.parse('All')
        <Protocol.ANY: 'any'>

        Raises:
            ValueError: For anything that is not a known protocol name.
        """
        if isinstance(raw, Protocol):
            return raw
        text = str(raw or "").strip().lower()
        if not text:
            return cls.TCP
        if text not in _ALIASES:
            raise ValueError(f"Unknown protocol: {raw!r}")
        return cls(_ALIASES[text])

    def expand(self) -> tuple[Protocol, ...]:
        """Return the concrete protocols one rule per entry is emitted for.

        >>> [p.value for p in Protocol.TCP_UDP.expand()]
        ['tcp', 'udp']
        >>> [p.value for p in Protocol.ANY.expand()]
        ['any']
        """
        if self is Protocol.TCP_UDP:
            return (Protocol.TCP, Protocol.UDP)
        return (self,)

    @property
    def has_ports(self) -> bool:
        """True if a destination port clause applies to this protocol."""
        return self in (Protocol.TCP, Protocol.UDP)

    @property
    def label(self) -> str:
        """Upper-case form used in the stored service definitions."""
        return self.value.upper()

    def __str__(self) -> str:
        return self.value
