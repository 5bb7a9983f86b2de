"""Service definitions: named sets of protocol/port items."""

from __future__ import annotations

from dataclasses import dataclass, field

from flowforge.models.protocol import Protocol


@dataclass(frozen=True)
class PortItem:
    """One protocol/port pair of a service.

    ``value`` is free text as entered: a single port ('22'), a list
    ('80,443') or a range ('20000-20100').

    ``proto`` is None when the stored protocol is not one rules can be
    generated for (e.g. 'GRE'); ``raw_proto`` then holds it upper-cased
    so the item is written back unchanged.
    """

    proto: Protocol | None
    value: str
    raw_proto: str = ""

    @property
    def label(self) -> str:
        """Upper-case protocol name as stored in the topology file.

        >>> PortItem(Protocol.TCP_UDP, '53').label
        'TCP/UDP'
        >>> PortItem(None, '47', raw_proto='GRE').label
        'GRE'
        """
        if self.proto is None:
            return self.raw_proto
        return self.proto.label

    @property
    def usable(self) -> bool:
        return self.proto is not None


@dataclass
class Service:
    """A named network service (e.g. 'postgres' on TCP 5432)."""

    name: str
    comment: str = ""
    port_items: list[PortItem] = field(default_factory=list)

    @property
    def label(self) -> str:
        """Service name with its comment, as used in rule comments."""
        return f"{self.name} — {self.comment}" if self.comment else self.name
