"""Address specifications used as route destinations and rule addresses."""

from __future__ import annotations

import enum
from dataclasses import dataclass

SERVER_IP_PLACEHOLDER = "<server-ip>/32"


class AddressKind(enum.Enum):
    """Whether an address names a single host or a whole subnet."""

    HOST = "host"
    CIDR = "cidr"


@dataclass(frozen=True)
class AddressSpec:
    """A destination address: either ``A.B.C.D/32`` or a VLAN CIDR.

    Attributes:
        kind: HOST for a single server, CIDR for a VLAN subnet.
        value: The address text as it appears in commands and rules.
            For unresolvable hosts this is SERVER_IP_PLACEHOLDER.
    """

    kind: AddressKind
    value: str

    @classmethod
    def host(cls, ip: str) -> AddressSpec:
        """Build a /32 host spec, falling back to the placeholder.

        >>> AddressSpec.host('10.1.1.11').value
        '10.1.1.11/32'
        >>> AddressSpec.host('').value
        '<server-ip>/32'
        """
        return cls(AddressKind.HOST, f"{ip}/32" if ip else SERVER_IP_PLACEHOLDER)

    @classmethod
    def cidr(cls, cidr: str) -> AddressSpec:
        return cls(AddressKind.CIDR, cidr)

    @property
    def is_placeholder(self) -> bool:
        return self.value == SERVER_IP_PLACEHOLDER

    def __str__(self) -> str:
        return self.value
