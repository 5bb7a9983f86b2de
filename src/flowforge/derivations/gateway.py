"""Gateway selection for a VLAN within an environment.

Two-step lookup:
1. The first scope whose env_tag equals the requested environment
2. Otherwise the VLAN's first scope, whatever its environment

A VLAN without scopes yields empty gateways. Scope mismatch is never an
error; route commands substitute a placeholder for an empty gateway.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowforge.models.network import VLAN, Scope


@dataclass(frozen=True)
class Gateway:
    """Default and fallback gateway addresses ('' when unknown)."""

    default: str = ""
    fallback: str = ""


def select_scope(vlan: VLAN, env_tag: str) -> Scope | None:
    """Return the scope gateway data is taken from, or None."""
    for scope in vlan.scopes:
        if scope.env_tag == env_tag:
            return scope
    if vlan.scopes:
        return vlan.scopes[0]
    return None


def select_gateway(vlan: VLAN, env_tag: str) -> Gateway:
    """Select the default/fallback gateway for hosts on a VLAN."""
    scope = select_scope(vlan, env_tag)
    if scope is None:
        return Gateway()
    return Gateway(default=scope.gw_default, fallback=scope.gw_fallback)
