"""Capability checks for managed stamp actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet


@dataclass(slots=True, frozen=True)
class ActorCapabilities:
    """Platform-neutral view of what an actor is in a community."""

    user_id: str
    is_owner: bool = False
    is_admin: bool = False
    role_ids: frozenset[str] = field(default_factory=frozenset)


def can_manage(actor: ActorCapabilities, manager_role_ids: AbstractSet[str]) -> bool:
    """Owners, admins and holders of a manager role may add, remove and reset."""
    return bool(actor.is_owner or actor.is_admin or actor.role_ids & manager_role_ids)


def can_reset_all(actor: ActorCapabilities) -> bool:
    return bool(actor.is_owner or actor.is_admin)
