"""
Role-based authorization helpers.
"""
from typing import Any
from uuid import UUID

from tablebook.core.errors import AccessDeniedError
from tablebook.models.user import UserRole

ADMIN_ROLES = frozenset({UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value})


def is_admin(actor: Any) -> bool:
    return actor.role in ADMIN_ROLES


def can_access(actor: Any, resource_owner_id: UUID) -> bool:
    """True if the actor owns the resource or holds an administrative role."""
    return actor.id == resource_owner_id or is_admin(actor)


def ensure_can_access(actor: Any, resource_owner_id: UUID) -> None:
    if not can_access(actor, resource_owner_id):
        raise AccessDeniedError()
