"""Ownership checks shared by user-owned resources."""

from app.errors import ForbiddenError


def is_owner(user_id: str, resource_owner_id: str | None) -> bool:
    """True when the resource belongs to the given user."""
    return resource_owner_id is not None and resource_owner_id == user_id


def require_owner(user_id: str, resource_owner_id: str | None) -> None:
    """Raise ForbiddenError unless the user owns the resource."""
    if not is_owner(user_id, resource_owner_id):
        raise ForbiddenError()
