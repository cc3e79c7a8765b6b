"""Actor resolution for the HTTP layer."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from apps.bookings.domain.entities import Actor, Role

ROLE_NAMES = {role.value: role for role in Role}


def actor_from_user(user) -> Actor:
    """
    Build the engine's Actor from an authenticated Django user.

    Roles come from group membership (groups named ``renter``, ``owner``,
    ``admin``); staff and superusers are always admins.
    """
    roles = {
        ROLE_NAMES[name]
        for name in user.groups.values_list("name", flat=True)
        if name in ROLE_NAMES
    }
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        roles.add(Role.ADMIN)
    return Actor(id=user.pk, roles=frozenset(roles))


class CanViewBooking(permissions.BasePermission):
    """Renter, owner and administrators may see a booking."""

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        actor = actor_from_user(request.user)
        if actor.has_role(Role.ADMIN):
            return True
        return actor.id in (obj.renter_id, obj.owner_id)
