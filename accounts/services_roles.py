# -*- coding: utf-8 -*-
# accounts/services_roles.py
# Purpose:
# Centralise role checks (no rules in views/templates).

from __future__ import annotations

from functools import wraps
from typing import Iterable

from django.contrib.auth.decorators import login_required
from django.contrib.auth.models import AbstractUser
from django.db import transaction
from django.http import HttpResponseForbidden

from accounts.models import Role, UserRole


# Roles managed from the "user management" screen; the rest live in "team management".
CONTRIBUTOR_ROLES = (Role.Name.AUTHOR, Role.Name.TRANSLATOR)
STAFF_ROLES = (Role.Name.MANAGER, Role.Name.EDITOR)


class RoleAssignmentError(Exception):
    pass


def role_names(user: AbstractUser) -> set[str]:
    if not getattr(user, "is_authenticated", False):
        return set()
    cached = getattr(user, "_pressroom_role_names", None)
    if cached is None:
        cached = set(UserRole.objects.filter(user=user).values_list("role__name", flat=True))
        user._pressroom_role_names = cached
    return cached


def has_role(user: AbstractUser, *names: str) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    if user.is_superuser:
        return True
    return bool(role_names(user) & set(names))


def is_manager(user: AbstractUser) -> bool:
    return has_role(user, Role.Name.MANAGER)


def is_staff_member(user: AbstractUser) -> bool:
    return has_role(user, *STAFF_ROLES)


def role_required(*names: str):
    """
    View decorator: login first, then the user must hold one of `names`.
    Superusers always pass.
    """

    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if not has_role(request.user, *names):
                return HttpResponseForbidden("Tidak diizinkan.")
            return view_func(request, *args, **kwargs)

        return login_required(_wrapped)

    return decorator


@transaction.atomic
def set_user_roles(user: AbstractUser, names: Iterable[str], *, allowed: Iterable[str] | None = None) -> None:
    """
    Replace the user's roles with `names`.
    When `allowed` is given, any name outside it is refused.
    """
    wanted = {str(n) for n in names}
    if allowed is not None:
        refused = wanted - {str(a) for a in allowed}
        if refused:
            raise RoleAssignmentError("Role yang dipilih tidak diizinkan.")

    roles = {r.name: r for r in Role.objects.filter(name__in=wanted)}
    missing = wanted - set(roles)
    for name in missing:
        roles[name], _ = Role.objects.get_or_create(name=name)

    UserRole.objects.filter(user=user).exclude(role__name__in=wanted).delete()
    for role in roles.values():
        UserRole.objects.get_or_create(user=user, role=role)

    if hasattr(user, "_pressroom_role_names"):
        del user._pressroom_role_names
