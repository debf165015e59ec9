# -*- coding: utf-8 -*-
# accounts/context_processors.py

from __future__ import annotations

from typing import Any, Dict

from django.contrib.auth.models import AnonymousUser

from accounts.models import Role
from accounts.services_roles import has_role


def role_flags(request) -> Dict[str, Any]:
    """
    Provides pr_roles for the sidebar:
      - is_manager / is_editor / is_staff_member
      - can_submit (authors and translators)
    """
    user = getattr(request, "user", None)
    if not user or isinstance(user, AnonymousUser) or not user.is_authenticated:
        return {"pr_roles": None}

    is_manager = has_role(user, Role.Name.MANAGER)
    is_editor = has_role(user, Role.Name.EDITOR)
    return {
        "pr_roles": {
            "is_manager": is_manager,
            "is_editor": is_editor,
            "is_staff_member": is_manager or is_editor,
            "can_submit": has_role(user, Role.Name.AUTHOR, Role.Name.TRANSLATOR),
        }
    }
