# -*- coding: utf-8 -*-
# notifications/context_processors.py
# Purpose:
# Unread count + latest items for the topbar bell.

from __future__ import annotations

from typing import Any, Dict

from notifications.models import Notification

_BELL_ITEMS = 5


def notifications_bar(request) -> Dict[str, Any]:
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        return {"pr_notifications": None}

    unread_qs = Notification.objects.filter(recipient=user, is_read=False)

    return {
        "pr_notifications": {
            "unread_count": unread_qs.count(),
            "latest": list(unread_qs.order_by("-created_at")[:_BELL_ITEMS]),
        }
    }
