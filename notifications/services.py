# -*- coding: utf-8 -*-
# notifications/services.py
# Purpose:
# One place that decides who hears about manuscript events.

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Q
from django.urls import reverse

from accounts.models import Role
from notifications.models import Notification


def _managers():
    User = get_user_model()
    return (
        User.objects
        .filter(is_active=True)
        .filter(Q(user_roles__role__name=Role.Name.MANAGER) | Q(is_superuser=True))
        .distinct()
    )


def notify_new_submission(manuscript) -> int:
    """Tell every manager a manuscript is waiting. Returns rows created."""
    link = reverse("manuscripts:approval_detail", args=[manuscript.pk])
    author = manuscript.submitted_by
    rows = [
        Notification(
            recipient=m,
            type=Notification.Type.NEW_SUBMISSION,
            title=f"Naskah baru: {manuscript.title}"[:200],
            body=f"Dikirim oleh {author.display_name()}.",
            manuscript=manuscript,
            link_url=link,
        )
        for m in _managers()
        if m.pk != author.pk
    ]
    Notification.objects.bulk_create(rows)
    return len(rows)


def notify_decision(manuscript, *, approved: bool, note: str = "") -> Notification:
    link = reverse("manuscripts:submission_detail", args=[manuscript.pk])
    if approved:
        ntype = Notification.Type.APPROVED
        title = f"Naskah disetujui: {manuscript.title}"
    else:
        ntype = Notification.Type.REJECTED
        title = f"Naskah ditolak: {manuscript.title}"
    return Notification.objects.create(
        recipient=manuscript.submitted_by,
        type=ntype,
        title=title[:200],
        body=note or "",
        manuscript=manuscript,
        link_url=link,
    )
