# -*- coding: utf-8 -*-
# manuscripts/services_approval.py
# Purpose:
# Manager decisions on submitted manuscripts.
# Approve = status + audit trail + Book with its production tasks.

from __future__ import annotations

import datetime as dt
import logging
import uuid
from typing import Dict, Iterable, Optional

from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from manuscripts.models import Manuscript
from notifications.services import notify_decision
from production.services import create_book_from_manuscript

logger = logging.getLogger("pressroom.approvals")

MIN_REJECT_REASON = 10
BULK_ACTIONS = ("approve", "reject")


class ApprovalError(Exception):
    pass


def approval_queryset(*, status: str = "all", search: str = "") -> QuerySet:
    qs = (
        Manuscript.objects
        .select_related("submitted_by")
        .prefetch_related("target_publishers__publisher")
        .order_by("-created_at")
    )
    status = (status or "all").strip()
    if status != "all":
        qs = qs.filter(status=status)

    search = (search or "").strip()
    if search:
        qs = qs.filter(
            Q(title__icontains=search)
            | Q(submitted_by__full_name__icontains=search)
            | Q(submitted_by__username__icontains=search)
        )
    return qs


def approval_stats() -> Dict[str, int]:
    return {
        "pending": Manuscript.objects.filter(status=Manuscript.Status.REVIEW).count(),
        "approved": Manuscript.objects.filter(status=Manuscript.Status.APPROVED).count(),
        "rejected": Manuscript.objects.filter(status=Manuscript.Status.CANCELED).count(),
        "total": Manuscript.objects.count(),
    }


def _merge_info(manuscript: Manuscript, extra: Dict[str, object]) -> None:
    info = dict(manuscript.extra_info or {})
    info.update(extra)
    manuscript.extra_info = info


def _lock_pending(manuscript: Manuscript) -> Manuscript:
    """Re-read the row under a lock; a concurrent decision shows up here."""
    locked = Manuscript.objects.select_for_update().get(pk=manuscript.pk)
    if locked.status != Manuscript.Status.REVIEW:
        raise ApprovalError("Naskah sudah diproses sebelumnya.")
    return locked


def approve_manuscript(
    manuscript: Manuscript,
    *,
    by,
    publisher,
    pic,
    target_print_date: dt.date,
    note: str = "",
    today: Optional[dt.date] = None,
):
    """Returns the created Book."""
    day = today or timezone.localdate()

    with transaction.atomic():
        locked = _lock_pending(manuscript)
        if target_print_date <= day:
            raise ApprovalError("Target naik cetak harus setelah hari ini.")

        locked.status = Manuscript.Status.APPROVED
        _merge_info(
            locked,
            {
                "approval_note": note or None,
                "approved_by": by.pk,
                "approved_at": timezone.now().isoformat(),
            },
        )
        locked.save(update_fields=["status", "extra_info", "updated_at"])

        book = create_book_from_manuscript(
            locked,
            publisher=publisher,
            pic=pic,
            target_print_date=target_print_date,
            today=day,
        )
        notify_decision(locked, approved=True, note=note)

    manuscript.refresh_from_db()
    logger.info("manuscript approved id=%s by=%s book=%s", manuscript.pk, by.pk, book.pk)
    return book


def reject_manuscript(manuscript: Manuscript, *, by, reason: str) -> Manuscript:
    reason = (reason or "").strip()

    with transaction.atomic():
        locked = _lock_pending(manuscript)
        if len(reason) < MIN_REJECT_REASON:
            raise ApprovalError("Alasan penolakan minimal 10 karakter.")

        locked.status = Manuscript.Status.CANCELED
        _merge_info(
            locked,
            {
                "rejection_reason": reason,
                "rejected_by": by.pk,
                "rejected_at": timezone.now().isoformat(),
            },
        )
        locked.save(update_fields=["status", "extra_info", "updated_at"])
        notify_decision(locked, approved=False, note=reason)

    manuscript.refresh_from_db()
    logger.info("manuscript rejected id=%s by=%s", manuscript.pk, by.pk)
    return manuscript


def bulk_decide(manuscript_ids: Iterable[str], action: str, *, by) -> int:
    """
    Status-only decision for many manuscripts at once (no Book is created).
    Returns how many rows changed.
    """
    if action not in BULK_ACTIONS:
        raise ApprovalError("Aksi tidak dikenal.")

    ids = []
    for raw in manuscript_ids:
        try:
            ids.append(uuid.UUID(str(raw)))
        except (TypeError, ValueError):
            continue
    if not ids:
        raise ApprovalError("Pilih minimal 1 naskah.")

    new_status = Manuscript.Status.APPROVED if action == "approve" else Manuscript.Status.CANCELED
    count = 0
    with transaction.atomic():
        for manuscript in Manuscript.objects.filter(pk__in=ids).select_related("submitted_by"):
            if manuscript.status == new_status:
                continue
            manuscript.status = new_status
            manuscript.save(update_fields=["status", "updated_at"])
            notify_decision(manuscript, approved=(action == "approve"))
            count += 1

    logger.info("bulk %s by=%s count=%s", action, by.pk, count)
    return count
