# -*- coding: utf-8 -*-
# production/services.py
# Purpose:
# Book production rules: task seeding, progress stamps, overall status and
# the per-stage board. Views call these; no rules in templates.

from __future__ import annotations

import datetime as dt
import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence

from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from production.models import Book, MasterTask, TaskProgress

logger = logging.getLogger("pressroom.production")

FINISHED_STAGE = "Selesai"


class TaskOrderError(Exception):
    pass


def _today(today: Optional[dt.date]) -> dt.date:
    return today or timezone.localdate()


# ------------------------------------------------------------
# Master tasks
# ------------------------------------------------------------

def add_master_task(name: str, *, estimated_days: int = 7) -> MasterTask:
    top = MasterTask.objects.aggregate(m=Max("order"))["m"] or 0
    return MasterTask.objects.create(name=name.strip(), order=top + 1, estimated_days=estimated_days)


@transaction.atomic
def reorder_tasks(task_ids: Sequence[int]) -> None:
    """
    Rewrite `order` as 1..n following `task_ids`.
    The list must name every master task exactly once.
    """
    ids = [int(t) for t in task_ids]
    if len(set(ids)) != len(ids):
        raise TaskOrderError("Urutan task berisi duplikat.")

    existing = set(MasterTask.objects.values_list("id", flat=True))
    if set(ids) != existing:
        raise TaskOrderError("Urutan task tidak lengkap atau berisi task yang tidak dikenal.")

    for position, task_id in enumerate(ids, start=1):
        MasterTask.objects.filter(pk=task_id).update(order=position)
    logger.info("master tasks reordered count=%s", len(ids))


# ------------------------------------------------------------
# Books
# ------------------------------------------------------------

@transaction.atomic
def create_book_from_manuscript(
    manuscript,
    *,
    publisher,
    pic,
    target_print_date: dt.date,
    today: Optional[dt.date] = None,
) -> Book:
    """One Book per manuscript, one pending TaskProgress per master task."""
    day = _today(today)
    book = Book.objects.create(
        manuscript=manuscript,
        title=manuscript.title,
        pic=pic,
        publisher=publisher,
        status=Book.Status.DRAFT,
        target_print_date=target_print_date,
    )

    rows = [
        TaskProgress(
            book=book,
            task=task,
            pic=pic,
            status=TaskProgress.Status.PENDING,
            started_on=day,
            deadline=day + dt.timedelta(days=task.estimated_days or 7),
        )
        for task in MasterTask.objects.order_by("order", "id")
    ]
    TaskProgress.objects.bulk_create(rows)

    logger.info("book created id=%s manuscript=%s tasks=%s", book.pk, manuscript.pk, len(rows))
    return book


def refresh_book_status(book: Book, *, today: Optional[dt.date] = None) -> Book:
    """
    all tasks completed -> PUBLISHED (actual print date stamped)
    any task started    -> EDITING
    nothing started     -> DRAFT
    """
    statuses = list(book.tasks.values_list("status", flat=True))
    if statuses and all(s == TaskProgress.Status.COMPLETED for s in statuses):
        new_status = Book.Status.PUBLISHED
    elif any(s != TaskProgress.Status.PENDING for s in statuses):
        new_status = Book.Status.EDITING
    else:
        new_status = Book.Status.DRAFT

    fields = []
    if book.status != new_status:
        book.status = new_status
        fields.append("status")
    if new_status == Book.Status.PUBLISHED and book.actual_print_date is None:
        book.actual_print_date = _today(today)
        fields.append("actual_print_date")
    elif new_status != Book.Status.PUBLISHED and book.actual_print_date is not None:
        book.actual_print_date = None
        fields.append("actual_print_date")

    if fields:
        book.save(update_fields=fields + ["updated_at"])
    return book


_UNSET = object()


@transaction.atomic
def update_task_progress(
    progress: TaskProgress,
    *,
    status: Optional[str] = None,
    pic=_UNSET,
    deadline=_UNSET,
    notes: Optional[str] = None,
    today: Optional[dt.date] = None,
) -> TaskProgress:
    day = _today(today)

    if status is not None and status != progress.status:
        if status not in TaskProgress.Status.values:
            raise ValueError(f"Unknown task status: {status!r}")
        progress.status = status
        if status == TaskProgress.Status.IN_PROGRESS:
            progress.started_on = progress.started_on or day
            progress.completed_on = None
        elif status == TaskProgress.Status.COMPLETED:
            progress.started_on = progress.started_on or day
            progress.completed_on = day
        else:
            progress.completed_on = None

    if pic is not _UNSET:
        progress.pic = pic
    if deadline is not _UNSET:
        progress.deadline = deadline
    if notes is not None:
        progress.notes = notes

    progress.save()
    refresh_book_status(progress.book, today=day)
    return progress


def is_overdue(progress: TaskProgress, *, today: Optional[dt.date] = None) -> bool:
    return (
        progress.status != TaskProgress.Status.COMPLETED
        and progress.deadline is not None
        and progress.deadline < _today(today)
    )


def progress_percentage(book: Book) -> int:
    statuses = [t.status for t in book.tasks.all()]
    if not statuses:
        return 0
    done = sum(1 for s in statuses if s == TaskProgress.Status.COMPLETED)
    return round(done * 100 / len(statuses))


def current_stage(book: Book) -> Optional[MasterTask]:
    """Lowest-ordered unfinished task, or None when everything is done."""
    open_rows = [t for t in book.tasks.all() if t.status != TaskProgress.Status.COMPLETED]
    if not open_rows:
        return None
    return min(open_rows, key=lambda t: (t.task.order, t.task_id)).task


def books_by_stage(books: Optional[Iterable[Book]] = None) -> "OrderedDict[str, List[Book]]":
    """
    Books grouped under the name of their current stage, stages in master-task
    order, finished books last under "Selesai".
    """
    if books is None:
        books = (
            Book.objects
            .select_related("manuscript", "pic", "publisher")
            .prefetch_related("tasks__task")
        )

    board: "OrderedDict[str, List[Book]]" = OrderedDict(
        (name, []) for name in MasterTask.objects.order_by("order", "id").values_list("name", flat=True)
    )
    board[FINISHED_STAGE] = []

    for book in books:
        stage = current_stage(book)
        key = stage.name if stage else FINISHED_STAGE
        board.setdefault(key, []).append(book)

    # keep "Selesai" at the end even if a stage was added by setdefault
    finished = board.pop(FINISHED_STAGE)
    board[FINISHED_STAGE] = finished
    return board


def book_stats(qs=None, *, today: Optional[dt.date] = None, warning_days: int = 7) -> Dict[str, object]:
    """Counters shown on the staff dashboard."""
    day = _today(today)
    qs = Book.objects.all() if qs is None else qs
    in_progress = qs.filter(status__in=[Book.Status.EDITING, Book.Status.REVIEW]).count()
    published = qs.filter(status=Book.Status.PUBLISHED).count()
    return {
        "yearly_target": qs.filter(target_print_date__year=day.year).count(),
        "in_progress": in_progress,
        "near_deadline": qs.filter(target_print_date__lt=day + dt.timedelta(days=warning_days))
        .exclude(status=Book.Status.PUBLISHED)
        .count(),
        "published": published,
        "chart": {
            "Belum Mulai": qs.filter(status=Book.Status.DRAFT).count(),
            "Dalam Proses": in_progress,
            "Selesai": published,
        },
    }
