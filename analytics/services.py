# -*- coding: utf-8 -*-
# analytics/services.py
# Purpose:
# Numbers for the analytics page and its JSON feed.
# Every function takes an optional publisher; None means the whole house.

from __future__ import annotations

import calendar
import datetime as dt
from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model
from django.db.models import Count, F, Q
from django.utils import timezone

from manuscripts.models import Manuscript
from production.models import Book, MasterTask, TaskProgress
from publishers.models import Publisher, Target
from publishers.services import yearly_target_summary

TOP_PERFORMER_MIN_TASKS = 3


def _pct(part: int, whole: int) -> float:
    return round(part * 100 / whole, 1) if whole else 0.0


def _books(publisher: Optional[Publisher]):
    qs = Book.objects.all()
    return qs.filter(publisher=publisher) if publisher is not None else qs


def _tasks(publisher: Optional[Publisher]):
    qs = TaskProgress.objects.all()
    return qs.filter(book__publisher=publisher) if publisher is not None else qs


def _overdue(qs, today: dt.date):
    return qs.filter(deadline__isnull=False, deadline__lt=today).exclude(status=TaskProgress.Status.COMPLETED)


def _last_months(today: dt.date, count: int) -> List[tuple]:
    """(first_day, last_day) for the `count` months ending with today's month, oldest first."""
    out = []
    year, month = today.year, today.month
    for _ in range(count):
        last = calendar.monthrange(year, month)[1]
        out.append((dt.date(year, month, 1), dt.date(year, month, last)))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(out))


def dashboard_metrics(publisher: Optional[Publisher] = None, *, today: Optional[dt.date] = None) -> Dict[str, Any]:
    today = today or timezone.localdate()
    books = _books(publisher)
    tasks = _tasks(publisher)

    total_tasks = tasks.count()
    completed_tasks = tasks.filter(status=TaskProgress.Status.COMPLETED).count()
    overdue_tasks = _overdue(tasks, today).count()

    User = get_user_model()
    # one filter() call so both conditions hit the same assignment row
    active_filter = Q(task_assignments__status__in=[TaskProgress.Status.PENDING, TaskProgress.Status.IN_PROGRESS])
    if publisher is not None:
        active_filter &= Q(task_assignments__book__publisher=publisher)
    active_members = User.objects.filter(active_filter).distinct().count()

    return {
        "total_books": books.count(),
        "completed_books": books.filter(status=Book.Status.PUBLISHED).count(),
        "in_progress_books": books.filter(status__in=[Book.Status.EDITING, Book.Status.REVIEW]).count(),
        "total_tasks": total_tasks,
        "completed_tasks": completed_tasks,
        "completion_rate": _pct(completed_tasks, total_tasks),
        "overdue_tasks": overdue_tasks,
        "overdue_rate": _pct(overdue_tasks, total_tasks),
        "active_members": active_members,
    }


def book_status_distribution(publisher: Optional[Publisher] = None) -> List[Dict[str, Any]]:
    books = _books(publisher)
    total = books.count()
    buckets = [
        ("Draft", books.filter(status=Book.Status.DRAFT).count()),
        ("Dalam Proses", books.filter(status__in=[Book.Status.EDITING, Book.Status.REVIEW]).count()),
        ("Selesai", books.filter(status=Book.Status.PUBLISHED).count()),
    ]
    return [{"name": name, "value": value, "percentage": _pct(value, total)} for name, value in buckets]


def monthly_productivity(
    publisher: Optional[Publisher] = None,
    *,
    today: Optional[dt.date] = None,
    months: int = 6,
) -> List[Dict[str, Any]]:
    today = today or timezone.localdate()
    rows = []
    for start, end in _last_months(today, months):
        row = {
            "month": start.strftime("%b %Y"),
            "tasks": _tasks(publisher)
            .filter(status=TaskProgress.Status.COMPLETED, completed_on__range=(start, end))
            .count(),
            "books": _books(publisher)
            .filter(status=Book.Status.PUBLISHED, actual_print_date__range=(start, end))
            .count(),
        }
        if publisher is not None:
            row["manuscripts"] = (
                Manuscript.objects
                .filter(target_publishers__publisher=publisher, submitted_at__date__range=(start, end))
                .distinct()
                .count()
            )
        rows.append(row)
    return rows


def workload_distribution(publisher: Optional[Publisher] = None, *, today: Optional[dt.date] = None) -> List[Dict[str, Any]]:
    """Per PIC with at least one open task, busiest first."""
    today = today or timezone.localdate()
    open_statuses = [TaskProgress.Status.PENDING, TaskProgress.Status.IN_PROGRESS]
    rows = (
        _tasks(publisher)
        .filter(pic__isnull=False)
        .values("pic_id", "pic__full_name", "pic__username")
        .annotate(
            active_tasks=Count("id", filter=Q(status__in=open_statuses)),
            completed_tasks=Count("id", filter=Q(status=TaskProgress.Status.COMPLETED)),
            overdue_tasks=Count(
                "id",
                filter=Q(deadline__isnull=False, deadline__lt=today) & ~Q(status=TaskProgress.Status.COMPLETED),
            ),
        )
        .filter(active_tasks__gt=0)
        .order_by("-active_tasks", "pic_id")
    )
    return [
        {
            "user_id": r["pic_id"],
            "name": r["pic__full_name"] or r["pic__username"],
            "active_tasks": r["active_tasks"],
            "completed_tasks": r["completed_tasks"],
            "overdue_tasks": r["overdue_tasks"],
        }
        for r in rows
    ]


def top_performers(publisher: Optional[Publisher] = None, *, today: Optional[dt.date] = None, limit: int = 10) -> List[Dict[str, Any]]:
    today = today or timezone.localdate()
    rows = (
        _tasks(publisher)
        .filter(pic__isnull=False)
        .values("pic_id", "pic__full_name", "pic__username")
        .annotate(
            total_tasks=Count("id"),
            completed_tasks=Count("id", filter=Q(status=TaskProgress.Status.COMPLETED)),
            overdue_tasks=Count(
                "id",
                filter=Q(deadline__isnull=False, deadline__lt=today) & ~Q(status=TaskProgress.Status.COMPLETED),
            ),
            books_involved=Count("book_id", distinct=True),
        )
        .filter(total_tasks__gte=TOP_PERFORMER_MIN_TASKS)
        .order_by()
    )

    out = []
    for r in rows:
        finished = _tasks(publisher).filter(
            pic_id=r["pic_id"], completed_on__isnull=False, started_on__isnull=False
        ).values_list("started_on", "completed_on")
        durations = [(done - start).days for start, done in finished]
        rate = _pct(r["completed_tasks"], r["total_tasks"])
        out.append(
            {
                "user_id": r["pic_id"],
                "name": r["pic__full_name"] or r["pic__username"],
                "total_tasks": r["total_tasks"],
                "completed_tasks": r["completed_tasks"],
                "overdue_tasks": r["overdue_tasks"],
                "books_involved": r["books_involved"],
                "completion_rate": rate,
                "avg_completion_days": round(sum(durations) / len(durations), 1) if durations else 0.0,
                "efficiency_score": rate - r["overdue_tasks"] * 10,
            }
        )
    out.sort(key=lambda row: row["completion_rate"], reverse=True)
    return out[:limit]


def deadline_performance(
    publisher: Optional[Publisher] = None,
    *,
    today: Optional[dt.date] = None,
    warning_days: int = 7,
) -> Dict[str, int]:
    today = today or timezone.localdate()
    tasks = _tasks(publisher)
    done = tasks.filter(
        status=TaskProgress.Status.COMPLETED, deadline__isnull=False, completed_on__isnull=False
    )
    return {
        "on_time": done.filter(completed_on__lte=F("deadline")).count(),
        "late": done.filter(completed_on__gt=F("deadline")).count(),
        "upcoming": tasks.filter(
            status__in=[TaskProgress.Status.PENDING, TaskProgress.Status.IN_PROGRESS],
            deadline__gt=today,
            deadline__lte=today + dt.timedelta(days=warning_days),
        ).count(),
        "overdue": _overdue(tasks, today).count(),
    }


def stage_performance(publisher: Optional[Publisher] = None) -> List[Dict[str, Any]]:
    scope = Q(progress_rows__book__publisher=publisher) if publisher is not None else Q()
    rows = (
        MasterTask.objects
        .annotate(
            total_tasks=Count("progress_rows", filter=scope),
            completed_tasks=Count(
                "progress_rows",
                filter=scope & Q(progress_rows__status=TaskProgress.Status.COMPLETED),
            ),
        )
        .order_by("order", "id")
    )
    return [
        {
            "task_id": t.pk,
            "name": t.name,
            "order": t.order,
            "total_tasks": t.total_tasks,
            "completed_tasks": t.completed_tasks,
            "completion_rate": _pct(t.completed_tasks, t.total_tasks),
        }
        for t in rows
    ]


def genre_distribution(publisher: Optional[Publisher] = None) -> List[Dict[str, Any]]:
    rows = list(
        _books(publisher)
        .filter(status=Book.Status.PUBLISHED)
        .values("manuscript__genre")
        .annotate(n=Count("id"))
        .order_by("-n")
    )
    total = sum(r["n"] for r in rows)
    return [
        {"name": r["manuscript__genre"] or "Lainnya", "value": r["n"], "percentage": _pct(r["n"], total)}
        for r in rows
    ]


def build_analytics(user, *, today: Optional[dt.date] = None, warning_days: int = 7) -> Dict[str, Any]:
    """Full payload. Staff bound to a publisher only see that publisher."""
    today = today or timezone.localdate()
    publisher = getattr(user, "publisher", None) if getattr(user, "publisher_id", None) else None

    data: Dict[str, Any] = {
        "scope": {"publisher_id": publisher.pk, "publisher_name": publisher.name} if publisher else None,
        "metrics": dashboard_metrics(publisher, today=today),
        "book_status_distribution": book_status_distribution(publisher),
        "monthly_productivity": monthly_productivity(publisher, today=today),
        "workload_distribution": workload_distribution(publisher, today=today),
        "deadline_performance": deadline_performance(publisher, today=today, warning_days=warning_days),
        "publishing_targets": yearly_target_summary(category=Target.Category.PUBLISH, publisher=publisher),
    }
    if publisher is None:
        data["top_performers"] = top_performers(today=today)
    else:
        data["stage_performance"] = stage_performance(publisher)
        data["genre_distribution"] = genre_distribution(publisher)
    return data
