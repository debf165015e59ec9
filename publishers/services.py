# -*- coding: utf-8 -*-
# publishers/services.py
# Purpose:
# Targets vs. realised books (published, by actual print date).

from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.db.models import Count, Max, Q, Sum

from production.models import Book
from publishers.models import Publisher, Target


def _pct(done: int, target: int) -> int:
    return round(done * 100 / target) if target > 0 else 0


def _published(publisher: Optional[Publisher] = None):
    qs = Book.objects.filter(status=Book.Status.PUBLISHED, actual_print_date__isnull=False)
    if publisher is not None:
        qs = qs.filter(publisher=publisher)
    return qs


def _targets(publisher: Optional[Publisher] = None):
    qs = Target.objects.all()
    if publisher is not None:
        qs = qs.filter(publisher=publisher)
    return qs


def target_progress(
    *,
    year: int,
    month: int,
    category: str = Target.Category.PUBLISH,
    publisher: Optional[Publisher] = None,
) -> Dict[str, int]:
    """
    yearly:  sum of annual targets vs books published in `year`
    ytd:     monthly targets up to `month` vs books published up to `month`
    """
    targets = _targets(publisher).filter(year=year, category=category)
    yearly_target = targets.filter(target_type=Target.Type.ANNUAL).aggregate(s=Sum("amount"))["s"] or 0
    ytd_target = (
        targets.filter(target_type=Target.Type.MONTHLY, month__lte=month).aggregate(s=Sum("amount"))["s"] or 0
    )

    published = _published(publisher).filter(actual_print_date__year=year)
    yearly_done = published.count()
    ytd_done = published.filter(actual_print_date__month__lte=month).count()

    return {
        "yearly_target": yearly_target,
        "yearly_realised": yearly_done,
        "yearly_percentage": _pct(yearly_done, yearly_target),
        "ytd_target": ytd_target,
        "ytd_realised": ytd_done,
        "avg_books_per_month": round(ytd_done / month) if month > 0 else 0,
    }


def monthly_progress(
    *,
    year: int,
    category: str = Target.Category.PUBLISH,
    publisher: Optional[Publisher] = None,
) -> List[Dict[str, int]]:
    """Twelve rows: monthly target and books finished that month."""
    targets = dict(
        _targets(publisher)
        .filter(year=year, category=category, target_type=Target.Type.MONTHLY)
        .values("month")
        .annotate(s=Sum("amount"))
        .order_by()
        .values_list("month", "s")
    )
    done = dict(
        _published(publisher)
        .filter(actual_print_date__year=year)
        .values("actual_print_date__month")
        .annotate(n=Count("id"))
        .order_by()
        .values_list("actual_print_date__month", "n")
    )
    return [{"month": m, "target": targets.get(m, 0) or 0, "realised": done.get(m, 0)} for m in range(1, 13)]


def yearly_target_summary(
    *,
    category: str = Target.Category.PUBLISH,
    publisher: Optional[Publisher] = None,
) -> List[Dict[str, Any]]:
    """
    One row per (year, publisher). Percentage is against the annual target,
    or against the sum of monthly targets when no annual target exists.
    """
    grouped = (
        _targets(publisher)
        .filter(category=category)
        .values("year", "publisher_id", "publisher__name")
        .annotate(
            annual=Max("amount", filter=Q(target_type=Target.Type.ANNUAL)),
            monthly_total=Sum("amount", filter=Q(target_type=Target.Type.MONTHLY)),
            months_with_target=Count("id", filter=Q(target_type=Target.Type.MONTHLY)),
        )
        .order_by("-year", "publisher__name")
    )

    rows: List[Dict[str, Any]] = []
    for g in grouped:
        realised = (
            Book.objects
            .filter(
                publisher_id=g["publisher_id"],
                status=Book.Status.PUBLISHED,
                actual_print_date__year=g["year"],
            )
            .count()
        )
        annual = g["annual"] or 0
        monthly_total = g["monthly_total"] or 0
        basis = annual or monthly_total
        rows.append(
            {
                "year": g["year"],
                "publisher_id": g["publisher_id"],
                "publisher_name": g["publisher__name"],
                "annual_target": annual,
                "monthly_target_total": monthly_total,
                "months_with_target": g["months_with_target"],
                "realised": realised,
                "percentage": _pct(realised, basis),
            }
        )
    return rows
