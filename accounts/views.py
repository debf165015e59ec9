# -*- coding: utf-8 -*-
# accounts/views.py

from __future__ import annotations

import datetime as dt
import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth import get_user_model
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import ProtectedError, Q
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from accounts.forms import UserCreateForm, UserUpdateForm
from accounts.models import Role
from accounts.services_roles import CONTRIBUTOR_ROLES, has_role, is_staff_member, role_required
from manuscripts.models import Manuscript
from production.models import Book
from production.services import book_stats, progress_percentage

User = get_user_model()

_SECURITY_LOG = logging.getLogger("pressroom.security")

_managers = role_required(Role.Name.MANAGER)

_SORTABLE = {"full_name", "email", "date_joined"}
_PER_PAGE = 10


# ------------------------------------------------------------
# Dashboard
# ------------------------------------------------------------

@login_required
def dashboard(request):
    user = request.user

    if not is_staff_member(user):
        manuscripts = (
            Manuscript.objects
            .filter(submitted_by=user)
            .prefetch_related("target_publishers__publisher")
            .order_by("-created_at")
        )
        return render(
            request,
            "accounts/dashboard_author.html",
            {
                "manuscripts": manuscripts,
                "can_submit": has_role(user, *CONTRIBUTOR_ROLES),
            },
        )

    warning_days = int(getattr(settings, "PRESSROOM_DEADLINE_WARNING_DAYS", 7))
    today = timezone.localdate()
    books = (
        Book.objects
        .select_related("manuscript", "pic", "publisher")
        .prefetch_related("tasks")
    )
    near_deadline = (
        books.filter(target_print_date__lt=today + dt.timedelta(days=warning_days))
        .exclude(status=Book.Status.PUBLISHED)
        .order_by("target_print_date")
    )

    return render(
        request,
        "accounts/dashboard_staff.html",
        {
            "stats": book_stats(today=today, warning_days=warning_days),
            "rows": [{"book": b, "progress": progress_percentage(b)} for b in books],
            "near_deadline": near_deadline,
        },
    )


# ------------------------------------------------------------
# Shared list helpers
# ------------------------------------------------------------

def _list_params(request):
    q = (request.GET.get("q") or "").strip()
    sort = request.GET.get("sort") or "full_name"
    if sort not in _SORTABLE:
        sort = "full_name"
    direction = "desc" if request.GET.get("dir") == "desc" else "asc"
    return q, sort, direction


def _filtered_users(qs, q: str, sort: str, direction: str):
    if q:
        qs = qs.filter(Q(full_name__icontains=q) | Q(email__icontains=q))
    return qs.order_by(("-" if direction == "desc" else "") + sort, "pk")


def _form_errors(form) -> str:
    return " ".join(m for msgs in form.errors.values() for m in msgs)


def _delete_user(request, target) -> bool:
    target_id = target.pk
    try:
        target.delete()
    except ProtectedError:
        messages.error(request, "User masih menjadi PIC buku dan tidak dapat dihapus.")
        return False
    _SECURITY_LOG.info("user deleted id=%s by=%s", target_id, request.user.pk)
    return True


# ------------------------------------------------------------
# User management (authors and translators)
# ------------------------------------------------------------

def _contributors():
    return User.objects.filter(user_roles__role__name__in=CONTRIBUTOR_ROLES).distinct()


@_managers
def user_list(request):
    q, sort, direction = _list_params(request)
    qs = _filtered_users(_contributors().prefetch_related("user_roles__role"), q, sort, direction)
    page = Paginator(qs, _PER_PAGE).get_page(request.GET.get("page"))
    return render(
        request,
        "accounts/user_list.html",
        {
            "page": page,
            "filters": {"q": q, "sort": sort, "dir": direction},
            "create_form": UserCreateForm(allowed_roles=CONTRIBUTOR_ROLES),
        },
    )


@_managers
@require_POST
def user_create(request):
    form = UserCreateForm(request.POST, allowed_roles=CONTRIBUTOR_ROLES)
    if form.is_valid():
        form.save()
        messages.success(request, "User berhasil ditambahkan.")
    else:
        messages.error(request, _form_errors(form))
    return redirect("accounts:user_list")


@_managers
def user_update(request, user_id: int):
    target = get_object_or_404(_contributors(), pk=user_id)
    form = UserUpdateForm(
        request.POST or None,
        instance=target,
        allowed_roles=CONTRIBUTOR_ROLES,
        initial={
            "full_name": target.full_name,
            "email": target.email,
            "roles": [r for r in target.user_roles.values_list("role__name", flat=True) if r in CONTRIBUTOR_ROLES],
        },
    )
    if request.method == "POST":
        if form.is_valid():
            form.save()
            messages.success(request, "User berhasil diupdate.")
            return redirect("accounts:user_list")
    return render(request, "accounts/user_form.html", {"form": form, "target": target, "back": "accounts:user_list"})


@_managers
@require_POST
def user_delete(request, user_id: int):
    target = _contributors().filter(pk=user_id).first()
    if target is None:
        messages.error(request, "User tidak dapat dihapus.")
        return redirect("accounts:user_list")
    if not _delete_user(request, target):
        return redirect("accounts:user_list")
    messages.success(request, "User berhasil dihapus.")
    return redirect("accounts:user_list")


# ------------------------------------------------------------
# Team management (everyone, any role)
# ------------------------------------------------------------

@_managers
def team_list(request):
    q, sort, direction = _list_params(request)
    qs = _filtered_users(User.objects.prefetch_related("user_roles__role"), q, sort, direction)
    page = Paginator(qs, _PER_PAGE).get_page(request.GET.get("page"))
    return render(
        request,
        "accounts/team_list.html",
        {
            "page": page,
            "filters": {"q": q, "sort": sort, "dir": direction},
            "create_form": UserCreateForm(),
        },
    )


@_managers
@require_POST
def team_create(request):
    form = UserCreateForm(request.POST)
    if form.is_valid():
        form.save()
        messages.success(request, "User berhasil ditambahkan.")
    else:
        messages.error(request, _form_errors(form))
    return redirect("accounts:team_list")


@_managers
def team_update(request, user_id: int):
    target = get_object_or_404(User, pk=user_id)
    form = UserUpdateForm(
        request.POST or None,
        instance=target,
        initial={
            "full_name": target.full_name,
            "email": target.email,
            "roles": list(target.user_roles.values_list("role__name", flat=True)),
        },
    )
    if request.method == "POST":
        if form.is_valid():
            form.save()
            messages.success(request, "User berhasil diupdate.")
            return redirect("accounts:team_list")
    return render(request, "accounts/user_form.html", {"form": form, "target": target, "back": "accounts:team_list"})


@_managers
@require_POST
def team_delete(request, user_id: int):
    target = get_object_or_404(User, pk=user_id)
    if target.user_roles.filter(role__name=Role.Name.MANAGER).exists() or target.is_superuser:
        messages.error(request, "Tidak dapat menghapus user dengan role manajer.")
        return redirect("accounts:team_list")
    if target.pk == request.user.pk:
        messages.error(request, "Tidak dapat menghapus akun sendiri.")
        return redirect("accounts:team_list")
    if not _delete_user(request, target):
        return redirect("accounts:team_list")
    messages.success(request, "User berhasil dihapus.")
    return redirect("accounts:team_list")
