# -*- coding: utf-8 -*-
# publishers/views.py

from __future__ import annotations

from django.contrib import messages
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from accounts.models import Role
from accounts.services_roles import role_required
from publishers.forms import PublisherForm, TargetForm
from publishers.models import Publisher, Target
from publishers.services import monthly_progress, target_progress, yearly_target_summary

_managers = role_required(Role.Name.MANAGER)


@_managers
def publisher_list(request):
    return render(request, "publishers/publisher_list.html", {"publishers": Publisher.objects.order_by("name")})


@_managers
def publisher_create(request):
    form = PublisherForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        form.save()
        messages.success(request, "Penerbit berhasil ditambahkan.")
        return redirect("publishers:list")
    return render(request, "publishers/publisher_form.html", {"form": form, "publisher": None})


@_managers
def publisher_edit(request, publisher_id: int):
    publisher = get_object_or_404(Publisher, pk=publisher_id)
    form = PublisherForm(request.POST or None, instance=publisher)
    if request.method == "POST" and form.is_valid():
        form.save()
        messages.success(request, "Penerbit berhasil diperbarui.")
        return redirect("publishers:list")
    return render(request, "publishers/publisher_form.html", {"form": form, "publisher": publisher})


@_managers
@require_POST
def publisher_delete(request, publisher_id: int):
    publisher = get_object_or_404(Publisher, pk=publisher_id)
    try:
        publisher.delete()
    except ProtectedError:
        messages.error(request, "Penerbit masih memiliki buku dan tidak dapat dihapus.")
    else:
        messages.success(request, "Penerbit berhasil dihapus.")
    return redirect("publishers:list")


def _int_param(request, name: str, default: int) -> int:
    try:
        return int(request.GET.get(name, default))
    except (TypeError, ValueError):
        return default


@_managers
def target_list(request):
    today = timezone.localdate()
    year = _int_param(request, "year", today.year)
    month = _int_param(request, "month", today.month)
    category = request.GET.get("category") or Target.Category.PUBLISH
    if category not in Target.Category.values:
        category = Target.Category.PUBLISH

    publisher = request.user.publisher if request.user.publisher_id else None

    return render(
        request,
        "publishers/target_list.html",
        {
            "targets": Target.objects.select_related("publisher").filter(category=category),
            "form": TargetForm(initial={"year": year, "category": category}),
            "progress": target_progress(year=year, month=month, category=category, publisher=publisher),
            "monthly": monthly_progress(year=year, category=category, publisher=publisher),
            "summary": yearly_target_summary(category=category, publisher=publisher),
            "filters": {"year": year, "month": month, "category": category},
            "categories": Target.Category.choices,
        },
    )


@_managers
@require_POST
def target_create(request):
    form = TargetForm(request.POST)
    if form.is_valid():
        form.save()
        messages.success(request, "Target berhasil disimpan.")
    else:
        errors = [m for msgs in form.errors.values() for m in msgs]
        messages.error(request, " ".join(errors))
    return redirect("publishers:targets")


@_managers
@require_POST
def target_delete(request, target_id: int):
    get_object_or_404(Target, pk=target_id).delete()
    messages.success(request, "Target berhasil dihapus.")
    return redirect("publishers:targets")
