# -*- coding: utf-8 -*-
# manuscripts/views_approval.py
#
# Manager / editorial review queue.

from __future__ import annotations

import logging

from django.contrib import messages
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from accounts.models import Role
from accounts.services_roles import role_required
from manuscripts.forms import ApprovalFilterForm, ApproveManuscriptForm, RejectManuscriptForm
from manuscripts.models import Manuscript
from manuscripts.services_approval import (
    ApprovalError,
    approval_queryset,
    approval_stats,
    approve_manuscript,
    bulk_decide,
    reject_manuscript,
)

logger = logging.getLogger("pressroom.approvals")

_reviewers = role_required(Role.Name.MANAGER, Role.Name.EDITOR)
_deciders = role_required(Role.Name.MANAGER)


@_reviewers
def approval_list(request):
    status = (request.GET.get("status") or "all").strip()
    search = (request.GET.get("search") or "").strip()

    return render(
        request,
        "manuscripts/approval_list.html",
        {
            "manuscripts": approval_queryset(status=status, search=search),
            "stats": approval_stats(),
            "filter_form": ApprovalFilterForm(initial={"status": status, "search": search}),
            "filters": {"status": status, "search": search},
        },
    )


def _detail_context(manuscript, approve_form=None, reject_form=None):
    return {
        "manuscript": manuscript,
        "targets": manuscript.target_publishers.select_related("publisher"),
        "authors": manuscript.author_links.select_related("author"),
        "info": manuscript.extra_info or {},
        "approve_form": approve_form or ApproveManuscriptForm(manuscript=manuscript),
        "reject_form": reject_form or RejectManuscriptForm(),
        "is_pending": manuscript.status == Manuscript.Status.REVIEW,
    }


@_reviewers
def approval_detail(request, manuscript_id):
    manuscript = get_object_or_404(Manuscript.objects.select_related("submitted_by"), pk=manuscript_id)
    return render(request, "manuscripts/approval_detail.html", _detail_context(manuscript))


@_deciders
@require_POST
def approve(request, manuscript_id):
    manuscript = get_object_or_404(Manuscript, pk=manuscript_id)
    form = ApproveManuscriptForm(request.POST, manuscript=manuscript)
    if not form.is_valid():
        return render(
            request,
            "manuscripts/approval_detail.html",
            _detail_context(manuscript, approve_form=form),
            status=400,
        )

    cd = form.cleaned_data
    try:
        approve_manuscript(
            manuscript,
            by=request.user,
            publisher=cd["publisher"],
            pic=cd["pic"],
            target_print_date=cd["target_print_date"],
            note=cd.get("note") or "",
        )
    except ApprovalError as exc:
        messages.error(request, str(exc))
        return redirect("manuscripts:approval_detail", manuscript_id=manuscript.pk)

    messages.success(request, "Naskah berhasil diapprove dan dibuat menjadi proyek buku.")
    return redirect("manuscripts:approval_list")


@_deciders
@require_POST
def reject(request, manuscript_id):
    manuscript = get_object_or_404(Manuscript, pk=manuscript_id)
    form = RejectManuscriptForm(request.POST)
    if not form.is_valid():
        return render(
            request,
            "manuscripts/approval_detail.html",
            _detail_context(manuscript, reject_form=form),
            status=400,
        )

    try:
        reject_manuscript(manuscript, by=request.user, reason=form.cleaned_data["reason"])
    except ApprovalError as exc:
        messages.error(request, str(exc))
        return redirect("manuscripts:approval_detail", manuscript_id=manuscript.pk)

    messages.success(request, "Naskah berhasil ditolak.")
    return redirect("manuscripts:approval_list")


@_deciders
@require_POST
def approval_bulk(request):
    action = (request.POST.get("action") or "").strip()
    ids = request.POST.getlist("manuscript_ids")
    try:
        count = bulk_decide(ids, action, by=request.user)
    except ApprovalError as exc:
        messages.error(request, str(exc))
    else:
        label = "disetujui" if action == "approve" else "ditolak"
        messages.success(request, f"{count} naskah berhasil {label}.")
    return redirect("manuscripts:approval_list")
