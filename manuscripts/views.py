# -*- coding: utf-8 -*-
# manuscripts/views.py
#
# Author-facing pages: my manuscripts, one manuscript.

from __future__ import annotations

from django.contrib.auth.decorators import login_required
from django.shortcuts import get_object_or_404, render

from manuscripts.models import Manuscript


@login_required
def submission_list(request):
    manuscripts = (
        Manuscript.objects
        .filter(submitted_by=request.user)
        .prefetch_related("target_publishers__publisher")
        .order_by("-created_at")
    )
    return render(request, "manuscripts/submission_list.html", {"manuscripts": manuscripts})


@login_required
def submission_detail(request, manuscript_id):
    # Only the author sees their own manuscript here; managers use the approval pages.
    manuscript = get_object_or_404(
        Manuscript.objects.select_related("submitted_by", "submitted_by__profile"),
        pk=manuscript_id,
        submitted_by=request.user,
    )
    return render(
        request,
        "manuscripts/submission_detail.html",
        {
            "manuscript": manuscript,
            "targets": manuscript.target_publishers.select_related("publisher"),
            "authors": manuscript.author_links.select_related("author"),
            "info": manuscript.extra_info or {},
        },
    )
