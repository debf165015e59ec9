# -*- coding: utf-8 -*-
# production/views.py

from __future__ import annotations

from django.conf import settings
from django.contrib import messages
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from accounts.models import Role
from accounts.services_roles import role_required
from production.forms import MasterTaskForm, TaskProgressForm
from production.models import Book, MasterTask, TaskProgress
from production.services import (
    TaskOrderError,
    add_master_task,
    book_stats,
    books_by_stage,
    is_overdue,
    progress_percentage,
    reorder_tasks,
    update_task_progress,
)

_staff = role_required(Role.Name.MANAGER, Role.Name.EDITOR)
_managers = role_required(Role.Name.MANAGER)


# ------------------------------------------------------------
# Master tasks
# ------------------------------------------------------------

@_managers
def task_list(request):
    return render(
        request,
        "production/task_list.html",
        {"tasks": MasterTask.objects.order_by("order", "id"), "form": MasterTaskForm()},
    )


@_managers
@require_POST
def task_create(request):
    form = MasterTaskForm(request.POST)
    if form.is_valid():
        add_master_task(form.cleaned_data["name"], estimated_days=form.cleaned_data["estimated_days"])
        messages.success(request, "Task berhasil ditambahkan.")
    else:
        messages.error(request, "Nama tugas wajib diisi.")
    return redirect("production:task_list")


@_managers
@require_POST
def task_update(request, task_id: int):
    task = get_object_or_404(MasterTask, pk=task_id)
    form = MasterTaskForm(request.POST, instance=task)
    if form.is_valid():
        form.save()
        messages.success(request, "Task berhasil diperbarui.")
    else:
        messages.error(request, "Nama tugas wajib diisi.")
    return redirect("production:task_list")


@_managers
@require_POST
def task_delete(request, task_id: int):
    task = get_object_or_404(MasterTask, pk=task_id)
    try:
        task.delete()
    except ProtectedError:
        messages.error(request, "Task masih dipakai.")
    else:
        messages.success(request, "Task berhasil dihapus.")
    return redirect("production:task_list")


@_managers
@require_POST
def task_reorder(request):
    try:
        reorder_tasks(request.POST.getlist("task_ids"))
    except (TaskOrderError, ValueError) as exc:
        messages.error(request, f"Gagal memperbarui urutan task. {exc}".strip())
    else:
        messages.success(request, "Urutan task berhasil diperbarui.")
    return redirect("production:task_list")


# ------------------------------------------------------------
# Books
# ------------------------------------------------------------

@_staff
def book_list(request):
    books = (
        Book.objects
        .select_related("manuscript", "pic", "publisher")
        .prefetch_related("tasks")
    )
    rows = [{"book": b, "progress": progress_percentage(b)} for b in books]
    warning_days = int(getattr(settings, "PRESSROOM_DEADLINE_WARNING_DAYS", 7))
    return render(
        request,
        "production/book_list.html",
        {"rows": rows, "stats": book_stats(warning_days=warning_days)},
    )


@_staff
def progress_board(request):
    return render(request, "production/progress_board.html", {"board": books_by_stage()})


@_staff
def book_detail(request, book_id):
    book = get_object_or_404(
        Book.objects.select_related("manuscript", "pic", "publisher"),
        pk=book_id,
    )
    tasks = book.tasks.select_related("task", "pic").order_by("task__order", "task_id")
    rows = [
        {"progress": t, "form": TaskProgressForm(instance=t, prefix=str(t.pk)), "overdue": is_overdue(t)}
        for t in tasks
    ]
    return render(
        request,
        "production/book_detail.html",
        {"book": book, "rows": rows, "percentage": progress_percentage(book)},
    )


@_staff
@require_POST
def task_progress_update(request, progress_id):
    progress = get_object_or_404(TaskProgress.objects.select_related("book"), pk=progress_id)
    # ModelForm validation writes into its instance; keep `progress` untouched for the status diff.
    scratch = TaskProgress.objects.get(pk=progress.pk)
    form = TaskProgressForm(request.POST, instance=scratch, prefix=str(progress.pk))
    if not form.is_valid():
        messages.error(request, "Data task tidak valid.")
        return redirect("production:book_detail", book_id=progress.book_id)

    cd = form.cleaned_data
    update_task_progress(
        progress,
        status=cd["status"],
        pic=cd.get("pic"),
        deadline=cd.get("deadline"),
        notes=cd.get("notes") or "",
    )
    messages.success(request, "Progres task diperbarui.")
    return redirect("production:book_detail", book_id=progress.book_id)
