# -*- coding: utf-8 -*-
# production/models.py

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import models


class MasterTask(models.Model):
    """
    One production stage (editing, layout, cover, ...).
    `order` defines the pipeline; every approved book gets one TaskProgress per stage.
    """

    name = models.CharField(max_length=255)
    order = models.PositiveIntegerField(default=1)
    estimated_days = models.PositiveIntegerField(default=7)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return self.name


class Book(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "Belum mulai"
        EDITING = "editing", "Dalam proses"
        REVIEW = "review", "Review akhir"
        PUBLISHED = "published", "Terbit"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    manuscript = models.OneToOneField(
        "manuscripts.Manuscript",
        on_delete=models.CASCADE,
        related_name="book",
    )
    title = models.CharField(max_length=255)

    pic = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="books_as_pic",
    )
    publisher = models.ForeignKey(
        "publishers.Publisher",
        on_delete=models.PROTECT,
        related_name="books",
    )

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    target_print_date = models.DateField()
    actual_print_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["target_print_date", "title"]
        indexes = [
            models.Index(fields=["status"], name="book_status_idx"),
            models.Index(fields=["publisher", "status"], name="book_publisher_status_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class TaskProgress(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Belum mulai"
        IN_PROGRESS = "in_progress", "Dikerjakan"
        COMPLETED = "completed", "Selesai"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name="tasks")
    task = models.ForeignKey(MasterTask, on_delete=models.CASCADE, related_name="progress_rows")
    pic = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="task_assignments",
    )

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    started_on = models.DateField(null=True, blank=True)
    deadline = models.DateField(null=True, blank=True)
    completed_on = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["task__order", "task_id"]
        constraints = [
            models.UniqueConstraint(fields=("book", "task"), name="uniq_book_task"),
        ]
        indexes = [
            models.Index(fields=["status", "deadline"], name="taskprogress_status_dl_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.book_id}:{self.task_id}:{self.status}"
