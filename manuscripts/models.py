# -*- coding: utf-8 -*-
# manuscripts/models.py

from __future__ import annotations

import os
import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


def manuscript_upload_to(instance: "Manuscript", filename: str) -> str:
    """
    Store under:
      media/manuscripts/<user_id>/<uuid>.pdf
    """
    _base, ext = os.path.splitext(filename or "")
    safe_name = f"{uuid.uuid4().hex}{(ext or '.pdf').lower()}"
    return f"manuscripts/{instance.submitted_by_id}/{safe_name}"


class Manuscript(models.Model):
    """
    A submitted manuscript.
    REVIEW until a manager approves (becomes a Book) or cancels it.
    """

    class Status(models.TextChoices):
        REVIEW = "review", "Menunggu review"
        APPROVED = "approved", "Disetujui"
        CANCELED = "canceled", "Ditolak"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="manuscripts",
    )

    title = models.CharField(max_length=255)
    synopsis = models.TextField(blank=True, default="")
    genre = models.CharField(max_length=100, blank=True, default="")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.REVIEW)

    file = models.FileField(upload_to=manuscript_upload_to, max_length=255)

    # Marketing data, reader segment and decision audit trail
    extra_info = models.JSONField(default=dict, blank=True)

    submitted_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="manuscript_status_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def reader_segment(self) -> str:
        return (self.extra_info or {}).get("reader_segment", "")

    def primary_author(self):
        link = self.author_links.filter(role=ManuscriptAuthor.Role.PRIMARY).select_related("author").first()
        return link.author if link else None


class Author(models.Model):
    """
    Person credited on a manuscript.
    `user` is NULL for external co-authors.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="author_records",
    )

    full_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default="")
    nik = models.CharField(max_length=50, blank=True, default="")
    address = models.TextField(blank=True, default="")
    phone = models.CharField(max_length=25, blank=True, default="")
    education = models.CharField(max_length=255, blank=True, default="")
    activities = models.TextField(blank=True, default="")
    published_writing = models.TextField(blank=True, default="")
    other_books = models.TextField(blank=True, default="")
    social_media = models.JSONField(default=dict, blank=True)
    network = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["full_name", "email"], name="author_name_email_idx"),
        ]

    def __str__(self) -> str:
        return self.full_name


class ManuscriptAuthor(models.Model):
    class Role(models.TextChoices):
        PRIMARY = "primary", "Penulis utama"
        CO_AUTHOR = "co_author", "Penulis pendamping"

    manuscript = models.ForeignKey(Manuscript, on_delete=models.CASCADE, related_name="author_links")
    author = models.ForeignKey(Author, on_delete=models.CASCADE, related_name="manuscript_links")
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.PRIMARY)
    position = models.PositiveSmallIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=("manuscript", "author"), name="uniq_manuscript_author"),
        ]

    def __str__(self) -> str:
        return f"{self.manuscript_id}:{self.author_id}:{self.role}"


class ManuscriptTargetPublisher(models.Model):
    """
    Publisher the author asked for. Priority 1 always exists; priority 2 is optional.
    """

    manuscript = models.ForeignKey(Manuscript, on_delete=models.CASCADE, related_name="target_publishers")
    publisher = models.ForeignKey(
        "publishers.Publisher",
        on_delete=models.CASCADE,
        related_name="manuscript_targets",
    )
    priority = models.PositiveSmallIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["priority"]
        constraints = [
            models.UniqueConstraint(fields=("manuscript", "publisher"), name="uniq_manuscript_publisher"),
            models.UniqueConstraint(fields=("manuscript", "priority"), name="uniq_manuscript_priority"),
        ]

    def __str__(self) -> str:
        return f"{self.manuscript_id} -> {self.publisher_id} (P{self.priority})"


# Stored inside Manuscript.extra_info["reader_segment"]
READER_SEGMENT_CHOICES = [
    ("semua", "Semua Umur"),
    ("remaja", "Remaja"),
    ("dewasa", "Dewasa"),
    ("anak", "Anak-anak"),
    ("orangtua", "Orang Tua"),
]
