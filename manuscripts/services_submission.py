# -*- coding: utf-8 -*-
# manuscripts/services_submission.py
# Purpose:
# The manuscript store endpoint as a service: server-side rules, one
# transaction, manager notification. Also stages wizard uploads between steps.

from __future__ import annotations

import datetime as dt
import logging
import os
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional

from django import forms
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import UploadedFile
from django.db import transaction
from django.utils import timezone

from accounts.models import UserProfile
from manuscripts.models import (
    READER_SEGMENT_CHOICES,
    Author,
    Manuscript,
    ManuscriptAuthor,
    ManuscriptTargetPublisher,
)
from manuscripts.services.wizard_flow import SubmissionRejected
from manuscripts.services.wizard_state import STEP_TEXT_FIELDS, FormState, StagedFile
from notifications.services import notify_new_submission
from publishers.models import Publisher

logger = logging.getLogger("pressroom.submissions")

STAGING_DIR = "manuscripts/staging"
_PDF_MAGIC = b"%PDF"


def _max_bytes() -> int:
    return int(getattr(settings, "PRESSROOM_MAX_MANUSCRIPT_BYTES", 50 * 1024 * 1024))


def _req(msg: str) -> Dict[str, str]:
    return {"required": msg}


class ManuscriptSubmissionForm(forms.Form):
    # Step 1
    publisher_1 = forms.ModelChoiceField(
        queryset=Publisher.objects.all(),
        error_messages={"required": "Pilih minimal 1 penerbit.", "invalid_choice": "Penerbit tidak ditemukan."},
    )
    publisher_2 = forms.ModelChoiceField(
        queryset=Publisher.objects.all(),
        required=False,
        error_messages={"invalid_choice": "Penerbit prioritas 2 tidak ditemukan."},
    )

    # Step 2
    title = forms.CharField(max_length=255, error_messages=_req("Judul naskah wajib diisi."))
    synopsis = forms.CharField(error_messages=_req("Sinopsis wajib diisi."))
    category = forms.CharField(max_length=100, error_messages=_req("Kategori/Genre wajib diisi."))
    keywords = forms.CharField(max_length=255, required=False)
    page_count = forms.CharField(max_length=50, required=False)
    primary_readers = forms.CharField(max_length=255, required=False)
    secondary_readers = forms.CharField(max_length=255, required=False)
    reader_segment = forms.ChoiceField(
        choices=READER_SEGMENT_CHOICES,
        error_messages={"required": "Segmen pembaca wajib dipilih.", "invalid_choice": "Segmen pembaca tidak valid."},
    )
    selling_point = forms.CharField(required=False)
    bonus_addon = forms.CharField(required=False)
    advantages = forms.CharField(required=False)
    media_adaptation = forms.CharField(required=False)
    manuscript_file = forms.FileField(error_messages=_req("File PDF wajib diunggah."))

    # Step 3
    author_name = forms.CharField(max_length=255, error_messages=_req("Nama penulis wajib diisi."))
    co_author_name = forms.CharField(max_length=255, required=False)
    nik = forms.CharField(max_length=50, error_messages=_req("NIK penulis wajib diisi."))
    address = forms.CharField(required=False)
    phone = forms.CharField(max_length=25, error_messages=_req("Nomor HP wajib diisi."))
    email = forms.EmailField(
        max_length=255,
        error_messages={"required": "Email wajib diisi.", "invalid": "Format email tidak valid."},
    )
    education = forms.CharField(max_length=255, required=False)
    activities = forms.CharField(required=False)
    published_writing = forms.CharField(required=False)
    other_books = forms.CharField(required=False)

    # Step 4
    promotion_plan = forms.CharField(error_messages=_req("Rencana promosi wajib diisi."))
    sales_plan = forms.CharField(required=False)
    social_media = forms.CharField(required=False)
    network = forms.CharField(required=False)

    def __init__(self, *args, user=None, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_manuscript_file(self):
        f = self.cleaned_data["manuscript_file"]
        if f.size > _max_bytes():
            raise forms.ValidationError("Ukuran maksimal 50 MB.")
        head = f.read(len(_PDF_MAGIC))
        f.seek(0)
        if head != _PDF_MAGIC:
            raise forms.ValidationError("File harus PDF.")
        return f

    def clean_email(self):
        email = self.cleaned_data["email"].strip()
        User = get_user_model()
        clash = User.objects.filter(email__iexact=email)
        if self.user is not None:
            clash = clash.exclude(pk=self.user.pk)
        if clash.exists():
            raise forms.ValidationError("Email sudah digunakan akun lain.")
        return email

    def clean(self):
        cleaned = super().clean()
        p1 = cleaned.get("publisher_1")
        p2 = cleaned.get("publisher_2")
        if p1 and p2 and p1.pk == p2.pk:
            self.add_error("publisher_2", "Penerbit prioritas 2 harus berbeda.")
        return cleaned


def form_error_messages(form: forms.Form) -> List[str]:
    """All messages in field order, as one flat list."""
    out: List[str] = []
    for name in list(form.fields) + ["__all__"]:
        for msg in form.errors.get(name, []):
            if msg not in out:
                out.append(msg)
    return out


# ------------------------------------------------------------
# Store
# ------------------------------------------------------------

def _update_profile(user, cd: Mapping[str, Any]) -> None:
    social = cd.get("social_media") or ""
    UserProfile.objects.update_or_create(
        user=user,
        defaults={
            "nik": cd["nik"],
            "address": cd.get("address") or "",
            "phone": cd["phone"],
            "education": cd.get("education") or "",
            "activities": cd.get("activities") or "",
            "published_writing": cd.get("published_writing") or "",
            "other_books": cd.get("other_books") or "",
            "social_media": {"data": social} if social else {},
            "network": cd.get("network") or "",
        },
    )

    user.full_name = cd["author_name"]
    user.email = cd["email"]
    user.save(update_fields=["full_name", "email"])


def _extra_info(cd: Mapping[str, Any]) -> Dict[str, Any]:
    def opt(name: str) -> Optional[str]:
        return cd.get(name) or None

    return {
        "keywords": opt("keywords"),
        "page_count": opt("page_count"),
        "primary_readers": opt("primary_readers"),
        "secondary_readers": opt("secondary_readers"),
        "reader_segment": cd["reader_segment"],
        "selling_point": opt("selling_point"),
        "bonus_addon": opt("bonus_addon"),
        "advantages": opt("advantages"),
        "media_adaptation": opt("media_adaptation"),
        "promotion_plan": cd["promotion_plan"],
        "sales_plan": opt("sales_plan"),
    }


def _create_authors(manuscript: Manuscript, user, cd: Mapping[str, Any]) -> None:
    social = cd.get("social_media") or ""
    primary = Author.objects.create(
        user=user,
        full_name=cd["author_name"],
        email=cd["email"],
        nik=cd["nik"],
        address=cd.get("address") or "",
        phone=cd["phone"],
        education=cd.get("education") or "",
        activities=cd.get("activities") or "",
        published_writing=cd.get("published_writing") or "",
        other_books=cd.get("other_books") or "",
        social_media={"data": social} if social else {},
        network=cd.get("network") or "",
    )
    ManuscriptAuthor.objects.create(
        manuscript=manuscript, author=primary, role=ManuscriptAuthor.Role.PRIMARY, position=1
    )

    co_name = (cd.get("co_author_name") or "").strip()
    if co_name:
        co = Author.objects.create(full_name=co_name)
        ManuscriptAuthor.objects.create(
            manuscript=manuscript, author=co, role=ManuscriptAuthor.Role.CO_AUTHOR, position=2
        )


def store_submission(user, data: Mapping[str, Any], files: Mapping[str, Any]) -> Manuscript:
    """
    Validate and persist one submission.
    Raises SubmissionRejected with every validation message on bad input.
    """
    form = ManuscriptSubmissionForm(data, files, user=user)
    if not form.is_valid():
        messages = form_error_messages(form)
        logger.info("submission rejected user_id=%s errors=%s", user.pk, len(messages))
        raise SubmissionRejected(messages)

    cd = form.cleaned_data
    manuscript = Manuscript(
        submitted_by=user,
        title=cd["title"],
        synopsis=cd["synopsis"],
        genre=cd["category"],
        status=Manuscript.Status.REVIEW,
        extra_info=_extra_info(cd),
        submitted_at=timezone.now(),
    )

    upload = cd["manuscript_file"]
    try:
        with transaction.atomic():
            _update_profile(user, cd)

            manuscript.file.save(os.path.basename(upload.name), upload, save=False)
            manuscript.save()

            _create_authors(manuscript, user, cd)

            ManuscriptTargetPublisher.objects.create(
                manuscript=manuscript, publisher=cd["publisher_1"], priority=1
            )
            if cd.get("publisher_2"):
                ManuscriptTargetPublisher.objects.create(
                    manuscript=manuscript, publisher=cd["publisher_2"], priority=2
                )

            notify_new_submission(manuscript)
    except Exception:
        if manuscript.file.name:
            manuscript.file.delete(save=False)
        raise

    logger.info(
        "manuscript submitted id=%s user_id=%s publishers=%s",
        manuscript.pk,
        user.pk,
        manuscript.target_publishers.count(),
    )
    return manuscript


# ------------------------------------------------------------
# Wizard staging + transport
# ------------------------------------------------------------

def stage_upload(upload) -> StagedFile:
    """
    Keep a step-2 upload until the final confirm.
    Oversized files are recorded but not stored, so the validator can report them.
    """
    name = os.path.basename(upload.name or "")
    content_type = getattr(upload, "content_type", "") or ""
    size = int(upload.size or 0)
    if size > _max_bytes():
        return StagedFile(name=name, content_type=content_type, size=size)

    ext = os.path.splitext(name)[1].lower() or ".bin"
    path = default_storage.save(f"{STAGING_DIR}/{uuid.uuid4().hex}{ext}", upload)
    return StagedFile(name=name, content_type=content_type, size=size, path=path)


def discard_staged(staged: Optional[StagedFile]) -> None:
    if staged and staged.path and default_storage.exists(staged.path):
        default_storage.delete(staged.path)


def prune_staged(max_age: dt.timedelta, *, now: Optional[dt.datetime] = None) -> int:
    """
    Delete staged uploads older than `max_age`. Wizard sessions that were
    abandoned never reach confirm, so their files are only removed here.
    Returns how many files were deleted.
    """
    if not default_storage.exists(STAGING_DIR):
        return 0

    cutoff = (now or timezone.now()) - max_age
    _dirs, files = default_storage.listdir(STAGING_DIR)
    removed = 0
    for name in files:
        path = f"{STAGING_DIR}/{name}"
        if default_storage.get_modified_time(path) < cutoff:
            default_storage.delete(path)
            removed += 1

    if removed:
        logger.info("pruned %s staged upload(s) older than %s", removed, max_age)
    return removed


def form_payload(form: FormState) -> Dict[str, str]:
    data = {"publisher_1": form.publisher_1, "publisher_2": form.publisher_2}
    for step_fields in STEP_TEXT_FIELDS.values():
        for name in step_fields:
            data[name] = getattr(form, name)
    return data


def wizard_transport(user) -> Callable[[FormState], Manuscript]:
    """Adapter: FormState -> the same multipart payload the store endpoint takes."""

    def _send(form: FormState) -> Manuscript:
        staged = form.manuscript_file
        if staged is None or not staged.path or not default_storage.exists(staged.path):
            raise SubmissionRejected(["File PDF wajib diunggah."])

        with default_storage.open(staged.path, "rb") as fh:
            upload = UploadedFile(
                file=fh,
                name=staged.name,
                content_type=staged.content_type,
                size=staged.size,
            )
            manuscript = store_submission(user, form_payload(form), {"manuscript_file": upload})

        discard_staged(staged)
        return manuscript

    return _send
