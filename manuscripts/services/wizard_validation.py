# -*- coding: utf-8 -*-
# manuscripts/services/wizard_validation.py
#
# Submission wizard - per-step validator.
# Pure functions: same FormState in, same error record out. No dirty tracking;
# every call validates the whole step from scratch.

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import ClassVar, Dict, Optional, Union

from manuscripts.services.wizard_state import STEPS, FormState, StagedFile


MAX_PDF_BYTES = 50 * 1024 * 1024
NIK_DIGITS = 16
MIN_PHONE_DIGITS = 9

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_NON_DIGITS_RE = re.compile(r"[^0-9]")


def digits_only(value: str) -> str:
    return _NON_DIGITS_RE.sub("", value or "")


def is_email(value: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(value or ""))


def is_pdf(staged: StagedFile) -> bool:
    return staged.content_type == "application/pdf" or staged.name.lower().endswith(".pdf")


def coerce_publisher_id(value: str) -> Optional[int]:
    """Publisher id as int, or None when the text is not a positive integer."""
    try:
        pid = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return pid if pid > 0 else None


def _blank(value: str) -> bool:
    return not (value or "").strip()


# ------------------------------------------------------------
# Error records (one per step, one optional message per field)
# ------------------------------------------------------------

class StepErrors:
    step: ClassVar[int] = 0

    def as_dict(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for f in fields(self):
            msg = getattr(self, f.name)
            if msg:
                out[f.name] = msg
        return out

    def __bool__(self) -> bool:
        return bool(self.as_dict())


@dataclass(frozen=True)
class Step1Errors(StepErrors):
    step: ClassVar[int] = 1

    publisher_1: Optional[str] = None
    publisher_2: Optional[str] = None


@dataclass(frozen=True)
class Step2Errors(StepErrors):
    step: ClassVar[int] = 2

    title: Optional[str] = None
    synopsis: Optional[str] = None
    category: Optional[str] = None
    reader_segment: Optional[str] = None
    manuscript_file: Optional[str] = None


@dataclass(frozen=True)
class Step3Errors(StepErrors):
    step: ClassVar[int] = 3

    author_name: Optional[str] = None
    nik: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class Step4Errors(StepErrors):
    step: ClassVar[int] = 4

    promotion_plan: Optional[str] = None


AnyStepErrors = Union[Step1Errors, Step2Errors, Step3Errors, Step4Errors]

# Fields whose errors belong to each step (used to route the user back).
STEP_ERROR_FIELDS: Dict[int, frozenset] = {
    cls.step: frozenset(f.name for f in fields(cls))
    for cls in (Step1Errors, Step2Errors, Step3Errors, Step4Errors)
}


# ------------------------------------------------------------
# Per-step rules
# ------------------------------------------------------------

def _validate_step1(state: FormState) -> Step1Errors:
    p1 = None
    p2 = None

    if not state.publisher_1:
        p1 = "Pilih minimal 1 penerbit."
    elif coerce_publisher_id(state.publisher_1) is None:
        p1 = "Penerbit tidak valid."

    if state.publisher_2:
        if coerce_publisher_id(state.publisher_2) is None:
            p2 = "Penerbit tidak valid."
        elif state.publisher_2 == state.publisher_1:
            p2 = "Penerbit prioritas 2 harus berbeda."

    return Step1Errors(publisher_1=p1, publisher_2=p2)


def _validate_step2(state: FormState, max_file_bytes: int) -> Step2Errors:
    file_msg = None
    f = state.manuscript_file
    if f is None:
        file_msg = "File PDF wajib diunggah."
    else:
        if not is_pdf(f):
            file_msg = "File harus PDF."
        if f.size > max_file_bytes:
            file_msg = "Ukuran maksimal 50 MB."

    return Step2Errors(
        title="Judul naskah wajib diisi." if _blank(state.title) else None,
        synopsis="Sinopsis wajib diisi." if _blank(state.synopsis) else None,
        category="Kategori/Genre wajib diisi." if _blank(state.category) else None,
        reader_segment="Segmen pembaca wajib dipilih." if _blank(state.reader_segment) else None,
        manuscript_file=file_msg,
    )


def _validate_step3(state: FormState) -> Step3Errors:
    nik = None
    if _blank(state.nik):
        nik = "NIK penulis wajib diisi."
    elif len(digits_only(state.nik)) != NIK_DIGITS:
        nik = "NIK harus 16 digit."

    phone = None
    if _blank(state.phone):
        phone = "Nomor HP wajib diisi."
    elif len(digits_only(state.phone)) < MIN_PHONE_DIGITS:
        phone = "Nomor HP tidak valid."

    email = None
    if _blank(state.email):
        email = "Email wajib diisi."
    elif not is_email(state.email.strip()):
        email = "Format email tidak valid."

    return Step3Errors(
        author_name="Nama penulis wajib diisi." if _blank(state.author_name) else None,
        nik=nik,
        phone=phone,
        email=email,
    )


def _validate_step4(state: FormState) -> Step4Errors:
    return Step4Errors(
        promotion_plan="Rencana promosi wajib diisi." if _blank(state.promotion_plan) else None,
    )


def validate_step(state: FormState, step: int, *, max_file_bytes: int = MAX_PDF_BYTES) -> AnyStepErrors:
    if step == 1:
        return _validate_step1(state)
    if step == 2:
        return _validate_step2(state, max_file_bytes)
    if step == 3:
        return _validate_step3(state)
    if step == 4:
        return _validate_step4(state)
    raise ValueError(f"Unknown wizard step: {step!r}")


def validate_all(state: FormState, *, max_file_bytes: int = MAX_PDF_BYTES) -> Dict[int, AnyStepErrors]:
    return {s: validate_step(state, s, max_file_bytes=max_file_bytes) for s in STEPS}


def first_invalid_step(results: Dict[int, AnyStepErrors]) -> Optional[int]:
    for s in STEPS:
        if results.get(s):
            return s
    return None


def errors_as_dict(*records: AnyStepErrors) -> Dict[str, str]:
    """Flatten one or more step records into the displayed error map."""
    out: Dict[str, str] = {}
    for rec in records:
        out.update(rec.as_dict())
    return out
