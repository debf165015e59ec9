# -*- coding: utf-8 -*-
# manuscripts/services/wizard_state.py
#
# Submission wizard - form state holder.
# One flat, immutable snapshot for all four steps. Every update returns a new
# snapshot (reducer style); nothing here touches Django.

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Mapping, Optional


STEPS = (1, 2, 3, 4)

STEP_TITLES = {
    1: "Pilih Penerbit",
    2: "Unggah Naskah",
    3: "Profil Penulis",
    4: "Rencana Promosi",
}


@dataclass(frozen=True)
class StagedFile:
    """Uploaded file kept between steps. `path` is the storage name ("" if not stored)."""

    name: str
    content_type: str
    size: int
    path: str = ""


@dataclass(frozen=True)
class FormState:
    # Step 1
    publisher_1: str = ""
    publisher_2: str = ""
    # Step 2
    title: str = ""
    synopsis: str = ""
    category: str = ""
    keywords: str = ""
    page_count: str = ""
    primary_readers: str = ""
    secondary_readers: str = ""
    reader_segment: str = ""
    selling_point: str = ""
    bonus_addon: str = ""
    advantages: str = ""
    media_adaptation: str = ""
    manuscript_file: Optional[StagedFile] = None
    # Step 3
    author_name: str = ""
    co_author_name: str = ""
    nik: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    education: str = ""
    activities: str = ""
    published_writing: str = ""
    other_books: str = ""
    # Step 4
    promotion_plan: str = ""
    sales_plan: str = ""
    social_media: str = ""
    network: str = ""


# Text fields shown on each step (publisher slots are driven by toggle_publisher).
STEP_TEXT_FIELDS: Dict[int, tuple] = {
    1: (),
    2: (
        "title",
        "synopsis",
        "category",
        "keywords",
        "page_count",
        "primary_readers",
        "secondary_readers",
        "reader_segment",
        "selling_point",
        "bonus_addon",
        "advantages",
        "media_adaptation",
    ),
    3: (
        "author_name",
        "co_author_name",
        "nik",
        "address",
        "phone",
        "email",
        "education",
        "activities",
        "published_writing",
        "other_books",
    ),
    4: ("promotion_plan", "sales_plan", "social_media", "network"),
}

FIELD_NAMES = frozenset(f.name for f in fields(FormState))


def empty_form() -> FormState:
    return FormState()


def set_field(state: FormState, name: str, value: Any) -> FormState:
    if name not in FIELD_NAMES:
        raise KeyError(name)
    if name == "manuscript_file":
        if value is not None and not isinstance(value, StagedFile):
            raise TypeError("manuscript_file must be a StagedFile or None")
        return replace(state, manuscript_file=value)
    return replace(state, **{name: "" if value is None else str(value)})


def update_fields(state: FormState, values: Mapping[str, Any]) -> FormState:
    for name, value in values.items():
        state = set_field(state, name, value)
    return state


# ------------------------------------------------------------
# Publisher selection (priority 1 and 2)
# ------------------------------------------------------------

def selected_publishers(state: FormState) -> List[str]:
    return [p for p in (state.publisher_1, state.publisher_2) if p]


def priority_of(state: FormState, publisher_id: str) -> Optional[int]:
    pid = str(publisher_id)
    if pid and state.publisher_1 == pid:
        return 1
    if pid and state.publisher_2 == pid:
        return 2
    return None


def toggle_publisher(state: FormState, publisher_id: Any) -> FormState:
    """
    Slot rules:
    - id in slot 1 -> removed; slot 2 shifts up
    - id in slot 2 -> slot 2 emptied
    - new id       -> first empty slot; ignored when both are full
    """
    pid = "" if publisher_id is None else str(publisher_id).strip()
    if not pid:
        return state

    if state.publisher_1 == pid:
        return replace(state, publisher_1=state.publisher_2, publisher_2="")
    if state.publisher_2 == pid:
        return replace(state, publisher_2="")

    if not state.publisher_1:
        return replace(state, publisher_1=pid)
    if not state.publisher_2:
        return replace(state, publisher_2=pid)
    return state


# ------------------------------------------------------------
# Session round-trip (JSON-safe)
# ------------------------------------------------------------

def to_session(state: FormState) -> Dict[str, Any]:
    return asdict(state)


def from_session(data: Optional[Mapping[str, Any]]) -> FormState:
    if not data:
        return empty_form()
    values: Dict[str, Any] = {}
    for name in FIELD_NAMES:
        if name not in data:
            continue
        raw = data[name]
        if name == "manuscript_file":
            values[name] = _staged_from_dict(raw)
        else:
            values[name] = "" if raw is None else str(raw)
    return FormState(**values)


def _staged_from_dict(raw: Any) -> Optional[StagedFile]:
    if not isinstance(raw, Mapping):
        return None
    try:
        size = int(raw.get("size") or 0)
    except (TypeError, ValueError):
        size = 0
    return StagedFile(
        name=str(raw.get("name") or ""),
        content_type=str(raw.get("content_type") or ""),
        size=size,
        path=str(raw.get("path") or ""),
    )
