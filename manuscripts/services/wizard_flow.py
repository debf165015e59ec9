# -*- coding: utf-8 -*-
# manuscripts/services/wizard_flow.py
#
# Submission wizard - state machine.
#
#   EDITING(1..4) --request_submit--> CONFIRMING --confirm--> SUBMITTING
#        ^                                |                       |
#        +------- cancel_confirm ---------+        ok: SUCCEEDED  |  fail: EDITING(4) + alert
#
# A failed submission lands back in EDITING with errors populated; there is no
# separate failed phase. Every transition returns a new WizardState.

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from manuscripts.services import wizard_state as ws
from manuscripts.services.wizard_gate import is_step_accessible
from manuscripts.services.wizard_validation import (
    MAX_PDF_BYTES,
    STEP_ERROR_FIELDS,
    errors_as_dict,
    first_invalid_step,
    validate_all,
    validate_step,
)

logger = logging.getLogger("pressroom.submissions")

FIRST_STEP = ws.STEPS[0]
LAST_STEP = ws.STEPS[-1]

GENERIC_FAILURE = "Terjadi kesalahan saat mengirim naskah. Silakan coba lagi."
SUCCESS_MESSAGE = "Naskah berhasil dikirim dan sedang direview."


class WizardPhase(str, enum.Enum):
    EDITING = "editing"
    CONFIRMING = "confirming"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"


class InvalidTransition(Exception):
    pass


class SubmissionRejected(Exception):
    """Raised by a transport when the server refuses the payload."""

    def __init__(self, messages: Iterable[str]):
        self.messages = [m for m in messages if m]
        super().__init__(" ".join(self.messages))


@dataclass(frozen=True)
class WizardState:
    phase: WizardPhase = WizardPhase.EDITING
    step: int = FIRST_STEP
    form: ws.FormState = field(default_factory=ws.empty_form)
    errors: Dict[str, str] = field(default_factory=dict)
    alert: str = ""
    success_message: str = ""

    @property
    def processing(self) -> bool:
        return self.phase == WizardPhase.SUBMITTING


@dataclass(frozen=True)
class SubmissionSummary:
    title: str
    publisher_count: int
    reader_segment: str
    author_name: str
    email: str


Transport = Callable[[ws.FormState], Any]


def initial_state() -> WizardState:
    return WizardState()


def _require(state: WizardState, *phases: WizardPhase) -> None:
    if state.phase not in phases:
        allowed = ", ".join(p.value for p in phases)
        raise InvalidTransition(f"{state.phase.value} -> expected one of: {allowed}")


# ------------------------------------------------------------
# Editing
# ------------------------------------------------------------

def edit(state: WizardState, values: Mapping[str, Any]) -> WizardState:
    _require(state, WizardPhase.EDITING)
    return replace(state, form=ws.update_fields(state.form, values))


def toggle_publisher(state: WizardState, publisher_id: Any) -> WizardState:
    _require(state, WizardPhase.EDITING)
    return replace(state, form=ws.toggle_publisher(state.form, publisher_id))


def _merge_step_errors(current: Mapping[str, str], step: int, fresh: Mapping[str, str]) -> Dict[str, str]:
    # Other steps keep their messages; this step's messages are replaced.
    own = STEP_ERROR_FIELDS[step]
    merged = {k: v for k, v in current.items() if k not in own}
    merged.update(fresh)
    return merged


def go_next(state: WizardState, *, max_file_bytes: int = MAX_PDF_BYTES) -> WizardState:
    _require(state, WizardPhase.EDITING)
    result = validate_step(state.form, state.step, max_file_bytes=max_file_bytes)
    errors = _merge_step_errors(state.errors, state.step, result.as_dict())
    if result or state.step == LAST_STEP:
        return replace(state, errors=errors)
    return replace(state, step=state.step + 1, errors=errors)


def go_prev(state: WizardState) -> WizardState:
    _require(state, WizardPhase.EDITING)
    if state.step == FIRST_STEP:
        return state
    return replace(state, step=state.step - 1)


def go_to(state: WizardState, target: int, *, max_file_bytes: int = MAX_PDF_BYTES) -> WizardState:
    _require(state, WizardPhase.EDITING)
    if not is_step_accessible(state.form, state.step, target, max_file_bytes=max_file_bytes):
        return state
    return replace(state, step=target)


# ------------------------------------------------------------
# Submit / confirm
# ------------------------------------------------------------

def request_submit(state: WizardState, *, max_file_bytes: int = MAX_PDF_BYTES) -> WizardState:
    _require(state, WizardPhase.EDITING)
    if state.step != LAST_STEP:
        raise InvalidTransition("submit is only offered on the last step")

    results = validate_all(state.form, max_file_bytes=max_file_bytes)
    errors = errors_as_dict(*results.values())
    bad = first_invalid_step(results)
    if bad is not None:
        return replace(state, step=bad, errors=errors, alert="")
    return replace(state, phase=WizardPhase.CONFIRMING, errors={}, alert="")


def cancel_confirm(state: WizardState) -> WizardState:
    _require(state, WizardPhase.CONFIRMING)
    return replace(state, phase=WizardPhase.EDITING, step=LAST_STEP)


def begin_submit(state: WizardState) -> WizardState:
    _require(state, WizardPhase.CONFIRMING)
    return replace(state, phase=WizardPhase.SUBMITTING, alert="")


def confirm(
    state: WizardState,
    transport: Transport,
    *,
    max_file_bytes: int = MAX_PDF_BYTES,
) -> WizardState:
    """
    CONFIRMING -> SUBMITTING -> SUCCEEDED, or back to EDITING with an alert.
    The transport receives the FormState and raises SubmissionRejected when the
    server refuses it.
    """
    state = begin_submit(state)

    results = validate_all(state.form, max_file_bytes=max_file_bytes)
    bad = first_invalid_step(results)
    if bad is not None:
        return replace(
            state,
            phase=WizardPhase.EDITING,
            step=bad,
            errors=errors_as_dict(*results.values()),
        )

    try:
        transport(state.form)
    except SubmissionRejected as exc:
        return replace(
            state,
            phase=WizardPhase.EDITING,
            step=LAST_STEP,
            alert=" ".join(exc.messages) or GENERIC_FAILURE,
        )
    except Exception:
        logger.exception("submission transport failed")
        return replace(state, phase=WizardPhase.EDITING, step=LAST_STEP, alert=GENERIC_FAILURE)

    return WizardState(
        phase=WizardPhase.SUCCEEDED,
        step=FIRST_STEP,
        form=ws.empty_form(),
        success_message=SUCCESS_MESSAGE,
    )


def acknowledge_success(state: WizardState) -> WizardState:
    _require(state, WizardPhase.SUCCEEDED)
    return initial_state()


def dismiss_alert(state: WizardState) -> WizardState:
    return replace(state, alert="")


def summarize(form: ws.FormState) -> SubmissionSummary:
    return SubmissionSummary(
        title=form.title,
        publisher_count=len(ws.selected_publishers(form)),
        reader_segment=form.reader_segment,
        author_name=form.author_name,
        email=form.email,
    )


# ------------------------------------------------------------
# Session round-trip
# ------------------------------------------------------------

def to_session(state: WizardState) -> Dict[str, Any]:
    return {
        "phase": state.phase.value,
        "step": state.step,
        "form": ws.to_session(state.form),
        "errors": dict(state.errors),
        "alert": state.alert,
        "success_message": state.success_message,
    }


def from_session(data: Optional[Mapping[str, Any]]) -> WizardState:
    if not data:
        return initial_state()

    try:
        phase = WizardPhase(data.get("phase") or WizardPhase.EDITING.value)
    except ValueError:
        phase = WizardPhase.EDITING
    # A request that died mid-submit must not leave the wizard locked.
    if phase == WizardPhase.SUBMITTING:
        phase = WizardPhase.CONFIRMING

    try:
        step = int(data.get("step") or FIRST_STEP)
    except (TypeError, ValueError):
        step = FIRST_STEP
    if step not in ws.STEPS:
        step = FIRST_STEP

    errors = data.get("errors") or {}
    if not isinstance(errors, Mapping):
        errors = {}

    return WizardState(
        phase=phase,
        step=step,
        form=ws.from_session(data.get("form")),
        errors={str(k): str(v) for k, v in errors.items()},
        alert=str(data.get("alert") or ""),
        success_message=str(data.get("success_message") or ""),
    )
