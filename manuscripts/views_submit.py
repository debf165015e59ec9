# -*- coding: utf-8 -*-
# manuscripts/views_submit.py
#
# Four-step submission wizard, kept in the session between requests.
# Every POST applies the current step's fields, runs one transition, then
# redirects back (post/redirect/get).

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import messages
from django.core.cache import cache
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from accounts.models import Role
from accounts.services_roles import role_required
from manuscripts.models import READER_SEGMENT_CHOICES
from manuscripts.services import wizard_flow as flow
from manuscripts.services.wizard_gate import accessible_steps
from manuscripts.services.wizard_state import STEP_TEXT_FIELDS, STEP_TITLES, STEPS, priority_of
from manuscripts.services_submission import (
    SubmissionRejected,
    discard_staged,
    stage_upload,
    store_submission,
    wizard_transport,
)
from publishers.models import Publisher

logger = logging.getLogger("pressroom.submissions")

SESSION_KEY = "pr_submission_wizard"
SUCCESS_FLASH_TAG = "submission"

_submitters = role_required(Role.Name.AUTHOR, Role.Name.TRANSLATOR)


def _max_bytes() -> int:
    return int(getattr(settings, "PRESSROOM_MAX_MANUSCRIPT_BYTES", flow.MAX_PDF_BYTES))


def _load(request) -> flow.WizardState:
    return flow.from_session(request.session.get(SESSION_KEY))


def _save(request, state: flow.WizardState) -> None:
    request.session[SESSION_KEY] = flow.to_session(state)


def _lock_key(user) -> str:
    return f"pressroom:submit:{user.pk}"


def _acquire_submit_lock(user) -> bool:
    timeout = int(getattr(settings, "PRESSROOM_SUBMISSION_LOCK_SECONDS", 120))
    return cache.add(_lock_key(user), "1", timeout=timeout)


def _release_submit_lock(user) -> None:
    cache.delete(_lock_key(user))


def _apply_posted_fields(request, state: flow.WizardState) -> flow.WizardState:
    """Copy the current step's posted inputs into the form (EDITING only)."""
    if state.phase != flow.WizardPhase.EDITING:
        return state

    values = {
        name: request.POST.get(name, "")
        for name in STEP_TEXT_FIELDS.get(state.step, ())
        if name in request.POST
    }
    upload = request.FILES.get("manuscript_file") if state.step == 2 else None
    if upload is not None:
        discard_staged(state.form.manuscript_file)
        values["manuscript_file"] = stage_upload(upload)

    if not values:
        return state
    return flow.edit(state, values)


def _parse_step(raw) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def _confirm(request, state: flow.WizardState) -> flow.WizardState:
    if not _acquire_submit_lock(request.user):
        messages.warning(request, "Pengiriman sedang diproses. Mohon tunggu.")
        return state
    try:
        return flow.confirm(state, wizard_transport(request.user), max_file_bytes=_max_bytes())
    finally:
        _release_submit_lock(request.user)


def _dispatch(request, state: flow.WizardState, action: str) -> flow.WizardState:
    limit = _max_bytes()
    if action == "next":
        return flow.go_next(state, max_file_bytes=limit)
    if action == "prev":
        return flow.go_prev(state)
    if action.startswith("goto:"):
        # Stepper buttons post "goto:<n>" through the wizard form.
        return flow.go_to(state, _parse_step(action.partition(":")[2]), max_file_bytes=limit)
    if action == "toggle_publisher":
        return flow.toggle_publisher(state, request.POST.get("publisher_id"))
    if action == "submit":
        return flow.request_submit(state, max_file_bytes=limit)
    if action == "cancel":
        return flow.cancel_confirm(state)
    if action == "confirm":
        return _confirm(request, state)
    if action == "dismiss_alert":
        return flow.dismiss_alert(state)
    if action in ("close_success", "go_dashboard"):
        # The store endpoint's flash dialog closes without a SUCCEEDED phase.
        if state.phase != flow.WizardPhase.SUCCEEDED:
            return state
        return flow.acknowledge_success(state)
    raise flow.InvalidTransition(f"unknown action {action!r}")


def _take_submission_flash(request):
    """
    Find the success flash left by the store endpoint without consuming the
    other queued messages.
    """
    storage = messages.get_messages(request)
    found = None
    for m in storage:
        if SUCCESS_FLASH_TAG in (m.extra_tags or "").split():
            found = m.message
    storage.used = False
    return found


@_submitters
def submit_wizard(request):
    state = _load(request)

    if request.method == "POST":
        action = (request.POST.get("action") or "").strip()
        try:
            state = _apply_posted_fields(request, state)
            state = _dispatch(request, state, action)
        except flow.InvalidTransition as exc:
            logger.warning("wizard transition refused user_id=%s: %s", request.user.pk, exc)
        _save(request, state)

        if action == "go_dashboard":
            return redirect("accounts:dashboard")
        return redirect("manuscripts:submit")

    flash_success = _take_submission_flash(request)
    form = state.form
    publishers = [
        {"id": str(p.pk), "name": p.name, "priority": priority_of(form, str(p.pk))}
        for p in Publisher.objects.order_by("name").only("id", "name")
    ]
    access = accessible_steps(form, state.step, max_file_bytes=_max_bytes())
    stepper = [
        {
            "number": s,
            "title": STEP_TITLES[s],
            "active": s == state.step,
            "done": s < state.step,
            "accessible": access[s],
        }
        for s in STEPS
    ]

    return render(
        request,
        "manuscripts/submit.html",
        {
            "wizard": state,
            "form_values": form,
            "errors": state.errors,
            "stepper": stepper,
            "publishers": publishers,
            "reader_segments": READER_SEGMENT_CHOICES,
            "is_first_step": state.step == STEPS[0],
            "is_last_step": state.step == STEPS[-1],
            "summary": flow.summarize(form) if state.phase == flow.WizardPhase.CONFIRMING else None,
            "show_success": state.phase == flow.WizardPhase.SUCCEEDED or bool(flash_success),
            "success_message": state.success_message or flash_success or "",
        },
    )


@_submitters
@require_POST
def submit_store(request):
    """Direct multipart store; answers with a redirect and a flash message."""
    if not _acquire_submit_lock(request.user):
        messages.warning(request, "Pengiriman sedang diproses. Mohon tunggu.")
        return redirect("manuscripts:submit")

    try:
        store_submission(request.user, request.POST, request.FILES)
    except SubmissionRejected as exc:
        messages.error(request, " ".join(exc.messages))
        return redirect("manuscripts:submit")
    except Exception:
        logger.exception("manuscript store failed user_id=%s", request.user.pk)
        messages.error(request, flow.GENERIC_FAILURE)
        return redirect("manuscripts:submit")
    finally:
        _release_submit_lock(request.user)

    old = _load(request)
    discard_staged(old.form.manuscript_file)
    request.session.pop(SESSION_KEY, None)

    messages.success(
        request,
        "Naskah berhasil dikirim dan profil diperbarui.",
        extra_tags=SUCCESS_FLASH_TAG,
    )
    return redirect("manuscripts:submit")
