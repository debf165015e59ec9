# -*- coding: utf-8 -*-
# manuscripts/services/wizard_gate.py
#
# Submission wizard - which steps may be jumped to from the stepper.

from __future__ import annotations

from typing import Dict

from manuscripts.services.wizard_state import STEPS, FormState
from manuscripts.services.wizard_validation import MAX_PDF_BYTES, validate_step


def is_step_accessible(
    state: FormState,
    current: int,
    target: int,
    *,
    max_file_bytes: int = MAX_PDF_BYTES,
) -> bool:
    """
    Backward moves and staying put are always allowed. Forward jumps need every
    step before `target` to validate against the form as it is now.
    """
    if target not in STEPS:
        return False
    if target <= current:
        return True
    return all(
        not validate_step(state, s, max_file_bytes=max_file_bytes)
        for s in STEPS
        if s < target
    )


def accessible_steps(
    state: FormState,
    current: int,
    *,
    max_file_bytes: int = MAX_PDF_BYTES,
) -> Dict[int, bool]:
    return {
        s: is_step_accessible(state, current, s, max_file_bytes=max_file_bytes)
        for s in STEPS
    }
