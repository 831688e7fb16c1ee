from __future__ import annotations

from dataclasses import dataclass

DATA_VALIDITY = "DATA_VALIDITY"
INSUFFICIENT_SAMPLE = "INSUFFICIENT_SAMPLE"
SELECTOR_INVALIDATED = "SELECTOR_INVALIDATED"
NOT_IN_CURRENT_VIEW = "NOT_IN_CURRENT_VIEW"
NO_ANIMATABLE_CATEGORIES = "NO_ANIMATABLE_CATEGORIES"


@dataclass(frozen=True)
class Diagnostic:
    """
    Warning-level signal attached to a view model.

    None of these are errors: each one describes a condition that was
    recovered locally (exclusion, empty curve, reset selector, no-op).
    """
    code: str
    message: str
