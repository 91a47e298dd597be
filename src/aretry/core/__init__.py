r"""Retry loop, failure classification and attempt outcomes."""

from __future__ import annotations

__all__ = [
    "AbortRequest",
    "ProgrammerError",
    "RetryController",
    "Success",
    "Transient",
    "classify_failure",
    "retry",
    "retrying",
]

from aretry.core.controller import RetryController, retry, retrying
from aretry.core.decider import classify_failure
from aretry.core.outcome import AbortRequest, ProgrammerError, Success, Transient
