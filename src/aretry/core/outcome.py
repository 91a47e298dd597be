r"""Outcomes of a single attempt.

Every attempt ends in exactly one of these variants. The controller
matches on them instead of inspecting exception types in its loop.
"""

from __future__ import annotations

__all__ = ["AbortRequest", "Outcome", "ProgrammerError", "Success", "Transient"]

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    """The action returned a value."""

    value: Any


@dataclass(frozen=True)
class ProgrammerError:
    """The action failed because of a bug: never retried."""

    error: BaseException


@dataclass(frozen=True)
class AbortRequest:
    """The action raised ``AbortError``: never retried.

    ``original`` is the exception to raise to the caller.
    """

    original: BaseException


@dataclass(frozen=True)
class Transient:
    """The action failed in a way that may succeed on retry."""

    error: BaseException


Outcome = Union[Success, ProgrammerError, AbortRequest, Transient]
