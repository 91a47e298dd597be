r"""Utilities shared by the retry orchestrator."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "bind_session_id",
    "clear_session_id",
    "get_session_id",
    "log_structured",
    "set_session_id",
]

from aretry.utils.structured_logging import (
    StructuredFormatter,
    bind_session_id,
    clear_session_id,
    get_session_id,
    log_structured,
    set_session_id,
)
