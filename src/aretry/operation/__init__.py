r"""Operations schedule the attempts of a retry session.

An operation is the backoff collaborator of the retry controller: it
runs the attempt callback, decides after each reported failure whether
another attempt is allowed and after which delay, and remembers the
error to report once it gives up.
"""

from __future__ import annotations

__all__ = ["BaseOperation", "RetryOperation", "create_timeouts"]

from aretry.operation.base import BaseOperation
from aretry.operation.retry_operation import RetryOperation, create_timeouts
