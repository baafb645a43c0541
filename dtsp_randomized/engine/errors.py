"""Error kinds raised by the randomized DTSP search and its oracles."""

from __future__ import annotations

from typing import List, Tuple


class DTSPError(Exception):
    """Base class for every solver failure."""


class InvalidArgument(DTSPError, ValueError):
    """Caller supplied inputs that violate a precondition. Never retried."""


class OracleIOError(DTSPError):
    """The ordering oracle could not be reached or its request not built."""


class OracleOutputError(DTSPError):
    """The ordering oracle returned something that is not a valid tour."""


class ResourceCleanupError(DTSPError):
    """One or more scratch resources could not be released.

    ``failures`` lists every ``(path, exception)`` pair, not only the first.
    """

    def __init__(self, failures: List[Tuple[str, BaseException]]):
        self.failures = list(failures)
        detail = ", ".join(f"{path} ({exc})" for path, exc in self.failures)
        super().__init__(f"failed to release {len(self.failures)} scratch file(s): {detail}")
