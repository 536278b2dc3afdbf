from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from resume_optimizer.schemas.optimization import ProviderAttempt


class OptimizationError(RuntimeError):
    status_code = 500

    def __init__(self, message: str, *, code: str = "optimization_failed"):
        super().__init__(message)
        self.code = code


class InputTooShort(OptimizationError):
    status_code = 422

    def __init__(self, length: int, minimum: int):
        super().__init__(
            f"Resume text is too short ({length} characters). At least {minimum} characters are required.",
            code="input_too_short",
        )
        self.length = length
        self.minimum = minimum


class ProviderCallFailed(OptimizationError):
    status_code = 502

    def __init__(self, provider_name: str, reason: str):
        super().__init__(f"{provider_name}: {reason}", code="provider_call_failed")
        self.provider_name = provider_name
        self.reason = reason


class AllProvidersFailed(OptimizationError):
    status_code = 503

    def __init__(self, attempts: Sequence["ProviderAttempt"]):
        self.attempts = list(attempts)
        if self.attempts:
            reasons = "; ".join(
                f"{attempt.provider_name}: {attempt.error_reason or 'unknown error'}"
                for attempt in self.attempts
            )
            message = f"All text generation providers failed ({reasons})."
        else:
            message = "No text generation provider is configured."
        super().__init__(message, code="all_providers_failed")

    @property
    def reasons(self) -> list[str]:
        return [attempt.error_reason or "unknown error" for attempt in self.attempts]


class MalformedResponse(OptimizationError):
    """Raised inside the normalizer for one parse strategy; never escapes it."""

    status_code = 500

    def __init__(self, reason: str):
        super().__init__(reason, code="malformed_response")


class IndexOutOfRange(OptimizationError):
    status_code = 404

    def __init__(self, kind: str, index: int, size: int):
        super().__init__(
            f"No {kind} at index {index} (available: {size}).",
            code="index_out_of_range",
        )
        self.kind = kind
        self.index = index
        self.size = size


class PersistenceFailed(OptimizationError):
    """The result sink rejected a write. ``run`` keeps the completed, still usable optimization."""

    status_code = 502

    def __init__(self, message: str, *, run: Any = None):
        super().__init__(message, code="persistence_failed")
        self.run = run


class SessionNotFound(OptimizationError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Optimization session '{session_id}' was not found.", code="session_not_found")
        self.session_id = session_id
