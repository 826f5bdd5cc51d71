"""
Tagged operation outcomes.

Every engine operation reports success or failure as an Outcome instead of
letting a domain exception reach the caller. The transport layer maps
`ok`/`error_kind` to its own representation (e.g. HTTP status).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from questline.modules.shared.exceptions import QuestlineDomainException, is_transient_error


@dataclass(frozen=True)
class Outcome:
    """
    Result of one engine operation.

    Attributes
    ----------
    ok : bool
        Whether the operation succeeded
    message : str
        Human-readable summary ("ok" on success)
    error_code : Optional[str]
        Stable code of the failure (e.g. "DAY_NOT_STARTED")
    error_kind : Optional[str]
        Failure taxonomy: validation, precondition, insufficient_resource
        or conflict
    data : Dict[str, Any]
        Operation-specific payload, plus the player snapshot under "player"
    changed : bool
        Whether the player record was mutated and must be persisted. True on
        failure when reconciliation alone reset a stale day.
    retryable : bool
        Whether repeating the same request may succeed (conflicts only)
    """

    ok: bool
    message: str = "ok"
    error_code: Optional[str] = None
    error_kind: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    changed: bool = False
    retryable: bool = False

    @classmethod
    def success(cls, data: Optional[Dict[str, Any]] = None, *, changed: bool = True, message: str = "ok") -> Outcome:
        return cls(ok=True, message=message, data=data or {}, changed=changed)

    @classmethod
    def failure(
        cls,
        exc: QuestlineDomainException,
        *,
        data: Optional[Dict[str, Any]] = None,
        changed: bool = False,
    ) -> Outcome:
        return cls(
            ok=False,
            message=exc.message,
            error_code=exc.error_code,
            error_kind=exc.kind.value,
            data=data or {},
            changed=changed,
            retryable=is_transient_error(exc),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"ok": self.ok, "message": self.message}
        if not self.ok:
            payload["error_code"] = self.error_code
            payload["error_kind"] = self.error_kind
            payload["retryable"] = self.retryable
        payload.update(self.data)
        return payload
