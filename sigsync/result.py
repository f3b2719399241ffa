from enum import Enum
from typing import Optional, List, Dict, Any


class PatchStatus(Enum):
    SUCCESS = "success"
    ANCHOR_NOT_FOUND = "anchor_not_found"


class PatchResult:
    """Outcome of one SignaturePatcher.apply() call."""

    def __init__(
        self,
        status: PatchStatus,
        message: str = '',
        applied_steps: Optional[List[str]] = None
    ):
        if not isinstance(status, PatchStatus):
            raise TypeError(f"status must be PatchStatus enum, got {type(status)}")

        self.status = status
        self.message = message
        self.applied_steps = applied_steps or []

    @classmethod
    def success(cls, applied_steps: Optional[List[str]] = None) -> 'PatchResult':
        steps = applied_steps or []
        message = f"Applied: {', '.join(steps)}" if steps else "Nothing to change"
        return cls(PatchStatus.SUCCESS, message, steps)

    @classmethod
    def anchor_not_found(cls, message: str) -> 'PatchResult':
        return cls(PatchStatus.ANCHOR_NOT_FOUND, message)

    @property
    def succeeded(self) -> bool:
        return self.status == PatchStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        result_dict = {
            'status': self.status.value,
            'message': self.message
        }

        if self.applied_steps:
            result_dict['applied_steps'] = self.applied_steps

        return result_dict

    def __repr__(self) -> str:
        return f"PatchResult(status={self.status.value}, message={self.message[:50]}...)"
