"""
Structured result returned by every domain operation.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .enums import ResultKind


@dataclass
class OperationResult:
    """Result of a domain operation."""
    success: bool
    kind: ResultKind
    message: str = ""
    value: Any = None
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, message: str = "", value: Any = None, **metadata: Any) -> "OperationResult":
        return cls(success=True, kind=ResultKind.OK, message=message, value=value, metadata=metadata)

    @classmethod
    def fail(cls, kind: ResultKind, message: str, **metadata: Any) -> "OperationResult":
        return cls(success=False, kind=kind, message=message, metadata=metadata)

    def unwrap(self) -> Any:
        """Return ``value`` of a successful result."""
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result ({self.kind.value}): {self.message}")
        return self.value
