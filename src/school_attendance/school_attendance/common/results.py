from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BulkOperationResult:
    """Per-item outcome of a batch operation; failures never abort the batch."""

    succeeded: list = field(default_factory=list)
    failed: list = field(default_factory=list)

    def add_failure(self, item, error) -> None:
        self.failed.append({"item": item, **error.to_payload()})

    def extend(self, other: BulkOperationResult) -> None:
        self.succeeded.extend(other.succeeded)
        self.failed.extend(other.failed)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    def to_dict(self) -> dict:
        return {
            "successCount": len(self.succeeded),
            "failureCount": len(self.failed),
            "succeeded": self.succeeded,
            "failed": self.failed,
        }
