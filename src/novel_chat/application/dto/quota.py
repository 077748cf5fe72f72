from __future__ import annotations

from dataclasses import dataclass

UNLIMITED = -1


@dataclass(frozen=True, slots=True)
class QuotaDTO:
    limit: int
    remaining: int

    @classmethod
    def unlimited(cls) -> QuotaDTO:
        return cls(limit=UNLIMITED, remaining=UNLIMITED)
