"""What a query is known to require of a property, used to pick fast lookup paths."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable


class CandidateKind(enum.Enum):
    """The shape of knowledge about a property's possible values."""

    IMPOSSIBLE = "impossible"
    SINGLE = "single"
    MULTIPLE = "multiple"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CandidateValue:
    """The values a property may take: none, exactly one, a set of them, or unknown."""

    kind: CandidateKind
    values: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if self.kind is CandidateKind.SINGLE and len(self.values) != 1:
            raise ValueError("a single candidate holds exactly one value")
        if self.kind in (CandidateKind.IMPOSSIBLE, CandidateKind.UNKNOWN) and self.values:
            raise ValueError(f"a {self.kind.value} candidate holds no values")

    @classmethod
    def impossible(cls) -> CandidateValue:
        """No value can satisfy the query."""
        return cls(CandidateKind.IMPOSSIBLE)

    @classmethod
    def single(cls, value: Any) -> CandidateValue:
        """Exactly this value is required."""
        return cls(CandidateKind.SINGLE, (value,))

    @classmethod
    def multiple(cls, values: Iterable[Any]) -> CandidateValue:
        """Any one of these values is acceptable."""
        return cls(CandidateKind.MULTIPLE, tuple(values))

    @classmethod
    def unknown(cls) -> CandidateValue:
        """Nothing usable is known; callers take the slow path."""
        return cls(CandidateKind.UNKNOWN)