"""Error taxonomy and per-conversion diagnostics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiagnosticKind(str, Enum):
    UNSUPPORTED_TYPE = "unsupported_type"
    MALFORMED_INPUT = "malformed_input"
    UNRESOLVED_DEPENDENCY = "unresolved_dependency"
    RECURSION_LIMIT_EXCEEDED = "recursion_limit_exceeded"
    CONVERTER_FAILURE = "converter_failure"


class BlockMarkupError(RuntimeError):
    """Base class for conversion problems; never escapes a public entry point."""

    kind: DiagnosticKind = DiagnosticKind.CONVERTER_FAILURE


class MalformedInputError(BlockMarkupError):
    kind = DiagnosticKind.MALFORMED_INPUT


class UnresolvedDependencyError(BlockMarkupError):
    kind = DiagnosticKind.UNRESOLVED_DEPENDENCY


@dataclass(frozen=True, slots=True)
class DiagnosticEntry:
    kind: DiagnosticKind
    block_type: str
    block_id: str
    message: str = ""

    def as_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.value,
            "type": self.block_type,
            "id": self.block_id,
            "message": self.message,
        }


@dataclass(slots=True)
class Diagnostics:
    """Collector scoped to a single ``convert_blocks`` call."""

    entries: list[DiagnosticEntry] = field(default_factory=list)
    block_type_counts: Counter[str] = field(default_factory=Counter)

    def record(
        self,
        kind: DiagnosticKind,
        block_type: str,
        block_id: str,
        message: str = "",
    ) -> DiagnosticEntry:
        entry = DiagnosticEntry(kind=kind, block_type=block_type, block_id=block_id, message=message)
        self.entries.append(entry)
        return entry

    def count_block(self, block_type: str) -> None:
        self.block_type_counts[block_type] += 1

    def of_kind(self, kind: DiagnosticKind) -> list[DiagnosticEntry]:
        return [entry for entry in self.entries if entry.kind is kind]

    @property
    def unsupported_items(self) -> list[DiagnosticEntry]:
        return self.of_kind(DiagnosticKind.UNSUPPORTED_TYPE)

    @property
    def unsupported_count(self) -> int:
        return len(self.unsupported_items)

    @property
    def truncated_count(self) -> int:
        return len(self.of_kind(DiagnosticKind.RECURSION_LIMIT_EXCEEDED))

    @property
    def error_count(self) -> int:
        return len(self.entries) - self.unsupported_count

    @property
    def is_clean(self) -> bool:
        return not self.entries

    def as_dict(self) -> dict[str, Any]:
        return {
            "unsupported_count": self.unsupported_count,
            "unsupported_items": [entry.as_dict() for entry in self.unsupported_items],
            "error_count": self.error_count,
            "truncated_count": self.truncated_count,
            "entries": [entry.as_dict() for entry in self.entries],
            "block_type_counts": dict(self.block_type_counts),
        }


__all__ = [
    "BlockMarkupError",
    "DiagnosticEntry",
    "DiagnosticKind",
    "Diagnostics",
    "MalformedInputError",
    "UnresolvedDependencyError",
]
