"""Application-level DTOs for the credit log and monthly report workflows."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from factor_reports.domain.models import DisplayRow, LinkTable, ReportTable
from factor_reports.infrastructure.parsing.xml_messages import SkippedItem


@dataclass(slots=True, frozen=True)
class SourceDocument:
    name: str
    content: bytes


@dataclass(slots=True, frozen=True)
class CreditLogResult:
    rows: Sequence[DisplayRow]
    skipped: Sequence[SkippedItem] = field(default_factory=tuple)
    documents: int = 0
    failed_documents: int = 0

    @property
    def all_documents_failed(self) -> bool:
        return self.documents > 0 and self.failed_documents == self.documents


@dataclass(slots=True, frozen=True)
class MonthlyReport:
    volume: ReportTable
    commission: ReportTable
    link_tables: Sequence[LinkTable] = field(default_factory=tuple)
