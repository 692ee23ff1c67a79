"""Domain models for the credit log and the monthly fixed-width reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Mapping, Sequence, Union

# A converted amount is a number, or a string explaining why it is unavailable.
ConvertedAmount = Union[Decimal, str]


@dataclass(frozen=True)
class DisplayRow:
    """One credit-log line derived from a transactional message."""

    sequence_nr: Decimal | None
    request_date: str
    date_received: str
    buyer_name: str
    buyer_country: str
    seller_name: str
    seller_country: str
    partner_name: str
    partner_country: str
    message_type: str
    amount_requested: Decimal | None
    currency: str
    term: Decimal | None
    contact_allowed: str
    incoming_comments: str
    credit_manager: str
    account_executive: str
    industry_product: str
    client_code: str
    amount_requested_usd: ConvertedAmount


class ReportType(str, Enum):
    VOLUME = "Volume"
    COMMISSION = "Commission"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Bracket:
    start: int
    end: int

    def slice(self, line: str) -> str:
        return line[self.start:self.end]


@dataclass(frozen=True)
class ColumnMap:
    group_bracket: Bracket
    code_bracket: Bracket
    name_bracket: Bracket
    data_columns: Mapping[str, int] = field(default_factory=dict)

    def ordered_columns(self) -> list[str]:
        return [name for name, _ in sorted(self.data_columns.items(), key=lambda item: item[1])]


@dataclass(frozen=True)
class ReportRow:
    group: str
    code: str
    name: str
    values: Mapping[str, str]


@dataclass(frozen=True)
class ReportTable:
    title: str
    report_type: ReportType
    column_map: ColumnMap | None
    rows: Sequence[ReportRow] = field(default_factory=tuple)
    error: str | None = None

    @property
    def columns(self) -> list[str]:
        return self.column_map.ordered_columns() if self.column_map else []


@dataclass(frozen=True)
class LinkRow:
    display_name: str
    values: Sequence[str]


@dataclass(frozen=True)
class LinkTable:
    group: str
    heading: str
    columns: Sequence[str]
    rows: Sequence[LinkRow] = field(default_factory=tuple)
    totals: Sequence[str] = field(default_factory=tuple)
