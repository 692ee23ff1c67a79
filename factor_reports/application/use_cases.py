"""Application services orchestrating the credit log and monthly report workflows."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Generator, Mapping, Sequence, Tuple

from factor_reports.application.dto import CreditLogResult, MonthlyReport, SourceDocument
from factor_reports.domain.errors import (
    ColumnAnchorNotFound,
    HeaderNotFound,
    MalformedDocument,
    UnrecognizedReportType,
)
from factor_reports.domain.lookups import BusinessLookups
from factor_reports.domain.messages import Message
from factor_reports.domain.models import DisplayRow, ReportTable, ReportType
from factor_reports.domain.report_tables import build_link_tables
from factor_reports.domain.repositories import MessageRepository
from factor_reports.domain.services import (
    CreditLogCombiner,
    ExchangeRateCache,
    RateRequest,
    RateResolver,
    coerce_rate,
)
from factor_reports.infrastructure.lookups.routing import StaticBusinessLookups
from factor_reports.infrastructure.parsing.fixed_width import locate_columns, locate_header, parse_rows
from factor_reports.infrastructure.parsing.xml_messages import SkippedItem
from factor_reports.infrastructure.repositories.document_repositories import (
    FixedWidthReportSource,
    XmlMessageSource,
)
from factor_reports.infrastructure.storage import mapping_store

logger = logging.getLogger(__name__)

Decoded = Tuple[Sequence[Message], Sequence[SkippedItem], bool]


def _decode(document: SourceDocument) -> Decoded:
    """Messages, skipped items and whether the whole document failed."""
    source = XmlMessageSource(document.content, name=document.name)
    try:
        return source.list_messages(), source.skipped, False
    except MalformedDocument as exc:
        logger.error("Skipping document %s: %s", document.name, exc)
        return (), (SkippedItem(source=document.name, kind=None, reason=str(exc)),), True


class BuildCreditLogUseCase:
    """Decode a batch of XML uploads and combine them into credit-log rows."""

    def __init__(self, lookups: BusinessLookups | None = None, workers: int = 1) -> None:
        self.repository = MessageRepository()
        self.rates = ExchangeRateCache()
        self._combiner = CreditLogCombiner(lookups or StaticBusinessLookups(), self.rates)
        self._workers = max(1, workers)
        self._skipped: list[SkippedItem] = []
        self._documents = 0
        self._failed_documents = 0

    def load(self, documents: Sequence[SourceDocument]) -> Sequence[SkippedItem]:
        self.repository.clear()
        self.rates.clear()
        self._skipped = []
        self._documents = len(documents)
        self._failed_documents = 0

        if self._workers > 1 and len(documents) > 1:
            with ThreadPoolExecutor(max_workers=self._workers) as executor:
                results = list(executor.map(_decode, documents))
        else:
            results = [_decode(document) for document in documents]

        for messages, skipped, failed in results:
            for message in messages:
                self.repository.register(message)
            self._skipped.extend(skipped)
            if failed:
                self._failed_documents += 1
        logger.info(
            "Loaded %d message(s) from %d document(s); %d item(s) skipped",
            len(self.repository),
            len(documents),
            len(self._skipped),
        )
        return tuple(self._skipped)

    def provide_rates(self, rates: Mapping[str, object]) -> None:
        for currency, value in rates.items():
            rate = coerce_rate(value)
            if rate is None:
                logger.warning("Ignoring invalid exchange rate %r for %s", value, currency)
                continue
            self.rates.put(currency, rate)

    def required_currencies(self) -> list[str]:
        return self._combiner.required_currencies(self.repository)

    def combine(self, resolve_rate: RateResolver | None = None) -> list[DisplayRow]:
        return self._combiner.combine(self.repository, resolve_rate)

    def combine_steps(self) -> Generator[RateRequest, object, list[DisplayRow]]:
        return self._combiner.combine_steps(self.repository)

    def result(self, rows: Sequence[DisplayRow]) -> CreditLogResult:
        return CreditLogResult(
            rows=tuple(rows),
            skipped=tuple(self._skipped),
            documents=self._documents,
            failed_documents=self._failed_documents,
        )

    def execute(
        self,
        documents: Sequence[SourceDocument],
        resolve_rate: RateResolver | None = None,
        rates: Mapping[str, object] | None = None,
    ) -> CreditLogResult:
        self.load(documents)
        if rates:
            self.provide_rates(rates)
        return self.result(self.combine(resolve_rate))


class BuildMonthlyReportUseCase:
    """Parse the Volume and Commission uploads and build the link tables."""

    def __init__(self, client_countries: Mapping[str, str] | None = None) -> None:
        self._client_countries = client_countries

    def execute(self, volume: SourceDocument, commission: SourceDocument) -> MonthlyReport:
        volume_source = self._accept(volume, ReportType.VOLUME)
        commission_source = self._accept(commission, ReportType.COMMISSION)

        volume_table = self._build_table("Volume Report", volume_source)
        commission_table = self._build_table("Commission Report", commission_source)

        link_tables = ()
        if volume_table.error is None:
            countries = self._client_countries
            if countries is None:
                countries = mapping_store.load_mapping()
            link_tables = tuple(build_link_tables(volume_table.rows, countries))
        return MonthlyReport(volume=volume_table, commission=commission_table, link_tables=link_tables)

    @staticmethod
    def _accept(document: SourceDocument, expected: ReportType) -> FixedWidthReportSource:
        source = FixedWidthReportSource(document.content, name=document.name)
        if source.report_type is not expected:
            raise UnrecognizedReportType(document.name, expected.value, source.report_type.value)
        return source

    @staticmethod
    def _build_table(title: str, source: FixedWidthReportSource) -> ReportTable:
        report_type = source.report_type
        try:
            header_row = locate_header(source.text, report_type)
            if header_row is None:
                raise HeaderNotFound(report_type.value)
            column_map = locate_columns(source.text, header_row, report_type)
            if column_map is None:
                raise ColumnAnchorNotFound(report_type.value, header_row)
        except (HeaderNotFound, ColumnAnchorNotFound) as exc:
            logger.warning("Cannot build %s from %s: %s", title, source.name, exc)
            return ReportTable(
                title=title,
                report_type=report_type,
                column_map=None,
                error=f"Could not parse this report: {exc}",
            )

        rows = parse_rows(source.text, column_map)
        logger.info("%s: %d client row(s) parsed from %s", title, len(rows), source.name)
        return ReportTable(title=title, report_type=report_type, column_map=column_map, rows=tuple(rows))
