"""Credit log and monthly volume report toolkit for factoring network data."""
from factor_reports.application.dto import CreditLogResult, MonthlyReport, SourceDocument
from factor_reports.application.use_cases import BuildCreditLogUseCase, BuildMonthlyReportUseCase
from factor_reports.domain.repositories import MessageRepository
from factor_reports.domain.services import CreditLogCombiner, ExchangeRateCache
from factor_reports.infrastructure.lookups.routing import StaticBusinessLookups

__all__ = [
    "BuildCreditLogUseCase",
    "BuildMonthlyReportUseCase",
    "CreditLogCombiner",
    "CreditLogResult",
    "ExchangeRateCache",
    "MessageRepository",
    "MonthlyReport",
    "SourceDocument",
    "StaticBusinessLookups",
]
