"""Exceptions raised by the parsing and reporting pipeline."""
from __future__ import annotations


class FactorReportsError(Exception):
    """Base class for every error raised by this package."""


class MalformedMessage(FactorReportsError):
    """A required section is missing from a factoring message."""

    def __init__(self, kind: str, missing_section: str) -> None:
        self.kind = kind
        self.missing_section = missing_section
        super().__init__(f"Invalid {kind} structure: <{missing_section}> element not found")


class MalformedDocument(FactorReportsError):
    """An uploaded XML document could not be parsed at all."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Could not parse {name}: {reason}")


class UnrecognizedReportType(FactorReportsError):
    """An upload is not the kind of fixed-width report its slot expects."""

    def __init__(self, name: str, expected: str, found: str) -> None:
        self.name = name
        self.expected = expected
        self.found = found
        super().__init__(f"The file '{name}' is not a valid {expected} report (detected: {found})")


class HeaderNotFound(FactorReportsError):
    def __init__(self, report_type: str) -> None:
        self.report_type = report_type
        super().__init__(f"Header row not found in {report_type} report")


class ColumnAnchorNotFound(FactorReportsError):
    def __init__(self, report_type: str, header_row: int) -> None:
        self.report_type = report_type
        self.header_row = header_row
        super().__init__(
            f"Could not locate a client code on the data line below header row {header_row} "
            f"in {report_type} report"
        )
