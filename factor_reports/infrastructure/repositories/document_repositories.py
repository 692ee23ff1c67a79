"""Upload-backed sources for XML messages and fixed-width reports."""
from __future__ import annotations

from functools import cached_property
from io import BytesIO
from pathlib import Path
from typing import Sequence

from factor_reports.domain.messages import Message
from factor_reports.domain.models import ReportType
from factor_reports.domain.repositories import MessageSource
from factor_reports.infrastructure.parsing.fixed_width import classify
from factor_reports.infrastructure.parsing.utils import decode_text, ensure_bytes
from factor_reports.infrastructure.parsing.xml_messages import DocumentDecodeResult, SkippedItem, decode_document


def _source_name(source: BytesIO | Path | bytes | str, name: str | None) -> str:
    if name:
        return name
    if isinstance(source, (Path, str)):
        return Path(source).name
    return "<upload>"


class XmlMessageSource(MessageSource):
    def __init__(self, source: BytesIO | Path | bytes | str, name: str | None = None) -> None:
        self._source = ensure_bytes(source)
        self.name = _source_name(source, name)

    @cached_property
    def result(self) -> DocumentDecodeResult:
        return decode_document(decode_text(self._source), self.name)

    def list_messages(self) -> Sequence[Message]:
        return self.result.messages

    @property
    def skipped(self) -> Sequence[SkippedItem]:
        return self.result.skipped


class FixedWidthReportSource:
    def __init__(self, source: BytesIO | Path | bytes | str, name: str | None = None) -> None:
        self._source = ensure_bytes(source)
        self.name = _source_name(source, name)

    @cached_property
    def text(self) -> str:
        return decode_text(self._source)

    @cached_property
    def report_type(self) -> ReportType:
        return classify(self.text)
