"""Command-line entrypoint for the credit log and monthly report builders."""
from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path

from factor_reports.application.dto import SourceDocument
from factor_reports.application.use_cases import BuildCreditLogUseCase, BuildMonthlyReportUseCase
from factor_reports.config import SETTINGS
from factor_reports.domain.errors import UnrecognizedReportType
from factor_reports.domain.services import coerce_rate
from factor_reports.presentation import credit_log, monthly_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_REJECTED = 2


def parse_rate(text: str) -> tuple[str, Decimal]:
    currency, sep, value = text.partition("=")
    rate = coerce_rate(value) if sep else None
    if not currency.strip() or rate is None:
        raise argparse.ArgumentTypeError(f"expected CUR=RATE with a positive rate, got {text!r}")
    return currency.strip().upper(), rate


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="factor-reports",
        description="Build the credit log from factoring XML and the monthly volume report tables",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    commands = parser.add_subparsers(dest="command", required=True)

    credit = commands.add_parser("credit-log", help="Combine XML messages into the credit log")
    credit.add_argument("files", nargs="+", type=Path, help="XML documents")
    credit.add_argument(
        "--rate",
        action="append",
        type=parse_rate,
        default=[],
        metavar="CUR=RATE",
        help="Units of CUR per one USD; may be repeated",
    )
    credit.add_argument("--interactive", action="store_true", help="Prompt for missing exchange rates")
    credit.add_argument("--format", choices=("tsv", "csv", "html"), default="tsv")
    credit.add_argument("--no-header", action="store_true", help="Omit the TSV header row")
    credit.add_argument("--workers", type=int, default=1, help="Decode documents in a thread pool")
    credit.add_argument("-o", "--output", type=Path, help="Write to PATH instead of stdout")

    monthly = commands.add_parser("monthly", help="Parse the Volume and Commission reports")
    monthly.add_argument("volume", type=Path, help="Volume fixed-width report")
    monthly.add_argument("commission", type=Path, help="Commission fixed-width report")
    monthly.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Directory for the outputs")
    return parser.parse_args(argv)


def configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, SETTINGS.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def prompt_rate(currency: str) -> Decimal | None:
    """Ask on the terminal until a positive rate is given; blank input declines."""
    while True:
        try:
            answer = input(f"Enter exchange rate for {currency} (units per 1 {SETTINGS.reference_currency}, blank to skip): ")
        except EOFError:
            return None
        if not answer.strip():
            return None
        rate = coerce_rate(answer)
        if rate is not None:
            return rate
        print(f"Invalid rate {answer.strip()!r}; enter a positive number.", file=sys.stderr)


def _read_documents(paths: list[Path]) -> list[SourceDocument]:
    return [SourceDocument(name=path.name, content=path.read_bytes()) for path in paths]


def _write(output: Path | None, data: str | bytes) -> None:
    if output is None:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        sys.stdout.write(text)
        return
    if isinstance(data, bytes):
        output.write_bytes(data)
    else:
        output.write_text(data, encoding="utf-8")
    logger.info("Wrote %s", output)


def run_credit_log(args: argparse.Namespace) -> int:
    use_case = BuildCreditLogUseCase(workers=args.workers)
    result = use_case.execute(
        _read_documents(args.files),
        resolve_rate=prompt_rate if args.interactive else None,
        rates=dict(args.rate),
    )

    for item in result.skipped:
        label = f"{item.kind} in {item.source}" if item.kind else item.source
        print(f"Skipped {label}: {item.reason}", file=sys.stderr)

    if args.format == "csv":
        _write(args.output, credit_log.render_csv(result.rows))
    elif args.format == "html":
        _write(args.output, credit_log.render_html(result.rows))
    else:
        _write(args.output, credit_log.render_tsv(result.rows, include_header=not args.no_header))

    if result.all_documents_failed:
        return EXIT_FAILED
    return EXIT_OK


def run_monthly(args: argparse.Namespace) -> int:
    use_case = BuildMonthlyReportUseCase()
    try:
        report = use_case.execute(
            SourceDocument(name=args.volume.name, content=args.volume.read_bytes()),
            SourceDocument(name=args.commission.name, content=args.commission.read_bytes()),
        )
    except UnrecognizedReportType as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_REJECTED

    output_dir: Path = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / "volume_tables.html").write_text(monthly_report.render_volume_page(report), encoding="utf-8")
    (output_dir / "commission_report.html").write_text(
        monthly_report.render_commission_page(report), encoding="utf-8"
    )
    (output_dir / "monthly_report.xlsx").write_bytes(monthly_report.build_workbook(report))

    print("Monthly Report Summary")
    print("======================")
    for table in (report.volume, report.commission):
        status = table.error or f"{len(table.rows)} client rows"
        print(f"{table.title}: {status}")
    for table in report.link_tables:
        print(f"{table.heading}: {len(table.rows)} rows")
    print(f"\nOutputs written to {output_dir}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose)
    if args.command == "credit-log":
        return run_credit_log(args)
    return run_monthly(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
