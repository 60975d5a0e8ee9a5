import argparse
import sys

from loguru import logger

from contract_compiler import __version__
from contract_compiler.core.schemas import SEVERITY_ORDER, risk_to_ordinal
from contract_compiler.intake import DocumentLoadError, UnsupportedDocumentError
from contract_compiler.pipeline import run_analysis
from contract_compiler.report import format_json, format_text
from contract_compiler.utils.logging import init_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contract-compiler",
        usage="contract-compiler [analyze] FILE [options]",
        description="Compile a contract into a fact graph and report structural anomalies.",
    )
    parser.add_argument("args", nargs="*", metavar="FILE", help="contract file (.txt, .pdf, .docx)")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--verbose", action="store_true", help="Show DAG structure and extraction details"
    )
    parser.add_argument("--no-ai", action="store_true", help="Skip the LLM analysis pass")
    parser.add_argument(
        "--exact-references",
        action="store_true",
        help="Match clause references on heading numbers instead of id substrings",
    )
    parser.add_argument(
        "--fail-on",
        choices=SEVERITY_ORDER,
        default=None,
        help="Exit with status 2 when an anomaly of this severity or worse is found",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _threshold_hit(anomalies, fail_on) -> bool:
    if not fail_on:
        return False
    bar = risk_to_ordinal(fail_on)
    return any(risk_to_ordinal(a.severity) >= bar for a in anomalies)


def main(argv=None):
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # --help / --version exit 0; usage errors map to the input-error status
        return 0 if exc.code in (0, None) else 1

    init_logging(debug=True if args.verbose else None)

    positional = list(args.args)
    if positional and positional[0] == "analyze":
        positional.pop(0)
    if not positional:
        print("Error: File argument is required", file=sys.stderr)
        return 1

    try:
        report = run_analysis(
            positional[0],
            use_llm=not args.no_ai,
            exact_references=args.exact_references,
        )
    except (FileNotFoundError, UnsupportedDocumentError, DocumentLoadError) as exc:
        logger.debug("input error: {!r}", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(format_json(report.anomalies, report.metadata, report.graph_hash()))
    else:
        print(format_text(report.anomalies, report.metadata))
    return 2 if _threshold_hit(report.anomalies, args.fail_on) else 0


if __name__ == "__main__":
    sys.exit(main())
