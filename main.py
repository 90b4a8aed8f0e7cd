"""
ReviewLens - Customer Review Insights

CLI entry point for analyzing customer reviews with Gemini.
"""

import argparse
import asyncio
import logging
import sys

from reviewlens.errors import ReviewLensError
from reviewlens.exporters.charts import dashboard_metrics
from reviewlens.exporters.text import format_summary_markdown
from reviewlens.orchestrator import AnalysisController
from reviewlens.state import (
    ComparisonToggled, ErrorRaised, LanguageChanged, ReportSelected, SegmentColumnChanged,
    SourceFieldChanged
)
from reviewlens.utils.storage import StorageManager
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by every command that analyzes review data."""
    parser.add_argument(
        "files",
        nargs="*",
        help=f"Review files (CSV, TXT, XLSX, XLS), at most {settings.MAX_FILES}"
    )
    parser.add_argument(
        "--sheet",
        help="URL of a Google Sheet published to the web"
    )
    parser.add_argument(
        "--segment-column",
        default="",
        help=f"CSV column to split the first source into personas (reviews come from '{settings.REVIEW_COLUMN_NAME}')"
    )
    parser.add_argument(
        "--language",
        default=settings.DEFAULT_OUTPUT_LANGUAGE,
        choices=settings.SUPPORTED_LANGUAGES,
        help=f"Output language (default: {settings.DEFAULT_OUTPUT_LANGUAGE})"
    )
    parser.add_argument(
        "--context",
        default="",
        help="Product context applied to every source"
    )
    parser.add_argument(
        "--report-date",
        default="",
        help="Report date applied to every source (e.g. 'Q4 2024')"
    )
    parser.add_argument(
        "--report",
        type=int,
        default=1,
        help="Report number to explore or export (default: 1)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ReviewLens - Customer Review Insights",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Save your Gemini API key
  python main.py set-key YOUR_KEY

  # Analyze two quarters and compare them
  python main.py analyze q3.csv q4.csv --trend 1 2 --export pdf

  # Persona analysis on the CSV template layout
  python main.py analyze reviews.csv --segment-column "Customer Type" --chart

  # Ask a question about the first report
  python main.py ask reviews.csv --question "What do people say about battery life?"

Note: The key saved with set-key is used first, then GOOGLE_API_KEY.
        """
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )
    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Directory for exported files (default: {settings.OUTPUT_ROOT})"
    )
    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Directory holding the saved API key (default: {settings.DATA_ROOT})"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    set_key = commands.add_parser("set-key", help="Save the Gemini API key")
    set_key.add_argument("api_key", help="Gemini API key")

    commands.add_parser("template", help="Write the persona CSV template")

    commands.add_parser("sample", help="Generate sample review data as CSV")

    analyze = commands.add_parser("analyze", help="Summarize reviews and build reports")
    _add_input_arguments(analyze)
    analyze.add_argument(
        "--export",
        action="append",
        choices=settings.EXPORT_FORMATS,
        default=[],
        help="Export the selected report (repeatable)"
    )
    analyze.add_argument(
        "--chart",
        action="store_true",
        help="Write the sentiment trend chart as SVG"
    )
    analyze.add_argument(
        "--trend",
        nargs=2,
        type=int,
        metavar=("START", "END"),
        help="Compare two report numbers"
    )

    ask = commands.add_parser("ask", help="Ask a question about one report's reviews")
    _add_input_arguments(ask)
    ask.add_argument("--question", help="Question to ask")
    ask.add_argument(
        "--suggest",
        action="store_true",
        help="Print suggested questions"
    )

    deep_dive = commands.add_parser("deep-dive", help="Analyze one keyword or theme in depth")
    _add_input_arguments(deep_dive)
    deep_dive.add_argument("--topic", required=True, help="Keyword or theme")

    reply = commands.add_parser("reply", help="Draft a reply to a customer complaint")
    reply.add_argument("complaint", help="Complaint text")
    reply.add_argument(
        "--language",
        default=settings.DEFAULT_OUTPUT_LANGUAGE,
        choices=settings.SUPPORTED_LANGUAGES
    )
    reply.add_argument("--context", default="", help="Product context")

    return parser


def _print_rule(title: str = "") -> None:
    print("=" * 60)
    if title:
        print(title)
        print("=" * 60)


def _report_error(controller: AnalysisController) -> int:
    print(f"\n❌ {controller.state.error}")
    print(f"Check {settings.LOG_FILE} for details")
    return 1


async def _load_inputs(controller: AnalysisController, args) -> bool:
    """Load sources and apply the shared options to the state."""
    if args.sheet:
        if not await controller.fetch_sheet(args.sheet):
            return False
    elif args.files:
        if not controller.load_files(args.files):
            return False
    else:
        controller.dispatch(ErrorRaised("Provide review files or --sheet."))
        return False

    for index in range(len(controller.state.sources)):
        if args.context:
            controller.dispatch(SourceFieldChanged(index, "product_context", args.context))
        if args.report_date:
            controller.dispatch(SourceFieldChanged(index, "report_date", args.report_date))

    controller.dispatch(LanguageChanged(args.language))
    controller.dispatch(SegmentColumnChanged(args.segment_column))
    return True


async def _analyze_inputs(controller: AnalysisController, args) -> bool:
    if not await _load_inputs(controller, args):
        return False
    if not await controller.run_analysis():
        return False

    controller.dispatch(ReportSelected(args.report - 1))
    return controller.state.error is None


def _print_reports(controller: AnalysisController) -> None:
    state = controller.state
    for index, summary in enumerate(state.summaries or ()):
        source = state.sources[index]
        metrics = dashboard_metrics(summary)
        print()
        _print_rule(f"Report {index + 1}: {source.label}")
        print(
            f"Reviews: {metrics['total_reviews']} "
            f"(positive {metrics['positive_pct']}%, negative {metrics['negative_pct']}%, "
            f"neutral {metrics['neutral_pct']}%)"
        )
        if state.strategies and index < len(state.strategies):
            print(f"Key Focus Area: {state.strategies[index].key_focus_area}")
        print()
        print(format_summary_markdown(source.label, summary))

    if state.persona_comparison:
        print()
        _print_rule("Persona Comparison")
        print(state.persona_comparison.overview)
        for comparison in state.persona_comparison.segment_comparisons:
            print(f"\n{comparison.segment}:")
            for item in comparison.key_differentiators:
                print(f"  - {item}")


async def run_analyze(controller: AnalysisController, args) -> int:
    if not await _analyze_inputs(controller, args):
        return _report_error(controller)

    _print_reports(controller)

    if args.trend:
        for number in args.trend:
            controller.dispatch(ComparisonToggled(number - 1))
        if not await controller.run_trend_analysis():
            return _report_error(controller)
        trend = controller.state.trend_analysis
        print()
        _print_rule("Trend Analysis")
        print(trend.summary)
        for title, items in (
            ("New Issues", trend.new_issues),
            ("Resolved Issues", trend.resolved_issues),
            ("Persistent Themes", trend.persistent_themes),
        ):
            print(f"\n{title}:")
            for item in items:
                print(f"  - {item}")

    written = []
    for export_format in args.export:
        path = controller.export_report(export_format, args.output_dir)
        if path is None:
            return _report_error(controller)
        written.append(path)

    if args.chart:
        path = controller.render_trend_chart(args.output_dir)
        if path is None:
            return _report_error(controller)
        written.append(path)

    print()
    _print_rule("✅ Analysis completed successfully!")
    for path in written:
        print(f"Written: {path}")
    return 0


async def run_ask(controller: AnalysisController, args) -> int:
    if not args.question and not args.suggest:
        print("Nothing to ask: pass --question or --suggest")
        return 1
    if not await _analyze_inputs(controller, args):
        return _report_error(controller)

    if args.suggest:
        questions = await controller.suggest_questions()
        print("\nSuggested questions:")
        for question in questions:
            print(f"  - {question}")

    if args.question:
        answer = await controller.ask(args.question)
        if answer is None:
            return _report_error(controller)
        print(f"\nQ: {args.question}\nA: {answer.text}")
    return 0


async def run_deep_dive(controller: AnalysisController, args) -> int:
    if not await _analyze_inputs(controller, args):
        return _report_error(controller)

    outcome = await controller.deep_dive(args.topic)
    if outcome.error:
        print(f"\n❌ {outcome.error}")
        return 1

    analysis = outcome.analysis
    _print_rule(f"Deep Dive: {outcome.topic}")
    print(analysis.summary)
    print(
        f"\nPositive: {analysis.sentiment.positive}, Negative: {analysis.sentiment.negative}, "
        f"Neutral: {analysis.sentiment.neutral}"
    )
    for snippet in analysis.snippets:
        print(f'  "{snippet}"')
    return 0


async def run_reply(controller: AnalysisController, args) -> int:
    controller.dispatch(LanguageChanged(args.language))
    reply = await controller.draft_reply(args.complaint, product_context=args.context)
    if controller.state.error:
        return _report_error(controller)
    print(reply)
    return 0


async def run_sample(controller: AnalysisController, args) -> int:
    if not await controller.generate_sample():
        return _report_error(controller)

    sample = controller.state.sources[0]
    path = controller.storage.save_artifact(
        settings.SAMPLE_FILENAME, sample.content.encode("utf-8"), args.output_dir
    )
    print(f"Sample data: {path}")
    print(
        f'Analyze it with: python main.py analyze {path} '
        f'--segment-column "{controller.state.segment_column}" '
        f'--context "{sample.product_context}" --report-date "{sample.report_date}"'
    )
    return 0


async def run_command(controller: AnalysisController, args) -> int:
    if args.command == "set-key":
        if not controller.save_api_key(args.api_key):
            return _report_error(controller)
        print(f"API key saved to {controller.storage.credentials_path}")
        return 0

    if args.command == "template":
        path = controller.write_template(args.output_dir)
        if path is None:
            return _report_error(controller)
        print(f"Template: {path}")
        return 0

    handlers = {
        "sample": run_sample,
        "analyze": run_analyze,
        "ask": run_ask,
        "deep-dive": run_deep_dive,
        "reply": run_reply,
    }
    return await handlers[args.command](controller, args)


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    # Setup logging
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    # Print banner
    _print_rule("ReviewLens - Customer Review Insights")
    print(f"Command: {args.command}")
    print(f"Output: {args.output_dir}")
    _print_rule()
    print()

    try:
        controller = AnalysisController(storage=StorageManager(args.data_root, args.output_dir))
        exit_code = asyncio.run(run_command(controller, args))
        logger.info(f"ReviewLens finished with exit code {exit_code}")
        sys.exit(exit_code)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n⚠️  Interrupted")
        sys.exit(1)

    except (ReviewLensError, OSError) as e:
        logger.error(f"ReviewLens failed: {e}", exc_info=True)
        print(f"\n❌ ReviewLens failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
