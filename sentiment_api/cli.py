"""Command-line campaign runner.

Can be run as:
1. Installed script: sentiment-campaign [options]
2. Module: python -m sentiment_api.cli [options]
"""

import argparse
import json
import logging
import sys
import threading
from dataclasses import replace

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from sentiment_api.core.config import Settings
from sentiment_api.core.countries import DEFAULT_CAMPAIGN, get_country
from sentiment_api.core.sentiment import (
    CampaignReport,
    CancellationToken,
    Recommendation,
    build_campaign_runner,
)
from sentiment_api.domain.exceptions import (
    AllStrategiesExhausted,
    CampaignPartialFailure,
    SentimentAPIError,
)

console = Console()

RECOMMENDATION_STYLES = {
    Recommendation.POSITIVE: "green",
    Recommendation.NEGATIVE: "red",
    Recommendation.NEUTRAL: "yellow",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analyze government news sentiment for a list of countries"
    )
    parser.add_argument(
        "--countries",
        nargs="+",
        default=None,
        metavar="CODE",
        help=f"Country codes in processing order. Default: {' '.join(DEFAULT_CAMPAIGN)}",
    )
    parser.add_argument(
        "--pace",
        type=float,
        default=None,
        help="Seconds between countries. Default: COUNTRY_PACE_SECONDS",
    )
    parser.add_argument(
        "--policy",
        choices=["abort", "skip"],
        default=None,
        help="On a classification failure: abort the country or skip the article",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the campaign report as JSON instead of tables",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero if any country failed",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show per-strategy and per-article events",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def run_with_interrupt(runner, countries: list[str], pace: float) -> CampaignReport:
    """Run the campaign in a worker thread so Ctrl-C cancels it cleanly.

    The first interrupt cancels the token; the worker stops at the next
    country or article boundary and the partial report is returned.
    """
    token = CancellationToken()
    outcome: dict = {}

    def work() -> None:
        try:
            outcome["report"] = runner.run_campaign(countries, pace_delay=pace, cancel_token=token)
        except BaseException as e:  # re-raised on the main thread
            outcome["error"] = e

    worker = threading.Thread(target=work, name="campaign", daemon=True)
    worker.start()
    try:
        while worker.is_alive():
            worker.join(timeout=0.2)
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠ Interrupted! Finishing the current request...[/]")
        token.cancel("interrupted by user")
        worker.join()

    if "error" in outcome:
        raise outcome["error"]
    return outcome["report"]


def print_report(report: CampaignReport) -> None:
    table = Table(title="Country Sentiment", show_header=True, header_style="bold cyan")
    table.add_column("Country")
    table.add_column("Recommendation")
    table.add_column("Positive", justify="right")
    table.add_column("Neutral", justify="right")
    table.add_column("Negative", justify="right")
    table.add_column("Unclassified", justify="right")
    table.add_column("Strategy", style="dim")

    for result in report.results:
        style = RECOMMENDATION_STYLES[result.recommendation]
        table.add_row(
            f"{result.country_name} ({result.country_code})",
            f"[{style}]{result.recommendation.value}[/]",
            str(result.tally.positive),
            str(result.tally.neutral),
            str(result.tally.negative),
            str(result.unclassified_count),
            result.strategy or "-",
        )
    console.print(table)

    if report.failures:
        failures = Table(title="Failed Countries", show_header=True, header_style="bold red")
        failures.add_column("Country")
        failures.add_column("Step")
        failures.add_column("Error")
        for code, error in report.failures.items():
            message = str(error)
            if isinstance(error, AllStrategiesExhausted):
                message += "".join(
                    f"\n  {f.strategy}: {f.kind}: {f.error}" for f in error.failures
                )
            failures.add_row(get_country(code).name, error.step, escape(message))
        console.print(failures)

    if report.cancelled:
        console.print("[yellow]Campaign cancelled before all countries were analyzed[/]")


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    args = build_parser().parse_args(argv)
    load_dotenv()
    configure_logging(args.verbose)

    try:
        settings = Settings.from_env()
        if args.policy:
            settings = replace(settings, failure_policy=args.policy)
        runner = build_campaign_runner(settings)
    except SentimentAPIError as e:
        console.print(f"[bold red]Configuration error:[/] {e}")
        return 2

    countries = [c.upper() for c in (args.countries or DEFAULT_CAMPAIGN)]
    pace = args.pace if args.pace is not None else settings.country_pace

    if not args.json:
        console.print(
            f"[bold blue]Analyzing {len(countries)} countries[/] "
            f"(pace {pace}s, policy {settings.failure_policy})"
        )

    report = run_with_interrupt(runner, countries, pace)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report)

    if args.strict:
        try:
            report.raise_for_failures()
        except CampaignPartialFailure as e:
            console.print(f"[bold red]Error:[/] {e}")
            return 1
    return 130 if report.cancelled else 0


if __name__ == "__main__":
    sys.exit(main())
