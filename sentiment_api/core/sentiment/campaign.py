"""Run country analyses one after another."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from sentiment_api.core.classifier import ClassifierClient
from sentiment_api.core.config import Settings
from sentiment_api.core.countries import build_country_query, get_country
from sentiment_api.core.events import (
    CAMPAIGN_CANCELLED,
    COUNTRY_COMPLETED,
    COUNTRY_FAILED,
    EventSink,
    LoggingEventSink,
    PipelineEvent,
)
from sentiment_api.core.news_search.models import SearchQuery
from sentiment_api.core.news_search.orchestrator import FetchOrchestrator
from sentiment_api.core.news_search.strategies import RetrievalStrategy, default_strategies
from sentiment_api.core.sentiment.aggregation import AggregationEngine, FailurePolicy
from sentiment_api.core.sentiment.cancellation import CancellationToken
from sentiment_api.core.sentiment.models import CountryResult
from sentiment_api.core.sentiment.protocols import TextClassifier
from sentiment_api.core.sentiment.recommendation import decide
from sentiment_api.domain.exceptions import (
    AllStrategiesExhausted,
    CampaignCancelled,
    CampaignPartialFailure,
    SentimentAPIError,
)

logger = logging.getLogger(__name__)


@dataclass
class CampaignReport:
    """Results of a campaign, in the order countries were requested."""

    results: list[CountryResult] = field(default_factory=list)
    failures: dict[str, SentimentAPIError] = field(default_factory=dict)
    cancelled: bool = False

    @property
    def succeeded(self) -> list[str]:
        return [r.country_code for r in self.results]

    def raise_for_failures(self) -> None:
        """Raise CampaignPartialFailure if any country failed."""
        if self.failures:
            raise CampaignPartialFailure(dict(self.failures), self.succeeded)

    def to_dict(self) -> dict:
        failures = {}
        for code, error in self.failures.items():
            entry = {"step": error.step, "error": type(error).__name__, "message": str(error)}
            if isinstance(error, AllStrategiesExhausted):
                entry["causes"] = [f.to_dict() for f in error.failures]
            failures[code] = entry
        return {
            "results": [r.to_dict() for r in self.results],
            "failures": failures,
            "cancelled": self.cancelled,
        }


class CountryCampaignRunner:
    """Analyze countries sequentially with pacing between them.

    Countries are never processed in parallel: the news search and the
    classifier are shared, rate-limited upstreams. One country's failure is
    logged and skipped; it never aborts the campaign.
    """

    def __init__(
        self,
        engine: AggregationEngine,
        strategy_factory: Callable[[], list[RetrievalStrategy]],
        query_builder: Callable[[str], SearchQuery] = build_country_query,
        article_pace: float = 0.0,
        event_sink: EventSink | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the runner.

        Args:
            engine: Aggregation engine shared across countries (stateless per run)
            strategy_factory: Builds a fresh ranked strategy list per country
            query_builder: Country code to SearchQuery
            article_pace: Seconds between classifications inside a country
            event_sink: Event consumer
            sleep: Sleep function for pacing without a cancel token
        """
        self.engine = engine
        self.strategy_factory = strategy_factory
        self.query_builder = query_builder
        self.article_pace = article_pace
        self.events = event_sink or LoggingEventSink()
        self._sleep = sleep

    def analyze_country(
        self,
        country_code: str,
        cancel_token: CancellationToken | None = None,
    ) -> CountryResult:
        """Analyze one country.

        Raises:
            NoArticlesFound, AllStrategiesExhausted, ClassificationError
        """
        country = get_country(country_code)
        query = self.query_builder(country.code)
        logger.info(f"Analyzing {country.name} ({country.code}) with query {query.text}")

        outcome = self.engine.run(
            query,
            self.strategy_factory(),
            pace_delay=self.article_pace,
            cancel_token=cancel_token,
        )
        return CountryResult(
            country_code=country.code,
            country_name=country.name,
            articles=outcome.articles,
            tally=outcome.tally,
            recommendation=decide(outcome.tally),
            strategy=outcome.strategy,
        )

    def run_campaign(
        self,
        country_codes: Sequence[str],
        pace_delay: float = 0.0,
        cancel_token: CancellationToken | None = None,
    ) -> CampaignReport:
        """Analyze every country, collecting results and per-country failures.

        Codes are upper-cased and repeats dropped, keeping first-seen order.
        """
        report = CampaignReport()
        codes = list(dict.fromkeys(code.strip().upper() for code in country_codes))

        for position, code in enumerate(codes):
            if cancel_token is not None and cancel_token.cancelled:
                self._emit_cancelled(report, code)
                break

            try:
                result = self.analyze_country(code, cancel_token=cancel_token)
            except CampaignCancelled:
                self._emit_cancelled(report, code)
                break
            except SentimentAPIError as e:
                report.failures[code] = e
                fields = {"country": code, "step": e.step, "error_kind": type(e).__name__}
                if isinstance(e, AllStrategiesExhausted):
                    fields["causes"] = [f.to_dict() for f in e.failures]
                self.events.emit(
                    PipelineEvent(
                        COUNTRY_FAILED,
                        f"Analysis failed for {code}: {e}",
                        level=logging.ERROR,
                        fields=fields,
                    )
                )
            else:
                report.results.append(result)
                self.events.emit(
                    PipelineEvent(
                        COUNTRY_COMPLETED,
                        f"{result.country_name}: {result.recommendation.value} "
                        f"from {result.total_articles} articles",
                        fields={
                            "country": result.country_code,
                            "recommendation": result.recommendation.value,
                            "tally": result.tally.to_dict(),
                            "total_articles": result.total_articles,
                            "strategy": result.strategy,
                        },
                    )
                )

            is_last = position == len(codes) - 1
            if not is_last and pace_delay > 0:
                if cancel_token is not None:
                    cancel_token.wait(pace_delay)
                else:
                    self._sleep(pace_delay)

        return report

    def run_all(
        self,
        country_codes: Sequence[str],
        pace_delay: float = 0.0,
        cancel_token: CancellationToken | None = None,
    ) -> list[CountryResult]:
        """Analyze every country and return only the successful results."""
        return self.run_campaign(country_codes, pace_delay, cancel_token).results

    def _emit_cancelled(self, report: CampaignReport, next_code: str) -> None:
        report.cancelled = True
        self.events.emit(
            PipelineEvent(
                CAMPAIGN_CANCELLED,
                f"Campaign cancelled before finishing {next_code}",
                level=logging.WARNING,
                fields={"next_country": next_code, "completed": report.succeeded},
            )
        )


def build_campaign_runner(
    settings: Settings,
    strategy_factory: Callable[[], list[RetrievalStrategy]] | None = None,
    classifier: TextClassifier | None = None,
    event_sink: EventSink | None = None,
) -> CountryCampaignRunner:
    """Wire a runner from settings, building any collaborator not supplied.

    Raises:
        ConfigurationError: A required API key is missing
    """
    sink = event_sink or LoggingEventSink()

    if strategy_factory is None:
        api_key = settings.require_gnews_key()

        def strategy_factory() -> list[RetrievalStrategy]:
            return default_strategies(api_key, settings.gnews_base_url)

    if classifier is None:
        classifier = ClassifierClient(
            api_token=settings.require_huggingface_key(),
            model_id=settings.sentiment_model_id,
            base_url=settings.hf_inference_base_url,
            timeout=settings.classifier_timeout,
        )

    engine = AggregationEngine(
        fetcher=FetchOrchestrator(sink),
        classifier=classifier,
        failure_policy=FailurePolicy(settings.failure_policy),
        event_sink=sink,
    )

    def query_builder(code: str) -> SearchQuery:
        return build_country_query(
            code,
            lang=settings.news_lang,
            max_results=settings.news_max_articles,
            lookback=settings.news_lookback,
        )

    return CountryCampaignRunner(
        engine=engine,
        strategy_factory=strategy_factory,
        query_builder=query_builder,
        article_pace=settings.article_pace,
        event_sink=sink,
    )
