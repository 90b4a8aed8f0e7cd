"""
Analysis Controller.

Owns the application state and sequences the agents for every user action.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from reviewlens.agents.aggregation import build_report_data
from reviewlens.agents.comparison import PersonaComparisonAgent, TrendAnalysisAgent
from reviewlens.agents.exploration import DeepDiveAgent, ReviewChatAgent
from reviewlens.agents.ingestion import IngestionAgent
from reviewlens.agents.persona import build_persona_sources
from reviewlens.agents.replies import DraftReplyAgent
from reviewlens.agents.sample_data import SampleDataGenerator
from reviewlens.agents.strategy import StrategicAnalysisAgent
from reviewlens.agents.summarization import SummarizationAgent
from reviewlens.errors import InputValidationError, ReviewLensError
from reviewlens.exporters import get_renderer
from reviewlens.exporters.base import ReportRenderer, export_filename
from reviewlens.exporters.charts import dashboard_metrics, render_sentiment_trend_svg, sentiment_trend_frame
from reviewlens.exporters.text import format_summary_markdown
from reviewlens.models.analysis import ChatMessage, DeepDiveAnalysis
from reviewlens.models.review_source import ReviewSource
from reviewlens.state import (
    AnalysisFailed, AnalysisFinished, AnalysisStarted, AppState, ChatMessageAdded,
    ErrorCleared, ErrorRaised, PersonaComparisonCommitted, PersonasGrouped,
    SegmentColumnChanged, SourcesReplaced, StrategiesCommitted, SummariesCommitted,
    TrendCommitted, TrendFailed, TrendStarted, reduce
)
from reviewlens.utils.gemini import GeminiClient
from reviewlens.utils.storage import StorageManager
import config.settings as settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeepDiveOutcome:
    """Result of a deep dive: either an analysis or an inline error message."""
    topic: str
    analysis: Optional[DeepDiveAnalysis] = None
    error: Optional[str] = None


class AnalysisController:
    """
    Runs user actions against the application state.

    Analysis pipeline:
    1. Persona grouping (only when a segment column is set)
    2. One summary per source, in parallel
    3. One strategic analysis per summary, in parallel
    4. Persona comparison (persona runs with more than one segment)

    Each stage settles all of its calls before the next one starts. A stage
    with any failed call commits nothing and stops the run. Errors are caught
    here, logged, and stored in the state's error slot.
    """

    def __init__(
        self,
        storage: Optional[StorageManager] = None,
        ingestion: Optional[IngestionAgent] = None,
        api_key: Optional[str] = None,
        client_factory: Callable[[str], GeminiClient] = GeminiClient,
        renderer_factory: Callable[[str], ReportRenderer] = get_renderer,
        state: Optional[AppState] = None
    ):
        """
        Initialize controller.

        Args:
            storage: Credential and artifact storage
            ingestion: File and sheet ingestion agent
            api_key: Gemini API key; defaults to the saved key, then GOOGLE_API_KEY
            client_factory: Builds a Gemini client from an API key
            renderer_factory: Returns the report renderer for an export format
            state: Initial application state
        """
        self.storage = storage or StorageManager(str(settings.DATA_ROOT), str(settings.OUTPUT_ROOT))
        self.ingestion = ingestion or IngestionAgent()
        self.api_key = api_key or self.storage.load_api_key() or settings.GOOGLE_API_KEY
        self.client_factory = client_factory
        self.renderer_factory = renderer_factory
        self.state = state or AppState()

        logger.info(f"Initialized AnalysisController (api key set: {bool(self.api_key)})")

    # --- State plumbing ---------------------------------------------------

    def dispatch(self, event) -> AppState:
        self.state = reduce(self.state, event)
        return self.state

    def _fail(self, message: str) -> None:
        logger.error(message)
        self.dispatch(ErrorRaised(message))

    def _client(self) -> GeminiClient:
        return self.client_factory(self.api_key or "")

    def _source_for_report(self, index: int) -> ReviewSource:
        if self.state.summaries is None:
            raise InputValidationError("Run an analysis before exploring the reviews.")
        if not 0 <= index < len(self.state.sources):
            raise InputValidationError(f"No review source at position {index + 1}.")
        return self.state.sources[index]

    # --- Credentials and inputs -------------------------------------------

    def save_api_key(self, api_key: str) -> bool:
        key = api_key.strip()
        if not key:
            self._fail("API Key cannot be empty.")
            return False
        try:
            self.storage.save_api_key(key)
        except OSError as e:
            self._fail(f"Failed to save API key: {e}")
            return False
        self.api_key = key
        self.dispatch(ErrorCleared())
        return True

    def load_files(self, paths: Sequence[str]) -> bool:
        """Replace the sources with one per uploaded file."""
        self.dispatch(ErrorCleared())
        try:
            sources = self.ingestion.load_files(paths)
        except ReviewLensError as e:
            self._fail(str(e))
            return False
        if sources:
            self.dispatch(SourcesReplaced(tuple(sources)))
        return True

    async def fetch_sheet(self, url: str) -> bool:
        """Replace the sources with a published Google Sheet."""
        self.dispatch(ErrorCleared())
        try:
            source = await self.ingestion.fetch_sheet(url)
        except ReviewLensError as e:
            self._fail(str(e))
            return False
        self.dispatch(SourcesReplaced((source,)))
        return True

    def write_template(self, output_dir: Optional[str] = None) -> Optional[str]:
        try:
            return self.storage.save_artifact(
                settings.TEMPLATE_FILENAME,
                settings.CSV_TEMPLATE.encode("utf-8"),
                output_dir
            )
        except OSError as e:
            self._fail(f"Failed to write {settings.TEMPLATE_FILENAME}: {e}")
            return None

    async def generate_sample(self) -> bool:
        """Replace the sources with generated sample reviews."""
        self.dispatch(ErrorCleared())
        try:
            content = await SampleDataGenerator(self._client()).generate()
        except ReviewLensError as e:
            self._fail(str(e) or "Failed to generate sample data.")
            return False

        sample = ReviewSource(
            label=settings.SAMPLE_SOURCE_LABEL,
            content=content,
            product_context=settings.SAMPLE_PRODUCT_CONTEXT,
            report_date=settings.SAMPLE_REPORT_DATE
        )
        self.dispatch(SourcesReplaced((sample,)))
        self.dispatch(SegmentColumnChanged(settings.SAMPLE_SEGMENT_COLUMN))
        return True

    # --- Analysis -----------------------------------------------------------

    @staticmethod
    async def _run_stage(stage: str, calls: List[Awaitable]) -> list:
        """
        Await sibling calls together.

        Returns:
            Results in call order

        Raises:
            The first failure in call order, after every call has settled
        """
        logger.info(f"Starting {stage} stage with {len(calls)} calls")
        results = await asyncio.gather(*calls, return_exceptions=True)

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(f"{stage} stage failed: {len(failures)} of {len(results)} calls failed")
            raise failures[0]

        logger.info(f"{stage} stage complete")
        return results

    async def run_analysis(self) -> bool:
        """
        Run the full analysis pipeline over the current sources.

        Returns:
            True if every stage completed and the run is still current
        """
        try:
            client = self._client()
        except ReviewLensError as e:
            self._fail(str(e))
            return False

        sources = self.state.sources
        if not sources or not any(s.has_content() for s in sources):
            self._fail("Please provide some review data before summarizing.")
            return False

        self.dispatch(AnalysisStarted())
        run_id = self.state.run_id
        language = self.state.output_language
        segment_column = self.state.segment_column.strip()
        logger.info(f"Analysis run {run_id} started for {len(sources)} sources")

        try:
            if segment_column:
                sources = tuple(build_persona_sources(sources[0], segment_column))
                self.dispatch(PersonasGrouped(run_id, sources))

            summarizer = SummarizationAgent(client)
            summaries = await self._run_stage("summary", [
                summarizer.summarize(s.content, language, s.product_context) for s in sources
            ])
            self.dispatch(SummariesCommitted(run_id, tuple(summaries)))

            if summaries:
                strategist = StrategicAnalysisAgent(client)
                strategies = await self._run_stage("strategy", [
                    strategist.analyze(summary, language) for summary in summaries
                ])
                self.dispatch(StrategiesCommitted(run_id, tuple(strategies)))

            if segment_column and len(summaries) > 1:
                segments = [(s.label, summary) for s, summary in zip(sources, summaries)]
                comparison = await PersonaComparisonAgent(client).compare(segments, language)
                self.dispatch(PersonaComparisonCommitted(run_id, comparison))

        except ReviewLensError as e:
            logger.error(f"Analysis run {run_id} failed: {e}")
            self.dispatch(AnalysisFailed(run_id, str(e) or "An unexpected error occurred."))
            return False

        self.dispatch(AnalysisFinished(run_id))
        logger.info(f"Analysis run {run_id} finished")
        return run_id == self.state.run_id

    async def run_trend_analysis(self) -> bool:
        """Compare the two selected reports; the lower index is the start."""
        try:
            client = self._client()
        except ReviewLensError as e:
            self._fail(str(e))
            return False

        state = self.state
        if len(state.comparison_indices) != 2 or state.summaries is None:
            self._fail("Please select exactly two reports to analyze trends.")
            return False

        self.dispatch(TrendStarted())
        run_id = state.run_id
        start_index, end_index = sorted(state.comparison_indices)

        def label(index: int) -> str:
            if index < len(state.sources) and state.sources[index].label:
                return state.sources[index].label
            return f"Report {index + 1}"

        try:
            trend = await TrendAnalysisAgent(client).compare(
                state.summaries[start_index],
                state.summaries[end_index],
                label(start_index),
                label(end_index),
                state.output_language
            )
        except ReviewLensError as e:
            logger.error(f"Trend analysis failed: {e}")
            self.dispatch(TrendFailed(run_id, str(e) or "An unexpected error occurred during trend analysis."))
            return False

        self.dispatch(TrendCommitted(run_id, trend))
        return True

    # --- Exploration ---------------------------------------------------------

    async def ask(self, question: str) -> Optional[ChatMessage]:
        """
        Ask a question about the selected report's reviews.

        Both the question and the answer are appended to the chat history.
        A failed call produces an apology message instead of an error.
        Without a completed analysis nothing is recorded and None is returned.
        """
        try:
            source = self._source_for_report(self.state.selected_index)
        except ReviewLensError as e:
            self._fail(str(e))
            return None

        message_id = int(time.time() * 1000)
        self.dispatch(ChatMessageAdded(ChatMessage(id=message_id, sender="user", text=question)))

        try:
            text = await ReviewChatAgent(self._client()).ask(
                source.content, question, self.state.output_language, source.product_context
            )
        except ReviewLensError as e:
            logger.error(f"Chat question failed: {e}")
            text = f"Sorry, I encountered an error: {e}"

        answer = ChatMessage(id=message_id + 1, sender="ai", text=text)
        self.dispatch(ChatMessageAdded(answer))
        return answer

    async def suggest_questions(self) -> List[str]:
        """Suggested chat questions; empty when they cannot be generated."""
        try:
            source = self._source_for_report(self.state.selected_index)
            return await ReviewChatAgent(self._client()).suggest_questions(
                source.content, source.product_context
            )
        except ReviewLensError as e:
            logger.error(f"Failed to generate suggested questions: {e}")
            return []

    async def deep_dive(self, topic: str) -> DeepDiveOutcome:
        try:
            source = self._source_for_report(self.state.selected_index)
            analysis = await DeepDiveAgent(self._client()).analyze(
                source.content, topic, self.state.output_language, source.product_context
            )
        except ReviewLensError as e:
            logger.error(f"Deep dive on '{topic}' failed: {e}")
            return DeepDiveOutcome(topic=topic, error=f'Failed to analyze "{topic}": {e}')
        return DeepDiveOutcome(topic=topic, analysis=analysis)

    async def draft_reply(self, complaint: str, product_context: Optional[str] = None) -> str:
        """
        Draft a reply to one complaint.

        Args:
            complaint: Complaint text, usually one of the report's cons
            product_context: Overrides the selected source's product context
        """
        try:
            client = self._client()
        except ReviewLensError as e:
            self._fail(str(e))
            return ""

        if product_context is None:
            index = self.state.selected_index
            sources = self.state.sources
            product_context = sources[index].product_context if index < len(sources) else ""
        return await DraftReplyAgent(client).draft(complaint, self.state.output_language, product_context)

    # --- Reports and exports --------------------------------------------------

    def report_data(self, index: Optional[int] = None):
        index = self.state.selected_index if index is None else index
        return build_report_data(self.state.sources, self.state.summaries, self.state.strategies, index)

    def export_report(
        self,
        export_format: str,
        output_dir: Optional[str] = None,
        index: Optional[int] = None
    ) -> Optional[str]:
        """
        Render one report and write it to the output directory.

        Returns:
            Path of the written file, or None if the export was aborted
        """
        index = self.state.selected_index if index is None else index
        report = self.report_data(index)
        if report is None:
            self._fail(f"No analysis available for report {index + 1}. Run an analysis first.")
            return None

        try:
            renderer = self.renderer_factory(export_format)
            data = renderer.render(report)
            path = self.storage.save_artifact(renderer.filename(), data, output_dir)
        except (ReviewLensError, ValueError) as e:
            self._fail(str(e))
            return None
        except OSError as e:
            self._fail(f"Failed to write {export_format} report: {e}")
            return None

        logger.info(f"Exported report {index + 1} as {export_format}: {path}")
        return path

    def copy_summary(self, index: Optional[int] = None) -> Optional[str]:
        index = self.state.selected_index if index is None else index
        summaries = self.state.summaries
        if summaries is None or not 0 <= index < min(len(summaries), len(self.state.sources)):
            self._fail(f"No analysis available for report {index + 1}. Run an analysis first.")
            return None
        return format_summary_markdown(self.state.sources[index].label, summaries[index])

    def dashboard(self, index: Optional[int] = None) -> Optional[Dict[str, float]]:
        index = self.state.selected_index if index is None else index
        summaries = self.state.summaries
        if summaries is None or not 0 <= index < len(summaries):
            return None
        return dashboard_metrics(summaries[index])

    def render_trend_chart(self, output_dir: Optional[str] = None) -> Optional[str]:
        """Write the sentiment trend across all reports as an SVG file."""
        summaries = self.state.summaries
        if not summaries:
            self._fail("Run an analysis before charting sentiment.")
            return None

        labels = [
            self.state.sources[i].label if i < len(self.state.sources) else f"Report {i + 1}"
            for i in range(len(summaries))
        ]
        svg = render_sentiment_trend_svg(sentiment_trend_frame(labels, summaries))

        try:
            return self.storage.save_artifact(export_filename("svg"), svg.encode("utf-8"), output_dir)
        except OSError as e:
            self._fail(f"Failed to write sentiment chart: {e}")
            return None
