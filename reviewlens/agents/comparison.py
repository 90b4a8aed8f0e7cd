"""
Comparison Agents.

Trend analysis between two summaries and persona comparison across
all segment summaries.
"""

import json
import logging
from typing import List, Tuple

import config.settings as settings
from reviewlens.models.analysis import PersonaComparison, TrendAnalysis
from reviewlens.models.summary import Summary
from reviewlens.utils.gemini import GeminiClient, language_instruction

logger = logging.getLogger(__name__)


def _trend_schema(start_label: str, end_label: str) -> dict:
    return {
        "type": "OBJECT",
        "properties": {
            "summary": {
                "type": "STRING",
                "description": "A brief narrative summary of the key trends and changes between the two reports.",
            },
            "newIssues": {
                "type": "ARRAY",
                "description": (
                    f'Negative themes or cons that appeared in the second report ("{end_label}") '
                    f'but not the first ("{start_label}").'
                ),
                "items": {"type": "STRING"},
            },
            "resolvedIssues": {
                "type": "ARRAY",
                "description": (
                    f'Negative themes from the first report ("{start_label}") '
                    f'that are no longer present in the second ("{end_label}").'
                ),
                "items": {"type": "STRING"},
            },
            "persistentThemes": {
                "type": "ARRAY",
                "description": "Common themes that are present in both reports.",
                "items": {"type": "STRING"},
            },
        },
        "required": ["summary", "newIssues", "resolvedIssues", "persistentThemes"],
    }


PERSONA_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "overview": {
            "type": "STRING",
            "description": "A brief, high-level summary comparing all customer segments.",
        },
        "segmentComparisons": {
            "type": "ARRAY",
            "description": "A list of analyses for each segment, highlighting their unique feedback.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "segment": {
                        "type": "STRING",
                        "description": "The name of the customer segment.",
                    },
                    "keyDifferentiators": {
                        "type": "ARRAY",
                        "description": (
                            "A list of 2-3 key feedback points that are unique or most "
                            "prominent for this segment compared to others."
                        ),
                        "items": {"type": "STRING"},
                    },
                },
                "required": ["segment", "keyDifferentiators"],
            },
        },
    },
    "required": ["overview", "segmentComparisons"],
}


def _dump(data) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _construct_trend_prompt(
    start_summary: Summary,
    end_summary: Summary,
    start_label: str,
    end_label: str,
    language: str
) -> str:
    output_language = language_instruction(language, "the same language as the provided summaries")
    return f"""You are an expert business analyst specializing in customer feedback trends. You have been provided with two summaries of customer feedback from two different time periods or sources.

The first summary, labeled "{start_label}", is as follows:
--- START SUMMARY ---
{_dump(start_summary.to_dict())}
--- END START SUMMARY ---

The second summary, labeled "{end_label}", is as follows:
--- END SUMMARY ---
{_dump(end_summary.to_dict())}
--- END END SUMMARY ---

Your task is to perform a comparative trend analysis in {output_language}. Your output must be a structured JSON object.

Please perform the following analysis:
1. Narrative Summary: Write a concise, high-level summary (2-3 sentences) that describes the key changes in customer feedback between "{start_label}" and "{end_label}". Mention shifts in sentiment and any notable new or disappearing themes.
2. New Issues: Identify specific "cons" or negative "themes" that appear in the "{end_label}" summary but are NOT present in the "{start_label}" summary. These are emerging problems.
3. Resolved Issues: Identify specific "cons" or negative "themes" from the "{start_label}" summary that are NO LONGER present in the "{end_label}" summary. These are problems that appear to have been fixed.
4. Persistent Themes: Identify recurring "themes" (positive or negative) that are present and significant in BOTH summaries.

Return the complete analysis as a single, structured JSON object. Ensure all string values in the JSON are plain text without any markdown characters."""


def _construct_persona_prompt(segments: List[Tuple[str, Summary]], language: str) -> str:
    output_language = language_instruction(language, "the same language as the provided summaries")
    data = [{"segment": segment, "summary": summary.to_dict()} for segment, summary in segments]
    return f"""You are a market research analyst AI. You have been given several summaries of customer feedback, each corresponding to a different customer segment (persona). Your task is to perform a comparative analysis to highlight the unique differences between these segments.

Here are the feedback summaries for each segment:
--- DATA ---
{_dump(data)}
--- END DATA ---

Please perform the following analysis in {output_language} and return the result as a single, structured JSON object:
1. Overall Overview: Write a brief, high-level overview (2-3 sentences) summarizing the most significant differences or similarities in feedback across all the customer segments.
2. Segment-Specific Differentiators: For each individual segment, analyze its summary (pros, cons, themes) in comparison to all other segments. Identify 2-3 key points of feedback that are either unique to this segment or significantly more prominent than in others. These should be the most defining characteristics of their experience.

The goal is to understand what makes each customer segment distinct. Focus on contrast and uniqueness. Do not just list their pros and cons; explain what makes them different from the others."""


class TrendAnalysisAgent:
    """
    Compares a "start" summary with an "end" summary.
    Identifies new, resolved and persistent issues.
    """

    def __init__(self, client: GeminiClient, model_name: str = settings.TREND_MODEL):
        self.client = client
        self.model_name = model_name

        logger.info(f"Initialized TrendAnalysisAgent with model={model_name}")

    async def compare(
        self,
        start_summary: Summary,
        end_summary: Summary,
        start_label: str,
        end_label: str,
        language: str = settings.DEFAULT_OUTPUT_LANGUAGE
    ) -> TrendAnalysis:
        logger.info(f"Requesting trend analysis: '{start_label}' -> '{end_label}'")
        return await self.client.generate_structured(
            _construct_trend_prompt(start_summary, end_summary, start_label, end_label, language),
            schema=_trend_schema(start_label, end_label),
            parse=TrendAnalysis.from_dict,
            model_name=self.model_name,
            task="generate trend analysis",
            subject="a valid trend analysis"
        )


class PersonaComparisonAgent:
    """Contrasts the summaries of several customer segments."""

    def __init__(self, client: GeminiClient, model_name: str = settings.PERSONA_MODEL):
        self.client = client
        self.model_name = model_name

        logger.info(f"Initialized PersonaComparisonAgent with model={model_name}")

    async def compare(
        self,
        segments: List[Tuple[str, Summary]],
        language: str = settings.DEFAULT_OUTPUT_LANGUAGE
    ) -> PersonaComparison:
        """
        Compare segment summaries.

        Args:
            segments: (segment label, summary) pairs in source order
            language: Output language or "Auto-detect"
        """
        logger.info(f"Requesting persona comparison across {len(segments)} segments")
        return await self.client.generate_structured(
            _construct_persona_prompt(segments, language),
            schema=PERSONA_SCHEMA,
            parse=PersonaComparison.from_dict,
            model_name=self.model_name,
            task="generate persona comparison",
            subject="a valid persona comparison"
        )
