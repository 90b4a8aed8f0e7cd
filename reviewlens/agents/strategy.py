"""
Strategic Analysis Agent.

Derives an overview, a key focus area and recommended steps from a Summary.
"""

import json
import logging

import config.settings as settings
from reviewlens.models.analysis import StrategicAnalysis
from reviewlens.models.summary import Summary
from reviewlens.utils.gemini import GeminiClient, language_instruction

logger = logging.getLogger(__name__)


STRATEGY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "overview": {
            "type": "STRING",
            "description": "A brief, high-level summary of the customer feedback.",
        },
        "keyFocusArea": {
            "type": "STRING",
            "description": "The single most critical issue or theme to focus on.",
        },
        "steps": {
            "type": "ARRAY",
            "description": "A list of strategic next steps with their rationale.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "step": {
                        "type": "STRING",
                        "description": "A concrete strategic step for the team.",
                    },
                    "rationale": {
                        "type": "STRING",
                        "description": "The reasoning behind why this step is recommended, based on the data.",
                    },
                },
                "required": ["step", "rationale"],
            },
        },
    },
    "required": ["overview", "keyFocusArea", "steps"],
}


def _construct_prompt(summary: Summary, language: str) -> str:
    output_language = language_instruction(language, "the same language as the provided summary data")
    return f"""You are a seasoned data analyst and business strategist. You have been given a summary of customer feedback. Your task is to provide a high-level strategic analysis for a customer service team.

Based on the following data summary:
---
{json.dumps(summary.to_dict(), indent=2, ensure_ascii=False)}
---

Please generate a strategic analysis in {output_language}. Your analysis should include:
1. Overview: A brief, high-level summary of the overall customer sentiment and key takeaways.
2. Key Focus Area: Identify the single most critical theme or problem from the 'cons' and 'themes' that requires immediate attention.
3. Strategic Steps: Provide 2-3 high-level, strategic next steps for the customer team.
4. Rationale: For each step, provide a clear, concise rationale explaining why it's important and how it addresses the data.

Return the analysis as a single, structured JSON object. Ensure all string values in the JSON are plain text without any markdown characters (like *, **, _, #). Do not include any introductory text outside the JSON object."""


class StrategicAnalysisAgent:
    """Turns one Summary into a StrategicAnalysis."""

    def __init__(self, client: GeminiClient, model_name: str = settings.STRATEGY_MODEL):
        self.client = client
        self.model_name = model_name

        logger.info(f"Initialized StrategicAnalysisAgent with model={model_name}")

    async def analyze(
        self,
        summary: Summary,
        language: str = settings.DEFAULT_OUTPUT_LANGUAGE
    ) -> StrategicAnalysis:
        """
        Generate a strategic analysis for a summary.

        Raises:
            ExternalServiceError: If the call fails or the response does not conform
        """
        return await self.client.generate_structured(
            _construct_prompt(summary, language),
            schema=STRATEGY_SCHEMA,
            parse=StrategicAnalysis.from_dict,
            model_name=self.model_name,
            task="generate strategic analysis",
            subject="a valid strategic analysis"
        )
