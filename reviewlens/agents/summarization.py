"""
Review Summarization Agent.

Turns a raw dump of customer reviews into a structured Summary:
pros, cons, themes, sentiment counts, insights and keywords.
"""

import logging

import config.settings as settings
from reviewlens.models.summary import Summary
from reviewlens.utils.gemini import GeminiClient, context_or_default

logger = logging.getLogger(__name__)


SUMMARY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "pros": {
            "type": "ARRAY",
            "description": "A list of positive points and compliments from the reviews.",
            "items": {"type": "STRING"},
        },
        "cons": {
            "type": "ARRAY",
            "description": "A list of negative points and complaints from the reviews.",
            "items": {"type": "STRING"},
        },
        "themes": {
            "type": "ARRAY",
            "description": "A list of recurring topics or common themes mentioned in the reviews.",
            "items": {"type": "STRING"},
        },
        "sentiment": {
            "type": "OBJECT",
            "description": "A breakdown of review sentiment counts.",
            "properties": {
                "positive": {"type": "NUMBER"},
                "negative": {"type": "NUMBER"},
                "neutral": {"type": "NUMBER"},
            },
        },
        "insights": {
            "type": "ARRAY",
            "description": "A list of actionable insights, including root causes and suggestions.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "cause": {"type": "STRING", "description": "The inferred root cause of an issue."},
                    "suggestion": {"type": "STRING", "description": "A suggested actionable step to address the cause."},
                },
            },
        },
        "keywords": {
            "type": "ARRAY",
            "description": "A list of the top 10-15 most frequent keywords and their frequencies.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "keyword": {"type": "STRING", "description": "The extracted keyword."},
                    "frequency": {"type": "NUMBER", "description": "How many times the keyword appeared."},
                },
                "required": ["keyword", "frequency"],
            },
        },
    },
    "required": ["pros", "cons", "themes", "sentiment", "insights", "keywords"],
}


def _language_step(language: str) -> str:
    if language.lower() == "auto-detect":
        return (
            "First, automatically detect the predominant language of the customer reviews. "
            "All subsequent analysis and the final summary must be in this detected language."
        )
    return (
        f"First, identify the primary language of the reviews. If it is not {language}, "
        f"mentally translate them before analysis. The final summary must be written in {language}."
    )


def _construct_prompt(reviews_text: str, language: str, product_context: str) -> str:
    return f"""You are a world-class expert in customer feedback analysis for a global company. You have been provided with some background context about the product/service being reviewed. Use this context to better understand the customer feedback.

--- CONTEXT ---
{context_or_default(product_context)}
--- END CONTEXT ---

Your task is to analyze a dataset of customer reviews and provide a clear, concise, and insightful summary.

The data provided is a raw text dump containing multiple customer reviews. From this data, you must perform the following actions:
1. Language Handling: {_language_step(language)}
2. Extract Key Points:
   - Pros: Identify positive points, compliments, and aspects customers liked.
   - Cons: Identify negative points, complaints, and areas for improvement.
   - Common Themes: Identify recurring topics, features, or issues mentioned across multiple reviews.
3. Perform Sentiment Analysis: Tally the reviews to determine sentiment. Count how many reviews are clearly positive, negative, and neutral. A neutral review might be one that just states facts or has a balanced mix of mild pros and cons.
4. Generate Actionable Insights: Based on the common themes and cons, infer 1 to 3 potential root causes for the problems. For each root cause, suggest a concrete, actionable step the company can take to address it.
5. Extract Top Keywords: Identify the top 10-15 most frequently mentioned nouns or noun phrases that are specific and meaningful (e.g., "battery life", "customer service", "screen quality"). Exclude generic, non-descriptive words like "product", "item", "review", or "thing". For each keyword, provide its frequency count, sorted from most to least frequent.

Analyze the following customer review data:
---
{reviews_text}
---

Return the complete summary in a single, structured JSON object. Ensure all string values in the JSON are plain text without any markdown characters (like *, **, _, #). Do not include any introductory text outside the JSON object."""


class SummarizationAgent:
    """
    Summarizes one review source.

    Uses Gemini structured output to:
    1. Extract pros, cons and recurring themes
    2. Count positive / negative / neutral reviews
    3. Infer root causes with suggested actions
    4. List top keywords with frequencies
    """

    def __init__(self, client: GeminiClient, model_name: str = settings.SUMMARY_MODEL):
        """
        Initialize summarization agent.

        Args:
            client: Configured Gemini client
            model_name: Gemini model to use
        """
        self.client = client
        self.model_name = model_name

        logger.info(f"Initialized SummarizationAgent with model={model_name}")

    async def summarize(
        self,
        reviews_text: str,
        language: str = settings.DEFAULT_OUTPUT_LANGUAGE,
        product_context: str = ""
    ) -> Summary:
        """
        Summarize raw review text.

        Raises:
            ExternalServiceError: If the call fails or the response is not a valid summary
        """
        prompt = _construct_prompt(reviews_text, language, product_context)

        summary = await self.client.generate_structured(
            prompt,
            schema=SUMMARY_SCHEMA,
            parse=Summary.from_dict,
            model_name=self.model_name,
            task="process reviews",
            subject="a valid summary"
        )

        logger.debug(
            f"Summary: {len(summary.pros)} pros, {len(summary.cons)} cons, "
            f"{len(summary.keywords)} keywords"
        )
        return summary
