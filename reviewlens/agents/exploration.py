"""
Exploration Agents.

Interactive follow-ups on one analysed source: deep dives into a single
keyword or theme, free-form questions, and suggested questions.
"""

import logging
from typing import List

import config.settings as settings
from reviewlens.models.analysis import DeepDiveAnalysis
from reviewlens.utils.gemini import GeminiClient, context_or_default, language_instruction

logger = logging.getLogger(__name__)


def _deep_dive_schema(topic: str) -> dict:
    return {
        "type": "OBJECT",
        "properties": {
            "summary": {
                "type": "STRING",
                "description": f"A concise summary of customer feedback about the topic: {topic}.",
            },
            "snippets": {
                "type": "ARRAY",
                "description": f"A list of direct quotes from reviews that mention the topic: {topic}.",
                "items": {"type": "STRING"},
            },
            "sentiment": {
                "type": "OBJECT",
                "description": f"A sentiment breakdown for only the snippets related to the topic: {topic}.",
                "properties": {
                    "positive": {"type": "NUMBER"},
                    "negative": {"type": "NUMBER"},
                    "neutral": {"type": "NUMBER"},
                },
                "required": ["positive", "negative", "neutral"],
            },
        },
        "required": ["summary", "snippets", "sentiment"],
    }


SUGGESTED_QUESTIONS_SCHEMA = {
    "type": "ARRAY",
    "description": "A list of 3-4 suggested questions to ask about the review data.",
    "items": {"type": "STRING"},
}


def _parse_questions(data) -> List[str]:
    if not isinstance(data, list) or not all(isinstance(q, str) for q in data):
        raise ValueError("Expected a list of question strings")
    return data


class DeepDiveAgent:
    """
    Focused analysis of one keyword or theme over the raw reviews.
    """

    def __init__(self, client: GeminiClient, model_name: str = settings.DEEP_DIVE_MODEL):
        self.client = client
        self.model_name = model_name

        logger.info(f"Initialized DeepDiveAgent with model={model_name}")

    async def analyze(
        self,
        reviews_text: str,
        topic: str,
        language: str = settings.DEFAULT_OUTPUT_LANGUAGE,
        product_context: str = ""
    ) -> DeepDiveAnalysis:
        output_language = language_instruction(language, "the same language as the reviews")
        prompt = f"""You are a data analysis AI. You have been given a dataset of customer reviews, background product context, and a specific topic (a keyword or theme). Your task is to perform a deep-dive analysis on that specific topic based only on the provided reviews.

--- PRODUCT CONTEXT ---
{context_or_default(product_context)}
--- END CONTEXT ---

--- CUSTOMER REVIEWS ---
{reviews_text}
--- END REVIEWS ---

The topic to analyze is: "{topic}"

Perform the following actions and return the result as a single, structured JSON object in {output_language}:
1. Extract Relevant Snippets: Find and list all direct quotes or sentences from the reviews that explicitly mention or are clearly about the topic "{topic}".
2. Generate a Mini-Summary: Write a concise, 1-2 sentence summary of what customers are saying about "{topic}" based only on the extracted snippets.
3. Perform Sentiment Analysis: Based only on the extracted snippets, count how many are positive, negative, and neutral in their sentiment towards "{topic}".

Ensure all string values in the JSON are plain text without any markdown characters."""

        logger.info(f"Requesting deep dive on '{topic}'")
        return await self.client.generate_structured(
            prompt,
            schema=_deep_dive_schema(topic),
            parse=DeepDiveAnalysis.from_dict,
            model_name=self.model_name,
            task="generate deep dive analysis",
            subject="a valid deep dive analysis"
        )


class ReviewChatAgent:
    """
    Answers questions grounded only in the reviews and product context.
    """

    def __init__(self, client: GeminiClient, model_name: str = settings.CHAT_MODEL):
        self.client = client
        self.model_name = model_name

        logger.info(f"Initialized ReviewChatAgent with model={model_name}")

    async def ask(
        self,
        reviews_text: str,
        question: str,
        language: str = settings.DEFAULT_OUTPUT_LANGUAGE,
        product_context: str = ""
    ) -> str:
        output_language = language_instruction(language, "the same language as the question")
        prompt = f"""You are a data analyst AI assistant. You have been provided with a dataset of customer reviews and some background context about the product/service. Your job is to answer questions based only on the information contained within the reviews and the context. Do not use any external knowledge. If the answer cannot be found, state that clearly. Your answer must be plain text without any markdown formatting (no asterisks, underscores, bullet points, etc.).

Here is the background context on the product/service:
--- CONTEXT ---
{context_or_default(product_context)}
--- END CONTEXT ---

The customer review data is as follows:
--- REVIEWS ---
{reviews_text}
--- END REVIEWS ---

Now, please answer this question in {output_language}: "{question}"
"""
        return await self.client.generate_text(
            prompt,
            model_name=self.model_name,
            task="answer question",
            subject="an answer"
        )

    async def suggest_questions(self, reviews_text: str, product_context: str = "") -> List[str]:
        """
        Suggest 3-4 questions answerable from a sample of the reviews.
        """
        sample = reviews_text[:settings.SUGGESTED_QUESTION_SAMPLE_CHARS]
        prompt = f"""You are a data analyst AI. Your task is to help a user explore a dataset of customer reviews by suggesting insightful questions.
Based on the following product context and raw customer review data, generate 3 to 4 interesting and relevant questions a user might want to ask.

--- PRODUCT CONTEXT ---
{context_or_default(product_context)}
--- END CONTEXT ---

--- CUSTOMER REVIEWS (sample) ---
{sample}...
--- END REVIEWS ---

The questions should:
- Be concise and easy to understand.
- Go beyond simple keyword searches (e.g., instead of "What about the battery?", ask "What are the biggest complaints regarding battery life?").
- Be directly answerable from the provided review data.

Return the result as a single, structured JSON array of strings. Do not include any introductory text."""

        return await self.client.generate_structured(
            prompt,
            schema=SUGGESTED_QUESTIONS_SCHEMA,
            parse=_parse_questions,
            model_name=self.model_name,
            task="generate questions",
            subject="any suggested questions"
        )
