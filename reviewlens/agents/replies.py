"""
Draft Reply Agent.

Writes a customer-service reply to a single complaint.
"""

import logging

import config.settings as settings
from reviewlens.errors import ExternalServiceError
from reviewlens.utils.gemini import GeminiClient, context_or_default, language_instruction

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I was unable to generate a reply at this time."


class DraftReplyAgent:
    """
    Drafts an empathetic, plain-text reply to one complaint.
    Returns a fixed apology text when the model call fails.
    """

    def __init__(self, client: GeminiClient, model_name: str = settings.REPLY_MODEL):
        self.client = client
        self.model_name = model_name

        logger.info(f"Initialized DraftReplyAgent with model={model_name}")

    async def draft(
        self,
        complaint: str,
        language: str = settings.DEFAULT_OUTPUT_LANGUAGE,
        product_context: str = ""
    ) -> str:
        output_language = language_instruction(language, "the same language as the complaint")
        prompt = f"""You are an empathetic and highly professional customer service agent.
You have the following background context about the product/service:
--- CONTEXT ---
{context_or_default(product_context)}
--- END CONTEXT ---

A customer has left the following complaint:
--- COMPLAINT ---
"{complaint}"
--- END COMPLAINT ---

Your task is to draft a concise, helpful, and non-robotic response in {output_language}, using the provided context to make your answer more specific and accurate if possible.
The response should:
1. Acknowledge the customer's specific problem and validate their frustration.
2. Apologize for the negative experience.
3. Briefly suggest a next step for resolution (e.g., "Our support team will reach out," "Here is a link to our help center," or "Could you provide your order number?"). Refer to specific features or policies from the context if relevant.
4. Do not make promises you can't keep.

Generate only the response text. The response must be plain text and should not contain any markdown formatting (e.g., no asterisks for bolding, no bullet points)."""

        try:
            return await self.client.generate_text(
                prompt,
                model_name=self.model_name,
                task="generate draft reply",
                subject="a reply"
            )
        except ExternalServiceError as e:
            logger.warning(f"Draft reply failed, returning fallback text: {e}")
            return FALLBACK_REPLY
