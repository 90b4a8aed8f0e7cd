"""
Sample Data Generator.

Asks the model for a small, realistic persona-tagged review CSV.
"""

import logging

import config.settings as settings
from reviewlens.utils.gemini import GeminiClient

logger = logging.getLogger(__name__)


SAMPLE_DATA_PROMPT = """Generate a realistic-looking sample dataset of 15 customer reviews for a fictional product called "AcoustiMax Pro Headphones".
The data should be in CSV format with four columns: "Reviewer Name", "Rating (1-5)", "Customer Type", and "Comment".
For "Customer Type", use values like "New User", "Power User", "Commuter", and "Audiophile".
Include a mix of positive, negative, and neutral reviews. The comments should be detailed enough to be useful for analysis and reflect the likely priorities of each customer type.
Do not include any introductory text or explanation, only the raw CSV data including the header row."""


class SampleDataGenerator:
    def __init__(self, client: GeminiClient, model_name: str = settings.SAMPLE_DATA_MODEL):
        self.client = client
        self.model_name = model_name

    async def generate(self) -> str:
        """
        Returns:
            Raw CSV text including the header row, stripped of outer whitespace
        """
        text = await self.client.generate_text(
            SAMPLE_DATA_PROMPT,
            model_name=self.model_name,
            task="generate sample data",
            subject="any sample data"
        )
        logger.info(f"Generated sample data ({len(text)} chars)")
        return text.strip()
