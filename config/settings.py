"""
Configuration settings for ReviewLens.

Centralized configuration for all agents, ingestion limits and exports.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = PROJECT_ROOT / "data"
OUTPUT_ROOT = PROJECT_ROOT / "output"

# API Configuration
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
API_KEY_STORAGE_KEY = "gemini-api-key"
CREDENTIALS_FILENAME = "credentials.json"

# LLM Models
SUMMARY_MODEL = "gemini-2.5-flash"
STRATEGY_MODEL = "gemini-2.5-pro"  # Stronger model for strategic reasoning
TREND_MODEL = "gemini-2.5-pro"
PERSONA_MODEL = "gemini-2.5-pro"
DEEP_DIVE_MODEL = "gemini-2.5-flash"
CHAT_MODEL = "gemini-2.5-flash"
REPLY_MODEL = "gemini-2.5-flash"
SAMPLE_DATA_MODEL = "gemini-2.5-flash"

# None leaves the service default in place
LLM_TEMPERATURE = None
LLM_TIMEOUT_SECONDS = 300

# Analysis language
DEFAULT_OUTPUT_LANGUAGE = "Auto-detect"
SUPPORTED_LANGUAGES = [
    "Auto-detect",
    "English",
    "Spanish",
    "French",
    "German",
    "Japanese",
    "Portuguese",
    "Italian",
    "Chinese",
]

# Ingestion limits
MAX_FILES = 5  # Also caps the number of review sources
MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
MAX_TEXT_LENGTH_PER_SOURCE = 500000
SUPPORTED_TEXT_EXTENSIONS = (".csv", ".txt")
SUPPORTED_SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")
SHEET_FETCH_TIMEOUT_SECONDS = 30

# Persona analysis
REVIEW_COLUMN_NAME = "Comment"
TEMPLATE_FILENAME = "review_template_with_persona.csv"
CSV_TEMPLATE = (
    "Reviewer Name,Rating (1-5),Customer Type,Comment\n"
    'John Doe,5,Power User,"I absolutely love these headphones! The noise cancelling is top-tier."\n'
    'Jane Smith,2,New User,"Disappointed with the battery life. The setup was also confusing."\n'
)

# Sample data
SAMPLE_SOURCE_LABEL = "Sample Headphones Data"
SAMPLE_PRODUCT_CONTEXT = "AcoustiMax Pro Headphones: Wireless, noise-cancelling, 20-hour battery life."
SAMPLE_REPORT_DATE = "Q4 2024"
SAMPLE_SEGMENT_COLUMN = "Customer Type"
SAMPLE_FILENAME = "sample_reviews.csv"

# Chat
SUGGESTED_QUESTION_SAMPLE_CHARS = 2000

# Exports
REPORT_FILE_PREFIX = "Customer_Insights_Report"
REPORT_TITLE_PREFIX = "CUSTOMER INSIGHTS AI - ANALYSIS REPORT for"
EXPORT_FORMATS = ("txt", "pdf", "docx")

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "reviewlens.log"
