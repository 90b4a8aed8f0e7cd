"""
Ingestion Agent.

Loads review text from uploaded files (CSV, TXT, XLSX, XLS) or from a
published Google Sheet, enforcing the batch and size limits.
"""

import logging
import os
import re
from typing import List, Optional, Sequence

import httpx
import pandas as pd

import config.settings as settings
from reviewlens.errors import CapabilityUnavailableError, ExternalServiceError, InputValidationError
from reviewlens.models.review_source import ReviewSource

logger = logging.getLogger(__name__)

SHEET_ID_PATTERN = re.compile(r"spreadsheets/d/([a-zA-Z0-9-_]+)")
SHEET_SOURCE_LABEL = "Google Sheet"


def sheet_export_url(url: str) -> str:
    """
    Derive the CSV export URL of a Google Sheet.

    Raises:
        InputValidationError: If the URL is empty or has no spreadsheets/d/<ID> part
    """
    if not url or not url.strip():
        raise InputValidationError("Please enter a Google Sheet URL.")

    match = SHEET_ID_PATTERN.search(url)
    if not match:
        raise InputValidationError("Invalid Google Sheet URL format.")

    return f"https://docs.google.com/spreadsheets/d/{match.group(1)}/export?format=csv"


class SpreadsheetConverter:
    """
    Converts the first worksheet of an Excel workbook to CSV text.

    Backed by pandas; the openpyxl (xlsx) or xlrd (xls) engine is loaded
    by pandas on first use.
    """

    def to_csv(self, path: str) -> str:
        """
        Raises:
            CapabilityUnavailableError: If the Excel engine is not installed
            InputValidationError: If the file is not a readable workbook
        """
        try:
            frame = pd.read_excel(path, sheet_name=0, header=None, dtype=str)
        except ImportError as e:
            raise CapabilityUnavailableError(
                f"Spreadsheet library not found. Could not parse Excel file: {e}"
            ) from e
        except Exception as e:
            # pandas, openpyxl and xlrd each raise their own error types for bad workbooks
            logger.error(f"Could not parse workbook {path}: {e}")
            raise InputValidationError(f"Error reading {os.path.basename(path)}.") from e

        return frame.to_csv(index=False, header=False, lineterminator="\n")


class IngestionAgent:
    """
    Turns user-provided files or a sheet URL into review sources.

    Batch checks (file count, per-file size) run before any file is read;
    a single violation rejects the whole batch.
    """

    def __init__(
        self,
        converter: Optional[SpreadsheetConverter] = None,
        max_files: int = settings.MAX_FILES,
        max_file_size_bytes: int = settings.MAX_FILE_SIZE_BYTES,
        max_text_length: int = settings.MAX_TEXT_LENGTH_PER_SOURCE,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize ingestion agent.

        Args:
            converter: Spreadsheet-to-CSV capability, defaults to the pandas converter
            max_files: Maximum number of files per upload batch
            max_file_size_bytes: Maximum size of each file
            max_text_length: Character ceiling for a fetched sheet
            http_transport: Optional httpx transport (used by tests)
        """
        self.converter = converter or SpreadsheetConverter()
        self.max_files = max_files
        self.max_file_size_bytes = max_file_size_bytes
        self.max_text_length = max_text_length
        self.http_transport = http_transport

        logger.info(
            f"Initialized IngestionAgent (max_files={max_files}, "
            f"max_file_size_bytes={max_file_size_bytes})"
        )

    def validate_batch(self, paths: Sequence[str]) -> None:
        """
        Check batch limits without reading any file.

        Raises:
            InputValidationError: Too many files or one or more files too large
        """
        if len(paths) > self.max_files:
            raise InputValidationError(
                f"You can upload a maximum of {self.max_files} files at a time."
            )

        oversized = [
            os.path.basename(path) for path in paths
            if self._file_size(path) > self.max_file_size_bytes
        ]
        if oversized:
            max_mb = self.max_file_size_bytes / (1024 * 1024)
            raise InputValidationError(
                f"The following files are too large (max {max_mb:g}MB): {', '.join(oversized)}"
            )

    @staticmethod
    def _file_size(path: str) -> int:
        try:
            return os.path.getsize(path)
        except OSError as e:
            raise InputValidationError(f"Error reading {os.path.basename(path)}.") from e

    def load_files(self, paths: Sequence[str]) -> List[ReviewSource]:
        """
        Read an upload batch into one review source per file.

        Returns:
            Sources labelled with their file names, in input order

        Raises:
            InputValidationError: Batch limits, unsupported type, empty file
            CapabilityUnavailableError: Excel engine missing
        """
        if not paths:
            return []

        self.validate_batch(paths)

        sources = [self._read_file(path) for path in paths]
        logger.info(f"Loaded {len(sources)} files")
        return sources

    def _read_file(self, path: str) -> ReviewSource:
        name = os.path.basename(path)
        extension = os.path.splitext(name)[1].lower()

        if extension in settings.SUPPORTED_TEXT_EXTENSIONS:
            try:
                with open(path, 'r', encoding='utf-8-sig') as f:
                    text = f.read()
            except (OSError, UnicodeDecodeError) as e:
                raise InputValidationError(f"Error reading {name}.") from e
        elif extension in settings.SUPPORTED_SPREADSHEET_EXTENSIONS:
            text = self.converter.to_csv(path)
        else:
            raise InputValidationError(
                f"Unsupported file type: {name}. Please use CSV, XLSX, or TXT."
            )

        if not text:
            raise InputValidationError(f"File is empty or could not be read: {name}")

        logger.debug(f"Read {len(text)} chars from {name}")
        return ReviewSource(label=name, content=text)

    async def fetch_sheet(self, url: str) -> ReviewSource:
        """
        Download a published Google Sheet as CSV.

        Raises:
            InputValidationError: Malformed URL or body over the character ceiling
            ExternalServiceError: Network failure or non-success status
        """
        csv_url = sheet_export_url(url)
        logger.info(f"Fetching sheet export: {csv_url}")

        try:
            async with httpx.AsyncClient(
                timeout=settings.SHEET_FETCH_TIMEOUT_SECONDS,
                follow_redirects=True,
                transport=self.http_transport
            ) as client:
                response = await client.get(csv_url)
        except httpx.HTTPError as e:
            logger.error(f"Sheet fetch failed: {e}")
            raise ExternalServiceError(
                f"Fetch failed ({e}). Ensure the sheet is published to the web."
            ) from e

        if not response.is_success:
            logger.error(f"Sheet fetch returned HTTP {response.status_code}")
            raise ExternalServiceError("Fetch failed. Ensure the sheet is published to the web.")

        text = response.text
        if len(text) > self.max_text_length:
            raise InputValidationError(
                f"Sheet data is too large. The limit is {self.max_text_length:,} characters."
            )

        logger.info(f"Fetched {len(text)} chars from sheet")
        return ReviewSource(label=SHEET_SOURCE_LABEL, content=text)
