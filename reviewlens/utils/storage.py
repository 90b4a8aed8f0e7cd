"""
Storage utility.

File I/O helpers for the persisted API credential and exported artifacts.
"""

import json
import os
import logging
from typing import Optional

import config.settings as settings

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages all file persistence.

    Handles:
    - API credential (data/credentials.json, single fixed key)
    - Exported artifacts (reports, charts, templates) in an output directory
    """

    def __init__(self, data_root: str, output_root: Optional[str] = None):
        """
        Initialize storage manager.

        Args:
            data_root: Directory holding the credential file
            output_root: Default directory for exported artifacts
        """
        self.data_root = data_root
        self.output_root = output_root or str(settings.OUTPUT_ROOT)
        self.credentials_path = os.path.join(data_root, settings.CREDENTIALS_FILENAME)

        os.makedirs(self.data_root, exist_ok=True)

        logger.info(f"Initialized StorageManager with data_root={data_root}")

    def load_api_key(self) -> Optional[str]:
        """
        Load the saved API key.

        Returns:
            The key, or None if nothing has been saved or the file is unreadable
        """
        if not os.path.exists(self.credentials_path):
            logger.debug("No saved API key found")
            return None

        try:
            with open(self.credentials_path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load credentials from {self.credentials_path}: {e}")
            return None

        key = data.get(settings.API_KEY_STORAGE_KEY) if isinstance(data, dict) else None
        return key or None

    def save_api_key(self, api_key: str) -> None:
        """
        Persist the API key under its fixed storage key.

        Uses a temp file and rename so a crash never leaves a half-written file.
        """
        temp_path = f"{self.credentials_path}.tmp"
        data = {settings.API_KEY_STORAGE_KEY: api_key}

        try:
            with open(temp_path, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, self.credentials_path)
            logger.info("API key saved")
        except OSError as e:
            logger.error(f"Failed to save API key: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def save_artifact(self, filename: str, data: bytes, output_dir: Optional[str] = None) -> str:
        """
        Write an exported artifact.

        Args:
            filename: Base file name, e.g. Customer_Insights_Report_18-10-2026.pdf
            data: Encoded file content
            output_dir: Target directory, defaults to the configured output root

        Returns:
            Path of the written file
        """
        target_dir = output_dir or self.output_root
        os.makedirs(target_dir, exist_ok=True)
        filepath = os.path.join(target_dir, filename)

        try:
            with open(filepath, 'wb') as f:
                f.write(data)
            logger.info(f"Saved {len(data)} bytes to {filepath}")
        except OSError as e:
            logger.error(f"Failed to save {filepath}: {e}")
            raise

        return filepath
