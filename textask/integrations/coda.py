"""Coda integration for textask.

Coda is both the vocabulary source (task types, categories, statuses tables)
and the persistence sink (task table).
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from textask.config import Settings
from textask.models.task import TaskRecord
from textask.models.vocabulary import CategoryCandidate, Vocabularies, normalize_status_key

logger = logging.getLogger(__name__)

CODA_API_BASE = "https://coda.io/apis/v1"
REQUEST_TIMEOUT_SEC = 10


class CodaError(Exception):
    """A Coda API call failed or returned an unusable response."""


class CodaClient:
    """Client for Coda API integration."""

    def __init__(self, settings: Settings):
        """Initialize Coda client.

        Args:
            settings: Service settings; CODA_API_KEY and DOC_ID are required.
        """
        if not settings.coda_api_key or not settings.doc_id:
            raise ValueError("Coda API key and doc id are required. Set CODA_API_KEY and DOC_ID env vars.")

        self.settings = settings
        self.headers = {
            "Authorization": f"Bearer {settings.coda_api_key}",
            "Content-Type": "application/json",
        }

    def _rows_url(self, table_id: str) -> str:
        return f"{CODA_API_BASE}/docs/{self.settings.doc_id}/tables/{table_id}/rows"

    def fetch_rows(self, table_id: str) -> List[Dict[str, Any]]:
        """Fetch every row of a table, following pagination.

        Returns:
            List of Coda row dictionaries

        Raises:
            CodaError: If API call fails
        """
        url = self._rows_url(table_id)
        params: Dict[str, Any] = {"useColumnNames": "true", "valueFormat": "simple"}
        rows: List[Dict[str, Any]] = []

        while True:
            try:
                response = requests.get(url, headers=self.headers, params=params, timeout=REQUEST_TIMEOUT_SEC)
                response.raise_for_status()
                payload = response.json()
            except requests.RequestException as e:
                raise CodaError(f"Failed to fetch rows from Coda table {table_id}: {type(e).__name__}") from e
            except ValueError as e:
                raise CodaError(f"Coda returned invalid JSON for table {table_id}") from e

            rows.extend(payload.get("items", []))
            page_token = payload.get("nextPageToken")
            if not page_token:
                return rows
            params = {**params, "pageToken": page_token}

    def fetch_task_types(self) -> List[str]:
        """Task type names from the types table."""
        if not self.settings.types_table_id:
            return []
        return [row["name"] for row in self.fetch_rows(self.settings.types_table_id) if row.get("name")]

    def fetch_categories(self) -> List[CategoryCandidate]:
        """Category rows (name and row id) from the categories table."""
        if not self.settings.categories_table_id:
            return []
        return [
            CategoryCandidate(name=row["name"], id=row["id"])
            for row in self.fetch_rows(self.settings.categories_table_id)
            if row.get("name") and row.get("id")
        ]

    def fetch_statuses(self) -> Dict[str, str]:
        """Status labels from the statuses table, keyed by normalized label."""
        if not self.settings.statuses_table_id:
            return {}
        statuses: Dict[str, str] = {}
        for row in self.fetch_rows(self.settings.statuses_table_id):
            label = row.get("name")
            if label:
                statuses[normalize_status_key(label)] = label
        return statuses

    def fetch_vocabularies(self) -> Vocabularies:
        """Fetch all vocabularies; a table that fails to load is treated as empty."""
        vocabularies = Vocabularies()

        try:
            vocabularies.task_types = self.fetch_task_types()
        except CodaError as e:
            logger.warning(f"Task types unavailable: {e}")
        try:
            vocabularies.categories = self.fetch_categories()
        except CodaError as e:
            logger.warning(f"Categories unavailable: {e}")
        try:
            vocabularies.statuses = self.fetch_statuses()
        except CodaError as e:
            logger.warning(f"Statuses unavailable: {e}")

        return vocabularies

    def create_record(self, record: TaskRecord) -> Dict[str, str]:
        """Insert a task row.

        Returns:
            {"id": <row id>} (request id when Coda has not assigned a row id yet)

        Raises:
            CodaError: If the row was not accepted
        """
        if not self.settings.task_table_id:
            raise CodaError("TASK_TABLE_ID is not configured")

        body = {"rows": [{"cells": record.to_cells(self.settings.columns)}]}
        try:
            response = requests.post(
                self._rows_url(self.settings.task_table_id),
                headers=self.headers,
                json=body,
                timeout=REQUEST_TIMEOUT_SEC,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise CodaError(f"Failed to add row to Coda: {type(e).__name__}") from e
        except ValueError as e:
            raise CodaError("Coda returned invalid JSON for row insert") from e

        row_ids: Optional[List[str]] = payload.get("addedRowIds")
        if row_ids:
            return {"id": row_ids[0]}
        if payload.get("requestId"):
            return {"id": payload["requestId"]}
        raise CodaError("Coda did not acknowledge the row insert")
