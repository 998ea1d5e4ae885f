"""Airtable REST client for reading and patching records."""

from typing import Any, Optional
from urllib.parse import quote

import httpx
import structlog

from airwave.services.exceptions import StoreNotFound, StoreUnavailable

logger = structlog.get_logger()


class AirtableClient:
    """Record store client bound to one Airtable base.

    No caching: every call hits Airtable, so sequential calls on the same
    record are not atomic with each other.
    """

    def __init__(
        self,
        token: str,
        base_id: str,
        api_url: str = "https://api.airtable.com/v0",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Airtable client.

        Args:
            token: Airtable personal access token (from AIRTABLE_TOKEN env var)
            base_id: Airtable base identifier (from AIRTABLE_BASE_ID env var)
            api_url: REST API root (default: public Airtable API)
            timeout: Transport timeout in seconds for every request
            transport: Optional httpx transport (used by tests)
        """
        self.base_id = base_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def table_url(self, table: str) -> str:
        """Build the endpoint URL for a table (name is percent-encoded)."""
        return f"{self.api_url}/{self.base_id}/{quote(table, safe='')}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def get_record(self, table: str, record_id: str) -> dict[str, Any]:
        """Fetch all fields of a record.

        Args:
            table: Table name
            record_id: Airtable record id (e.g., "rec123")

        Returns:
            The record's `fields` mapping (empty when Airtable omits it)

        Raises:
            StoreNotFound: Record id does not resolve (404)
            StoreUnavailable: Any other non-success response or network failure
        """
        url = f"{self.table_url(table)}/{quote(record_id, safe='')}"
        try:
            async with self._client() as client:
                response = await client.get(url, headers=self.headers)
        except httpx.HTTPError as e:
            raise StoreUnavailable(f"Airtable getRecord failed: {str(e)}") from e

        if response.status_code == 404:
            raise StoreNotFound(
                f"Airtable getRecord failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.is_success:
            raise StoreUnavailable(
                f"Airtable getRecord failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        record = response.json()
        logger.debug("airtable.record_fetched", table=table, record_id=record_id)
        return record.get("fields") or {}

    async def update_record(
        self, table: str, record_id: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Partially update named fields of a record; unnamed fields stay untouched.

        Raises:
            StoreUnavailable: Non-success response (message carries body text) or network failure
        """
        payload = {"records": [{"id": record_id, "fields": fields}]}
        try:
            async with self._client() as client:
                response = await client.patch(
                    self.table_url(table), headers=self.headers, json=payload
                )
        except httpx.HTTPError as e:
            raise StoreUnavailable(f"Airtable updateRecord failed: {str(e)}") from e

        if not response.is_success:
            raise StoreUnavailable(
                f"Airtable updateRecord failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug(
            "airtable.record_updated", table=table, record_id=record_id, fields=list(fields)
        )
        return response.json()
