"""Fetch JSON documents from the sequence and metadata endpoints."""

import logging
from typing import Any, List

import requests

from fasta_combiner.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
ENVELOPE_KEY = "data"


class JsonFetcher:
    def __init__(self, session: requests.Session, timeout: float = DEFAULT_TIMEOUT):
        self._session = session
        self._timeout = timeout

    def fetch(self, url: str) -> Any:
        """GET ``url`` and decode its JSON body. Raises FetchError, never retries."""
        logger.info("Fetching %s", url)
        try:
            resp = self._session.get(url, timeout=self._timeout)
            resp.raise_for_status()
        except requests.HTTPError as exc:
            logger.warning("HTTP GET failed: %s", url, exc_info=True)
            raise FetchError(url, f"upstream returned HTTP {exc.response.status_code}") from exc
        except requests.RequestException as exc:
            logger.warning("HTTP GET failed: %s", url, exc_info=True)
            raise FetchError(url, str(exc)) from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(url, "response body is not valid JSON") from exc


def unwrap_records(document: Any, url: str) -> List[Any]:
    """Return the record array from a ``{"data": [...]}`` envelope.

    Both upstream endpoints wrap their records this way. Bare arrays and any
    other shape are treated as a malformed upstream response.
    """
    if not isinstance(document, dict):
        raise FetchError(
            url, f"expected a JSON object with a '{ENVELOPE_KEY}' array, got {type(document).__name__}"
        )
    records = document.get(ENVELOPE_KEY)
    if not isinstance(records, list):
        raise FetchError(url, f"response has no '{ENVELOPE_KEY}' array")
    return records
