"""
Base API client shared by the bibliographic lookup sources.
"""
import logging
import time
import requests
from typing import Dict, Any, Optional
from abc import ABC, abstractmethod

from ..models.reference import MetadataRecord


class BaseAPIClient(ABC):
    """Base class for lookup clients with rate limiting and soft error handling.

    Lookups never raise: network errors, non-200 responses and undecodable
    bodies are logged and reported as None.
    """

    name = 'base'

    def __init__(self, base_url: str, email: Optional[str] = None,
                 timeout: int = 10, rate_limit_delay: float = 0.0,
                 session: Optional[requests.Session] = None):
        """
        Initialize API client.

        Args:
            base_url: Base URL for the API
            email: Contact email for polite-pool access (optional)
            timeout: Request timeout in seconds
            rate_limit_delay: Minimum delay between requests in seconds
            session: Preconfigured requests session (optional)
        """
        self.base_url = base_url.rstrip('/')
        self.email = email
        self.timeout = timeout
        self.rate_limit_delay = rate_limit_delay
        self.last_request_time = 0.0
        self.logger = logging.getLogger(self.__class__.__module__)
        self.session = session or requests.Session()

        if email:
            self.session.headers.update({
                'User-Agent': f'reference-tools/1.0 (mailto:{email})'
            })

    def _rate_limit(self):
        """Implement rate limiting."""
        if self.rate_limit_delay <= 0:
            return

        time_since_last = time.time() - self.last_request_time
        if time_since_last < self.rate_limit_delay:
            time.sleep(self.rate_limit_delay - time_since_last)

        self.last_request_time = time.time()

    def _get_json(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        GET an endpoint and decode the JSON body.

        Args:
            endpoint: Path relative to base_url
            params: Query parameters

        Returns:
            Decoded JSON object, or None on any failure
        """
        self._rate_limit()

        if endpoint and endpoint.strip():
            url = f"{self.base_url}/{endpoint.lstrip('/')}"
        else:
            url = self.base_url

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.warning(f"{self.name} request failed: {e}")
            return None

        if response.status_code != 200:
            self.logger.warning(f"{self.name} API error: {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            self.logger.warning(f"{self.name} returned invalid JSON: {e}")
            return None

        return data if isinstance(data, dict) else None

    @abstractmethod
    def search_by_title(self, title: str) -> Optional[MetadataRecord]:
        """
        Look up the best match for a title.

        Args:
            title: Paper title

        Returns:
            Normalized record of the top result, or None
        """
        pass


def first_item(values: Any) -> Optional[Any]:
    """First element of a list-valued API field, or None."""
    if isinstance(values, list) and values:
        return values[0]
    return None


def as_count(value: Any) -> int:
    """Non-negative integer from a count field."""
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0
