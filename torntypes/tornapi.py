"""
Client for the remote Torn API schema endpoints.

The V1 schema is spread over several documents: the section list, one schema
document per section and the error table. The section schemas have no mutual
dependency, so they are fetched concurrently. Results are always returned in
section-list order, never in arrival order.

Any failure to fetch or decode a document is fatal and raised as
``TornApiFetchError``; there is no retry and no partial result.
"""

# pylint: disable=line-too-long

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from torntypes.constants import MAX_WORKERS, REQUEST_TIMEOUT, V1_BASE_URL, V2_OPENAPI_URL
from torntypes.tornschema import ErrorCode, SectionSchema, parse_error_codes, parse_section_schema

logger = logging.getLogger(__name__)

T = TypeVar('T')


class TornTypesError(Exception):
    """
    Base exception of the torntypes package.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, context: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class TornApiFetchError(TornTypesError):
    """Raised when a schema document cannot be fetched or decoded."""


@dataclass
class TornV1Inputs:
    """The fetched inputs of the V1 generator."""
    sections: List[str]
    section_schemas: List[SectionSchema]
    errors: List[ErrorCode]


class TornApiClient:
    """
    Fetches the Torn API schema documents.

    Attributes:
        v1_base_url: Base URL of the V1 schema endpoints.
        v2_url: URL of the V2 OpenAPI document.
        timeout: Request timeout in seconds.
    """

    def __init__(self, v1_base_url: str = V1_BASE_URL, v2_url: str = V2_OPENAPI_URL, timeout: float = REQUEST_TIMEOUT) -> None:
        self.v1_base_url = v1_base_url.rstrip('/')
        self.v2_url = v2_url
        self.timeout = timeout

    def fetch_json(self, url: str) -> Any:
        """
        Fetch a JSON document.

        Args:
            url: The URL to fetch.

        Returns:
            The decoded JSON value.

        Raises:
            TornApiFetchError: If the request fails, returns an error status or
                the body is not JSON.
        """
        logger.debug("Fetching %s", url)
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise TornApiFetchError(f"Failed to fetch {url}: {e}", context=url, cause=e) from e
        except ValueError as e:
            raise TornApiFetchError(f"Response from {url} is not valid JSON", context=url, cause=e) from e

    def fetch_member(self, url: str, key: str) -> Any:
        """Fetch a JSON object and return one of its top-level members."""
        document = self.fetch_json(url)
        if not isinstance(document, dict) or key not in document:
            raise TornApiFetchError(f"Response from {url} has no '{key}' member", context=url)
        return document[key]

    def get_sections(self) -> List[str]:
        """Fetch the ordered list of V1 section names."""
        return [str(s) for s in self.fetch_member(f"{self.v1_base_url}/sections", 'sections')]

    def get_section_schema(self, section: str) -> SectionSchema:
        """Fetch and parse the schema document of one V1 section."""
        url = f"{self.v1_base_url}/schema/{section}"
        document = self.fetch_json(url)
        if not isinstance(document, dict):
            raise TornApiFetchError(f"Response from {url} is not a schema document", context=url)
        return parse_section_schema(document)

    def get_error_codes(self) -> List[ErrorCode]:
        """Fetch and parse the V1 error table."""
        url = f"{self.v1_base_url}/errors"
        try:
            return parse_error_codes(self.fetch_member(url, 'errors'))
        except (KeyError, TypeError, ValueError) as e:
            raise TornApiFetchError(f"Response from {url} is not an error table", context=url, cause=e) from e

    def get_openapi_document(self) -> Dict[str, Any]:
        """Fetch the V2 OpenAPI document."""
        document = self.fetch_json(self.v2_url)
        if not isinstance(document, dict):
            raise TornApiFetchError(f"Response from {self.v2_url} is not an OpenAPI document", context=self.v2_url)
        return document


def map_sections(sections: List[str], func: Callable[[str], T], max_workers: int = MAX_WORKERS) -> List[T]:
    """
    Apply ``func`` to every section concurrently.

    Results are in section order. The first exception raised by any call
    propagates once all submitted calls have finished.
    """
    if not sections:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(sections)))) as executor:
        return list(executor.map(func, sections))


def fetch_v1_inputs(client: TornApiClient, max_workers: int = MAX_WORKERS) -> TornV1Inputs:
    """
    Fetch the section list, the error table and every section schema.

    The error table is fetched while the section list and the section schemas
    are being fetched.
    """
    with ThreadPoolExecutor(max_workers=1) as executor:
        errors_future = executor.submit(client.get_error_codes)
        sections = client.get_sections()
        logger.info("Fetching %d V1 sections", len(sections))
        section_schemas = map_sections(sections, client.get_section_schema, max_workers)
        errors = errors_future.result()
    return TornV1Inputs(sections, section_schemas, errors)
