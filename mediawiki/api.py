"""
MediaWiki API Access
====================
Turns a Wikipedia page URL into a (language, title) locator and fetches the
page's latest revision through the MediaWiki API as XML.

Supported URL shapes:
- http(s)://<ll>.wikipedia.org/wiki/<title>
- https://secure.wikimedia.org/wikipedia/<ll>/wiki/<title>
"""

import re
from typing import Dict, Optional
from urllib.parse import unquote

import requests

from config_logging import get_config, get_logger, InvalidLocatorError, FetchError
from .models import DocumentLocator

logger = get_logger(__name__)

WIKIPEDIA_URL_REGEX = re.compile(r"https?://([a-z]{2})\.wikipedia\.org/wiki/(.*)")
SECURE_WIKIPEDIA_URL_REGEX = re.compile(r"https://secure\.wikimedia\.org/wikipedia/([a-z]{2})/wiki/(.*)")

API_URL_TEMPLATE = "https://{language}.wikipedia.org/w/api.php"


def parse_locator(url: str) -> DocumentLocator:
    """
    Resolve a Wikipedia page URL to its language and page title.

    Raises:
        InvalidLocatorError: URL does not have a supported shape or has no title
    """
    url = (url or "").strip()
    for pattern in (WIKIPEDIA_URL_REGEX, SECURE_WIKIPEDIA_URL_REGEX):
        match = pattern.fullmatch(url)
        if match:
            language, raw_title = match.group(1), match.group(2)
            title = unquote(raw_title)
            if not title:
                break
            return DocumentLocator(language=language, title=title, url=url)
    raise InvalidLocatorError(f"URL does not seem to be a valid Wikipedia URL: {url}", url=url)


def validate_url(url: str) -> None:
    """Raise InvalidLocatorError unless url is a supported Wikipedia URL."""
    parse_locator(url)


def api_endpoint(language: str) -> str:
    return API_URL_TEMPLATE.format(language=language)


def build_api_params(locator: DocumentLocator) -> Dict[str, str]:
    """Query parameters selecting the latest revision's content and timestamp."""
    return {
        'action': 'query',
        'prop': 'revisions',
        'rvprop': 'content|timestamp',
        'rvslots': 'main',
        'format': 'xml',
        'titles': locator.title,
    }


class MediaWikiClient:
    """
    Fetches revision XML from the MediaWiki API.

    No retries: a failed request is reported as FetchError.
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None, user_agent: Optional[str] = None):
        config = get_config()
        self.timeout = timeout if timeout is not None else config.http_timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': user_agent or config.user_agent})

    def fetch_revision_xml(self, locator: DocumentLocator) -> str:
        """
        Download the API response for a page.

        Raises:
            FetchError: on transport failure or a non-2xx response
        """
        endpoint = api_endpoint(locator.language)
        try:
            response = self.session.get(endpoint, params=build_api_params(locator), timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(f"MediaWiki API returned HTTP {status} for '{locator.title}'",
                             url=endpoint, status_code=status) from e
        except requests.RequestException as e:
            raise FetchError(f"Could not fetch '{locator.title}' from {endpoint}: {e}",
                             url=endpoint) from e

        response.encoding = response.encoding or 'utf-8'
        logger.info(
            f"Fetched {len(response.content)} bytes for '{locator.title}'",
            language=locator.language,
            title=locator.title,
        )
        return response.text

    def close(self):
        self.session.close()
