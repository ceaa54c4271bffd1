from typing import Optional
from urllib.parse import unquote, urlsplit

from loguru import logger

from .errors import InvalidInput, LinkNotFound, ResolverError, UnexpectedError
from .extractor import extract_direct_link
from .fetcher import PageFetcher
from .models import ExtractionOutcome
from .validator import is_valid_mediafire_url, normalize_page_url


def filename_from_link(link: str) -> str:
    """Percent-decoded last path segment of ``link``, without query or fragment."""
    path = urlsplit(link).path
    return unquote(path.rsplit("/", 1)[-1])


async def resolve_outcome(page_url: str, fetcher: PageFetcher) -> ExtractionOutcome:
    try:
        content = await fetcher.fetch(page_url)
    except ResolverError as e:
        return ExtractionOutcome.fetch_error(e.details or e.message, error=e)
    return extract_direct_link(content)


def link_from_outcome(outcome: ExtractionOutcome) -> str:
    if outcome.is_found:
        return outcome.link
    if outcome.kind == "fetch_error":
        if isinstance(outcome.error, ResolverError):
            raise outcome.error
        raise UnexpectedError(outcome.detail)
    raise LinkNotFound()


async def resolve_mediafire(url: Optional[str], fetcher: PageFetcher) -> str:
    """Turn a MediaFire file page URL into its direct download link.

    Raises:
        InvalidInput: the URL is missing or not a MediaFire file page.
        LinkNotFound: the page was fetched but no strategy produced a link.
        UpstreamError, NetworkError, RequestSetupError: fetching the page failed.
    """
    if not is_valid_mediafire_url(url):
        raise InvalidInput()

    page_url = normalize_page_url(url)
    outcome = await resolve_outcome(page_url, fetcher)
    if outcome.kind == "not_found":
        logger.warning(f"No direct link found on {page_url}")
    return link_from_outcome(outcome)
