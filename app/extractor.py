import base64
import binascii
import re
from typing import Callable, Optional, Tuple

from bs4 import BeautifulSoup
from loguru import logger

from .models import ExtractionOutcome, PageContent


DOWNLOAD_BUTTON_SELECTOR = "a#downloadButton"
SCRAMBLED_ATTR = "data-scrambled-url"

# Values MediaFire puts in the button before its scripts have run
PLACEHOLDER_HREFS = {"", "#", "javascript:void(0)", "javascript:void(0);", "javascript:;"}

DOWNLOAD_URL_RE = re.compile(r'"downloadUrl"\s*:\s*"(https?:(?:\\?/){2}[^"]+)"')
DIRECT_LINK_RE = re.compile(r"^https?://", re.IGNORECASE)

Strategy = Callable[[BeautifulSoup, str], Optional[str]]


def is_placeholder(value: Optional[str]) -> bool:
    if value is None:
        return True
    return value.strip().lower().replace(" ", "") in PLACEHOLDER_HREFS


def is_direct_link(value: Optional[str]) -> bool:
    return bool(value) and DIRECT_LINK_RE.match(value) is not None


def _download_button(soup: BeautifulSoup):
    return soup.select_one(DOWNLOAD_BUTTON_SELECTOR)


def from_download_button(soup: BeautifulSoup, html: str) -> Optional[str]:
    button = _download_button(soup)
    if button is None:
        return None
    href = button.get("href")
    if not isinstance(href, str) or is_placeholder(href):
        return None
    return href.strip()


def from_scrambled_url(soup: BeautifulSoup, html: str) -> Optional[str]:
    button = _download_button(soup)
    if button is None:
        return None
    scrambled = button.get(SCRAMBLED_ATTR)
    if not isinstance(scrambled, str) or not scrambled.strip():
        return None
    try:
        decoded = base64.b64decode(scrambled.strip(), validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        # malformed payload: let the next strategy have a go
        logger.debug(f"Could not decode {SCRAMBLED_ATTR}: {e}")
        return None
    if is_placeholder(decoded):
        return None
    return decoded.strip()


def _unescape_js(value: str) -> str:
    return value.replace("\\u002d", "-").replace("\\u002D", "-").replace("\\/", "/")


def from_script_payload(soup: BeautifulSoup, html: str) -> Optional[str]:
    script_text = "\n".join(script.get_text() for script in soup.find_all("script"))
    match = DOWNLOAD_URL_RE.search(script_text) or DOWNLOAD_URL_RE.search(html)
    if not match:
        return None
    return _unescape_js(match.group(1))


# Tried in order; MediaFire has changed its markup several times so the
# simplest selector comes first. New fallbacks go at the end.
STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("download_button", from_download_button),
    ("scrambled_url", from_scrambled_url),
    ("script_payload", from_script_payload),
)


def extract_direct_link(content: PageContent) -> ExtractionOutcome:
    soup = BeautifulSoup(content.html, "html.parser")

    for name, strategy in STRATEGIES:
        candidate = strategy(soup, content.html)
        if not candidate:
            continue
        if not is_direct_link(candidate):
            logger.warning(f"Strategy {name} produced a non-URL value for {content.url}: {candidate[:80]!r}")
            return ExtractionOutcome.not_found()
        logger.info(f"Found direct link with {name}: {candidate}")
        return ExtractionOutcome.found(candidate, name)

    return ExtractionOutcome.not_found()
