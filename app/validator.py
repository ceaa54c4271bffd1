import re
from typing import Optional


MEDIAFIRE_URL_RE = re.compile(r"^(https?://)?(www\.)?mediafire\.com/file/[^/?#\s]+(/\S*)?$", re.IGNORECASE)


def is_valid_mediafire_url(url: Optional[str]) -> bool:
    """Return True only for MediaFire file page URLs.

    This is the gate in front of every outbound request: anything that is not
    ``[http(s)://][www.]mediafire.com/file/<key>[/<more>]`` is refused.
    """
    if not url or not isinstance(url, str):
        return False
    return MEDIAFIRE_URL_RE.match(url.strip()) is not None


def normalize_page_url(url: str) -> str:
    url = url.strip()
    if not re.match(r"^https?://", url, re.IGNORECASE):
        url = f"https://{url}"
    return url
