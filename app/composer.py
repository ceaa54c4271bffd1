from urllib.parse import quote

import httpx
from fastapi.responses import PlainTextResponse, RedirectResponse, StreamingResponse
from loguru import logger
from starlette.background import BackgroundTask

from .config import Settings
from .errors import ResolverError, UpstreamError, classify_http_error
from .models import ResolvedFile
from .resolver import filename_from_link


def json_descriptor(link: str) -> ResolvedFile:
    return ResolvedFile(success=True, filename=filename_from_link(link), direct_link=link)


def _quoted(value: str) -> str:
    # quoted-string: backslash and double quote must be escaped
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def content_disposition(filename: str) -> str:
    try:
        filename.encode("latin-1")
    except UnicodeEncodeError:
        fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
        return f"attachment; filename={_quoted(fallback)}; filename*=UTF-8''{quote(filename, safe='')}"
    return f"attachment; filename={_quoted(filename)}"


async def stream_file(link: str, settings: Settings) -> StreamingResponse:
    """Proxy the file at ``link`` to the caller as an attachment.

    The upstream status is checked before any byte is sent so failures can
    still be reported with a proper status code.
    """
    client = httpx.AsyncClient(follow_redirects=True, timeout=settings.request_timeout)
    headers = {"User-Agent": settings.user_agent}
    try:
        upstream = await client.send(client.build_request("GET", link, headers=headers), stream=True)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        await client.aclose()
        error = classify_http_error(e)
        logger.warning(f"File fetch failed ({error.kind}): {e}")
        raise error from e

    if upstream.status_code >= 400:
        await upstream.aclose()
        await client.aclose()
        raise UpstreamError(upstream.status_code, f"GET {link} returned {upstream.status_code}")

    async def close_upstream():
        await upstream.aclose()
        await client.aclose()

    filename = filename_from_link(link)
    response = StreamingResponse(
        upstream.aiter_raw(),
        media_type=upstream.headers.get("content-type", "application/octet-stream"),
        background=BackgroundTask(close_upstream),
    )
    # raw bytes are passed through, so length and encoding stay valid
    for name in ("content-length", "content-encoding"):
        if upstream.headers.get(name):
            response.headers[name] = upstream.headers[name]
    response.headers["Content-Disposition"] = content_disposition(filename)
    logger.info(f"Streaming {filename or link} to client")
    return response


def redirect_to(link: str) -> RedirectResponse:
    return RedirectResponse(link, status_code=302)


def plain_text_error(error: ResolverError) -> PlainTextResponse:
    return PlainTextResponse(error.message, status_code=error.status_code)
