from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .composer import json_descriptor, plain_text_error, redirect_to, stream_file
from .config import Settings, get_settings
from .errors import InvalidInput, ResolverError, UnexpectedError
from .fetcher import PageFetcher, build_fetcher
from .logger import logger
from .models import ErrorResponse, ResolvedFile, ResolveRequest
from .resolver import resolve_mediafire


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def create_app(settings: Optional[Settings] = None, fetcher: Optional[PageFetcher] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="MediaFire Downloader API", version="0.1.0")
    app.state.settings = settings
    app.state.fetcher = fetcher or build_fetcher(settings)

    # Permissive CORS: the API is meant to be called from any web client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def _download(request: Request, url: Optional[str], stream: bool):
        link = await resolve_mediafire(url, request.app.state.fetcher)
        if stream:
            return await stream_file(link, request.app.state.settings)
        return json_descriptor(link)

    @app.get("/")
    async def homepage():
        return {"message": "MediaFire Downloader API", "docs": "/docs"}

    @app.get("/health")
    async def health(request: Request):
        return {"status": "ok", "render_mode": request.app.state.settings.render_mode}

    @app.get("/download", response_model=ResolvedFile, responses=ERROR_RESPONSES)
    async def download_get(
        request: Request,
        url: Optional[str] = Query(None, description="MediaFire file page URL"),
        stream: Optional[str] = Query(None, description="'true' to proxy the file bytes"),
    ):
        return await _download(request, url, (stream or "").lower() == "true")

    @app.post("/download", response_model=ResolvedFile, responses=ERROR_RESPONSES)
    async def download_post(request: Request, payload: ResolveRequest):
        return await _download(request, payload.url, payload.stream)

    @app.get("/direct", responses={302: {"description": "Redirect to the direct download link"}})
    async def direct(request: Request, url: Optional[str] = Query(None, description="MediaFire file page URL")):
        try:
            link = await resolve_mediafire(url, request.app.state.fetcher)
        except ResolverError as e:
            logger.warning(f"Direct redirect failed ({e.kind}): {e}")
            return plain_text_error(e)
        except Exception as e:
            logger.exception("Unexpected error in /direct")
            return plain_text_error(UnexpectedError(str(e)))
        return redirect_to(link)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected request body: {exc.errors()}")
        error = InvalidInput()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(ResolverError)
    async def resolver_error_handler(request: Request, exc: ResolverError):
        if exc.status_code >= 500:
            logger.error(f"Error in {request.url.path} ({exc.kind}): {exc}")
        else:
            logger.warning(f"Error in {request.url.path} ({exc.kind}): {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled server error")
        error = UnexpectedError(str(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    return app


app = create_app()
