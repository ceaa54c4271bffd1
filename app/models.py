from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field


class ResolveRequest(BaseModel):
    # Kept as a plain string: validation happens against the MediaFire pattern
    # so a bad value yields the same 400 body as the query-string variant.
    url: Optional[str] = Field(default=None, description="Public MediaFire file page URL")
    stream: bool = Field(default=False, description="Proxy the file bytes instead of returning JSON")


class ResolvedFile(BaseModel):
    success: bool = True
    filename: str
    direct_link: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


@dataclass(frozen=True)
class PageContent:
    """Markup of a file page, either as served or as rendered by a browser."""

    url: str
    html: str
    status_code: int = 200
    rendered: bool = False


@dataclass(frozen=True)
class ExtractionOutcome:
    kind: str
    link: Optional[str] = None
    strategy: Optional[str] = None
    detail: Optional[str] = None
    # the exception behind a fetch_error, re-raised at the HTTP boundary
    error: Optional[Any] = None

    @classmethod
    def found(cls, link: str, strategy: str) -> "ExtractionOutcome":
        return cls(kind="found", link=link, strategy=strategy)

    @classmethod
    def not_found(cls) -> "ExtractionOutcome":
        return cls(kind="not_found")

    @classmethod
    def fetch_error(cls, detail: str, error: Optional[Exception] = None) -> "ExtractionOutcome":
        return cls(kind="fetch_error", detail=detail, error=error)

    @property
    def is_found(self) -> bool:
        return self.kind == "found"
