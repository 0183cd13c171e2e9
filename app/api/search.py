import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.errors import RelayError, ValidationError
from app.schemas.error import ErrorResponse
from app.schemas.search import SearchResponse
from app.services.goodreads import GoodreadsClient, get_client
from app.services.search import search_books

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.get(
    "/search",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    summary="Goodreads 검색 결과를 책 목록으로 변환",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def search(
    q: Optional[str] = Query(None, description="검색 키워드"),
    page: Optional[str] = Query(None, description="Goodreads 결과 페이지 (1부터)"),
    settings: Settings = Depends(get_settings),
    client: GoodreadsClient = Depends(get_client),
):
    query = (q or "").strip()
    if not query:
        raise ValidationError("Search query is required")
    try:
        page_number = int(page) if page not in (None, "") else 1
    except ValueError:
        raise ValidationError("Page must be an integer") from None

    try:
        return search_books(
            client,
            query,
            page=page_number,
            include_pagination=settings.include_pagination,
            strict=settings.envelope_mode == "strict",
        )
    except RelayError:
        raise
    except Exception:
        logger.exception("Unexpected error while searching %r", query)
        return JSONResponse(status_code=500, content=ErrorResponse(error="Something went wrong").model_dump(exclude_none=True))
