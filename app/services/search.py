"""Search relay pipeline: fetch, parse, validate, map, paginate."""

import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import SchemaError
from app.core.xml_tree import parse_xml
from app.schemas.error import ErrorDetail
from app.schemas.goodreads import GoodreadsEnvelope, Search, SearchResults, TypedFloat, Work
from app.schemas.search import BookRecord, PaginationInfo, SearchResponse
from app.services.goodreads import GoodreadsClient

logger = logging.getLogger(__name__)


# union branch names pydantic inserts into error locations
_UNION_TAGS = {"str", "none", SearchResults.__name__, Work.__name__, TypedFloat.__name__}


def _upstream_path(loc) -> str:
    return ".".join(
        str(p) for p in loc if not (isinstance(p, str) and (p in _UNION_TAGS or "[" in p))
    )


def _schema_details(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    return [
        ErrorDetail(
            path=_upstream_path(err["loc"]),
            message=err["msg"],
            type=err["type"],
        ).model_dump()
        for err in exc.errors()
    ]


def validate_envelope(tree: Dict[str, Any], strict: bool = False) -> Search:
    """Validate a parsed catalog tree and return its ``search`` block.

    Raises ``SchemaError`` listing every violated check.
    """
    try:
        envelope = GoodreadsEnvelope.model_validate(tree, context={"strict": strict})
    except PydanticValidationError as exc:
        details = _schema_details(exc)
        logger.warning("Goodreads payload failed %d schema check(s)", len(details))
        raise SchemaError(details) from exc
    return envelope.response.search


def map_work_to_book(work: Work) -> BookRecord:
    best = work.best_book
    return BookRecord(
        id=best.id.value,
        title=best.title,
        author=best.author.name,
        image_url=best.image_url,
        small_image_url=best.small_image_url,
        # nil years carry no text
        publication_year=work.original_publication_year.value or "",
        average_rating=work.average_rating,
    )


def _count(search: Search, field: str, path: str) -> int:
    raw = getattr(search, field).strip()
    if not (raw.isascii() and raw.isdigit()):
        raise SchemaError(
            [ErrorDetail(path=path, message="Expected a decimal integer string", type="int_parsing").model_dump()]
        )
    return int(raw)


def compute_pagination(search: Search, page: int) -> PaginationInfo:
    base = "GoodreadsResponse.search."
    results_start = _count(search, "results_start", base + "results-start")
    results_end = _count(search, "results_end", base + "results-end")
    total_results = _count(search, "total_results", base + "total-results")

    items_per_page = (results_end - results_start + 1) if total_results > 0 else 0
    total_pages = math.ceil(total_results / items_per_page) if items_per_page > 0 else 0

    return PaginationInfo(
        page=page,
        results_start=results_start,
        results_end=results_end,
        total_results=total_results,
        total_pages=total_pages,
    )


def search_books(
    client: GoodreadsClient,
    query: str,
    page: int = 1,
    include_pagination: bool = True,
    strict: bool = False,
) -> SearchResponse:
    payload = client.search(query, page)
    tree = parse_xml(payload)
    search = validate_envelope(tree, strict=strict)

    books = [map_work_to_book(work) for work in search.works]
    pagination: Optional[PaginationInfo] = None
    if include_pagination:
        pagination = compute_pagination(search, page)

    logger.info("Search %r page %s -> %d book(s)", query, page, len(books))
    return SearchResponse(books=books, pagination=pagination)
