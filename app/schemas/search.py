from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookRecord(_CamelModel):
    # 업스트림 값 그대로 문자열 유지 (연도/평점 포함)
    id: str
    title: str
    author: str
    image_url: str
    small_image_url: str
    publication_year: str
    average_rating: str


class PaginationInfo(_CamelModel):
    page: int
    results_start: int
    results_end: int
    total_results: int
    total_pages: int


class SearchResponse(_CamelModel):
    books: List[BookRecord] = []
    pagination: Optional[PaginationInfo] = None
