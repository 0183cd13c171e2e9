"""Pydantic models of the Goodreads ``search/index.xml`` envelope.

The models validate the tree produced by ``app.core.xml_tree.parse_xml``.
Attribute blocks are exposed as ``attrs`` (key ``$``) and element text as
``value`` (key ``_``).

Two shape quirks of the upstream format are resolved here, once:

* ``work`` may be missing, a single element or a list. It is always
  exposed as a list (``SearchResults.works``).
* ``average_rating`` is sometimes plain text and sometimes a typed
  ``<average_rating type="float">`` element. It is always exposed as text.

Passing ``context={"strict": True}`` to ``model_validate`` enables the strict
envelope: ``results`` must be an element and ``work`` must already be a list.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    ValidationInfo,
    field_validator,
)

from app.core.xml_tree import listify

_url_adapter = TypeAdapter(AnyUrl)


def _is_strict(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("strict"))


class _Node(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class IntegerType(_Node):
    type: Literal["integer"]


class TypedInteger(_Node):
    value: str = Field(alias="_")
    attrs: IntegerType = Field(alias="$")


class NilableIntegerType(_Node):
    type: Literal["integer"]
    nil: Optional[Literal["true"]] = None


class PublicationDatePart(_Node):
    value: Optional[str] = Field(default=None, alias="_")
    attrs: NilableIntegerType = Field(alias="$")


class FloatType(_Node):
    type: Literal["float"]


class TypedFloat(_Node):
    value: str = Field(alias="_")
    attrs: FloatType = Field(alias="$")


def _rating_text(rating: Union[str, TypedFloat]) -> str:
    return rating if isinstance(rating, str) else rating.value


Rating = Annotated[Union[str, TypedFloat], AfterValidator(_rating_text)]


class Author(_Node):
    id: TypedInteger
    name: str


class BookType(_Node):
    type: Literal["Book"]


class BestBook(_Node):
    attrs: BookType = Field(alias="$")
    id: TypedInteger
    title: str
    author: Author
    image_url: str
    small_image_url: str

    @field_validator("image_url", "small_image_url")
    @classmethod
    def _absolute_url(cls, v: str) -> str:
        # validate only; the upstream string is passed through untouched
        try:
            _url_adapter.validate_python(v)
        except PydanticValidationError:
            raise ValueError("must be an absolute URL") from None
        return v


class Work(_Node):
    id: TypedInteger
    books_count: Any = None
    ratings_count: Any = None
    text_reviews_count: Any = None
    original_publication_year: PublicationDatePart
    original_publication_month: PublicationDatePart
    original_publication_day: PublicationDatePart
    average_rating: Rating
    best_book: BestBook


class SearchResults(_Node):
    works: Annotated[
        Union[List[Work], Work, None], AfterValidator(listify)
    ] = Field(default=None, alias="work", validate_default=True)

    @field_validator("works", mode="before")
    @classmethod
    def _strict_work_list(cls, v: Any, info: ValidationInfo) -> Any:
        if _is_strict(info) and v is not None and not isinstance(v, list):
            raise ValueError("work must be a list of work elements")
        return v


class Search(_Node):
    results_start: str = Field(alias="results-start")
    results_end: str = Field(alias="results-end")
    total_results: str = Field(alias="total-results")
    query_time_seconds: str = Field(alias="query-time-seconds")
    results: Union[SearchResults, str]

    @field_validator("results", mode="before")
    @classmethod
    def _strict_results(cls, v: Any, info: ValidationInfo) -> Any:
        if _is_strict(info) and isinstance(v, str):
            raise ValueError("results must be an element, not text")
        return v

    @property
    def works(self) -> List[Work]:
        if isinstance(self.results, str):
            return []
        return self.results.works


class GoodreadsBody(_Node):
    search: Search


class GoodreadsEnvelope(_Node):
    response: GoodreadsBody = Field(alias="GoodreadsResponse")
