import pytest

from app.core.errors import SchemaError
from app.core.xml_tree import parse_xml
from app.services.search import map_work_to_book, validate_envelope

from samples import search_xml, work_xml


def books_from(payload: bytes, strict: bool = False):
    search = validate_envelope(parse_xml(payload), strict=strict)
    return [map_work_to_book(w) for w in search.works]


def test_text_results_means_no_books():
    assert books_from(search_xml(total="0", start="0", end="0")) == []


def test_results_without_work_means_no_books():
    payload = search_xml(results="<results><note>none</note></results>")
    assert books_from(payload) == []


def test_single_work_object_yields_one_book():
    books = books_from(search_xml(work_xml(book_id="5", title="Dune", author="Frank Herbert")))
    assert len(books) == 1
    book = books[0]
    assert book.id == "5"
    assert book.title == "Dune"
    assert book.author == "Frank Herbert"
    assert book.image_url == "https://images.test/m/1.jpg"
    assert book.small_image_url == "https://images.test/s/1.jpg"
    assert book.publication_year == "1999"
    assert book.average_rating == "4.5"


def test_work_list_keeps_count_and_order():
    works = "".join(work_xml(book_id=str(i), title=f"T{i}") for i in range(1, 6))
    books = books_from(search_xml(works))
    assert [b.id for b in books] == ["1", "2", "3", "4", "5"]
    assert [b.title for b in books] == ["T1", "T2", "T3", "T4", "T5"]


def test_rating_text_and_typed_rating_map_the_same():
    plain = work_xml(book_id="1", rating="<average_rating>4.5</average_rating>")
    typed = work_xml(book_id="2", rating='<average_rating type="float">4.5</average_rating>')
    books = books_from(search_xml(plain + typed))
    assert [b.average_rating for b in books] == ["4.5", "4.5"]


def test_nil_publication_year_passes_through_as_empty():
    nil_year = '<original_publication_year type="integer" nil="true"/>'
    books = books_from(search_xml(work_xml(year=nil_year)))
    assert books[0].publication_year == ""


def test_book_fields_are_strings():
    book = books_from(search_xml(work_xml()))[0]
    assert all(isinstance(v, str) for v in book.model_dump().values())


def test_wrong_best_book_type_is_schema_error():
    with pytest.raises(SchemaError) as info:
        books_from(search_xml(work_xml(book_type="Author")))
    paths = [d["path"] for d in info.value.details]
    assert any("best_book.$.type" in p for p in paths)


def test_wrong_rating_type_is_schema_error():
    rating = '<average_rating type="integer">4</average_rating>'
    with pytest.raises(SchemaError):
        books_from(search_xml(work_xml(rating=rating)))


def test_invalid_image_url_is_schema_error():
    with pytest.raises(SchemaError) as info:
        books_from(search_xml(work_xml(image_url="not a url")))
    assert any("image_url" in d["path"] for d in info.value.details)


def test_missing_count_field_is_schema_error():
    payload = search_xml(work_xml()).replace(b"<total-results>100</total-results>", b"")
    with pytest.raises(SchemaError) as info:
        books_from(payload)
    assert info.value.details[0]["path"] == "GoodreadsResponse.search.total-results"
    assert info.value.details[0]["type"] == "missing"


def test_strict_envelope_accepts_work_list():
    works = work_xml(book_id="1") + work_xml(book_id="2")
    assert len(books_from(search_xml(works), strict=True)) == 2


def test_strict_envelope_rejects_text_results():
    with pytest.raises(SchemaError):
        books_from(search_xml(total="0"), strict=True)


def test_strict_envelope_rejects_single_work():
    with pytest.raises(SchemaError):
        books_from(search_xml(work_xml()), strict=True)


def test_strict_envelope_without_work_is_empty():
    payload = search_xml(results="<results><note>none</note></results>")
    assert books_from(payload, strict=True) == []


def test_schema_error_paths_follow_upstream_fields():
    with pytest.raises(SchemaError) as info:
        books_from(search_xml(work_xml(book_type="Author")))
    paths = [d["path"] for d in info.value.details]
    assert "GoodreadsResponse.search.results.work.best_book.$.type" in paths
    assert not any("SearchResults" in p or "[" in p for p in paths)


def test_schema_error_paths_index_work_lists():
    works = work_xml(book_id="1") + work_xml(book_id="2", book_type="Author")
    with pytest.raises(SchemaError) as info:
        books_from(search_xml(works))
    paths = [d["path"] for d in info.value.details]
    assert "GoodreadsResponse.search.results.work.1.best_book.$.type" in paths
