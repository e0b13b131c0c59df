import json

import pytest
import pytest_asyncio

from histline.db import build_engine, build_session_factory, init_db, load_dataset
from histline.exceptions import InvalidDatasetQueryError
from histline.services.dataset_search import (
    DatabaseDatasetSource,
    DatasetSearchService,
    InMemoryDatasetSource,
    parse_year_topic,
)

DATASET = [
    {"Title": "Treaty of Versailles", "Country": "France", "Year": 1919},
    {"Title": "Moon landing", "Country": "United States", "Year": 1969},
    {"Title": "Fall of the Berlin Wall", "Country": "Germany", "Year": 1989},
    {"Title": "Year as text", "Country": "FRANCE", "Year": "1969"},
    {"Title": "No country", "Year": 2001},
]


@pytest.fixture
def dataset_service() -> DatasetSearchService:
    return DatasetSearchService(InMemoryDatasetSource(DATASET))


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'dataset.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.mark.parametrize(
    "topic, expected",
    [("1969", 1969), (" 1945 AD", 1945), ("-44", -44), ("1989.5", 1989), ("abc", None), ("", None)],
)
def test_parse_year_topic_reads_leading_integer(topic, expected):
    assert parse_year_topic(topic) == expected


@pytest.mark.asyncio
async def test_year_matches_numeric_values_exactly(dataset_service):
    results = await dataset_service.search("Year", "1969")

    assert [r["Title"] for r in results] == ["Moon landing"]


@pytest.mark.asyncio
async def test_invalid_year_is_rejected(dataset_service):
    with pytest.raises(InvalidDatasetQueryError, match="Invalid year"):
        await dataset_service.search("Year", "nineteen sixty-nine")


@pytest.mark.asyncio
async def test_text_fields_match_case_insensitively_and_partially(dataset_service):
    results = await dataset_service.search("Country", "fran")

    assert [r["Title"] for r in results] == ["Treaty of Versailles", "Year as text"]


@pytest.mark.asyncio
async def test_text_topic_is_a_regular_expression(dataset_service):
    results = await dataset_service.search("Title", "^(moon|fall)")

    assert [r["Title"] for r in results] == ["Moon landing", "Fall of the Berlin Wall"]


@pytest.mark.asyncio
async def test_entries_without_the_field_never_match(dataset_service):
    results = await dataset_service.search("Country", ".*")

    assert "No country" not in [r["Title"] for r in results]


@pytest.mark.asyncio
async def test_numeric_field_values_are_not_regex_searched(dataset_service):
    assert await dataset_service.search("Year", "2001") != []
    assert await dataset_service.search("year", "2001") == []


@pytest.mark.asyncio
@pytest.mark.parametrize("field, topic", [(None, "x"), ("", "x"), ("Title", None)])
async def test_missing_parameters_are_rejected(dataset_service, field, topic):
    with pytest.raises(InvalidDatasetQueryError):
        await dataset_service.search(field, topic)


@pytest.mark.asyncio
async def test_broken_pattern_is_rejected(dataset_service):
    with pytest.raises(InvalidDatasetQueryError, match="Invalid topic pattern"):
        await dataset_service.search("Title", "(unclosed")


@pytest.mark.asyncio
async def test_loaded_dataset_is_searchable_from_database(sqlite_engine, tmp_path):
    dataset_file = tmp_path / "dataset.json"
    dataset_file.write_text(json.dumps(DATASET), encoding="utf-8")

    assert await load_dataset(dataset_file, engine=sqlite_engine) == len(DATASET)

    service = DatasetSearchService(
        DatabaseDatasetSource(session_factory=build_session_factory(sqlite_engine))
    )
    results = await service.search("Year", "1989")

    assert len(results) == 1
    assert results[0]["Title"] == "Fall of the Berlin Wall"
    assert results[0]["_id"]


@pytest.mark.asyncio
async def test_load_dataset_rejects_non_array_file(sqlite_engine, tmp_path):
    dataset_file = tmp_path / "dataset.json"
    dataset_file.write_text(json.dumps({"Title": "Not a list"}), encoding="utf-8")

    with pytest.raises(ValueError):
        await load_dataset(dataset_file, engine=sqlite_engine)
