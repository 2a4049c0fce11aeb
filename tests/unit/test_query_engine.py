from __future__ import annotations

import threading
from datetime import date
from typing import List, Optional

import pytest

from person_tables.domain.errors import InvalidArgument
from person_tables.domain.models import EyeColor, Person
from person_tables.query.criteria import DataTableCriteria
from person_tables.query.engine import QueryEngine, page_index_for
from person_tables.seeding.generator import SampleDataGenerator
from person_tables.store.memory import MemoryPersonStore, MemoryResultHandle

SYNTHETIC_ROWS = 1_000
REFERENCE_ROWS = 3


def _names(people: List[Person]) -> List[str]:
    return [person.name for person in people]


class TestReadQueries:
    """Plain lookups over the three reference people."""

    def test_find_by_eyes_blue_returns_only_farid(self, engine: QueryEngine):
        assert _names(engine.find_by_eyes("BLUE")) == ["Farid Ulyanov"]

    def test_find_by_eyes_green_is_empty(self, engine: QueryEngine):
        assert engine.find_by_eyes("GREEN") == []

    def test_find_by_eyes_rejects_unknown_color(self, engine: QueryEngine):
        with pytest.raises(InvalidArgument):
            engine.find_by_eyes("PURPLE")

    def test_find_born_before_1990(self, engine: QueryEngine):
        matches = engine.find_born_before(1990)

        assert len(matches) == 2
        assert set(_names(matches)) == {"Farid Ulyanov", "Salvador L. Witcher"}

    def test_find_born_before_includes_the_boundary_year(self, engine: QueryEngine):
        assert _names(engine.find_born_before(1974)) == ["Farid Ulyanov"]
        assert engine.find_born_before(1973) == []

    @pytest.mark.parametrize("year", [0, -5, 10_000])
    def test_find_born_before_rejects_out_of_range_years(self, engine: QueryEngine, year: int):
        with pytest.raises(InvalidArgument):
            engine.find_born_before(year)

    def test_list_all_and_get(self, engine: QueryEngine):
        assert len(engine.list_all()) == REFERENCE_ROWS
        assert engine.get(3).name == "Kim Hu"
        assert engine.get(42) is None

    def test_create_assigns_identity_and_grows_total(self, engine: QueryEngine):
        before = engine.datatable(DataTableCriteria(length=10)).records_total

        stored = engine.create("Hana Sato", date(2001, 2, 3), "GREEN")

        assert stored.id == REFERENCE_ROWS + 1
        assert stored.eyes is EyeColor.GREEN
        assert engine.datatable(DataTableCriteria(length=10)).records_total == before + 1
        assert _names(engine.list_all()).count("Hana Sato") == 1

    @pytest.mark.parametrize(
        "name, eyes",
        [("", "BLUE"), ("   ", "BLUE"), ("Hana", "PURPLE"), ("Hana", "green")],
    )
    def test_create_rejects_invalid_input(self, engine: QueryEngine, name: str, eyes: str):
        with pytest.raises(InvalidArgument):
            engine.create(name, date(2001, 2, 3), eyes)


class TestDatatable:
    """Server-side paging, filtering and counting."""

    def test_search_yan_counts_and_page(self, engine: QueryEngine):
        page = engine.datatable(DataTableCriteria(draw=1, start=0, length=10, search="yan"))

        assert page.records_total == REFERENCE_ROWS
        assert page.records_filtered == 1
        assert _names(page.data) == ["Farid Ulyanov"]

    def test_no_search_returns_everything(self, engine: QueryEngine):
        page = engine.datatable(DataTableCriteria(start=0, length=10))

        assert page.records_total == page.records_filtered == REFERENCE_ROWS
        assert [p.id for p in page.data] == [1, 2, 3]

    def test_zero_length_is_invalid(self, engine: QueryEngine):
        with pytest.raises(InvalidArgument, match="length"):
            engine.datatable(DataTableCriteria(start=0, length=0))

    @pytest.mark.parametrize("start, length", [(-1, 10), (0, -1), (-10, -10)])
    def test_negative_offsets_are_invalid(self, engine: QueryEngine, start: int, length: int):
        with pytest.raises(InvalidArgument):
            engine.datatable(DataTableCriteria(start=start, length=length))

    def test_filtered_count_ignores_page_slice(self, engine: QueryEngine):
        page = engine.datatable(DataTableCriteria(start=0, length=1, search="i"))

        assert page.records_filtered == 3
        assert len(page.data) == 1

    def test_page_beyond_filtered_set_is_empty(self, engine: QueryEngine):
        page = engine.datatable(DataTableCriteria(start=10, length=10))

        assert page.data == []
        assert page.records_total == REFERENCE_ROWS

    def test_second_page(self, engine: QueryEngine):
        page = engine.datatable(DataTableCriteria(start=2, length=2))

        assert [p.id for p in page.data] == [3]

    def test_unaligned_start_truncates_to_page(self, engine: QueryEngine):
        page = engine.datatable(DataTableCriteria(start=3, length=2))

        assert [p.id for p in page.data] == [3]

    def test_identical_queries_are_idempotent(self, engine: QueryEngine):
        criteria = DataTableCriteria(draw=5, start=0, length=2, search="a")

        assert engine.datatable(criteria) == engine.datatable(criteria)

    def test_search_is_case_sensitive(self, engine: QueryEngine):
        assert engine.datatable(DataTableCriteria(length=10, search="kim")).records_filtered == 0
        assert engine.datatable(DataTableCriteria(length=10, search="Kim")).records_filtered == 1

    def test_counts_then_page_in_order(self, engine: QueryEngine, monkeypatch):
        calls: List[str] = []
        store = engine.store
        original_count = MemoryResultHandle.count
        original_page = MemoryResultHandle.page
        original_total = store.count

        def tracking_count(handle):
            calls.append("filtered")
            return original_count(handle)

        def tracking_page(handle, page_index, page_size):
            calls.append("page")
            return original_page(handle, page_index, page_size)

        def tracking_total(search: Optional[str] = None):
            calls.append("total")
            return original_total(search)

        monkeypatch.setattr(MemoryResultHandle, "count", tracking_count)
        monkeypatch.setattr(MemoryResultHandle, "page", tracking_page)
        monkeypatch.setattr(store, "count", tracking_total)

        engine.datatable(DataTableCriteria(length=10, search="a"))

        assert calls == ["filtered", "total", "page"]


class TestDatatableProperties:
    """Count and paging invariants over a bulk synthetic data set."""

    @pytest.fixture
    def bulk_engine(self, seeded_store: MemoryPersonStore) -> QueryEngine:
        SampleDataGenerator(seeded_store, rows=SYNTHETIC_ROWS, seed=7).generate()
        return QueryEngine(seeded_store)

    def test_bulk_search_counts_match_independent_scan(self, bulk_engine: QueryEngine):
        page = bulk_engine.datatable(DataTableCriteria(draw=1, start=0, length=2, search="F"))
        expected = sum(1 for p in bulk_engine.list_all() if "F" in p.name)

        assert page.records_total == SYNTHETIC_ROWS + REFERENCE_ROWS
        assert page.records_filtered == expected
        assert len(page.data) <= 2
        assert all("F" in p.name for p in page.data)

    @pytest.mark.parametrize("token", ["", "a", "Hu", "Witcher", ".", "zzz"])
    def test_filtered_and_total_counts(self, bulk_engine: QueryEngine, token: str):
        everyone = bulk_engine.list_all()
        page = bulk_engine.datatable(DataTableCriteria(start=0, length=25, search=token))

        assert page.records_total == len(everyone)
        assert page.records_filtered == sum(1 for p in everyone if token in p.name)

    @pytest.mark.parametrize("length", [1, 7, 50, 400])
    def test_pages_partition_the_filtered_set(self, bulk_engine: QueryEngine, length: int):
        first = bulk_engine.datatable(DataTableCriteria(start=0, length=length, search="a"))
        collected: List[Person] = []
        start = 0
        while True:
            page = bulk_engine.datatable(DataTableCriteria(start=start, length=length, search="a"))
            assert len(page.data) <= length
            if start >= first.records_filtered:
                assert page.data == []
                break
            collected.extend(page.data)
            start += length

        assert len(collected) == first.records_filtered
        assert len({p.id for p in collected}) == len(collected)

    def test_concurrent_inserts_only_grow_counts(self, bulk_engine: QueryEngine):
        store = bulk_engine.store
        baseline = store.count()
        stop = threading.Event()
        observed: List[int] = []

        def reader() -> None:
            while not stop.is_set():
                observed.append(bulk_engine.datatable(DataTableCriteria(length=10)).records_total)

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            for index in range(100):
                bulk_engine.create(f"Late Arrival {index}", date(2000, 1, 1), EyeColor.BROWN)
        finally:
            stop.set()
            thread.join()

        assert observed == sorted(observed)
        assert all(baseline <= total <= baseline + 100 for total in observed)
        assert store.count() == baseline + 100


@pytest.mark.parametrize(
    "start, length, expected",
    [(0, 10, 0), (10, 10, 1), (20, 10, 2), (15, 10, 1), (0, 1, 0), (7, 1, 7)],
)
def test_page_index_for(start: int, length: int, expected: int) -> None:
    assert page_index_for(start, length) == expected


def test_page_index_for_zero_length_never_divides() -> None:
    with pytest.raises(InvalidArgument):
        page_index_for(10, 0)


class TestCriteriaParsing:
    """Query-string mapping to DataTableCriteria."""

    def test_defaults_when_params_missing(self):
        criteria = DataTableCriteria.from_params({}, default_length=25)

        assert criteria == DataTableCriteria(draw=0, start=0, length=25, search=None)

    def test_reads_datatables_keys(self):
        params = {"draw": "4", "start": "20", "length": "10", "search[value]": "yan"}

        criteria = DataTableCriteria.from_params(params)

        assert (criteria.draw, criteria.start, criteria.length) == (4, 20, 10)
        assert criteria.search == "yan"

    def test_blank_values_fall_back_to_defaults(self):
        criteria = DataTableCriteria.from_params({"start": " ", "search[value]": ""})

        assert criteria.start == 0
        assert criteria.search is None

    def test_range_checks_are_left_to_the_engine(self):
        assert DataTableCriteria.from_params({"length": "0"}).length == 0

    @pytest.mark.parametrize("key", ["draw", "start", "length"])
    def test_non_integer_value_is_invalid(self, key: str):
        with pytest.raises(InvalidArgument, match=key):
            DataTableCriteria.from_params({key: "ten"})

    @pytest.mark.parametrize("raw", ["1_000", "١٢", "+5", "1.0", "--3"])
    def test_only_plain_decimal_integers_are_accepted(self, raw: str):
        with pytest.raises(InvalidArgument, match="must be an integer"):
            DataTableCriteria.from_params({"start": raw})

    def test_negative_integers_parse_for_the_engine_to_reject(self):
        assert DataTableCriteria.from_params({"start": "-10"}).start == -10

    def test_values_beyond_bigint_are_out_of_range(self):
        with pytest.raises(InvalidArgument, match="out of range"):
            DataTableCriteria.from_params({"length": str(2**63)})

    def test_nul_in_search_is_invalid(self):
        with pytest.raises(InvalidArgument, match="NUL"):
            DataTableCriteria.from_params({"search[value]": "a\x00b"})


def test_page_index_for_rejects_offsets_beyond_bigint() -> None:
    with pytest.raises(InvalidArgument):
        page_index_for(2**63, 10)


def test_create_rejects_nul_in_name(engine: QueryEngine) -> None:
    with pytest.raises(InvalidArgument, match="NUL"):
        engine.create("Kim\x00Hu", date(1999, 4, 25), "HAZEL")
