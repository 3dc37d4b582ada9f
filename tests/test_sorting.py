"""Unit tests for sorting (algorithms, MemberSorter and fixed-field helpers)."""

from datetime import date, timedelta

import pytest

from models import PremiumMember, RegularMember, StudentMember
from sorting import (
    FIELD_KEYS,
    MemberSorter,
    SortAlgorithm,
    SortOrder,
    bubble_sort_by_id,
    choose_algorithm,
    compare_sorting_algorithms,
    counting_sort_by_performance,
    custom_sort,
    heap_sort_by_join_date,
    insertion_sort_by_name,
    merge_sort_by_fee,
    quick_sort_by_type,
    radix_sort,
    selection_sort_by_performance,
)


def ids(members):
    return [m.member_id for m in members]


def make_members(n):
    """Mixed members with repeated ratings and unique names."""
    members = []
    for i in range(n):
        member_id = f"M{(i * 7) % n:03d}"
        first = f"First{(i * 11) % n:02d}"
        joined = date(2024, 1, 1) + timedelta(days=(i * 5) % n)
        if i % 3 == 0:
            m = RegularMember(member_id, first, "Doe", "x@example.com", "1", join_date=joined)
        elif i % 3 == 1:
            m = PremiumMember(member_id, first, "Doe", "x@example.com", "1",
                              sessions_per_month=i % 5, join_date=joined)
        else:
            m = StudentMember(member_id, first, "Doe", "x@example.com", "1", join_date=joined)
        m.performance_rating = i % 11
        m.goal_achieved = i % 2 == 0
        members.append(m)
    return members


@pytest.fixture
def sorter():
    return MemberSorter()


# ---------------------------------------------------------------------------
# Algorithms via MemberSorter.sort
# ---------------------------------------------------------------------------

class TestAlgorithms:
    @pytest.mark.parametrize("algorithm", list(SortAlgorithm))
    @pytest.mark.parametrize("field", ["Name", "ID", "Performance", "Monthly Fee", "Type", "Goal"])
    def test_ordered_and_same_members(self, sorter, algorithm, field):
        members = make_members(25)
        result = sorter.sort(members, field, SortOrder.ASCENDING, algorithm)

        key = FIELD_KEYS[field]
        keys = [key(m) for m in result]
        assert keys == sorted(keys)
        assert sorted(map(id, result)) == sorted(map(id, members))

    @pytest.mark.parametrize("algorithm", list(SortAlgorithm))
    def test_descending_performance(self, sorter, algorithm):
        result = sorter.sort(make_members(25), "Performance", "Descending", algorithm)
        ratings = [m.performance_rating for m in result]
        assert ratings == sorted(ratings, reverse=True)

    @pytest.mark.parametrize("algorithm", [a for a in SortAlgorithm if a is not SortAlgorithm.COUNTING_SORT])
    def test_descending_is_reverse_of_ascending_for_distinct_keys(self, sorter, algorithm):
        members = make_members(25)
        asc = sorter.sort(members, "Name", SortOrder.ASCENDING, algorithm)
        desc = sorter.sort(members, "Name", SortOrder.DESCENDING, algorithm)
        assert ids(desc) == list(reversed(ids(asc)))

    @pytest.mark.parametrize("algorithm", list(SortAlgorithm))
    def test_input_not_mutated(self, sorter, algorithm):
        members = make_members(12)
        before = list(members)
        result = sorter.sort(members, "Name", SortOrder.ASCENDING, algorithm)
        assert members == before
        assert result is not members

    def test_algorithm_by_name_or_value(self, sorter, store):
        assert ids(sorter.sort(store.get_all_members(), "ID", "Ascending", "Heap Sort")) == ["P001", "R001", "S001"]
        assert ids(sorter.sort(store.get_all_members(), "ID", "ascending", "heap_sort")) == ["P001", "R001", "S001"]
        assert sorter.last_algorithm_used == "Heap Sort"


# ---------------------------------------------------------------------------
# MemberSorter behaviour
# ---------------------------------------------------------------------------

class TestMemberSorter:
    @pytest.mark.parametrize("size, expected", [
        (0, SortAlgorithm.INSERTION_SORT),
        (3, SortAlgorithm.INSERTION_SORT),
        (10, SortAlgorithm.INSERTION_SORT),
        (11, SortAlgorithm.QUICK_SORT),
        (1000, SortAlgorithm.QUICK_SORT),
        (1001, SortAlgorithm.MERGE_SORT),
    ])
    def test_choose_algorithm(self, size, expected):
        assert choose_algorithm(size) is expected

    @pytest.mark.parametrize("size, name", [(3, "Insertion Sort"), (25, "Quick Sort"), (1001, "Merge Sort")])
    def test_auto_selection_recorded(self, sorter, size, name):
        result = sorter.sort(make_members(size), "Name")
        assert len(result) == size
        assert sorter.last_algorithm_used == name
        assert sorter.last_data_size == size

    def test_counting_sort_falls_back_off_performance(self, sorter, store):
        result = sorter.sort(store.get_all_members(), "Name", SortOrder.ASCENDING, SortAlgorithm.COUNTING_SORT)
        assert ids(result) == ["R001", "P001", "S001"]
        assert sorter.last_algorithm_used == "Quick Sort (Counting Sort not applicable)"

    def test_counting_sort_on_performance(self, sorter, store):
        result = sorter.sort(store.get_all_members(), "Performance", SortOrder.ASCENDING, SortAlgorithm.COUNTING_SORT)
        assert ids(result) == ["S001", "R001", "P001"]
        assert sorter.last_algorithm_used == "Counting Sort"

    def test_invalid_algorithm(self, sorter, store):
        with pytest.raises(ValueError):
            sorter.sort(store.get_all_members(), "Name", SortOrder.ASCENDING, "Bogo Sort")

    def test_invalid_order(self, sorter, store):
        with pytest.raises(ValueError):
            sorter.sort(store.get_all_members(), "Name", "Sideways")

    @pytest.mark.parametrize("members", [None, []])
    def test_empty_input(self, sorter, members):
        assert sorter.sort(members, "Name") == []
        stats = sorter.get_sort_statistics()
        assert stats["last_data_size"] == 0
        assert "items_per_second" not in stats

    @pytest.mark.parametrize("algorithm", list(SortAlgorithm))
    @pytest.mark.parametrize("field", ["Name", "Performance"])
    @pytest.mark.parametrize("size", [0, 1])
    def test_trivial_lists_with_every_algorithm(self, sorter, regular, algorithm, field, size):
        members = [regular][:size]
        assert sorter.sort(members, field, SortOrder.ASCENDING, algorithm) == members
        assert sorter.sort(members, field, SortOrder.DESCENDING, algorithm) == members
        assert sorter.get_sort_statistics()["last_data_size"] == size

    def test_counting_sort_empty(self):
        assert counting_sort_by_performance([]) == []

    def test_unknown_field_sorts_by_name(self, sorter, store):
        assert ids(sorter.sort(store.get_all_members(), "Shoe Size")) == ["R001", "P001", "S001"]

    def test_ties_keep_input_order_for_stable_algorithms(self, sorter, store):
        assert ids(sorter.sort(store.get_all_members(), "Performance")) == ["S001", "R001", "P001"]

    def test_monthly_fee(self, sorter, store):
        assert ids(sorter.sort(store.get_all_members(), "Monthly Fee")) == ["S001", "R001", "P001"]

    def test_goal_false_first(self, sorter, store):
        assert ids(sorter.sort(store.get_all_members(), "Goal")) == ["S001", "R001", "P001"]

    def test_type(self, sorter, store):
        assert ids(sorter.sort(store.get_all_members(), "Type")) == ["P001", "R001", "S001"]

    def test_statistics(self, sorter):
        assert sorter.get_sort_statistics()["last_algorithm_used"] is None
        sorter.sort(make_members(50), "Name", algorithm=SortAlgorithm.BUBBLE_SORT)
        stats = sorter.get_sort_statistics()
        assert stats["last_algorithm_used"] == "Bubble Sort"
        assert stats["last_data_size"] == 50
        assert stats["last_sort_time_ms"] == stats["last_sort_time"] / 1_000_000
        assert stats["items_per_second"] > 0

    def test_multi_field_sort(self, sorter, store, regular):
        regular.performance_rating = 4
        result = sorter.multi_field_sort(
            store.get_all_members(), ["Performance", "Name"], [SortOrder.DESCENDING],
        )
        # P001 has 9; R001 and S001 tie on 4 and fall back to name ascending
        assert ids(result) == ["P001", "R001", "S001"]
        assert sorter.last_algorithm_used == "Multi-field Sort (built-in)"

    def test_multi_field_sort_without_fields(self, sorter, store):
        assert ids(sorter.multi_field_sort(store.get_all_members(), [])) == ["R001", "P001", "S001"]

    def test_benchmark(self, sorter):
        results = sorter.benchmark(make_members(30), "Performance")
        assert set(results) == {a.name for a in SortAlgorithm}
        assert all(v >= 0 for v in results.values())


# ---------------------------------------------------------------------------
# Standalone helpers
# ---------------------------------------------------------------------------

class TestHelpers:
    def test_counting_sort_descending_keeps_bucket_order(self, store):
        result = counting_sort_by_performance(store.get_all_members(), SortOrder.DESCENDING)
        assert ids(result) == ["R001", "P001", "S001"]

    def test_radix_sort(self):
        members = make_members(30)
        result = radix_sort(members, lambda m: m.performance_rating)
        ratings = [m.performance_rating for m in result]
        assert ratings == sorted(ratings)
        assert radix_sort([], lambda m: 0) == []

    def test_radix_sort_descending(self):
        result = radix_sort(make_members(30), lambda m: int(m.calculate_monthly_fee()), "Descending")
        fees = [int(m.calculate_monthly_fee()) for m in result]
        assert fees == sorted(fees, reverse=True)

    def test_fixed_field_helpers(self, store):
        members = store.get_all_members()
        assert ids(bubble_sort_by_id(members)) == ["P001", "R001", "S001"]
        assert [m.performance_rating for m in selection_sort_by_performance(members)] == [9, 9, 4]
        assert ids(insertion_sort_by_name(members)) == ["R001", "P001", "S001"]
        assert ids(merge_sort_by_fee(members)) == ["S001", "R001", "P001"]
        assert ids(quick_sort_by_type(members)) == ["P001", "R001", "S001"]
        assert ids(heap_sort_by_join_date(members)) == ["P001", "S001", "R001"]
        assert ids(members) == ["R001", "P001", "S001"]

    def test_custom_sort(self, store):
        members = store.get_all_members()
        assert ids(custom_sort(members, "FEE")) == ["S001", "R001", "P001"]
        assert ids(custom_sort(members, "id", ascending=False)) == ["S001", "R001", "P001"]

    def test_custom_sort_invalid(self, store):
        with pytest.raises(ValueError, match="Invalid sort criteria"):
            custom_sort(store.get_all_members(), "height")

    def test_compare_sorting_algorithms(self, store):
        timings = compare_sorting_algorithms(store.get_all_members())
        assert set(timings) == {
            "Bubble Sort", "Selection Sort", "Insertion Sort", "Merge Sort", "Quick Sort", "Heap Sort",
        }
