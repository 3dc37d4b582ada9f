"""
sorting.py
Hand-written sorting algorithms over members and the MemberSorter that
picks one per call, records timing, and benchmarks them against each other.

Comparators follow the cmp convention: negative, zero or positive.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from functools import cmp_to_key
from typing import Callable

from models import MAX_PERFORMANCE_RATING, MIN_PERFORMANCE_RATING, Member

logger = logging.getLogger(__name__)

Comparator = Callable[[Member, Member], int]

INSERTION_SORT_MAX_SIZE = 10
QUICK_SORT_MAX_SIZE = 1000
BUBBLE_SORT_BENCHMARK_LIMIT = 1000


class SortAlgorithm(str, Enum):
    QUICK_SORT = "Quick Sort"
    MERGE_SORT = "Merge Sort"
    HEAP_SORT = "Heap Sort"
    INSERTION_SORT = "Insertion Sort"
    BUBBLE_SORT = "Bubble Sort"
    COUNTING_SORT = "Counting Sort"


class SortOrder(str, Enum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"


def _coerce(enum_cls, value):
    """Accept an enum member, its value, or its name; anything else is a ValueError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        if isinstance(value, str) and value.upper().replace(" ", "_") in enum_cls.__members__:
            return enum_cls[value.upper().replace(" ", "_")]
        raise ValueError(f"Invalid {enum_cls.__name__}: {value!r}") from None


def compare_by(key: Callable[[Member], object]) -> Comparator:
    def compare(a: Member, b: Member) -> int:
        ka, kb = key(a), key(b)
        return (ka > kb) - (ka < kb)
    return compare


def reverse(comparator: Comparator) -> Comparator:
    return lambda a, b: comparator(b, a)


def chain(comparators: list[Comparator]) -> Comparator:
    def compare(a: Member, b: Member) -> int:
        for c in comparators:
            result = c(a, b)
            if result:
                return result
        return 0
    return compare


# Case-sensitive field keys; anything else sorts by name
FIELD_KEYS: dict[str, Callable[[Member], object]] = {
    "Name": lambda m: m.full_name.lower(),
    "ID": lambda m: m.member_id.lower(),
    "Type": lambda m: m.get_member_type(),
    "Performance": lambda m: m.performance_rating,
    "Monthly Fee": lambda m: m.calculate_monthly_fee(),
    "Goal": lambda m: m.goal_achieved,
}
SORT_FIELDS = list(FIELD_KEYS)


def get_comparator(sort_by: str, order: SortOrder | str = SortOrder.ASCENDING) -> Comparator:
    comparator = compare_by(FIELD_KEYS.get(sort_by, FIELD_KEYS["Name"]))
    if _coerce(SortOrder, order) is SortOrder.DESCENDING:
        return reverse(comparator)
    return comparator


# ---------- Algorithms ----------

def quick_sort(items: list, compare: Comparator) -> None:
    """In-place quick sort, Lomuto partition with the last element as pivot."""
    low, high = 0, len(items) - 1
    _quick_sort(items, low, high, compare)


def _quick_sort(items: list, low: int, high: int, compare: Comparator) -> None:
    # recurse into the smaller side, loop on the larger one to bound stack depth
    while low < high:
        p = _partition(items, low, high, compare)
        if p - low < high - p:
            _quick_sort(items, low, p - 1, compare)
            low = p + 1
        else:
            _quick_sort(items, p + 1, high, compare)
            high = p - 1


def _partition(items: list, low: int, high: int, compare: Comparator) -> int:
    pivot = items[high]
    i = low - 1
    for j in range(low, high):
        if compare(items[j], pivot) <= 0:
            i += 1
            items[i], items[j] = items[j], items[i]
    items[i + 1], items[high] = items[high], items[i + 1]
    return i + 1


def merge_sort(items: list, compare: Comparator) -> list:
    """Top-down stable merge sort. Returns a new list."""
    if len(items) <= 1:
        return list(items)
    mid = len(items) // 2
    left = merge_sort(items[:mid], compare)
    right = merge_sort(items[mid:], compare)
    return _merge(left, right, compare)


def _merge(left: list, right: list, compare: Comparator) -> list:
    result = []
    i = j = 0
    while i < len(left) and j < len(right):
        # <= keeps equal elements from the left half first
        if compare(left[i], right[j]) <= 0:
            result.append(left[i])
            i += 1
        else:
            result.append(right[j])
            j += 1
    result.extend(left[i:])
    result.extend(right[j:])
    return result


def heap_sort(items: list, compare: Comparator) -> None:
    """In-place heap sort using a binary max-heap."""
    n = len(items)
    for i in range(n // 2 - 1, -1, -1):
        _heapify(items, n, i, compare)
    for end in range(n - 1, 0, -1):
        items[0], items[end] = items[end], items[0]
        _heapify(items, end, 0, compare)


def _heapify(items: list, size: int, root: int, compare: Comparator) -> None:
    largest = root
    left = 2 * root + 1
    right = 2 * root + 2
    if left < size and compare(items[left], items[largest]) > 0:
        largest = left
    if right < size and compare(items[right], items[largest]) > 0:
        largest = right
    if largest != root:
        items[root], items[largest] = items[largest], items[root]
        _heapify(items, size, largest, compare)


def insertion_sort(items: list, compare: Comparator) -> None:
    for i in range(1, len(items)):
        key = items[i]
        j = i - 1
        while j >= 0 and compare(items[j], key) > 0:
            items[j + 1] = items[j]
            j -= 1
        items[j + 1] = key


def bubble_sort(items: list, compare: Comparator) -> None:
    n = len(items)
    for i in range(n - 1):
        swapped = False
        for j in range(n - i - 1):
            if compare(items[j], items[j + 1]) > 0:
                items[j], items[j + 1] = items[j + 1], items[j]
                swapped = True
        if not swapped:
            break


def selection_sort(items: list, compare: Comparator) -> None:
    n = len(items)
    for i in range(n - 1):
        smallest = i
        for j in range(i + 1, n):
            if compare(items[j], items[smallest]) < 0:
                smallest = j
        if smallest != i:
            items[i], items[smallest] = items[smallest], items[i]


def counting_sort_by_performance(items: list[Member], order: SortOrder | str = SortOrder.ASCENDING) -> list[Member]:
    """Bucket members by rating 0-10 and concatenate the buckets. Returns a new list."""
    buckets: list[list[Member]] = [[] for _ in range(MIN_PERFORMANCE_RATING, MAX_PERFORMANCE_RATING + 1)]
    for member in items:
        rating = member.performance_rating
        if MIN_PERFORMANCE_RATING <= rating <= MAX_PERFORMANCE_RATING:
            buckets[rating - MIN_PERFORMANCE_RATING].append(member)

    if _coerce(SortOrder, order) is SortOrder.DESCENDING:
        buckets.reverse()
    return [m for bucket in buckets for m in bucket]


def radix_sort(items: list[Member], value: Callable[[Member], int],
               order: SortOrder | str = SortOrder.ASCENDING) -> list[Member]:
    """LSD radix sort on a non-negative integer key. Returns a new list."""
    result = list(items)
    if not result:
        return result
    largest = max(value(m) for m in result)
    exp = 1
    while largest // exp > 0:
        digits: list[list[Member]] = [[] for _ in range(10)]
        for member in result:
            digits[(value(member) // exp) % 10].append(member)
        result = [m for bucket in digits for m in bucket]
        exp *= 10
    if _coerce(SortOrder, order) is SortOrder.DESCENDING:
        result.reverse()
    return result


def choose_algorithm(size: int) -> SortAlgorithm:
    if size <= INSERTION_SORT_MAX_SIZE:
        return SortAlgorithm.INSERTION_SORT
    if size <= QUICK_SORT_MAX_SIZE:
        return SortAlgorithm.QUICK_SORT
    return SortAlgorithm.MERGE_SORT


class MemberSorter:
    """
    Sorts copies of member lists by a named field. The caller's list is never
    modified. Timing of the last call is kept for get_sort_statistics().
    """

    def __init__(self):
        self.last_sort_time = 0
        self.last_algorithm_used: str | None = None
        self.last_data_size = 0

    def sort(
        self,
        members: list[Member] | None,
        sort_by: str = "Name",
        order: SortOrder | str = SortOrder.ASCENDING,
        algorithm: SortAlgorithm | str | None = None,
    ) -> list[Member]:
        order = _coerce(SortOrder, order)
        members = list(members or [])
        algorithm = choose_algorithm(len(members)) if algorithm is None else _coerce(SortAlgorithm, algorithm)

        start = time.perf_counter_ns()
        result = members
        compare = get_comparator(sort_by, order)
        name = algorithm.value

        if algorithm is SortAlgorithm.QUICK_SORT:
            quick_sort(result, compare)
        elif algorithm is SortAlgorithm.MERGE_SORT:
            result = merge_sort(result, compare)
        elif algorithm is SortAlgorithm.HEAP_SORT:
            heap_sort(result, compare)
        elif algorithm is SortAlgorithm.INSERTION_SORT:
            insertion_sort(result, compare)
        elif algorithm is SortAlgorithm.BUBBLE_SORT:
            bubble_sort(result, compare)
        elif sort_by == "Performance":
            result = counting_sort_by_performance(result, order)
        else:
            quick_sort(result, compare)
            name = "Quick Sort (Counting Sort not applicable)"

        self._record(name, start, len(members))
        return result

    def multi_field_sort(
        self,
        members: list[Member] | None,
        sort_fields: list[str],
        orders: list[SortOrder | str] | None = None,
    ) -> list[Member]:
        """
        Sort by several fields in priority order; later fields break ties.
        Missing orders default to ascending.
        """
        members = list(members or [])
        if not sort_fields:
            return members
        orders = list(orders or [])

        start = time.perf_counter_ns()
        comparators = [
            get_comparator(field, orders[i] if i < len(orders) else SortOrder.ASCENDING)
            for i, field in enumerate(sort_fields)
        ]
        result = sorted(members, key=cmp_to_key(chain(comparators)))
        self._record("Multi-field Sort (built-in)", start, len(members))
        return result

    def _record(self, name: str, start_ns: int, size: int) -> None:
        self.last_sort_time = time.perf_counter_ns() - start_ns
        self.last_algorithm_used = name
        self.last_data_size = size
        logger.debug("%s sorted %d members in %d ns", name, size, self.last_sort_time)

    def get_sort_statistics(self) -> dict:
        stats = {
            "last_sort_time": self.last_sort_time,
            "last_sort_time_ms": self.last_sort_time / 1_000_000,
            "last_algorithm_used": self.last_algorithm_used,
            "last_data_size": self.last_data_size,
        }
        if self.last_data_size > 0 and self.last_sort_time > 0:
            stats["items_per_second"] = self.last_data_size / (self.last_sort_time / 1_000_000_000)
        return stats

    def benchmark(self, members: list[Member], sort_by: str = "Name") -> dict[str, int]:
        """Run every algorithm on the same data; algorithm name -> elapsed ns (-1 on failure)."""
        results: dict[str, int] = {}
        for algorithm in SortAlgorithm:
            start = time.perf_counter_ns()
            try:
                self.sort(members, sort_by, SortOrder.ASCENDING, algorithm)
            except Exception:
                logger.exception("Benchmark of %s on %s failed", algorithm.value, sort_by)
                results[algorithm.name] = -1
                continue
            results[algorithm.name] = time.perf_counter_ns() - start
        return results


# ---------- Fixed-field helpers ----------
# Plain case-sensitive keys; each returns a new list.

def bubble_sort_by_id(members: list[Member]) -> list[Member]:
    result = list(members)
    bubble_sort(result, compare_by(lambda m: m.member_id))
    return result


def selection_sort_by_performance(members: list[Member]) -> list[Member]:
    """Highest rating first."""
    result = list(members)
    selection_sort(result, reverse(compare_by(lambda m: m.performance_rating)))
    return result


def insertion_sort_by_name(members: list[Member]) -> list[Member]:
    result = list(members)
    insertion_sort(result, compare_by(lambda m: m.full_name))
    return result


def merge_sort_by_fee(members: list[Member]) -> list[Member]:
    return merge_sort(list(members), compare_by(lambda m: m.calculate_monthly_fee()))


def quick_sort_by_type(members: list[Member]) -> list[Member]:
    result = list(members)
    quick_sort(result, compare_by(lambda m: m.get_member_type()))
    return result


def heap_sort_by_join_date(members: list[Member]) -> list[Member]:
    result = list(members)
    heap_sort(result, compare_by(lambda m: m.join_date))
    return result


_CUSTOM_SORT_KEYS: dict[str, Callable[[Member], object]] = {
    "id": lambda m: m.member_id,
    "name": lambda m: m.full_name,
    "performance": lambda m: m.performance_rating,
    "fee": lambda m: m.calculate_monthly_fee(),
    "type": lambda m: m.get_member_type(),
}


def custom_sort(members: list[Member], sort_by: str, ascending: bool = True) -> list[Member]:
    """Built-in stable sort by id/name/performance/fee/type."""
    key = _CUSTOM_SORT_KEYS.get(sort_by.lower())
    if key is None:
        raise ValueError(f"Invalid sort criteria: {sort_by}")
    return sorted(members, key=key, reverse=not ascending)


def compare_sorting_algorithms(members: list[Member]) -> dict[str, int]:
    """Elapsed ns of each fixed-field helper; bubble sort only runs on up to 1000 members."""
    helpers: list[tuple[str, Callable[[list[Member]], list[Member]]]] = [
        ("Selection Sort", selection_sort_by_performance),
        ("Insertion Sort", insertion_sort_by_name),
        ("Merge Sort", merge_sort_by_fee),
        ("Quick Sort", quick_sort_by_type),
        ("Heap Sort", heap_sort_by_join_date),
    ]
    if len(members) <= BUBBLE_SORT_BENCHMARK_LIMIT:
        helpers.insert(0, ("Bubble Sort", bubble_sort_by_id))

    timings: dict[str, int] = {}
    for name, helper in helpers:
        start = time.perf_counter_ns()
        helper(members)
        timings[name] = time.perf_counter_ns() - start
    return timings
