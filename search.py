"""
search.py
Member lookup: MemberSearcher (hash indexes over the store with linear
fallbacks) plus standalone search helpers that work on plain lists.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Iterable

from models import Member
from store import MemberStore, parse_bool

logger = logging.getLogger(__name__)


class SearchField(str, Enum):
    ID = "ID"
    NAME = "Name"
    EMAIL = "Email"
    TYPE = "Type"
    ALL_FIELDS = "All Fields"


def _normalize(text: str) -> str:
    return text.strip().lower()


class MemberSearcher:
    """
    Free-text search over a MemberStore.

    Two derived indexes are kept: lower-cased member ID -> member, and
    lower-cased name token -> members. They are rebuilt lazily after
    invalidate_indexes(); the store never invalidates them on its own.
    """

    def __init__(self, store: MemberStore):
        self.store = store
        self.id_index: dict[str, Member] = {}
        self.name_index: dict[str, list[Member]] = {}
        self.indexes_built = False
        self.build_indexes()

    def build_indexes(self) -> None:
        id_index: dict[str, Member] = {}
        name_index: dict[str, list[Member]] = {}
        for member in self.store.get_all_members():
            id_index[member.member_id.lower()] = member
            for token in member.full_name.lower().split():
                name_index.setdefault(token, []).append(member)

        self.id_index = id_index
        self.name_index = name_index
        self.indexes_built = True
        logger.debug("Search indexes built: %d ids, %d name tokens", len(id_index), len(name_index))

    def invalidate_indexes(self) -> None:
        self.indexes_built = False
        self.id_index.clear()
        self.name_index.clear()

    def _ensure_indexes(self) -> None:
        if not self.indexes_built:
            self.build_indexes()

    def _in_store_order(self, hits: Iterable[Member]) -> list[Member]:
        # dedupe by identity, keep the store's insertion order
        wanted = {id(m) for m in hits}
        return [m for m in self.store.get_all_members() if id(m) in wanted]

    # ---------- Entry point ----------

    def search(self, text: str | None, field: SearchField | str = SearchField.ALL_FIELDS) -> list[Member]:
        """
        Search members by free text within one field.
        Blank text returns every member. Unknown field names search all fields.
        """
        if text is None or not text.strip():
            return self.store.get_all_members()

        self._ensure_indexes()
        query = _normalize(text)

        try:
            field = SearchField(field)
        except ValueError:
            field = SearchField.ALL_FIELDS

        if field is SearchField.ID:
            results = self.search_by_id(query)
        elif field is SearchField.NAME:
            results = self.search_by_name(query)
        elif field is SearchField.EMAIL:
            results = self.search_by_email(query)
        elif field is SearchField.TYPE:
            results = self.search_by_type(query)
        else:
            results = self.search_all_fields(query)

        logger.debug("search(%r, %s) -> %d results", query, field.value, len(results))
        return results

    # ---------- Per-field strategies ----------

    def search_by_id(self, text: str) -> list[Member]:
        """Exact hit in the ID index, else substring scan over IDs."""
        self._ensure_indexes()
        query = _normalize(text)
        exact = self.id_index.get(query)
        if exact is not None:
            return self._in_store_order([exact])
        return [m for m in self.store.get_all_members() if query in m.member_id.lower()]

    def search_by_name(self, text: str) -> list[Member]:
        """
        Each query token matches indexed name tokens that equal or contain it.
        Falls back to a substring scan over full names when nothing matched.
        """
        self._ensure_indexes()
        query = _normalize(text)
        hits: list[Member] = []
        for part in query.split():
            hits.extend(self.name_index.get(part, ()))
            for token, members in self.name_index.items():
                if part in token:
                    hits.extend(members)

        if not hits:
            return [m for m in self.store.get_all_members() if query in m.full_name.lower()]
        return self._in_store_order(hits)

    def search_by_email(self, text: str) -> list[Member]:
        query = _normalize(text)
        return [m for m in self.store.get_all_members() if query in m.email.lower()]

    def search_by_type(self, text: str) -> list[Member]:
        query = _normalize(text)
        return [m for m in self.store.get_all_members() if query in m.get_member_type().lower()]

    def search_by_performance_rating(self, rating: int) -> list[Member]:
        return [m for m in self.store.get_all_members() if m.performance_rating == rating]

    def search_by_performance_range(self, min_rating: int, max_rating: int) -> list[Member]:
        return [m for m in self.store.get_all_members() if min_rating <= m.performance_rating <= max_rating]

    def search_all_fields(self, text: str) -> list[Member]:
        query = _normalize(text)
        hits: list[Member] = []
        hits.extend(self.search_by_id(query))
        hits.extend(self.search_by_name(query))
        hits.extend(self.search_by_email(query))
        hits.extend(self.search_by_type(query))

        try:
            rating = int(query)
        except ValueError:
            rating = None
        if rating is not None:
            hits.extend(self.search_by_performance_rating(rating))

        return self._in_store_order(hits)

    def advanced_search(self, criteria: dict[str, str]) -> list[Member]:
        """
        Members matching every criterion. Keys: id, name, email, type
        (substring, case-insensitive) and goal ("true"/"false").
        Unknown keys do not filter.
        """
        return [m for m in self.store.get_all_members() if self._matches_criteria(m, criteria)]

    @staticmethod
    def _matches_criteria(member: Member, criteria: dict[str, str]) -> bool:
        for key, raw_value in criteria.items():
            field = key.lower()
            value = str(raw_value).lower()
            if field == "id":
                matches = value in member.member_id.lower()
            elif field == "name":
                matches = value in member.full_name.lower()
            elif field == "email":
                matches = value in member.email.lower()
            elif field == "type":
                matches = value in member.get_member_type().lower()
            elif field == "goal":
                matches = member.goal_achieved == parse_bool(value)
            else:
                matches = True
            if not matches:
                return False
        return True

    @staticmethod
    def binary_search_by_id(sorted_members: list[Member], target_id: str) -> Member | None:
        """Binary search on a list already sorted by ID (case-insensitive)."""
        target = target_id.lower()
        left, right = 0, len(sorted_members) - 1
        while left <= right:
            mid = left + (right - left) // 2
            mid_id = sorted_members[mid].member_id.lower()
            if mid_id == target:
                return sorted_members[mid]
            if mid_id < target:
                left = mid + 1
            else:
                right = mid - 1
        return None

    def get_search_statistics(self) -> dict:
        return {
            "total_members": len(self.store.get_all_members()),
            "index_size": len(self.id_index),
            "name_index_entries": len(self.name_index),
            "indexes_built": self.indexes_built,
        }


# ---------- Standalone algorithms over plain lists ----------

def linear_search_by_id(members: list[Member], member_id: str) -> Member | None:
    for i, member in enumerate(members):
        if member.member_id == member_id:
            logger.debug("Linear search: found at index %d after %d comparisons", i, i + 1)
            return member
    logger.debug("Linear search: not found after %d comparisons", len(members))
    return None


def binary_search_by_id(sorted_members: list[Member], member_id: str) -> Member | None:
    """Case-sensitive binary search; the list must be sorted by member_id."""
    left, right = 0, len(sorted_members) - 1
    comparisons = 0
    while left <= right:
        comparisons += 1
        mid = left + (right - left) // 2
        mid_id = sorted_members[mid].member_id
        if mid_id == member_id:
            logger.debug("Binary search: found at index %d after %d comparisons", mid, comparisons)
            return sorted_members[mid]
        if mid_id < member_id:
            left = mid + 1
        else:
            right = mid - 1
    logger.debug("Binary search: not found after %d comparisons", comparisons)
    return None


def hash_search_by_id(members: list[Member], member_id: str) -> Member | None:
    return {m.member_id: m for m in members}.get(member_id)


def fuzzy_search_by_name(members: list[Member], term: str) -> list[Member]:
    needle = term.lower()
    return [m for m in members if needle in m.full_name.lower()]


def range_search_by_performance(members: list[Member], min_rating: int, max_rating: int) -> list[Member]:
    if min_rating > max_rating:
        logger.debug("Range search: invalid range %d > %d", min_rating, max_rating)
        return []
    return [m for m in members if min_rating <= m.performance_rating <= max_rating]


def multi_criteria_search(
    members: list[Member],
    member_type: str | None = None,
    min_rating: int = -1,
    goal_achieved: bool | None = None,
) -> list[Member]:
    """None / -1 disable a criterion. member_type is a case-sensitive substring of the display type."""
    results = []
    for m in members:
        if member_type is not None and member_type not in m.get_member_type():
            continue
        if min_rating >= 0 and m.performance_rating < min_rating:
            continue
        if goal_achieved is not None and m.goal_achieved != goal_achieved:
            continue
        results.append(m)
    return results


def compare_search_algorithms(members: list[Member], target_id: str) -> dict:
    """Time linear, hash and binary search for one ID (nanoseconds)."""
    start = time.perf_counter_ns()
    linear = linear_search_by_id(members, target_id)
    linear_ns = time.perf_counter_ns() - start

    start = time.perf_counter_ns()
    hashed = hash_search_by_id(members, target_id)
    hash_ns = time.perf_counter_ns() - start

    sorted_members = sorted(members, key=lambda m: m.member_id)
    start = time.perf_counter_ns()
    binary = binary_search_by_id(sorted_members, target_id)
    binary_ns = time.perf_counter_ns() - start

    found = [r.member_id if r is not None else None for r in (linear, hashed, binary)]
    return {
        "dataset_size": len(members),
        "linear_ns": linear_ns,
        "hash_ns": hash_ns,
        "binary_ns": binary_ns,
        "consistent": len(set(found)) == 1,
    }
