"""
store.py
In-memory member collection + CSV load/save (pandas).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pandas as pd

from models import (
    HIGH_PERFORMANCE_THRESHOLD,
    LOW_PERFORMANCE_THRESHOLD,
    Member,
    PremiumMember,
    RegularMember,
    StudentMember,
    member_from_row,
)

logger = logging.getLogger(__name__)

DATA_FILE = Path(os.environ.get("GYM_MEMBERS_FILE", Path(__file__).with_name("member_data.csv")))

CSV_COLUMNS = [
    "Type", "ID", "FirstName", "LastName", "Email", "Phone",
    "PerformanceRating", "GoalAchieved", "Extra1", "Extra2",
]
MIN_CSV_FIELDS_REQUIRED = 7

UPDATE_KEY_EMAIL = "email"
UPDATE_KEY_PHONE = "phone"
UPDATE_KEY_PERFORMANCE_RATING = "performance_rating"
UPDATE_KEY_GOAL_ACHIEVED = "goal_achieved"

# CSV-era spellings still accepted by update_member
_UPDATE_KEY_ALIASES = {
    "performanceRating": UPDATE_KEY_PERFORMANCE_RATING,
    "goalAchieved": UPDATE_KEY_GOAL_ACHIEVED,
}

APPRECIATION_LETTER_TEMPLATE = (
    "Dear {name},\n\n"
    "Congratulations on your outstanding performance this month!\n"
    "Your dedication with a rating of {rating}/10 is truly commendable.\n"
    "Keep up the excellent work!\n\n"
    "Best regards,\nGym Management"
)

REMINDER_LETTER_TEMPLATE = (
    "Dear {name},\n\n"
    "We noticed your performance rating is {rating}/10 this month.\n"
    "We encourage you to participate more actively in gym activities.\n"
    "Our trainers are here to help you achieve your fitness goals!\n\n"
    "Best regards,\nGym Management"
)


class DuplicateMemberError(ValueError):
    """Raised when adding a member whose ID is already in the store."""


def parse_bool(value) -> bool:
    # "true" in any case is True, everything else False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


class MemberStore:
    """
    Ordered collection of members keyed (case-insensitively) by member ID.

    Callers that also hold a MemberSearcher must call its
    invalidate_indexes() after add/remove/update.
    """

    def __init__(self, data_file: str | Path | None = None):
        self.data_file = Path(data_file) if data_file else DATA_FILE
        self._members: list[Member] = []

    def __len__(self) -> int:
        return len(self._members)

    # ---------- CRUD ----------

    def get_all_members(self) -> list[Member]:
        return list(self._members)

    def find_by_id(self, member_id: str) -> Member | None:
        key = member_id.lower()
        for m in self._members:
            if m.member_id.lower() == key:
                return m
        return None

    def add_member(self, member: Member) -> None:
        if self.find_by_id(member.member_id) is not None:
            raise DuplicateMemberError(f"Member ID already exists: {member.member_id}")
        self._members.append(member)
        logger.info("Member added: %s with ID: %s", member.full_name, member.member_id)

    def remove_member(self, member_id: str) -> bool:
        key = member_id.lower()
        before = len(self._members)
        self._members = [m for m in self._members if m.member_id.lower() != key]
        removed = len(self._members) < before
        if removed:
            logger.info("Member removed: %s", member_id)
        else:
            logger.info("Member not found: %s", member_id)
        return removed

    def update_member(self, member_id: str, updates: dict) -> bool:
        """
        Apply field updates to one member. Recognised keys: email, phone,
        performance_rating, goal_achieved. Unknown keys are ignored and an
        out-of-range or non-numeric rating leaves the rating unchanged.
        """
        member = self.find_by_id(member_id)
        if member is None:
            logger.warning("Member not found: %s for update, skipping", member_id)
            return False

        changes = {_UPDATE_KEY_ALIASES.get(k, k): v for k, v in updates.items()}
        if UPDATE_KEY_PERFORMANCE_RATING in changes:
            try:
                changes[UPDATE_KEY_PERFORMANCE_RATING] = int(changes[UPDATE_KEY_PERFORMANCE_RATING])
            except (TypeError, ValueError):
                logger.warning("Rating %r for %s is not a number, rating unchanged",
                               changes[UPDATE_KEY_PERFORMANCE_RATING], member_id)
                del changes[UPDATE_KEY_PERFORMANCE_RATING]

        for key, value in changes.items():
            if key == UPDATE_KEY_EMAIL:
                member.email = str(value)
            elif key == UPDATE_KEY_PHONE:
                member.phone = str(value)
            elif key == UPDATE_KEY_PERFORMANCE_RATING:
                if not member.set_performance_rating(value):
                    logger.warning("Rating %s out of range for %s, kept %d",
                                   value, member_id, member.performance_rating)
            elif key == UPDATE_KEY_GOAL_ACHIEVED:
                member.goal_achieved = parse_bool(value)

        logger.info("Member updated: %s with ID: %s", member.full_name, member.member_id)
        return True

    # ---------- Queries ----------

    def find_by_name(self, name: str) -> list[Member]:
        needle = name.lower()
        return [m for m in self._members if needle in m.full_name.lower()]

    def find_by_performance(self, min_rating: int) -> list[Member]:
        matches = [m for m in self._members if m.performance_rating >= min_rating]
        return sorted(matches, key=lambda m: m.performance_rating, reverse=True)

    def statistics(self) -> dict:
        total = len(self._members)
        if total == 0:
            return {
                "total": 0, "regular": 0, "premium": 0, "student": 0,
                "average_performance": 0.0, "goal_achievers": 0,
            }
        return {
            "total": total,
            "regular": sum(isinstance(m, RegularMember) for m in self._members),
            "premium": sum(isinstance(m, PremiumMember) for m in self._members),
            "student": sum(isinstance(m, StudentMember) for m in self._members),
            "average_performance": sum(m.performance_rating for m in self._members) / total,
            "goal_achievers": sum(m.goal_achieved for m in self._members),
        }

    # ---------- Letters ----------

    @staticmethod
    def generate_appreciation_letter(member: Member) -> str | None:
        if member.performance_rating >= HIGH_PERFORMANCE_THRESHOLD:
            return APPRECIATION_LETTER_TEMPLATE.format(name=member.full_name, rating=member.performance_rating)
        return None

    @staticmethod
    def generate_reminder_letter(member: Member) -> str | None:
        if member.performance_rating < LOW_PERFORMANCE_THRESHOLD:
            return REMINDER_LETTER_TEMPLATE.format(name=member.full_name, rating=member.performance_rating)
        return None

    # ---------- CSV ----------

    def load_from_file(self, path: str | Path | None = None) -> int:
        """
        Replace the current members with the content of a CSV file.
        Bad rows are skipped with a warning. A missing file raises FileNotFoundError.
        """
        path = Path(path) if path else self.data_file
        self.data_file = path

        def truncate_long_row(fields: list[str]) -> list[str]:
            logger.warning("%s: row for %s has %d fields, extra fields dropped",
                           path, fields[1] if len(fields) > 1 else "?", len(fields))
            return fields[: len(CSV_COLUMNS)]

        try:
            # columns are read by position, the header row is skipped
            df = pd.read_csv(
                path, header=None, skiprows=1, names=CSV_COLUMNS, dtype=str,
                keep_default_na=False, engine="python", on_bad_lines=truncate_long_row,
            )
        except pd.errors.EmptyDataError:
            logger.warning("%s is empty, no members loaded", path)
            self._members = []
            return 0

        df = df.fillna("")

        members: list[Member] = []
        seen: set[str] = set()
        for line_no, row in enumerate(df.itertuples(index=False, name=None), start=2):
            fields = [str(v).strip() for v in row[: len(CSV_COLUMNS)]]
            member = self._member_from_fields(fields, path, line_no)
            if member is None:
                continue
            key = member.member_id.lower()
            if key in seen:
                logger.warning("%s:%d duplicate member ID %s skipped", path, line_no, member.member_id)
                continue
            seen.add(key)
            members.append(member)

        self._members = members
        logger.info("Loaded %d members from %s", len(members), path)
        return len(members)

    @staticmethod
    def _member_from_fields(fields: list[str], path: Path, line_no: int) -> Member | None:
        if not all(fields[:MIN_CSV_FIELDS_REQUIRED]):
            logger.warning("%s:%d missing required fields, row skipped", path, line_no)
            return None
        type_tag, member_id, first, last, email, phone, rating, goal, extra1, extra2 = fields
        try:
            member = member_from_row(
                type_tag, member_id, first, last, email, phone,
                performance_rating=int(rating),
                goal_achieved=parse_bool(goal),
                extra1=extra1 or None,
                extra2=extra2 or None,
            )
        except ValueError:
            logger.warning("%s:%d bad numeric value, row skipped", path, line_no)
            return None
        if member is None:
            logger.warning("%s:%d unknown member type %r, row skipped", path, line_no, type_tag)
        return member

    def save_to_file(self, path: str | Path | None = None) -> Path:
        path = Path(path) if path else self.data_file
        rows = []
        for m in self._members:
            extra1, extra2 = m.extra_fields()
            rows.append([
                m.type_tag, m.member_id, m.first_name, m.last_name, m.email, m.phone,
                str(m.performance_rating), "true" if m.goal_achieved else "false",
                extra1, extra2,
            ])
        pd.DataFrame(rows, columns=CSV_COLUMNS).to_csv(path, index=False)
        logger.info("Saved %d members to %s", len(rows), path)
        return path
