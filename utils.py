"""
utils.py
Logging setup, input validation, tables/exports, letters, sample data.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pandas as pd

from models import (
    MAX_PERFORMANCE_RATING,
    MEMBER_TYPES,
    MIN_PERFORMANCE_RATING,
    TYPE_PREMIUM,
    TYPE_STUDENT,
    Member,
    member_from_row,
)
from store import MemberStore

LOG_DIR = Path(os.environ.get("GYM_LOG_DIR", Path(__file__).with_name("logs")))
LOGGER_NAME = "gym"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

MEMBER_COLUMNS = [
    "member_id", "full_name", "type", "email", "phone", "join_date",
    "performance_rating", "goal_achieved", "monthly_fee", "extra1", "extra2",
]

SAMPLE_ROWS = [
    ("Regular", "M001", "Eman", "Ejaz", "eman.ejaz@email.com", "466-0101", 7, True, None, None),
    ("Premium", "M002", "Sajina", "Rana", "sajina.rana@email.com", "466-0102", 9, True, "Elina Trainer", "8"),
    ("Student", "M003", "Waqas", "Iqbal", "waqas.iqbal@email.com", "466-0103", 6, False, "STU2024001", "State University"),
    ("Regular", "M004", "Sravanth", "Rao", "sravanth.ra@email.com", "466-0104", 5, False, None, None),
    ("Premium", "M005", "Jessica", "Wilson", "jessica.w@email.com", "466-0105", 8, True, "Lisa Coach", "6"),
    ("Student", "M006", "David", "Martinez", "david.m@email.com", "466-0106", 7, True, "STU2024002", "Tech College"),
    ("Regular", "M007", "Maria", "Garcia", "maria.g@email.com", "466-0107", 4, False, None, None),
    ("Premium", "M008", "James", "Anderson", "james.a@email.com", "466-0108", 10, True, "Tom Trainer", "10"),
    ("Student", "M009", "Sophie", "Taylor", "sophie.t@email.com", "466-0109", 8, True, "STU2024003", "City University"),
]


def setup_logger(level: int = logging.INFO, log_dir: Path | None = None) -> logging.Logger:
    """
    Configure the root logger once: console + daily rotating file.
    Modules log through logging.getLogger(__name__) and inherit this setup.
    """
    root = logging.getLogger()
    root.setLevel(level)
    # avoid duplicate handlers if setup_logger() is called multiple times
    if any(isinstance(h, TimedRotatingFileHandler) for h in root.handlers):
        return logging.getLogger(LOGGER_NAME)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        filename=log_dir / "gym.log",
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler()

    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logger = logging.getLogger(LOGGER_NAME)
    logger.info("Logger initialized (daily rotation enabled)")
    return logger


def validate_member_inputs(
    member_type: str,
    member_id: str,
    first_name: str,
    last_name: str,
    email: str,
    performance_rating=None,
    sessions_per_month=None,
    store: MemberStore | None = None,
) -> list[str]:
    errors: list[str] = []
    if member_type not in MEMBER_TYPES:
        errors.append(f"Member type must be one of: {', '.join(MEMBER_TYPES)}.")
    if not member_id.strip():
        errors.append("Member ID is required.")
    elif store is not None and store.find_by_id(member_id.strip()) is not None:
        errors.append(f"Member ID {member_id.strip()} already exists.")
    if not first_name.strip():
        errors.append("First name is required.")
    if not last_name.strip():
        errors.append("Last name is required.")
    if email.strip() and "@" not in email:
        errors.append("Email must contain '@'.")
    if any("," in v for v in (member_id, first_name, last_name, email)):
        errors.append("Fields must not contain commas.")
    if performance_rating is not None:
        try:
            rating = int(performance_rating)
            if not MIN_PERFORMANCE_RATING <= rating <= MAX_PERFORMANCE_RATING:
                errors.append("Performance rating must be between 0 and 10.")
        except (TypeError, ValueError):
            errors.append("Performance rating must be a whole number.")
    if member_type == TYPE_PREMIUM and sessions_per_month is not None:
        try:
            if int(sessions_per_month) < 0:
                errors.append("Sessions per month cannot be negative.")
        except (TypeError, ValueError):
            errors.append("Sessions per month must be a whole number.")
    return errors


def build_member(
    member_type: str,
    member_id: str,
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    performance_rating: int,
    goal_achieved: bool,
    extra1: str = "",
    extra2: str = "",
) -> Member:
    """Member from validated form/CLI input (extras: trainer+sessions or student id+university)."""
    member = member_from_row(
        member_type, member_id.strip(), first_name.strip(), last_name.strip(),
        email.strip(), phone.strip(),
        performance_rating=int(performance_rating),
        goal_achieved=goal_achieved,
        extra1=extra1.strip() or None,
        extra2=str(extra2).strip() or None,
    )
    if member is None:
        raise ValueError(f"Unknown member type: {member_type}")
    return member


def members_to_dataframe(members: list[Member]) -> pd.DataFrame:
    if not members:
        return pd.DataFrame(columns=MEMBER_COLUMNS)
    return pd.DataFrame([m.to_dict() for m in members], columns=MEMBER_COLUMNS)


def members_to_csv_bytes(members: list[Member]) -> bytes:
    return members_to_dataframe(members).to_csv(index=False).encode("utf-8")


def fee_summary_by_type(members: list[Member]) -> pd.DataFrame:
    df = members_to_dataframe(members)
    if df.empty:
        return pd.DataFrame(columns=["type", "members", "total_fee", "average_fee"])
    summary = (
        df.groupby("type")["monthly_fee"]
        .agg(members="count", total_fee="sum", average_fee="mean")
        .reset_index()
    )
    summary["total_fee"] = summary["total_fee"].round(2)
    summary["average_fee"] = summary["average_fee"].round(2)
    return summary


def appreciation_letters(store: MemberStore) -> list[str]:
    letters = (store.generate_appreciation_letter(m) for m in store.get_all_members())
    return [letter for letter in letters if letter]


def reminder_letters(store: MemberStore) -> list[str]:
    letters = (store.generate_reminder_letter(m) for m in store.get_all_members())
    return [letter for letter in letters if letter]


def insert_sample_data(store: MemberStore) -> int:
    """
    Add the nine sample members, skipping IDs already present.
    Returns how many were added.
    """
    added = 0
    for type_tag, member_id, first, last, email, phone, rating, goal, extra1, extra2 in SAMPLE_ROWS:
        if store.find_by_id(member_id) is not None:
            continue
        member = member_from_row(type_tag, member_id, first, last, email, phone, rating, goal, extra1, extra2)
        store.add_member(member)
        added += 1
    return added


def describe_fee_rules(member_type: str) -> str:
    if member_type == TYPE_PREMIUM:
        return "15% off when the goal is achieved; $20 off for a rating of 8 or more; $25 per session."
    if member_type == TYPE_STUDENT:
        return "30% student discount; $5 off when the goal is achieved; never below $20."
    return "10% off when the goal is achieved; $10 penalty for a rating below 3."
