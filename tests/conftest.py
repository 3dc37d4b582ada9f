"""Shared fixtures for the gym member tests."""

from __future__ import annotations

from datetime import date

import pytest

from models import PremiumMember, RegularMember, StudentMember
from store import MemberStore


@pytest.fixture
def regular() -> RegularMember:
    m = RegularMember("R001", "Alice", "Smith", "alice@example.com", "555-0101", join_date=date(2024, 3, 1))
    m.performance_rating = 9
    m.goal_achieved = True
    return m


@pytest.fixture
def premium() -> PremiumMember:
    m = PremiumMember("P001", "Bob", "Jones", "bob@example.com", "555-0102",
                      trainer_name="Tom Trainer", sessions_per_month=8, join_date=date(2024, 1, 15))
    m.performance_rating = 9
    m.goal_achieved = True
    return m


@pytest.fixture
def student() -> StudentMember:
    m = StudentMember("S001", "Carol", "Smithers", "carol@uni.edu", "555-0103",
                      student_id="STU2024001", university="State University", join_date=date(2024, 2, 10))
    m.performance_rating = 4
    m.goal_achieved = False
    return m


@pytest.fixture
def store(tmp_path, regular, premium, student) -> MemberStore:
    s = MemberStore(tmp_path / "members.csv")
    for m in (regular, premium, student):
        s.add_member(m)
    return s


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "member_data.csv"
    path.write_text(
        "Type,ID,FirstName,LastName,Email,Phone,PerformanceRating,GoalAchieved,Extra1,Extra2\n"
        "Regular,M001,Eman,Ejaz,eman.ejaz@email.com,466-0101,7,true,,\n"
        "Premium,M002,Sajina,Rana,sajina.rana@email.com,466-0102,9,true,Elina Trainer,8\n"
        "Student,M003,Waqas,Iqbal,waqas.iqbal@email.com,466-0103,6,false,STU2024001,State University\n",
        encoding="utf-8",
    )
    return path
