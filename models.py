"""
models.py
Member variants (regular, premium, student), fee rules and related constants.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

# Fees ($ per month)
REGULAR_BASE_FEE = 50
PREMIUM_BASE_FEE = 100
STUDENT_BASE_FEE = 40
SESSION_COST = 25

LOW_PERFORMANCE_PENALTY = 10
HIGH_PERFORMANCE_BONUS = 20
STUDENT_GOAL_ACHIEVEMENT_BONUS = 5
MINIMUM_STUDENT_FEE = 20

REGULAR_GOAL_ACHIEVEMENT_DISCOUNT = 0.10
PREMIUM_GOAL_ACHIEVEMENT_DISCOUNT = 0.15
STUDENT_BASE_DISCOUNT = 0.30

# Performance thresholds (0-10 scale)
MIN_PERFORMANCE_RATING = 0
MAX_PERFORMANCE_RATING = 10
HIGH_PERFORMANCE_THRESHOLD = 8
LOW_PERFORMANCE_THRESHOLD = 5
PENALTY_PERFORMANCE_THRESHOLD = 3

# Defaults for new members / incomplete CSV rows
DEFAULT_PERFORMANCE_RATING = 5
DEFAULT_GOAL_ACHIEVED = False
DEFAULT_TRAINER_NAME = "Default Trainer"
DEFAULT_SESSIONS_PER_MONTH = 4
DEFAULT_STUDENT_ID = "STU001"
DEFAULT_UNIVERSITY = "Default University"

# Type tags used in the CSV "Type" column
TYPE_REGULAR = "Regular"
TYPE_PREMIUM = "Premium"
TYPE_STUDENT = "Student"
MEMBER_TYPES = (TYPE_REGULAR, TYPE_PREMIUM, TYPE_STUDENT)

DISPLAY_REGULAR_MEMBERSHIP = "Regular Membership"
DISPLAY_PREMIUM_MEMBERSHIP = "Premium Membership (Personal Trainer)"
DISPLAY_STUDENT_MEMBERSHIP = "Student Membership"


class Member(ABC):
    """
    Common state of a gym member. Subclasses supply the monthly fee rule
    and the display name of the membership.

    Members compare by identity: two records with the same ID are still
    two different objects.
    """

    type_tag: str = ""

    def __init__(
        self,
        member_id: str,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        base_fee: float,
        join_date: date | None = None,
    ):
        self.member_id = member_id
        self.first_name = first_name
        self.last_name = last_name
        self.email = email
        self.phone = phone
        self.base_fee = base_fee
        self.join_date = join_date or date.today()
        self._performance_rating = DEFAULT_PERFORMANCE_RATING
        self.goal_achieved = DEFAULT_GOAL_ACHIEVED

    @abstractmethod
    def calculate_monthly_fee(self) -> float:
        ...

    @abstractmethod
    def get_member_type(self) -> str:
        ...

    def extra_fields(self) -> tuple[str, str]:
        """(Extra1, Extra2) columns of the CSV row."""
        return ("", "")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def performance_rating(self) -> int:
        return self._performance_rating

    @performance_rating.setter
    def performance_rating(self, value: int) -> None:
        self.set_performance_rating(value)

    def set_performance_rating(self, value: int) -> bool:
        """
        Set the rating if it is within 0-10 and return True.
        Out-of-range values are ignored (rating unchanged) and False is returned.
        """
        if MIN_PERFORMANCE_RATING <= value <= MAX_PERFORMANCE_RATING:
            self._performance_rating = int(value)
            return True
        return False

    def generate_performance_report(self) -> str:
        lines = [
            f"Performance Report for {self.full_name}",
            f"Member Type: {self.get_member_type()}",
            f"Performance Rating: {self.performance_rating}/10",
            f"Goal Achievement: {'Yes' if self.goal_achieved else 'No'}",
            f"Monthly Fee: ${self.calculate_monthly_fee():.2f}",
        ]
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict:
        """Flat row used for tables and exports."""
        extra1, extra2 = self.extra_fields()
        return {
            "member_id": self.member_id,
            "full_name": self.full_name,
            "type": self.get_member_type(),
            "email": self.email,
            "phone": self.phone,
            "join_date": self.join_date.isoformat(),
            "performance_rating": self.performance_rating,
            "goal_achieved": self.goal_achieved,
            "monthly_fee": round(self.calculate_monthly_fee(), 2),
            "extra1": extra1,
            "extra2": extra2,
        }

    def __str__(self) -> str:
        return (
            f"Member ID: {self.member_id} | Name: {self.full_name} | Type: {self.get_member_type()} | "
            f"Rating: {self.performance_rating}/10 | Fee: ${self.calculate_monthly_fee():.2f}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(member_id={self.member_id!r}, name={self.full_name!r})"


class RegularMember(Member):
    """10% off when the goal is achieved, $10 penalty below rating 3."""

    type_tag = TYPE_REGULAR

    def __init__(self, member_id: str, first_name: str, last_name: str, email: str, phone: str,
                 join_date: date | None = None):
        super().__init__(member_id, first_name, last_name, email, phone, REGULAR_BASE_FEE, join_date)

    def calculate_monthly_fee(self) -> float:
        fee = self.base_fee
        if self.goal_achieved:
            fee = fee * (1 - REGULAR_GOAL_ACHIEVEMENT_DISCOUNT)
        # penalty goes on after the discount
        if self.performance_rating < PENALTY_PERFORMANCE_THRESHOLD:
            fee += LOW_PERFORMANCE_PENALTY
        return fee

    def get_member_type(self) -> str:
        return DISPLAY_REGULAR_MEMBERSHIP


class PremiumMember(Member):
    """Personal trainer sessions on top of the base fee."""

    type_tag = TYPE_PREMIUM

    def __init__(self, member_id: str, first_name: str, last_name: str, email: str, phone: str,
                 trainer_name: str = DEFAULT_TRAINER_NAME,
                 sessions_per_month: int = DEFAULT_SESSIONS_PER_MONTH,
                 join_date: date | None = None):
        super().__init__(member_id, first_name, last_name, email, phone, PREMIUM_BASE_FEE, join_date)
        self.trainer_name = trainer_name
        self.sessions_per_month = sessions_per_month

    def calculate_monthly_fee(self) -> float:
        fee = self.base_fee + self.sessions_per_month * SESSION_COST
        if self.goal_achieved:
            fee = fee * (1 - PREMIUM_GOAL_ACHIEVEMENT_DISCOUNT)
        # bonus is subtracted from the already discounted fee
        if self.performance_rating >= HIGH_PERFORMANCE_THRESHOLD:
            fee -= HIGH_PERFORMANCE_BONUS
        return fee

    def get_member_type(self) -> str:
        return DISPLAY_PREMIUM_MEMBERSHIP

    def extra_fields(self) -> tuple[str, str]:
        return (self.trainer_name, str(self.sessions_per_month))


class StudentMember(Member):
    """30% off the base fee, $5 off for goal achievers, never below $20."""

    type_tag = TYPE_STUDENT

    def __init__(self, member_id: str, first_name: str, last_name: str, email: str, phone: str,
                 student_id: str = DEFAULT_STUDENT_ID,
                 university: str = DEFAULT_UNIVERSITY,
                 join_date: date | None = None):
        super().__init__(member_id, first_name, last_name, email, phone, STUDENT_BASE_FEE, join_date)
        self.student_id = student_id
        self.university = university

    def calculate_monthly_fee(self) -> float:
        fee = self.base_fee * (1 - STUDENT_BASE_DISCOUNT)
        if self.goal_achieved:
            fee -= STUDENT_GOAL_ACHIEVEMENT_BONUS
        return max(fee, MINIMUM_STUDENT_FEE)

    def get_member_type(self) -> str:
        return DISPLAY_STUDENT_MEMBERSHIP

    def extra_fields(self) -> tuple[str, str]:
        return (self.student_id, self.university)


def member_from_row(
    type_tag: str,
    member_id: str,
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    performance_rating: int = DEFAULT_PERFORMANCE_RATING,
    goal_achieved: bool = DEFAULT_GOAL_ACHIEVED,
    extra1: str | None = None,
    extra2: str | None = None,
) -> Member | None:
    """
    Build the right variant from the fields of one CSV row.
    Returns None for an unknown type tag.
    Empty extras fall back to the variant defaults; a non-numeric session
    count raises ValueError.
    """
    if type_tag == TYPE_REGULAR:
        member: Member = RegularMember(member_id, first_name, last_name, email, phone)
    elif type_tag == TYPE_PREMIUM:
        trainer = extra1 or DEFAULT_TRAINER_NAME
        sessions = int(extra2) if extra2 else DEFAULT_SESSIONS_PER_MONTH
        member = PremiumMember(member_id, first_name, last_name, email, phone, trainer, sessions)
    elif type_tag == TYPE_STUDENT:
        member = StudentMember(
            member_id, first_name, last_name, email, phone,
            extra1 or DEFAULT_STUDENT_ID, extra2 or DEFAULT_UNIVERSITY,
        )
    else:
        return None

    member.set_performance_rating(performance_rating)
    member.goal_achieved = goal_achieved
    return member
