"""Unit tests for models (fee rules, rating invariant, row factory)."""

import pytest

from models import (
    DEFAULT_SESSIONS_PER_MONTH,
    DEFAULT_STUDENT_ID,
    DEFAULT_TRAINER_NAME,
    DEFAULT_UNIVERSITY,
    PremiumMember,
    RegularMember,
    StudentMember,
    member_from_row,
)


def _regular(rating=5, goal=False):
    m = RegularMember("R1", "Ann", "Lee", "ann@example.com", "1")
    m.performance_rating = rating
    m.goal_achieved = goal
    return m


# ---------------------------------------------------------------------------
# Fee rules
# ---------------------------------------------------------------------------

class TestRegularFee:
    def test_base_fee_only(self):
        assert _regular(rating=5).calculate_monthly_fee() == pytest.approx(50.0)

    def test_goal_discount(self):
        assert _regular(rating=9, goal=True).calculate_monthly_fee() == pytest.approx(45.0)

    def test_low_performance_penalty(self):
        assert _regular(rating=2).calculate_monthly_fee() == pytest.approx(60.0)

    def test_penalty_applied_after_discount(self):
        assert _regular(rating=2, goal=True).calculate_monthly_fee() == pytest.approx(55.0)

    def test_rating_three_has_no_penalty(self):
        assert _regular(rating=3).calculate_monthly_fee() == pytest.approx(50.0)


class TestPremiumFee:
    def test_sessions_added(self):
        m = PremiumMember("P1", "Bo", "Ng", "bo@example.com", "2", "Tom", 5)
        m.performance_rating = 5
        assert m.calculate_monthly_fee() == pytest.approx(225.0)

    def test_discount_then_bonus(self):
        m = PremiumMember("P1", "Bo", "Ng", "bo@example.com", "2", "Tom", 5)
        m.goal_achieved = True
        m.performance_rating = 9
        assert m.calculate_monthly_fee() == pytest.approx(171.25)

    def test_discount_without_bonus(self):
        m = PremiumMember("P1", "Bo", "Ng", "bo@example.com", "2", "Tom", 5)
        m.goal_achieved = True
        m.performance_rating = 7
        assert m.calculate_monthly_fee() == pytest.approx(191.25)

    def test_bonus_at_threshold(self):
        m = PremiumMember("P1", "Bo", "Ng", "bo@example.com", "2", "Tom", 0)
        m.performance_rating = 8
        assert m.calculate_monthly_fee() == pytest.approx(80.0)


class TestStudentFee:
    def test_student_discount(self):
        m = StudentMember("S1", "Cy", "Ko", "cy@uni.edu", "3")
        assert m.calculate_monthly_fee() == pytest.approx(28.0)

    def test_goal_bonus(self):
        m = StudentMember("S1", "Cy", "Ko", "cy@uni.edu", "3")
        m.goal_achieved = True
        assert m.calculate_monthly_fee() == pytest.approx(23.0)

    def test_minimum_fee(self):
        m = StudentMember("S1", "Cy", "Ko", "cy@uni.edu", "3")
        m.base_fee = 20
        m.goal_achieved = True
        assert m.calculate_monthly_fee() == 20

    def test_rating_does_not_matter(self):
        m = StudentMember("S1", "Cy", "Ko", "cy@uni.edu", "3")
        m.performance_rating = 0
        assert m.calculate_monthly_fee() == pytest.approx(28.0)


# ---------------------------------------------------------------------------
# Performance rating
# ---------------------------------------------------------------------------

class TestPerformanceRating:
    def test_default_is_five(self):
        assert _regular().performance_rating == 5

    def test_in_range_is_applied(self):
        m = _regular()
        assert m.set_performance_rating(10) is True
        assert m.performance_rating == 10

    @pytest.mark.parametrize("value", [-1, 11, 100])
    def test_out_of_range_is_ignored(self, value):
        m = _regular(rating=7)
        assert m.set_performance_rating(value) is False
        assert m.performance_rating == 7

    def test_property_assignment_uses_same_check(self):
        m = _regular(rating=3)
        m.performance_rating = 42
        assert m.performance_rating == 3

    def test_rating_stays_in_range_after_many_attempts(self):
        m = _regular()
        for value in [12, -5, 0, 10, 11, 6, -1]:
            m.set_performance_rating(value)
            assert 0 <= m.performance_rating <= 10
        assert m.performance_rating == 6


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

class TestDisplay:
    def test_member_types(self, regular, premium, student):
        assert regular.get_member_type() == "Regular Membership"
        assert premium.get_member_type() == "Premium Membership (Personal Trainer)"
        assert student.get_member_type() == "Student Membership"

    def test_full_name(self, regular):
        assert regular.full_name == "Alice Smith"

    def test_str(self, regular):
        assert str(regular) == (
            "Member ID: R001 | Name: Alice Smith | Type: Regular Membership | Rating: 9/10 | Fee: $45.00"
        )

    def test_performance_report(self, student):
        report = student.generate_performance_report()
        assert "Performance Report for Carol Smithers" in report
        assert "Performance Rating: 4/10" in report
        assert "Goal Achievement: No" in report
        assert "Monthly Fee: $28.00" in report

    def test_extra_fields(self, regular, premium, student):
        assert regular.extra_fields() == ("", "")
        assert premium.extra_fields() == ("Tom Trainer", "8")
        assert student.extra_fields() == ("STU2024001", "State University")

    def test_members_compare_by_identity(self):
        a = RegularMember("X", "A", "B", "e", "p")
        b = RegularMember("X", "A", "B", "e", "p")
        assert a != b
        assert len({a, b}) == 2


# ---------------------------------------------------------------------------
# member_from_row
# ---------------------------------------------------------------------------

class TestMemberFromRow:
    def test_premium_with_extras(self):
        m = member_from_row("Premium", "P9", "A", "B", "a@b.c", "1", 8, True, "Lisa Coach", "6")
        assert isinstance(m, PremiumMember)
        assert m.trainer_name == "Lisa Coach"
        assert m.sessions_per_month == 6
        assert m.performance_rating == 8
        assert m.goal_achieved is True

    def test_premium_defaults(self):
        m = member_from_row("Premium", "P9", "A", "B", "a@b.c", "1")
        assert m.trainer_name == DEFAULT_TRAINER_NAME
        assert m.sessions_per_month == DEFAULT_SESSIONS_PER_MONTH

    def test_student_defaults(self):
        m = member_from_row("Student", "S9", "A", "B", "a@b.c", "1")
        assert m.student_id == DEFAULT_STUDENT_ID
        assert m.university == DEFAULT_UNIVERSITY

    def test_unknown_type(self):
        assert member_from_row("Gold", "G1", "A", "B", "a@b.c", "1") is None

    def test_out_of_range_rating_keeps_default(self):
        m = member_from_row("Regular", "R9", "A", "B", "a@b.c", "1", performance_rating=15)
        assert m.performance_rating == 5

    def test_bad_sessions(self):
        with pytest.raises(ValueError):
            member_from_row("Premium", "P9", "A", "B", "a@b.c", "1", extra1="Tom", extra2="many")
