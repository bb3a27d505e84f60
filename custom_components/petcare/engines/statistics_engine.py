"""Statistics Engine - read-only rollups over repository snapshots.

This engine derives every summary Pet Care displays:
- Per-pet statistics (total spent, average monthly spend, top category,
  vaccine compliance)
- Overall statistics across all pets, plus the per-pet breakdown
- Expense summary (this month / this year / all time, by category)
- Health dashboard (overdue/upcoming vaccines, today's reminders, scores)
- Weight trend (latest record and change since the previous one)

Design Principles:
    - Stateless: No coordinator reference, operates on passed snapshots
    - Recomputed on demand: nothing here is cached or persisted
    - Zero-division safe: empty inputs produce 0 totals and 100% compliance
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from dateutil.relativedelta import relativedelta

from .. import const
from ..utils.dt_utils import dt_parse_date
from ..utils.math_utils import calculate_percentage, round_amount
from . import status_engine

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence


class StatisticsEngine:
    """Unified engine for Pet Care summaries.

    All methods operate on lists of record dicts passed as arguments. Vaccine
    status is derived here from `now`, so stored records need no status field.

    Example:
        stats = StatisticsEngine()
        per_pet = stats.pet_statistics(pet_id, expenses, vaccines, now)
        overall = stats.overall_statistics(pets, expenses, vaccines, now)
    """

    # ────────────────────────────────────────────────────────────────
    # Expense Primitives
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def total_spent(expenses: Iterable[Mapping[str, Any]]) -> float:
        """Sum of expense amounts."""
        return round_amount(
            sum(float(e.get(const.DATA_EXPENSE_AMOUNT, 0)) for e in expenses)
        )

    @staticmethod
    def average_monthly_expense(
        expenses: Iterable[Mapping[str, Any]], now: datetime
    ) -> float:
        """Average spend over the trailing 12 months.

        Only expenses dated strictly after (today - 12 months) count. The
        divisor is the number of distinct calendar months that actually have
        at least one such expense, not 12.
        """
        cutoff = now.date() - relativedelta(months=const.STATS_TRAILING_MONTHS)
        months: set[tuple[int, int]] = set()
        total = 0.0
        for expense in expenses:
            day = dt_parse_date(expense.get(const.DATA_DATE))
            if day is None or day <= cutoff:
                continue
            months.add((day.year, day.month))
            total += float(expense.get(const.DATA_EXPENSE_AMOUNT, 0))
        if not months:
            return 0.0
        return round_amount(total / len(months))

    @staticmethod
    def category_totals(expenses: Iterable[Mapping[str, Any]]) -> dict[str, float]:
        """Per-category totals in first-encountered order."""
        totals: dict[str, float] = {}
        for expense in expenses:
            category = expense.get(const.DATA_EXPENSE_CATEGORY, "other")
            totals[category] = totals.get(category, 0.0) + float(
                expense.get(const.DATA_EXPENSE_AMOUNT, 0)
            )
        return {key: round_amount(value) for key, value in totals.items()}

    def most_expensive_category(
        self, expenses: Iterable[Mapping[str, Any]]
    ) -> str | None:
        """Category with the highest total; ties go to the first encountered.

        Returns None when there are no expenses.
        """
        best: str | None = None
        best_total = 0.0
        for category, total in self.category_totals(expenses).items():
            if best is None or total > best_total:
                best, best_total = category, total
        return best

    # ────────────────────────────────────────────────────────────────
    # Vaccine Compliance
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def compliance_rate(vaccines: Sequence[Mapping[str, Any]], now: datetime) -> float:
        """Percentage of vaccines that are completed or upcoming.

        Overdue vaccines count as non-compliant. No vaccines means 100%.
        """
        if not vaccines:
            return const.STATS_FULL_COMPLIANCE
        up_to_date = sum(
            1
            for v in vaccines
            if status_engine.vaccine_status(
                v.get(const.DATA_VACCINE_NEXT_DUE_DATE),
                v.get(const.DATA_VACCINE_DATE_ADMINISTERED),
                now,
            )
            != const.VACCINE_STATUS_OVERDUE
        )
        return calculate_percentage(up_to_date, len(vaccines))

    # ────────────────────────────────────────────────────────────────
    # Per-pet & Overall
    # ────────────────────────────────────────────────────────────────

    def pet_statistics(
        self,
        pet_id: str,
        expenses: Iterable[Mapping[str, Any]],
        vaccines: Iterable[Mapping[str, Any]],
        now: datetime,
    ) -> dict[str, Any]:
        """Build the statistics breakdown for a single pet.

        `expenses` and `vaccines` may be full snapshots; they are filtered
        by pet_id here.
        """
        pet_expenses = [e for e in expenses if e.get(const.DATA_PET_ID) == pet_id]
        pet_vaccines = [v for v in vaccines if v.get(const.DATA_PET_ID) == pet_id]
        return {
            "pet_id": pet_id,
            "total_spent": self.total_spent(pet_expenses),
            "average_monthly_expense": self.average_monthly_expense(pet_expenses, now),
            "most_expensive_category": self.most_expensive_category(pet_expenses),
            "total_expenses": len(pet_expenses),
            "health_compliance_rate": self.compliance_rate(pet_vaccines, now),
        }

    def overall_statistics(
        self,
        pets: Sequence[Mapping[str, Any]],
        expenses: Sequence[Mapping[str, Any]],
        vaccines: Sequence[Mapping[str, Any]],
        now: datetime,
    ) -> dict[str, Any]:
        """Aggregate the per-pet formulas across every pet combined."""
        return {
            "total_pets": len(pets),
            "total_spent": self.total_spent(expenses),
            "average_monthly_expense": self.average_monthly_expense(expenses, now),
            "most_expensive_category": self.most_expensive_category(expenses),
            "total_expenses": len(expenses),
            "health_compliance_rate": self.compliance_rate(vaccines, now),
            "pet_statistics": [
                self.pet_statistics(pet[const.DATA_ID], expenses, vaccines, now)
                for pet in pets
            ],
        }

    # ────────────────────────────────────────────────────────────────
    # Expense Summary
    # ────────────────────────────────────────────────────────────────

    def expense_summary(
        self, expenses: Sequence[Mapping[str, Any]], now: datetime
    ) -> dict[str, Any]:
        """Totals for the current month, current year and all time."""
        today = now.date()
        this_month: list[Mapping[str, Any]] = []
        this_year: list[Mapping[str, Any]] = []
        for expense in expenses:
            day = dt_parse_date(expense.get(const.DATA_DATE))
            if day is None or day.year != today.year:
                continue
            this_year.append(expense)
            if day.month == today.month:
                this_month.append(expense)
        return {
            "this_month": self.total_spent(this_month),
            "this_year": self.total_spent(this_year),
            "all_time": self.total_spent(expenses),
            "by_category": self.category_totals(expenses),
        }

    # ────────────────────────────────────────────────────────────────
    # Health Dashboard
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def health_score(overdue: int, upcoming: int) -> int:
        """100 minus 20 per overdue and 5 per upcoming vaccine, floored at 0."""
        score = (
            const.HEALTH_SCORE_MAX
            - const.HEALTH_SCORE_OVERDUE_PENALTY * overdue
            - const.HEALTH_SCORE_UPCOMING_PENALTY * upcoming
        )
        return max(0, score)

    @staticmethod
    def health_status(score: int) -> str:
        """Map a health score to excellent/good/fair/poor."""
        for threshold, label in const.HEALTH_STATUS_THRESHOLDS:
            if score >= threshold:
                return label
        return const.HEALTH_STATUS_POOR

    def health_dashboard(
        self,
        pets: Sequence[Mapping[str, Any]],
        vaccines: Sequence[Mapping[str, Any]],
        reminders: Sequence[Mapping[str, Any]],
        now: datetime,
    ) -> dict[str, Any]:
        """Build the health overview for every pet."""
        statuses = [
            (v.get(const.DATA_PET_ID), status_engine.with_vaccine_status(v, now))
            for v in vaccines
        ]

        def _count(status: str, pet_id: str | None = None) -> int:
            return sum(
                1
                for owner, record in statuses
                if record[const.DATA_VACCINE_STATUS] == status
                and (pet_id is None or owner == pet_id)
            )

        pet_statuses = []
        for pet in pets:
            pet_id = pet[const.DATA_ID]
            overdue = _count(const.VACCINE_STATUS_OVERDUE, pet_id)
            upcoming = _count(const.VACCINE_STATUS_UPCOMING, pet_id)
            score = self.health_score(overdue, upcoming)
            pet_statuses.append(
                {
                    "pet_id": pet_id,
                    "name": pet.get(const.DATA_PET_NAME),
                    "health_score": score,
                    "status": self.health_status(score),
                    "overdue_count": overdue,
                    "upcoming_count": upcoming,
                }
            )

        return {
            "overdue_vaccines": _count(const.VACCINE_STATUS_OVERDUE),
            "upcoming_vaccines": _count(const.VACCINE_STATUS_UPCOMING),
            "today_reminders": sum(
                1
                for r in reminders
                if status_engine.is_reminder_today(r.get(const.DATA_REMINDER_DATE), now)
            ),
            "pet_statuses": pet_statuses,
        }

    # ────────────────────────────────────────────────────────────────
    # Weight Trend
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def weight_trend(weights: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        """Latest weight and the change since the previous record.

        Weights are ordered by date ascending; ties keep insertion order.
        """
        ordered = sorted(
            weights,
            key=lambda w: dt_parse_date(w.get(const.DATA_DATE)) or date.min,
        )
        if not ordered:
            return {"latest_weight": None, "latest_date": None, "change": None}
        latest = ordered[-1]
        change = None
        if len(ordered) > 1:
            change = round_amount(
                float(latest[const.DATA_WEIGHT_VALUE])
                - float(ordered[-2][const.DATA_WEIGHT_VALUE])
            )
        return {
            "latest_weight": latest[const.DATA_WEIGHT_VALUE],
            "latest_date": latest.get(const.DATA_DATE),
            "change": change,
        }
