"""
Tests for monthly budget upsert and lookup
"""
import pytest
from decimal import Decimal

from app.application.budgets import (
    BudgetValidationError, CategoryLimit, UpsertBudgetUseCase, get_budget,
)
from app.application.categories import CreateCategoryUseCase, DeleteCategoryUseCase
from app.infrastructure.db.models import Budget, CategoryBudget


@pytest.fixture
def categories(db_session, active_user):
    use_case = CreateCategoryUseCase(db_session)
    return use_case.execute(active_user.id, "Food"), use_case.execute(active_user.id, "Rent")


class TestGetBudget:
    def test_month_required(self, db_session, active_user):
        with pytest.raises(BudgetValidationError, match="month required"):
            get_budget(db_session, active_user.id, None)

    def test_bad_month(self, db_session, active_user):
        with pytest.raises(BudgetValidationError):
            get_budget(db_session, active_user.id, "2026-13")

    def test_none_when_missing(self, db_session, active_user):
        assert get_budget(db_session, active_user.id, "2026-05") is None


class TestUpsertBudget:
    def test_creates(self, db_session, active_user, categories):
        food, rent = categories
        view = UpsertBudgetUseCase(db_session).execute(
            active_user.id, "2026-05", Decimal("1000"),
            [CategoryLimit(food.id, Decimal("200")), CategoryLimit(rent.id, Decimal("600"))],
        )

        assert view.budget.month == "2026-05"
        assert Decimal(view.budget.total_budget) == Decimal("1000")
        assert [line.category_id for line in view.lines] == [food.id, rent.id]
        assert view.category_names == {food.id: "Food", rent.id: "Rent"}

    def test_second_call_replaces(self, db_session, active_user, categories):
        food, rent = categories
        use_case = UpsertBudgetUseCase(db_session)
        use_case.execute(active_user.id, "2026-05", Decimal("1000"), [CategoryLimit(food.id, Decimal("200"))])

        view = use_case.execute(active_user.id, "2026-05", Decimal("800"), [CategoryLimit(rent.id, Decimal("500"))])

        assert db_session.query(Budget).count() == 1
        assert Decimal(view.budget.total_budget) == Decimal("800")
        assert [line.category_id for line in view.lines] == [rent.id]
        assert db_session.query(CategoryBudget).count() == 1

    def test_months_are_separate(self, db_session, active_user):
        use_case = UpsertBudgetUseCase(db_session)
        use_case.execute(active_user.id, "2026-05", Decimal("100"))
        use_case.execute(active_user.id, "2026-06", Decimal("200"))

        assert Decimal(get_budget(db_session, active_user.id, "2026-05").budget.total_budget) == Decimal("100")
        assert Decimal(get_budget(db_session, active_user.id, "2026-06").budget.total_budget) == Decimal("200")

    def test_foreign_category_rejected(self, db_session, active_user, make_user):
        other = make_user("other@test.com", is_active=True)
        theirs = CreateCategoryUseCase(db_session).execute(other.id, "Theirs")

        with pytest.raises(BudgetValidationError, match="Unknown category"):
            UpsertBudgetUseCase(db_session).execute(
                active_user.id, "2026-05", Decimal("100"), [CategoryLimit(theirs.id, Decimal("1"))],
            )

    def test_negative_total(self, db_session, active_user):
        with pytest.raises(BudgetValidationError):
            UpsertBudgetUseCase(db_session).execute(active_user.id, "2026-05", Decimal("-1"))

    def test_deleting_category_drops_its_line(self, db_session, active_user, categories):
        food, rent = categories
        UpsertBudgetUseCase(db_session).execute(
            active_user.id, "2026-05", Decimal("1000"),
            [CategoryLimit(food.id, Decimal("200")), CategoryLimit(rent.id, Decimal("600"))],
        )

        DeleteCategoryUseCase(db_session).execute(active_user.id, food.id)

        view = get_budget(db_session, active_user.id, "2026-05")
        assert [line.category_id for line in view.lines] == [rent.id]
