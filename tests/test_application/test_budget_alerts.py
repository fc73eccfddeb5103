"""
Tests for budget threshold evaluation (90% approaching, 100% exceeded)
"""
import logging
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app.application.budget_alerts import (
    BudgetThresholdEvaluator, LEVEL_APPROACHING, LEVEL_EXCEEDED,
    SCOPE_CATEGORY, SCOPE_TOTAL, classify,
)
from app.application.budgets import CategoryLimit, UpsertBudgetUseCase
from app.application.categories import CreateCategoryUseCase
from app.application.transactions import CreateTransactionUseCase, UpdateTransactionUseCase
from app.infrastructure.db.models import Transaction


_MAY = datetime(2026, 5, 10, 12, 0, 0, tzinfo=timezone.utc)
_LOGGER = "app.application.budget_alerts"


@pytest.fixture
def food(db_session, active_user):
    return CreateCategoryUseCase(db_session).execute(active_user.id, "Food")


@pytest.fixture
def may_budget(db_session, active_user, food):
    """Total 100, Food 50"""
    return UpsertBudgetUseCase(db_session).execute(
        active_user.id, "2026-05", Decimal("100"),
        [CategoryLimit(category_id=food.id, amount=Decimal("50"))],
    )


def _spend(db, user, amount, category_id=None, date=_MAY, type="expense"):
    return CreateTransactionUseCase(db).execute(
        user_id=user.id, amount=Decimal(amount), type=type,
        category_id=category_id, date=date,
    )


class TestClassify:
    def test_below_threshold(self):
        assert classify(Decimal("89.99"), Decimal("100")) is None

    def test_exactly_ninety_percent(self):
        assert classify(Decimal("90"), Decimal("100")) == LEVEL_APPROACHING

    def test_exactly_at_limit(self):
        assert classify(Decimal("100"), Decimal("100")) == LEVEL_EXCEEDED

    def test_over_limit(self):
        assert classify(Decimal("105"), Decimal("100")) == LEVEL_EXCEEDED

    def test_zero_limit_never_alerts(self):
        assert classify(Decimal("500"), Decimal("0")) is None


class TestTotalBudget:
    def test_approaching(self, db_session, active_user, may_budget, caplog):
        caplog.set_level(logging.WARNING, logger=_LOGGER)

        result = _spend(db_session, active_user, "95")

        assert [(a.scope, a.level) for a in result.alerts] == [(SCOPE_TOTAL, LEVEL_APPROACHING)]
        record = next(r for r in caplog.records if r.getMessage().startswith("Budget approaching limit"))
        assert record.levelno == logging.WARNING
        assert record.user_id == active_user.id
        assert record.month == "2026-05"
        assert record.spent == 95.0
        assert record.limit == 100.0
        assert record.percentage == 90

    def test_cumulative_exceeded(self, db_session, active_user, may_budget, caplog):
        caplog.set_level(logging.WARNING, logger=_LOGGER)
        _spend(db_session, active_user, "60")

        result = _spend(db_session, active_user, "45")

        alert = result.alerts[0]
        assert alert.level == LEVEL_EXCEEDED
        assert alert.spent == Decimal("105")
        assert "Budget exceeded" in caplog.text

    def test_alert_repeats_on_every_write(self, db_session, active_user, may_budget):
        first = _spend(db_session, active_user, "95")
        second = _spend(db_session, active_user, "1")

        assert first.alerts[0].level == LEVEL_APPROACHING
        assert second.alerts[0].level == LEVEL_APPROACHING

    def test_below_threshold_no_alert(self, db_session, active_user, may_budget, caplog):
        caplog.set_level(logging.WARNING, logger=_LOGGER)
        result = _spend(db_session, active_user, "10")
        assert result.alerts == []
        assert "Budget" not in caplog.text

    def test_income_never_alerts(self, db_session, active_user, may_budget):
        result = _spend(db_session, active_user, "500", type="income")
        assert result.alerts == []

    def test_income_not_counted_as_spending(self, db_session, active_user, may_budget):
        _spend(db_session, active_user, "500", type="income")
        result = _spend(db_session, active_user, "10")
        assert result.alerts == []

    def test_no_budget_no_alert(self, db_session, active_user):
        result = _spend(db_session, active_user, "1000")
        assert result.alerts == []

    def test_zero_total_budget(self, db_session, active_user):
        UpsertBudgetUseCase(db_session).execute(active_user.id, "2026-05", Decimal("0"))
        result = _spend(db_session, active_user, "1000")
        assert result.alerts == []

    def test_other_month_not_counted(self, db_session, active_user, may_budget):
        _spend(db_session, active_user, "95", date=datetime(2026, 4, 30, 23, 59, tzinfo=timezone.utc))
        result = _spend(db_session, active_user, "5")
        assert result.alerts == []

    def test_month_boundary_is_utc(self, db_session, active_user, may_budget):
        # 2026-06-01 01:00 at +03:00 is still May in UTC
        local = timezone(timedelta(hours=3))
        result = _spend(db_session, active_user, "95", date=datetime(2026, 6, 1, 1, 0, tzinfo=local))
        assert result.alerts[0].month == "2026-05"

    def test_other_users_spending_ignored(self, db_session, active_user, make_user, may_budget):
        other = make_user("other@test.com", is_active=True)
        _spend(db_session, other, "99")
        result = _spend(db_session, active_user, "1")
        assert result.alerts == []


class TestCategoryBudget:
    def test_category_exceeded(self, db_session, active_user, food, may_budget, caplog):
        caplog.set_level(logging.WARNING, logger=_LOGGER)

        result = _spend(db_session, active_user, "55", category_id=food.id)

        by_scope = {a.scope: a for a in result.alerts}
        assert SCOPE_TOTAL not in by_scope
        alert = by_scope[SCOPE_CATEGORY]
        assert alert.level == LEVEL_EXCEEDED
        assert alert.category_name == "Food"
        record = next(r for r in caplog.records if r.getMessage().startswith("Category budget exceeded"))
        assert record.category == "Food"
        assert record.category_id == food.id

    def test_category_and_total_together(self, db_session, active_user, food, may_budget):
        _spend(db_session, active_user, "50")
        result = _spend(db_session, active_user, "46", category_id=food.id)

        levels = {a.scope: a.level for a in result.alerts}
        assert levels == {SCOPE_TOTAL: LEVEL_APPROACHING, SCOPE_CATEGORY: LEVEL_APPROACHING}

    def test_zero_category_limit_never_alerts(self, db_session, active_user, food):
        UpsertBudgetUseCase(db_session).execute(
            active_user.id, "2026-05", Decimal("1000"),
            [CategoryLimit(category_id=food.id, amount=Decimal("0"))],
        )
        result = _spend(db_session, active_user, "50", category_id=food.id)
        assert result.alerts == []

    def test_category_without_line(self, db_session, active_user, may_budget):
        travel = CreateCategoryUseCase(db_session).execute(active_user.id, "Travel")
        result = _spend(db_session, active_user, "80", category_id=travel.id)
        assert result.alerts == []

    def test_uncategorized_only_checks_total(self, db_session, active_user, food, may_budget):
        result = _spend(db_session, active_user, "60")
        assert result.alerts == []


class TestWritePaths:
    def test_update_triggers_evaluation(self, db_session, active_user, may_budget):
        tx = _spend(db_session, active_user, "10").transaction

        result = UpdateTransactionUseCase(db_session).execute(active_user.id, tx.id, amount=Decimal("120"))

        assert result.alerts[0].level == LEVEL_EXCEEDED

    def test_evaluator_failure_does_not_block_write(self, db_session, active_user, may_budget, monkeypatch, caplog):
        def boom(self, user_id, transaction):
            raise RuntimeError("database went away")

        monkeypatch.setattr(BudgetThresholdEvaluator, "evaluate", boom)

        result = _spend(db_session, active_user, "95")

        assert result.alerts == []
        assert db_session.query(Transaction).filter(Transaction.id == result.transaction.id).count() == 1
        assert "Budget check failed" in caplog.text

    def test_evaluate_directly_raises(self, db_session, active_user, may_budget, monkeypatch):
        tx = _spend(db_session, active_user, "1").transaction
        evaluator = BudgetThresholdEvaluator(db_session)
        monkeypatch.setattr(evaluator, "_expense_sum", lambda *a, **k: 1 / 0)

        with pytest.raises(ZeroDivisionError):
            evaluator.evaluate(active_user.id, tx)
        assert evaluator.evaluate_safely(active_user.id, tx) == []

    def test_failure_rolls_back_session(self, db_session, active_user, may_budget, monkeypatch):
        tx = _spend(db_session, active_user, "1").transaction
        evaluator = BudgetThresholdEvaluator(db_session)
        monkeypatch.setattr(evaluator, "_expense_sum", lambda *a, **k: 1 / 0)
        calls = []
        real_rollback = db_session.rollback
        monkeypatch.setattr(db_session, "rollback", lambda: calls.append(1) or real_rollback())

        assert evaluator.evaluate_safely(active_user.id, tx) == []

        assert calls == [1]
        assert db_session.query(Transaction).filter(Transaction.id == tx.id).count() == 1


class TestDuplicateCategoryLines:
    def test_first_line_in_list_order_wins(self, db_session, active_user, food):
        UpsertBudgetUseCase(db_session).execute(
            active_user.id, "2026-05", Decimal("1000"),
            [
                CategoryLimit(category_id=food.id, amount=Decimal("50")),
                CategoryLimit(category_id=food.id, amount=Decimal("1000")),
            ],
        )

        result = _spend(db_session, active_user, "55", category_id=food.id)

        alert = next(a for a in result.alerts if a.scope == SCOPE_CATEGORY)
        assert alert.level == LEVEL_EXCEEDED
        assert alert.limit == Decimal("50")
