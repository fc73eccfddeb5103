"""
Tests for CSV/JSON export helpers
"""
import csv
import io
import pytest
from datetime import datetime, timezone
from decimal import Decimal

from app.application.categories import CreateCategoryUseCase
from app.application.errors import ValidationError
from app.application.export import (
    TRANSACTION_COLUMNS, USER_COLUMNS, check_format, export_filename, to_csv,
    transaction_rows, user_rows,
)
from app.application.transactions import CreateTransactionUseCase


class TestFormat:
    def test_default_json(self):
        assert check_format(None) == "json"

    def test_case_insensitive(self):
        assert check_format("CSV") == "csv"

    def test_unknown(self):
        with pytest.raises(ValidationError):
            check_format("xml")

    def test_filename(self):
        name = export_filename("users", "csv")
        assert name.startswith("users_export_")
        assert name.endswith(".csv")


class TestRows:
    def test_transaction_rows(self, db_session, active_user, make_user):
        food = CreateCategoryUseCase(db_session).execute(active_user.id, "Food")
        use_case = CreateTransactionUseCase(db_session)
        use_case.execute(active_user.id, Decimal("7.25"), "expense", food.id,
                         datetime(2026, 5, 2, tzinfo=timezone.utc), "Pizza")
        use_case.execute(active_user.id, Decimal("100"), "income", None,
                         datetime(2026, 5, 1, tzinfo=timezone.utc))
        other = make_user("other@test.com", is_active=True)
        use_case.execute(other.id, Decimal("1"), "expense")

        rows = transaction_rows(db_session, active_user.id)

        assert len(rows) == 2
        assert rows[0]["category"] == "Food"
        assert rows[0]["amount"] == 7.25
        assert rows[0]["date"] == "2026-05-02"
        assert rows[1]["category"] == "Uncategorized"
        assert rows[1]["description"] == ""

    def test_user_rows_exclude_secrets(self, db_session, active_user):
        rows = user_rows(db_session)
        assert rows[0]["email"] == "active@test.com"
        assert "password_hash" not in rows[0]
        assert "refresh_token" not in rows[0]

    def test_csv(self, db_session, active_user):
        text = to_csv(user_rows(db_session), USER_COLUMNS)
        parsed = list(csv.reader(io.StringIO(text)))
        assert parsed[0] == [title for _, title in USER_COLUMNS]
        assert parsed[1][2] == "active@test.com"

    def test_csv_quotes_commas(self):
        rows = [{"id": 1, "type": "expense", "amount": 1.0, "description": "a, b", "category": "X",
                 "date": "2026-05-01", "createdAt": "2026-05-01"}]
        text = to_csv(rows, TRANSACTION_COLUMNS)
        assert '"a, b"' in text
