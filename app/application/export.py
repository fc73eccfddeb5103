"""
CSV / JSON export of users (admin) and of a user's own transactions.
"""
import csv
import io
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.application.errors import ValidationError
from app.infrastructure.db.models import User, Transaction, Category
from app.utils.dates import as_utc, utcnow


FORMAT_CSV = "csv"
FORMAT_JSON = "json"

USER_COLUMNS = [
    ("id", "ID"),
    ("name", "Name"),
    ("email", "Email"),
    ("role", "Role"),
    ("isActive", "Active"),
    ("createdAt", "Created"),
    ("updatedAt", "Updated"),
]

TRANSACTION_COLUMNS = [
    ("id", "ID"),
    ("type", "Type"),
    ("amount", "Amount"),
    ("description", "Description"),
    ("category", "Category"),
    ("date", "Date"),
    ("createdAt", "Created At"),
]


def check_format(value: str | None) -> str:
    value = (value or FORMAT_JSON).lower()
    if value not in (FORMAT_CSV, FORMAT_JSON):
        raise ValidationError("format must be csv or json")
    return value


def export_filename(kind: str, fmt: str) -> str:
    """users_export_1714579200000.csv"""
    return f"{kind}_export_{int(utcnow().timestamp() * 1000)}.{fmt}"


def _iso(value) -> str | None:
    value = as_utc(value)
    return value.isoformat() if value else None


def _day(value) -> str | None:
    value = as_utc(value)
    return value.date().isoformat() if value else None


def user_rows(db: Session) -> List[Dict[str, Any]]:
    users = db.query(User).order_by(User.id.asc()).all()
    return [
        {
            "id": u.id,
            "name": u.name,
            "email": u.email,
            "role": u.role,
            "isActive": u.is_active,
            "activatedAt": _iso(u.activated_at),
            "expiresAt": _iso(u.expires_at),
            "createdAt": _iso(u.created_at),
            "updatedAt": _iso(u.updated_at),
        }
        for u in users
    ]


def transaction_rows(db: Session, user_id: int) -> List[Dict[str, Any]]:
    """Newest first, with the category name resolved"""
    rows = db.query(Transaction, Category.name).outerjoin(
        Category, Category.id == Transaction.category_id
    ).filter(
        Transaction.user_id == user_id,
    ).order_by(Transaction.date.desc(), Transaction.id.desc()).all()

    return [
        {
            "id": tx.id,
            "type": tx.type,
            "amount": float(tx.amount),
            "description": tx.description or "",
            "category": category_name or "Uncategorized",
            "date": _day(tx.date),
            "createdAt": _day(tx.created_at),
        }
        for tx, category_name in rows
    ]


def to_csv(rows: List[Dict[str, Any]], columns: List[tuple]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([title for _, title in columns])
    for row in rows:
        writer.writerow([row.get(key, "") for key, _ in columns])
    return buffer.getvalue()
