"""
Export routes: own transactions for any subscriber, all users for admins
"""
import json

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_admin, require_subscription
from app.application.export import (
    FORMAT_CSV, TRANSACTION_COLUMNS, USER_COLUMNS,
    check_format, export_filename, to_csv, transaction_rows, user_rows,
)
from app.infrastructure.db.models import User


router = APIRouter(prefix="/api/v1/export", tags=["export"])


def _attachment(rows: list, columns: list, kind: str, fmt: str) -> Response:
    filename = export_filename(kind, fmt)
    if fmt == FORMAT_CSV:
        body, media_type = to_csv(rows, columns), "text/csv"
    else:
        body, media_type = json.dumps(rows, ensure_ascii=False), "application/json"
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/transactions")
def export_transactions(
    format: str | None = None,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    fmt = check_format(format)
    return _attachment(transaction_rows(db, user.id), TRANSACTION_COLUMNS, "transactions", fmt)


@router.get("/users")
def export_users(
    format: str | None = None,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    fmt = check_format(format)
    return _attachment(user_rows(db), USER_COLUMNS, "users", fmt)
