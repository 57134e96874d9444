"""Data access layer for ledger entities"""

from datetime import datetime
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session, joinedload
from finance_gateway.infrastructure.database.models import Transaction, User

COMPLETED = "completed"


class TransactionRepository:
    """Repository for ledger transactions"""

    def __init__(self, db: Session):
        self.db = db

    def get_completed_in_range(
        self,
        user_id: str,
        types: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> List[Transaction]:
        """Completed transactions with completed_at in [start, end), oldest first"""
        return (
            self.db.query(Transaction)
            .options(joinedload(Transaction.invoice), joinedload(Transaction.bank_account))
            .filter(
                Transaction.user_id == user_id,
                Transaction.status == COMPLETED,
                Transaction.type.in_(list(types)),
                Transaction.completed_at >= start,
                Transaction.completed_at < end,
            )
            .order_by(Transaction.completed_at.asc(), Transaction.id.asc())
            .all()
        )


class UserRepository:
    """Repository for platform users"""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()
