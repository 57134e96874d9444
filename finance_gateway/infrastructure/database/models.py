"""SQLAlchemy ORM models mapping the payments ledger tables (read-only here)"""

import uuid
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Platform account (freelancer)"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Invoice(Base):
    """Invoice issued by a freelancer to a client"""

    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    invoice_number = Column(Text, nullable=False)
    client_email = Column(Text, nullable=True)
    client_name = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(18, 6), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BankAccount(Base):
    """Payout destination for withdrawals"""

    __tablename__ = "bank_accounts"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    bank_name = Column(Text, nullable=False)
    account_number = Column(Text, nullable=False)


class Transaction(Base):
    """Ledger movement: incoming, payment, refund or withdrawal"""

    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_status_completed", "user_id", "status", "completed_at"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    status = Column(Text, nullable=False, default="pending")
    type = Column(Text, nullable=False)
    amount = Column(Numeric(18, 6), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    invoice_id = Column(String(36), ForeignKey("invoices.id"), nullable=True)
    bank_account_id = Column(String(36), ForeignKey("bank_accounts.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    invoice = relationship("Invoice")
    bank_account = relationship("BankAccount")
