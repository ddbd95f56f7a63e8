"""SQLAlchemy models for budgetdesk database."""

from datetime import datetime, date, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Budget(Base):
    """Budget model. ``spent``, ``remaining`` and ``status`` are derived."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    category = Column(String(100), nullable=False)
    allocated = Column(Numeric(12, 2), nullable=False)
    spent = Column(Numeric(12, 2), default=0, nullable=False)
    remaining = Column(Numeric(12, 2), default=0, nullable=False)
    period = Column(String(20), default="monthly", nullable=False)
    status = Column(String(20), default="on-track", nullable=False)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_budgets_category_period", "category", "period"),
        Index("ix_budgets_status", "status"),
    )


class Expense(Base):
    """Expense model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String(100), nullable=False)
    # Plain column: a dangling budget reference must not break the expense.
    budget_id = Column(Integer, nullable=True)
    date = Column(Date, default=date.today, nullable=False)
    vendor = Column(String(100), nullable=False)
    department = Column(String(100), nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    approved_by = Column(String(255), nullable=True)
    receipt_url = Column(String, nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_expenses_category_status", "category", "status"),
        Index("ix_expenses_budget_id", "budget_id"),
        Index("ix_expenses_date", "date"),
    )


class Category(Base):
    """Category model with optional parent."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(500), nullable=True)
    color = Column(String(7), nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    budget = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")


class Transaction(Base):
    """Cash-flow transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    type = Column(String(10), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(500), nullable=False)
    category = Column(String(100), nullable=False)
    date = Column(Date, default=date.today, nullable=False)
    account = Column(String(100), nullable=False)
    reference = Column(String(50), nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class User(Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user", nullable=False)
    department = Column(String(100), nullable=False)
    avatar = Column(String, nullable=True)
    permissions = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    token_version = Column(Integer, default=0, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
