"""SQLAlchemy models for the dayledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class ExpenseCategory(Base):
    """Item classification used by the daily form."""

    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True)
    item_name = Column(String, nullable=False, index=True)
    main_category = Column(String, nullable=False)
    sub_category = Column(String, nullable=True)
    display_order = Column(Integer, default=0, nullable=False)
    is_meals_line = Column(Boolean, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class DailyInventory(Base):
    """One day of sales and purchase/expense amounts."""

    __tablename__ = "daily_inventory"

    id = Column(Integer, primary_key=True)
    inventory_date = Column(Date, unique=True, nullable=False)
    total_sales = Column(Numeric(12, 2), default=0, nullable=False)
    total_purchases = Column(Numeric(12, 2), default=0, nullable=False)
    purchase_items = Column(JSON, default=dict, nullable=False)
    total_damage = Column(Numeric(12, 2), default=0, nullable=False)
    total_salaries = Column(Numeric(12, 2), default=0, nullable=False)
    total_hospitality = Column(Numeric(12, 2), default=0, nullable=False)
    total_employee_meals = Column(Numeric(12, 2), default=0, nullable=False)
    total_assets = Column(Numeric(12, 2), default=0, nullable=False)
    total_expenses = Column(Numeric(12, 2), default=0, nullable=False)
    notes = Column(String, default="", nullable=False)
    created_by = Column(String, nullable=True)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
