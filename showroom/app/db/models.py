from sqlalchemy import (
    Column, Integer, BigInteger, Numeric, Boolean, Text, Date, DateTime, JSON, text
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class StockUnit(Base):
    __tablename__ = "stock_units"
    vin = Column(Text, primary_key=True)
    status_code = Column(Integer, nullable=False)
    order_status = Column(Text)
    processing_type = Column(Text)
    reservation_details = Column(Text)
    model_code = Column(Text, nullable=False)
    model_name = Column(Text)
    body_group = Column(Text)
    color_code = Column(Text)
    upholstery_code = Column(Text)
    fuel_type = Column(Text)
    drivetrain = Column(Text)
    option_codes = Column(JSON)
    all_option_codes = Column(JSON)  # packages expanded, for search
    list_price = Column(Numeric(12,2), default=0)
    special_price = Column(Numeric(12,2))  # manual override, never written by imports
    currency = Column(Text)
    visibility = Column(Text, nullable=False)  # PUBLIC|INTERNAL
    production_date = Column(Text)
    last_synced_at = Column(DateTime(timezone=True))

class Bulletin(Base):
    __tablename__ = "bulletins"
    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    rules = Column(JSON)
    is_active = Column(Boolean, default=True)
    valid_from = Column(Date)
    valid_until = Column(Date)
    # legacy single-rule columns, superseded by `rules`
    model_codes = Column(JSON)
    body_groups = Column(JSON)
    production_year_min = Column(Integer)
    production_year_max = Column(Integer)
    discount_percent = Column(Numeric(5,2))
    discount_amount = Column(Numeric(12,2))
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime(timezone=True))

class StockImport(Base):
    __tablename__ = "stock_imports"
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    uploaded_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))
    filename = Column(Text)
    feed = Column(Text, nullable=False)  # standard|bmw_pl
    status = Column(Text, nullable=False)  # processing|completed|failed
    processed = Column(Integer)
    skipped_status = Column(Integer)
    skipped_type = Column(Integer)
    hidden_de = Column(Integer)
    rows_updated = Column(Integer)
    errors = Column(JSON)
    processed_at = Column(DateTime(timezone=True))
