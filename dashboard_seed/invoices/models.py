from sqlmodel import SQLModel, Field, Column
from typing import Optional
import uuid
import datetime
import sqlalchemy as sa
import sqlalchemy.dialects.postgresql as pg
from enum import Enum


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class Invoice(SQLModel, table=True):
    __tablename__ = "invoices"

    id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(pg.UUID(as_uuid=True), primary_key=True, server_default=sa.text("uuid_generate_v4()"))
    )

    # Plain reference to customers.id; no FK constraint, the dashboard joins on it
    customer_id: uuid.UUID = Field(sa_column=Column(pg.UUID(as_uuid=True), nullable=False, index=True))

    # Stored in cents
    amount: int = Field(sa_column=Column(sa.Integer, nullable=False))
    status: InvoiceStatus = Field(sa_column=Column(sa.String(255), nullable=False))
    date: datetime.date = Field(sa_column=Column(sa.Date, nullable=False))
