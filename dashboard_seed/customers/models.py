from sqlmodel import SQLModel, Field, Column
from typing import Optional
import uuid
import sqlalchemy as sa
import sqlalchemy.dialects.postgresql as pg


class Customer(SQLModel, table=True):
    __tablename__ = "customers"

    id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(pg.UUID(as_uuid=True), primary_key=True, server_default=sa.text("uuid_generate_v4()"))
    )
    name: str = Field(sa_column=Column(sa.String(255), nullable=False))
    email: str = Field(sa_column=Column(sa.String(255), nullable=False))

    # Path under the dashboard's public/ folder, e.g. /customers/amy-burns.png
    image_url: str = Field(sa_column=Column(sa.String(255), nullable=False))
