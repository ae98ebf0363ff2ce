from sqlmodel import SQLModel, Field, Column
from typing import Optional
import uuid
import sqlalchemy as sa
import sqlalchemy.dialects.postgresql as pg


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(pg.UUID(as_uuid=True), primary_key=True, server_default=sa.text("uuid_generate_v4()"))
    )
    name: str = Field(sa_column=Column(sa.String(255), nullable=False))
    email: str = Field(sa_column=Column(sa.Text, nullable=False, unique=True))

    # bcrypt hash, never the plaintext
    password: str = Field(sa_column=Column(sa.Text, nullable=False), exclude=True)
