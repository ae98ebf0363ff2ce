from sqlmodel import SQLModel, Field, Column
import sqlalchemy as sa


class Revenue(SQLModel, table=True):
    __tablename__ = "revenue"

    # Three-letter label: "Jan", "Feb", ...
    month: str = Field(sa_column=Column(sa.String(4), primary_key=True, unique=True, nullable=False))
    revenue: int = Field(sa_column=Column(sa.Integer, nullable=False))
