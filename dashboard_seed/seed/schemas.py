from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional
import uuid
import datetime

from dashboard_seed.invoices.models import InvoiceStatus


class UserSeed(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    password: str

class CustomerSeed(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    image_url: str

class InvoiceSeed(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    # Left empty so the database default assigns one
    id: Optional[uuid.UUID] = None
    customer_id: uuid.UUID
    amount: int = Field(ge=0)
    status: InvoiceStatus
    date: datetime.date

class RevenueSeed(BaseModel):
    month: str = Field(max_length=4)
    revenue: int


class SeedResult(BaseModel):
    message: str
    counts: Dict[str, int] = Field(default_factory=dict)

class SeedResponse(BaseModel):
    message: str

class SeedErrorResponse(BaseModel):
    error: str
