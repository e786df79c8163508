"""
Schemi pydantic: payload di creazione (…CreateIn) e modelli di lettura (…Out).

Il JSON usa chiavi camelCase (clientName, invoiceNumber, createdAt...);
in Python si possono usare indifferentemente i nomi snake_case.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

# numeric(10, 2)
Amount = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]

CENT = Decimal("0.01")


def format_amount(value: Decimal) -> str:
    return f"{value.quantize(CENT):.2f}"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _AmountModel(CamelModel):
    @field_validator("amount", mode="after", check_fields=False)
    @classmethod
    def _two_decimals(cls, v: Decimal) -> Decimal:
        return v.quantize(CENT)

    @field_serializer("amount", when_used="json", check_fields=False)
    def _amount_as_text(self, v: Decimal) -> str:
        return format_amount(v)


# I modelli di lettura non ripetono i vincoli di input: devono poter
# rappresentare qualsiasi riga presente nel DB.

# =========================
# Appuntamenti
# =========================
class AppointmentCreateIn(CamelModel):
    title: str
    client_name: str
    date: dt.date
    time: str
    duration: str
    location: str
    type: str
    status: str = "Pending"


class AppointmentOut(CamelModel):
    id: int
    title: str
    client_name: str
    date: dt.date
    time: str
    duration: str
    location: str
    type: str
    status: str
    created_at: dt.datetime


# =========================
# Clienti
# =========================
class ClientCreateIn(CamelModel):
    name: str
    company: str
    email: str
    phone: str
    location: str
    status: str = "Lead"
    tags: list[str] = Field(default_factory=list)


class ClientOut(CamelModel):
    id: int
    name: str
    company: str
    email: str
    phone: str
    location: str
    status: str
    tags: list[str]
    last_contact: dt.datetime
    created_at: dt.datetime


# =========================
# Fatture
# =========================
class InvoiceCreateIn(_AmountModel):
    invoice_number: str
    client_name: str
    amount: Amount
    due_date: dt.date
    items: int = Field(default=1, ge=1)
    status: str = "Pending"


class InvoiceOut(_AmountModel):
    id: int
    invoice_number: str
    client_name: str
    amount: Decimal
    status: str
    items: int
    due_date: dt.date
    created_at: dt.datetime


class InvoiceStatusIn(CamelModel):
    # nessuna enumerazione lato server: qualsiasi stato testuale è accettato
    status: str


# =========================
# Movimenti
# =========================
class TransactionCreateIn(_AmountModel):
    title: str
    client: str
    amount: Amount
    type: str  # income, expense, travel


class TransactionOut(_AmountModel):
    id: int
    title: str
    client: str
    amount: Decimal
    type: str
    created_at: dt.datetime
