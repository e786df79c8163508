from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import Engine, func, select
from sqlalchemy.orm import Session, sessionmaker

from .db import Base, SessionLocal, engine as default_engine
from .models import Invoice, Transaction
from .repositories import (
    AppointmentRepository,
    ClientRepository,
    InvoiceRepository,
    TransactionRepository,
    store_session,
)
from .schemas import format_amount

logger = logging.getLogger(__name__)


# =========================
# Bootstrap DB
# =========================
def init_db(bind: Engine | None = None) -> None:
    """Crea le tabelle se non esistono."""
    target = bind or default_engine
    Base.metadata.create_all(bind=target)
    logger.debug("Tabelle verificate su %s", target.url)


# =========================
# Storage (un repository per entità)
# =========================
class Storage:
    """Raccoglie i quattro repository legati alla stessa session factory."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self.session_factory = session_factory or SessionLocal
        self.appointments = AppointmentRepository(self.session_factory)
        self.clients = ClientRepository(self.session_factory)
        self.invoices = InvoiceRepository(self.session_factory)
        self.transactions = TransactionRepository(self.session_factory)

    def repository(self, name: str):
        try:
            return {
                "appointments": self.appointments,
                "clients": self.clients,
                "invoices": self.invoices,
                "transactions": self.transactions,
            }[name]
        except KeyError:
            raise ValueError(f"Entità sconosciuta: {name}") from None


storage = Storage()


# =========================
# Riepilogo finanziario
# =========================
def _dec(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def finance_summary(store: Storage | None = None) -> dict:
    """
    Totali per la pagina Finanze (dict serializzabile):
    - entrate / uscite / trasferte dai movimenti
    - pagamenti in sospeso = fatture non "Paid"
    """
    store = store or storage
    with store_session(store.session_factory, "summary") as s:
        per_type = dict(
            s.execute(select(Transaction.type, func.sum(Transaction.amount)).group_by(Transaction.type)).all()
        )
        pending_total, pending_count = s.execute(
            select(func.sum(Invoice.amount), func.count(Invoice.id)).where(Invoice.status != "Paid")
        ).one()

    income = _dec(per_type.get("income"))
    expenses = _dec(per_type.get("expense"))
    travel = _dec(per_type.get("travel"))

    return {
        "income": format_amount(income),
        "expenses": format_amount(expenses),
        "travel": format_amount(travel),
        "netIncome": format_amount(income - expenses - travel),
        "pendingPayments": format_amount(_dec(pending_total)),
        "outstandingInvoices": int(pending_count or 0),
    }
