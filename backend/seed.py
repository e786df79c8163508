from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select

from .models import Appointment, Client, Invoice, Transaction
from .repositories import store_session
from .services import Storage, storage as default_storage

logger = logging.getLogger(__name__)


def seed_base(store: Storage | None = None) -> int:
    """
    Popola dati dimostrativi (idempotente):
    - clienti
    - appuntamenti (oggi e domani)
    - fatture
    - movimenti
    Ritorna il numero di righe inserite.
    """
    store = store or default_storage
    today = date.today()
    added = 0

    # first(): righe già duplicate nel DB non devono far fallire il seed
    with store_session(store.session_factory, "seed") as s:
        # Clienti
        clienti = [
            ("Alice Smith", "Acme Corp", "alice@acme.com", "+1 (555) 123-4567", "New York, NY", "Active", ["VIP", "Tech"]),
            ("Bob Jones", "TechStart Inc", "bob@techstart.io", "+1 (555) 987-6543", "San Francisco, CA", "Active", ["Startups"]),
        ]
        for nome, azienda, email, tel, luogo, stato, tags in clienti:
            if s.scalars(select(Client).where(Client.email == email)).first() is None:
                s.add(Client(name=nome, company=azienda, email=email, phone=tel, location=luogo, status=stato, tags=tags))
                added += 1

        # Appuntamenti
        appuntamenti = [
            ("Strategy Meeting", "Alice Smith", today, "10:00 AM", "1h", "Zoom Meeting", "Consultation", "Confirmed"),
            ("Project Review", "Bob Jones", today, "2:00 PM", "1h 30m", "123 Business Rd, Tech City", "On-site", "Pending"),
            ("Quarterly Planning", "Carol Williams", today + timedelta(days=1), "11:00 AM", "2h", "Office", "Internal", "Confirmed"),
        ]
        for titolo, cliente, giorno, ora, durata, luogo, tipo, stato in appuntamenti:
            exists = s.scalars(
                select(Appointment).where(Appointment.title == titolo, Appointment.client_name == cliente)
            ).first()
            if exists is None:
                s.add(
                    Appointment(
                        title=titolo,
                        client_name=cliente,
                        date=giorno,
                        time=ora,
                        duration=durata,
                        location=luogo,
                        type=tipo,
                        status=stato,
                    )
                )
                added += 1

        # Fatture
        fatture = [
            ("INV-001", "Acme Corp", "4500.00", "Paid", 3, today + timedelta(days=30)),
            ("INV-002", "TechStart Inc", "1200.00", "Pending", 1, today + timedelta(days=14)),
            ("INV-003", "Global Designs", "850.00", "Overdue", 2, today - timedelta(days=2)),
            ("INV-004", "Consulting Partners", "2300.00", "Paid", 1, today + timedelta(days=30)),
        ]
        for numero, cliente, importo, stato, voci, scadenza in fatture:
            if s.scalars(select(Invoice).where(Invoice.invoice_number == numero)).first() is None:
                s.add(
                    Invoice(
                        invoice_number=numero,
                        client_name=cliente,
                        amount=Decimal(importo),
                        status=stato,
                        items=voci,
                        due_date=scadenza,
                    )
                )
                added += 1

        # Movimenti
        movimenti = [
            ("Website Redesign", "Acme Corp", "4500.00", "income"),
            ("Office Supplies", "Staples", "245.50", "expense"),
            ("Travel Reimbursement", "Client Meeting", "85.00", "travel"),
            ("Consulting Fee", "TechStart Inc", "1200.00", "income"),
            ("Software Subscription", "Adobe Creative Cloud", "54.99", "expense"),
        ]
        for titolo, cliente, importo, tipo in movimenti:
            exists = s.scalars(
                select(Transaction).where(Transaction.title == titolo, Transaction.client == cliente)
            ).first()
            if exists is None:
                s.add(Transaction(title=titolo, client=cliente, amount=Decimal(importo), type=tipo))
                added += 1

    logger.info("Seed completato: %s righe inserite", added)
    return added
