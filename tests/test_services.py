from __future__ import annotations

import pytest

from backend.seed import seed_base
from backend.services import Storage, finance_summary


def test_seed_is_idempotent(store: Storage) -> None:
    assert seed_base(store) == 14
    assert seed_base(store) == 0

    assert store.clients.count() == 2
    assert store.appointments.count() == 3
    assert store.invoices.count() == 4
    assert store.transactions.count() == 5


def test_seed_tolerates_duplicate_rows(store: Storage, client_data: dict) -> None:
    gia_presente = {"title": "Website Redesign", "client": "Acme Corp", "amount": "4500.00", "type": "income"}
    store.transactions.create(gia_presente)
    store.transactions.create(gia_presente)
    store.clients.create(client_data)
    store.clients.create(client_data)

    # manca solo il resto dei dati dimostrativi
    assert seed_base(store) == 12
    assert seed_base(store) == 0

    assert store.transactions.count() == 6
    assert store.clients.count() == 3


def test_finance_summary_on_empty_store(store: Storage) -> None:
    assert finance_summary(store) == {
        "income": "0.00",
        "expenses": "0.00",
        "travel": "0.00",
        "netIncome": "0.00",
        "pendingPayments": "0.00",
        "outstandingInvoices": 0,
    }


def test_finance_summary_with_seed_data(store: Storage) -> None:
    seed_base(store)

    summary = finance_summary(store)

    assert summary["income"] == "5700.00"
    assert summary["expenses"] == "300.49"
    assert summary["travel"] == "85.00"
    assert summary["netIncome"] == "5314.51"
    # INV-002 (Pending) + INV-003 (Overdue)
    assert summary["pendingPayments"] == "2050.00"
    assert summary["outstandingInvoices"] == 2


def test_finance_summary_follows_invoice_status(store: Storage, invoice_data: dict) -> None:
    inv = store.invoices.create(invoice_data)
    assert finance_summary(store)["outstandingInvoices"] == 1

    store.invoices.update_status(inv.id, "Paid")

    summary = finance_summary(store)
    assert summary["outstandingInvoices"] == 0
    assert summary["pendingPayments"] == "0.00"


def test_unknown_repository_name(store: Storage) -> None:
    with pytest.raises(ValueError):
        store.repository("patients")
