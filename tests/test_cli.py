from __future__ import annotations

from backend.cli import build_parser, cmd_serve, main
from backend.services import Storage


def test_init_with_seed_and_list(store: Storage, capsys) -> None:
    assert main(["init", "--seed"], store=store) == 0
    assert "14 righe" in capsys.readouterr().out

    assert main(["list", "invoices"], store=store) == 0
    out = capsys.readouterr().out
    assert "INV-001" in out
    assert "4500.00" in out


def test_list_empty(store: Storage, capsys) -> None:
    assert main(["list", "clients"], store=store) == 0
    assert "Nessun record." in capsys.readouterr().out


def test_add_transaction_and_summary(store: Storage, capsys) -> None:
    assert main(
        ["add-transaction", "--title", "Lunch", "--client", "Acme", "--amount", "12.50", "--type", "expense"],
        store=store,
    ) == 0
    assert "12.50" in capsys.readouterr().out

    main(["summary"], store=store)
    out = capsys.readouterr().out
    assert "Uscite           : 12.50" in out
    assert "Utile netto      : -12.50" in out


def test_invoice_commands(store: Storage, capsys) -> None:
    args = ["add-invoice", "--number", "INV-7", "--client-name", "Acme", "--amount", "300", "--due-date", "2026-02-01"]
    assert main(args, store=store) == 0
    invoice_id = store.invoices.list()[0].id
    capsys.readouterr()

    # numero duplicato
    assert main(args, store=store) == 1
    assert "Errore" in capsys.readouterr().out

    main(["invoice-status", str(invoice_id), "Paid"], store=store)
    assert "stato Paid" in capsys.readouterr().out
    assert store.invoices.get(invoice_id).status == "Paid"

    main(["invoice-status", "999", "Paid"], store=store)
    assert "non trovata" in capsys.readouterr().out


def test_invalid_amount_reports_error(store: Storage, capsys) -> None:
    code = main(
        ["add-transaction", "--title", "X", "--client", "Y", "--amount", "tanti", "--type", "income"],
        store=store,
    )
    assert code == 1
    assert "amount" in capsys.readouterr().out
    assert store.transactions.count() == 0


def test_delete_twice(store: Storage, capsys, client_data: dict) -> None:
    c = store.clients.create(client_data)

    main(["delete", "clients", str(c.id)], store=store)
    assert "Eliminato." in capsys.readouterr().out

    assert main(["delete", "clients", str(c.id)], store=store) == 0
    assert "Non trovato" in capsys.readouterr().out


def test_list_filters(store: Storage, capsys, client_data: dict, appointment_data: dict) -> None:
    store.clients.create(client_data)
    store.appointments.create(appointment_data)

    main(["list", "clients", "--search", "acme"], store=store)
    assert "Alice Smith" in capsys.readouterr().out

    main(["list", "appointments", "--date", "2026-01-14"], store=store)
    assert "Strategy Meeting" in capsys.readouterr().out

    main(["list", "appointments", "--date", "2026-01-15"], store=store)
    assert "Nessun record." in capsys.readouterr().out


def test_info_counts(store: Storage, capsys, client_data: dict) -> None:
    store.clients.create(client_data)
    main(["info"], store=store)
    out = capsys.readouterr().out
    assert "ENGINE URL: sqlite" in out
    assert "clients      : 1" in out


def test_serve_arguments() -> None:
    args = build_parser().parse_args(["serve", "--port", "9000"])
    assert args.func is cmd_serve
    assert args.port == 9000
    assert args.host == "127.0.0.1"
