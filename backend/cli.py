from __future__ import annotations

import argparse
from datetime import date

import uvicorn

from backend.config import configure_logging, load_settings
from backend.errors import StoreError
from backend.seed import seed_base
from backend.services import Storage, finance_summary, init_db, storage
from backend.schemas import format_amount

ENTITIES = ["appointments", "clients", "invoices", "transactions"]


def _print_row(entity: str, r) -> None:
    if entity == "appointments":
        print(f"{r.id} | {r.date.isoformat()} {r.time} ({r.duration}) | {r.title} | {r.client_name} | {r.status}")
    elif entity == "clients":
        tags = ", ".join(r.tags) or "-"
        print(f"{r.id} | {r.name} | {r.company} | {r.email} | {r.status} | {tags}")
    elif entity == "invoices":
        print(f"{r.id} | {r.invoice_number} | {r.client_name} | {format_amount(r.amount)} | {r.status} | scad. {r.due_date.isoformat()}")
    elif entity == "transactions":
        print(f"{r.id} | {r.type} | {r.title} | {r.client} | {format_amount(r.amount)}")


def cmd_init(args: argparse.Namespace, store: Storage) -> None:
    added = seed_base(store) if args.seed else 0
    print(f"DB inizializzato ({added} righe di esempio inserite).")


def cmd_info(args: argparse.Namespace, store: Storage) -> None:
    print("ENGINE URL:", store.session_factory.kw.get("bind").url)
    for entity in ENTITIES:
        print(f"{entity:<13}: {store.repository(entity).count()}")


def cmd_list(args: argparse.Namespace, store: Storage) -> None:
    if args.entity == "clients" and args.search:
        rows = store.clients.search(args.search)
    elif args.entity == "appointments" and args.date:
        rows = store.appointments.list_for_day(args.date)
    else:
        rows = store.repository(args.entity).list()

    if not rows:
        print("Nessun record.")
        return
    for r in rows:
        _print_row(args.entity, r)


def cmd_add_client(args: argparse.Namespace, store: Storage) -> None:
    c = store.clients.create(
        {
            "name": args.name,
            "company": args.company,
            "email": args.email,
            "phone": args.phone,
            "location": args.location,
            "status": args.status,
            "tags": args.tag or [],
        }
    )
    print(f"Cliente creato: {c.id}")


def cmd_add_appointment(args: argparse.Namespace, store: Storage) -> None:
    a = store.appointments.create(
        {
            "title": args.title,
            "clientName": args.client_name,
            "date": args.date,
            "time": args.time,
            "duration": args.duration,
            "location": args.location,
            "type": args.type,
            "status": args.status,
        }
    )
    print(f"Appuntamento creato: {a.id}")


def cmd_add_invoice(args: argparse.Namespace, store: Storage) -> None:
    inv = store.invoices.create(
        {
            "invoiceNumber": args.number,
            "clientName": args.client_name,
            "amount": args.amount,
            "dueDate": args.due_date,
            "items": args.items,
            "status": args.status,
        }
    )
    print(f"Fattura creata: {inv.id} ({inv.invoice_number})")


def cmd_add_transaction(args: argparse.Namespace, store: Storage) -> None:
    t = store.transactions.create(
        {"title": args.title, "client": args.client, "amount": args.amount, "type": args.type}
    )
    print(f"Movimento creato: {t.id} ({format_amount(t.amount)})")


def cmd_delete(args: argparse.Namespace, store: Storage) -> None:
    removed = store.repository(args.entity).delete(args.id)
    print("Eliminato." if removed else "Non trovato (nessuna modifica).")


def cmd_invoice_status(args: argparse.Namespace, store: Storage) -> None:
    inv = store.invoices.update_status(args.id, args.status)
    if inv is None:
        print("Fattura non trovata.")
    else:
        print(f"Fattura {inv.invoice_number}: stato {inv.status}")


def cmd_summary(args: argparse.Namespace, store: Storage) -> None:
    s = finance_summary(store)
    print(f"Entrate          : {s['income']}")
    print(f"Uscite           : {s['expenses']}")
    print(f"Trasferte        : {s['travel']}")
    print(f"Utile netto      : {s['netIncome']}")
    print(f"In sospeso       : {s['pendingPayments']} ({s['outstandingInvoices']} fatture)")


def cmd_serve(args: argparse.Namespace, store: Storage) -> None:
    uvicorn.run("backend.api_main:app", host=args.host, port=args.port, reload=args.reload)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bizdesk", description="CLI Business Desk (gestione dati da terminale)")
    sub = p.add_subparsers(required=True)

    p_init = sub.add_parser("init", help="Crea il DB (ed eventualmente carica i dati di esempio)")
    p_init.add_argument("--seed", action="store_true", help="Inserisce i dati dimostrativi")
    p_init.set_defaults(func=cmd_init)

    p_info = sub.add_parser("info", help="Percorso DB e numero di righe per tabella")
    p_info.set_defaults(func=cmd_info)

    p_list = sub.add_parser("list", help="Lista entità (più recenti prima)")
    p_list.add_argument("entity", choices=ENTITIES)
    p_list.add_argument("--search", default=None, help="Solo clients: filtra per nome/azienda/email")
    p_list.add_argument("--date", type=date.fromisoformat, default=None, help="Solo appointments: giorno ISO es: 2026-01-14")
    p_list.set_defaults(func=cmd_list)

    p_cli = sub.add_parser("add-client", help="Crea cliente")
    p_cli.add_argument("--name", required=True)
    p_cli.add_argument("--company", required=True)
    p_cli.add_argument("--email", required=True)
    p_cli.add_argument("--phone", required=True)
    p_cli.add_argument("--location", required=True)
    p_cli.add_argument("--status", default="Lead")
    p_cli.add_argument("--tag", action="append", help="Ripetibile")
    p_cli.set_defaults(func=cmd_add_client)

    p_app = sub.add_parser("add-appointment", help="Crea appuntamento")
    p_app.add_argument("--title", required=True)
    p_app.add_argument("--client-name", required=True)
    p_app.add_argument("--date", required=True, help="ISO date es: 2026-01-14")
    p_app.add_argument("--time", required=True, help="es: 10:00 AM")
    p_app.add_argument("--duration", required=True, help="es: 1h 30m")
    p_app.add_argument("--location", required=True)
    p_app.add_argument("--type", required=True)
    p_app.add_argument("--status", default="Pending")
    p_app.set_defaults(func=cmd_add_appointment)

    p_inv = sub.add_parser("add-invoice", help="Crea fattura")
    p_inv.add_argument("--number", required=True)
    p_inv.add_argument("--client-name", required=True)
    p_inv.add_argument("--amount", required=True, help="es: 1200.00")
    p_inv.add_argument("--due-date", required=True, help="ISO date es: 2026-02-01")
    p_inv.add_argument("--items", type=int, default=1)
    p_inv.add_argument("--status", default="Pending")
    p_inv.set_defaults(func=cmd_add_invoice)

    p_tr = sub.add_parser("add-transaction", help="Registra movimento")
    p_tr.add_argument("--title", required=True)
    p_tr.add_argument("--client", required=True)
    p_tr.add_argument("--amount", required=True)
    p_tr.add_argument("--type", required=True, help="income, expense o travel")
    p_tr.set_defaults(func=cmd_add_transaction)

    p_del = sub.add_parser("delete", help="Elimina un record (id inesistente = nessun errore)")
    p_del.add_argument("entity", choices=ENTITIES)
    p_del.add_argument("id", type=int)
    p_del.set_defaults(func=cmd_delete)

    p_st = sub.add_parser("invoice-status", help="Cambia lo stato di una fattura")
    p_st.add_argument("id", type=int)
    p_st.add_argument("status", help="es: Paid, Pending, Overdue")
    p_st.set_defaults(func=cmd_invoice_status)

    p_sum = sub.add_parser("summary", help="Riepilogo finanziario")
    p_sum.set_defaults(func=cmd_summary)

    p_srv = sub.add_parser("serve", help="Avvia l'API REST (uvicorn)")
    p_srv.add_argument("--host", default="127.0.0.1")
    p_srv.add_argument("--port", type=int, default=8000)
    p_srv.add_argument("--reload", action="store_true")
    p_srv.set_defaults(func=cmd_serve)

    return p


def main(argv: list[str] | None = None, store: Storage | None = None) -> int:
    settings = load_settings()
    configure_logging(settings.log_level)

    parser = build_parser()
    args = parser.parse_args(argv)

    if store is None:
        init_db()  # garantisce tabelle
        store = storage

    try:
        args.func(args, store)
    except StoreError as e:
        print(f"Errore: {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
