from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.config import configure_logging, load_settings
from backend.errors import ConflictError, NotFoundError, StoreUnavailable, ValidationError
from backend.schemas import (
    AppointmentCreateIn,
    AppointmentOut,
    ClientCreateIn,
    ClientOut,
    InvoiceCreateIn,
    InvoiceOut,
    InvoiceStatusIn,
    TransactionCreateIn,
    TransactionOut,
)
from backend.seed import seed_base
from backend.services import Storage, finance_summary, init_db, storage

settings = load_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Crea tabelle e, se richiesto, seed dimostrativo (idempotente)
    init_db()
    if settings.seed_on_startup:
        seed_base()
    logger.info("%s avviata (db=%s)", settings.app_name, settings.database_url)
    yield
    logger.info("%s arrestata", settings.app_name)


app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)


def get_storage() -> Storage:
    return storage


# Errori -> HTTP

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


@app.exception_handler(ValidationError)
async def _on_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, exc.message)


@app.exception_handler(RequestValidationError)
async def _on_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        parts.append(f"{'.'.join(loc) or 'body'}: {err.get('msg')}")
    return _error(status.HTTP_400_BAD_REQUEST, "Richiesta non valida: " + "; ".join(parts))


@app.exception_handler(ConflictError)
async def _on_conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(status.HTTP_409_CONFLICT, exc.message)


@app.exception_handler(NotFoundError)
async def _on_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, exc.message)


@app.exception_handler(StoreUnavailable)
async def _on_store_unavailable(request: Request, exc: StoreUnavailable) -> JSONResponse:
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, exc.message)


def _found(item, entity: str, entity_id: int):
    if item is None:
        raise NotFoundError(entity, entity_id)
    return item


@app.get("/health")
def health() -> dict[str, Any]:
    return {"ok": True}


# Appuntamenti

@app.get("/api/appointments", response_model=list[AppointmentOut])
def api_appointments(
    day: date | None = Query(default=None, alias="date"),
    store: Storage = Depends(get_storage),
) -> list[AppointmentOut]:
    if day is not None:
        return store.appointments.list_for_day(day)
    return store.appointments.list()


@app.get("/api/appointments/{appointment_id}", response_model=AppointmentOut)
def api_appointment(appointment_id: int, store: Storage = Depends(get_storage)) -> AppointmentOut:
    return _found(store.appointments.get(appointment_id), "Appointment", appointment_id)


@app.post("/api/appointments", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
def api_create_appointment(payload: AppointmentCreateIn, store: Storage = Depends(get_storage)) -> AppointmentOut:
    return store.appointments.create(payload)


@app.delete("/api/appointments/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_appointment(appointment_id: int, store: Storage = Depends(get_storage)) -> Response:
    store.appointments.delete(appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Clienti

@app.get("/api/clients", response_model=list[ClientOut])
def api_clients(search: str | None = None, store: Storage = Depends(get_storage)) -> list[ClientOut]:
    return store.clients.search(search)


@app.get("/api/clients/{client_id}", response_model=ClientOut)
def api_client(client_id: int, store: Storage = Depends(get_storage)) -> ClientOut:
    return _found(store.clients.get(client_id), "Client", client_id)


@app.post("/api/clients", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def api_create_client(payload: ClientCreateIn, store: Storage = Depends(get_storage)) -> ClientOut:
    return store.clients.create(payload)


@app.delete("/api/clients/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_client(client_id: int, store: Storage = Depends(get_storage)) -> Response:
    store.clients.delete(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Fatture

@app.get("/api/invoices", response_model=list[InvoiceOut])
def api_invoices(store: Storage = Depends(get_storage)) -> list[InvoiceOut]:
    return store.invoices.list()


@app.get("/api/invoices/{invoice_id}", response_model=InvoiceOut)
def api_invoice(invoice_id: int, store: Storage = Depends(get_storage)) -> InvoiceOut:
    return _found(store.invoices.get(invoice_id), "Invoice", invoice_id)


@app.post("/api/invoices", response_model=InvoiceOut, status_code=status.HTTP_201_CREATED)
def api_create_invoice(payload: InvoiceCreateIn, store: Storage = Depends(get_storage)) -> InvoiceOut:
    return store.invoices.create(payload)


@app.patch("/api/invoices/{invoice_id}/status", response_model=InvoiceOut)
def api_invoice_status(
    invoice_id: int,
    payload: InvoiceStatusIn,
    store: Storage = Depends(get_storage),
) -> InvoiceOut:
    return _found(store.invoices.update_status(invoice_id, payload.status), "Invoice", invoice_id)


@app.delete("/api/invoices/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_invoice(invoice_id: int, store: Storage = Depends(get_storage)) -> Response:
    store.invoices.delete(invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Movimenti

@app.get("/api/transactions", response_model=list[TransactionOut])
def api_transactions(store: Storage = Depends(get_storage)) -> list[TransactionOut]:
    return store.transactions.list()


@app.get("/api/transactions/{transaction_id}", response_model=TransactionOut)
def api_transaction(transaction_id: int, store: Storage = Depends(get_storage)) -> TransactionOut:
    return _found(store.transactions.get(transaction_id), "Transaction", transaction_id)


@app.post("/api/transactions", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def api_create_transaction(payload: TransactionCreateIn, store: Storage = Depends(get_storage)) -> TransactionOut:
    return store.transactions.create(payload)


@app.delete("/api/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_transaction(transaction_id: int, store: Storage = Depends(get_storage)) -> Response:
    store.transactions.delete(transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/api/finances/summary")
def api_finance_summary(store: Storage = Depends(get_storage)) -> dict[str, Any]:
    return finance_summary(store)
