"""
Repository per entità: list / get / create / delete (+ update_status per le fatture).

Ogni chiamata apre e chiude la propria sessione con db_session(): una
scrittura = una transazione, nessuno stato condiviso tra le chiamate.
"""
from __future__ import annotations

import datetime as dt
import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterator, Mapping, TypeVar

import pydantic
from sqlalchemy import delete, desc, func, or_, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from .db import Base, SessionLocal, db_session
from .errors import ConflictError, StoreUnavailable, ValidationError
from .models import Appointment, Client, Invoice, Transaction
from .schemas import (
    AppointmentCreateIn,
    AppointmentOut,
    ClientCreateIn,
    ClientOut,
    InvoiceCreateIn,
    InvoiceOut,
    TransactionCreateIn,
    TransactionOut,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
CreateT = TypeVar("CreateT", bound=pydantic.BaseModel)
OutT = TypeVar("OutT", bound=pydantic.BaseModel)


def _validation_message(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{field}: {err.get('msg')}")
    return "; ".join(parts)


@contextmanager
def store_session(factory: sessionmaker[Session] | None = None, entity: str = "record") -> Iterator[Session]:
    """db_session() con traduzione delle eccezioni SQLAlchemy negli errori del dominio."""
    try:
        with db_session(factory) as s:
            yield s
    except IntegrityError as exc:
        logger.warning("%s: vincolo violato (%s)", entity, exc.orig)
        raise ConflictError(f"{entity}: vincolo di unicità violato", cause=exc) from exc
    except DBAPIError as exc:
        logger.exception("%s: database non disponibile", entity)
        raise StoreUnavailable("Database non disponibile", cause=exc) from exc


class Repository(Generic[ModelT, CreateT, OutT]):
    """Accesso ai dati per un singolo tipo di entità, indipendente dagli altri."""

    model: type[ModelT]
    create_schema: type[CreateT]
    out_schema: type[OutT]
    entity: str = "record"

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    # -------------------------
    # Helper
    # -------------------------
    def _session(self):
        return store_session(self._session_factory, self.entity)

    def _to_out(self, row: ModelT) -> OutT:
        data = {attr.key: getattr(row, attr.key) for attr in self.model.__mapper__.column_attrs}
        return self.out_schema.model_validate(data)

    def _ordered(self):
        # più recenti prima; a parità di timestamp decide l'id
        return select(self.model).order_by(desc(self.model.created_at), desc(self.model.id))

    def validate(self, fields: Mapping[str, Any] | CreateT) -> CreateT:
        if isinstance(fields, self.create_schema):
            return fields
        if isinstance(fields, pydantic.BaseModel):
            fields = fields.model_dump()
        try:
            return self.create_schema.model_validate(fields)
        except pydantic.ValidationError as exc:
            raise ValidationError(
                f"{self.entity} non valido: {_validation_message(exc)}",
                errors=exc.errors(include_url=False),
                cause=exc,
            ) from exc

    def _values(self, payload: CreateT) -> dict[str, Any]:
        return payload.model_dump()

    # -------------------------
    # CRUD
    # -------------------------
    def list(self) -> list[OutT]:
        with self._session() as s:
            return [self._to_out(r) for r in s.scalars(self._ordered())]

    def get(self, entity_id: int) -> OutT | None:
        logger.debug("Lookup %s %s", self.entity, entity_id)
        with self._session() as s:
            row = s.get(self.model, entity_id)
            return self._to_out(row) if row is not None else None

    def create(self, fields: Mapping[str, Any] | CreateT) -> OutT:
        payload = self.validate(fields)
        with self._session() as s:
            row = self.model(**self._values(payload))
            s.add(row)
            s.flush()
            out = self._to_out(row)
        logger.info("Creato %s %s", self.entity, out.id)
        return out

    def delete(self, entity_id: int) -> bool:
        """
        Cancellazione definitiva. Un id inesistente non è un errore:
        ritorna False (nessuna riga rimossa) ma l'operazione è comunque riuscita.
        """
        with self._session() as s:
            result = s.execute(delete(self.model).where(self.model.id == entity_id))
            removed = result.rowcount > 0
        logger.info("Delete %s %s (rimosso=%s)", self.entity, entity_id, removed)
        return removed

    def count(self) -> int:
        with self._session() as s:
            return s.scalar(select(func.count()).select_from(self.model)) or 0


class AppointmentRepository(Repository[Appointment, AppointmentCreateIn, AppointmentOut]):
    model = Appointment
    create_schema = AppointmentCreateIn
    out_schema = AppointmentOut
    entity = "Appointment"

    def list_for_day(self, day: dt.date) -> list[AppointmentOut]:
        with self._session() as s:
            q = self._ordered().where(Appointment.date == day)
            return [self._to_out(r) for r in s.scalars(q)]


class ClientRepository(Repository[Client, ClientCreateIn, ClientOut]):
    model = Client
    create_schema = ClientCreateIn
    out_schema = ClientOut
    entity = "Client"

    def search(self, term: str | None) -> list[ClientOut]:
        """Ricerca case-insensitive su nome, azienda o email."""
        term = (term or "").strip()
        if not term:
            return self.list()

        # % e _ nel termine sono caratteri letterali, non jolly LIKE
        term = term.lower()
        with self._session() as s:
            q = self._ordered().where(
                or_(
                    func.lower(Client.name).contains(term, autoescape=True),
                    func.lower(Client.company).contains(term, autoescape=True),
                    func.lower(Client.email).contains(term, autoescape=True),
                )
            )
            return [self._to_out(r) for r in s.scalars(q)]


class InvoiceRepository(Repository[Invoice, InvoiceCreateIn, InvoiceOut]):
    model = Invoice
    create_schema = InvoiceCreateIn
    out_schema = InvoiceOut
    entity = "Invoice"

    def update_status(self, entity_id: int, status: str) -> InvoiceOut | None:
        """Sovrascrive solo lo stato. None se la fattura non esiste."""
        if not isinstance(status, str):
            raise ValidationError("status: deve essere una stringa")

        with self._session() as s:
            row = s.get(Invoice, entity_id)
            if row is None:
                logger.info("Invoice %s non trovata: stato invariato", entity_id)
                return None
            row.status = status
            s.flush()
            out = self._to_out(row)
        logger.info("Invoice %s -> %s", entity_id, status)
        return out


class TransactionRepository(Repository[Transaction, TransactionCreateIn, TransactionOut]):
    model = Transaction
    create_schema = TransactionCreateIn
    out_schema = TransactionOut
    entity = "Transaction"
