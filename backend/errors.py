from __future__ import annotations


class StoreError(Exception):
    """Errore base del livello di accesso ai dati."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ValidationError(StoreError):
    """Campo obbligatorio mancante o malformato: nessuna scrittura eseguita."""

    def __init__(self, message: str, errors: list[dict] | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.errors = errors or []


class ConflictError(StoreError):
    """Violazione di un vincolo di unicità (es. numero fattura duplicato)."""


class NotFoundError(StoreError):
    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} non trovato")
        self.entity = entity
        self.entity_id = entity_id


class StoreUnavailable(StoreError):
    """Il database non risponde (connessione, lock, file mancante...). Nessun retry."""
