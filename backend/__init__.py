"""
Backend applicativo Business Desk.

Struttura:
- config.py       : impostazioni da ambiente/.env e logging
- db.py           : engine e sessioni SQLAlchemy
- models.py       : modelli ORM (appuntamenti, clienti, fatture, movimenti)
- schemas.py      : payload e modelli di lettura pydantic (JSON camelCase)
- errors.py       : errori del livello dati
- repositories.py : accesso ai dati, un repository per entità
- services.py     : bootstrap DB, Storage, riepilogo finanziario
- seed.py         : dati dimostrativi
- api_main.py     : API REST (FastAPI)
- cli.py          : gestione dati da terminale
"""
