"""Registration of every ORM model on the shared metadata.

Models live next to the context that owns them; importing those modules
registers their tables on ``Base.metadata``. Schema creation and Alembic
autogeneration call ``load_all_models`` first.
"""

from __future__ import annotations

from sqlalchemy import MetaData

from infrastructure.database.models import Base


def load_all_models() -> MetaData:
    """Import every model module and return the populated metadata."""
    import identity.infrastructure.models  # noqa: F401
    import infrastructure.idempotency.models  # noqa: F401
    import infrastructure.outbox.models  # noqa: F401
    import ordering.infrastructure.models  # noqa: F401

    return Base.metadata
