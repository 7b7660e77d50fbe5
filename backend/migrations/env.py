# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Alembic environment for the check-in database.

The URL comes from the application's Settings (etc/app.conf or the
environment), so migrations and the running service always agree on the
target database.
"""

import sys
import os

# ``backend/`` on sys.path so ``core``, ``database`` and ``models`` resolve
# the same way they do under uvicorn.
_BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from alembic import context            # noqa: E402
from sqlalchemy import create_engine   # noqa: E402

from core.config import settings       # noqa: E402
from database import Base              # noqa: E402
import models                          # noqa: F401, E402  registers every table

target_metadata = Base.metadata


def run_migrations_online():
    connectable = create_engine(settings.database_url)
    with connectable.connect() as conn:
        context.configure(
            connection=conn,
            target_metadata=target_metadata,
            # SQLite cannot ALTER most things in place
            render_as_batch=conn.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()
    connectable.dispose()


def run_migrations_offline():
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
