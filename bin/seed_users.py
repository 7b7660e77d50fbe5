# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the first admin account.

Run once after ``alembic upgrade head``:
    python bin/seed_users.py

FIRST_ADMIN_EMAIL / FIRST_ADMIN_PASSWORD / FIRST_ADMIN_NAME are read from
etc/app.conf.  With SEED_DEMO_USERS=true one account per desk role is
created as well (manager, sales, sales coordinator, front office,
housekeeping), all sharing the admin's initial password.  Existing emails
are left untouched, so the script is safe to run again.
"""

import sys
import os

# bin/seed_users.py  →  ../backend
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.config import settings          # noqa: E402
from core.logger import logger            # noqa: E402
from core.security import hash_password   # noqa: E402
from database import SessionLocal         # noqa: E402
import models                             # noqa: F401, E402
from models.user import Role, User        # noqa: E402

DEMO_USERS = [
    ("manager@hotel.com",      "Hotel Manager",      Role.MANAGER,           "Management"),
    ("sales@hotel.com",        "Sales Staff",        Role.SALES,             "Sales"),
    ("coordinator@hotel.com",  "Sales Coordinator",  Role.SALES_COORDINATOR, "Sales"),
    ("frontoffice@hotel.com",  "Front Office Staff", Role.FRONT_OFFICE,      "Front Office"),
    ("housekeeping@hotel.com", "Housekeeping Staff", Role.HOUSEKEEPING,      "Housekeeping"),
]


def _ensure_user(db, email, full_name, role, department, password_hash) -> bool:
    if db.query(User).filter(User.email == email).first():
        logger.info("[seed_users] %s already exists – skipping", email)
        return False
    db.add(User(
        email=email,
        password_hash=password_hash,
        full_name=full_name,
        role=role,
        department=department,
        is_active=True,
    ))
    return True


def seed():
    if not settings.first_admin_password:
        print("[seed_users] FIRST_ADMIN_PASSWORD not set in etc/app.conf – nothing to do.")
        return

    db = SessionLocal()
    try:
        created = []
        if _ensure_user(db, settings.first_admin_email, settings.first_admin_name,
                        Role.ADMIN, "IT", hash_password(settings.first_admin_password)):
            created.append(settings.first_admin_email)

        if settings.seed_demo_users:
            for email, full_name, role, department in DEMO_USERS:
                if _ensure_user(db, email, full_name, role, department,
                                hash_password(settings.first_admin_password)):
                    created.append(email)

        db.commit()
        for email in created:
            print(f"[seed_users] '{email}' created.")
        if not created:
            print("[seed_users] Nothing to create.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
