# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Housekeeping – delete refresh-token rows that have passed their expiry.

Expired rows are already refused at /auth/refresh; this only keeps the
table small.  Suitable for a daily cron entry:
    python bin/purge_refresh_tokens.py
"""

import sys
import os

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from auth.service import purge_expired_refresh_tokens   # noqa: E402
from core.logger import logger                          # noqa: E402
from database import SessionLocal                       # noqa: E402
import models                                           # noqa: F401, E402


def main():
    db = SessionLocal()
    try:
        purged = purge_expired_refresh_tokens(db)
    finally:
        db.close()
    logger.info("[purge_refresh_tokens] removed %d expired refresh token(s)", purged)
    print(f"[purge_refresh_tokens] removed {purged} expired refresh token(s)")


if __name__ == "__main__":
    main()
