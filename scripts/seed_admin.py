#!/usr/bin/env python3
"""
Bootstrap Admin Script

Creates the first admin account from the environment (or .env):
    BOOTSTRAP_ADMIN_EMAIL, BOOTSTRAP_ADMIN_PASSWORD, BOOTSTRAP_ADMIN_NAME
An existing user with that email is promoted to admin instead.

Usage: python scripts/seed_admin.py
"""
import sys
sys.path.insert(0, '.')

from placement_portal.core.config import get_settings
from placement_portal.core.logging import setup_logging
from placement_portal.db.mongodb import init_mongo_indexes
from placement_portal.services.user_service import get_user_service


def main():
    setup_logging()
    settings = get_settings()
    if not settings.bootstrap_admin_enabled:
        print("❌ Set BOOTSTRAP_ADMIN_EMAIL and BOOTSTRAP_ADMIN_PASSWORD first")
        return 1

    init_mongo_indexes()
    user_id = get_user_service().ensure_bootstrap_admin()
    print(f"✅ Admin ready: {settings.bootstrap_admin_email} ({user_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
