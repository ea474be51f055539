#!/usr/bin/env python3
"""
Moderation Reset Script

Sends EVERY approved/rejected experience back to pending and clears the
moderator fields. There is no undo.

Usage: python scripts/reset_moderation.py [--yes]
"""
import sys
sys.path.insert(0, '.')

from placement_portal.core.logging import setup_logging
from placement_portal.services.moderation_service import get_moderation_service


def main():
    setup_logging()
    service = get_moderation_service()
    reviewed = service.stats()["experiences"]
    print(f"Experiences: {reviewed['total']} total, {reviewed['pending']} pending")

    if "--yes" not in sys.argv[1:]:
        response = input("\nReset all reviewed experiences to pending? (y/n): ").strip().lower()
        if response != 'y':
            print("Aborted.")
            return 1

    modified = service.reset_all()
    print(f"✅ Reset {modified} experiences to pending status")
    return 0


if __name__ == "__main__":
    sys.exit(main())
