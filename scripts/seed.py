#!/usr/bin/env python3
"""
Seed database with demo codes and prizes.

Usage: python scripts/seed.py [--force]
Requires: migrations applied (alembic upgrade head)
"""
import os
import sys

# Ensure the package is on path when run from a checkout
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import bcrypt
from scratchcard.utils.db import get_db_connection

DEMO_CODES = ["ABC123", "WIN999", "GIFT500", "PLAIN01", "PLAIN02"]


def _hash(pw: str) -> str:
    return bcrypt.hashpw(pw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def seed():
    with get_db_connection() as conn, conn.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM codes WHERE code = ANY(%s)", (DEMO_CODES,))
        if cur.fetchone()[0] > 0:
            print("Already seeded (demo codes exist). Use --force to re-seed.")
            return

        # 1. Admin login
        cur.execute("SELECT COUNT(*) FROM admin_credentials")
        if cur.fetchone()[0] == 0:
            cur.execute(
                "INSERT INTO admin_credentials (username, password_hash) VALUES ('admin', %s)",
                (_hash("admin123"),),
            )

        # 2. Codes
        code_ids = {}
        for code in DEMO_CODES:
            cur.execute(
                """
                INSERT INTO codes (code, is_valid) VALUES (%s, true)
                ON CONFLICT (code) DO UPDATE SET is_valid = true
                RETURNING id
                """,
                (code,),
            )
            code_ids[code] = cur.fetchone()[0]

        # 3. Prize definitions
        cur.execute(
            """
            INSERT INTO prize_definitions (prize_name, description, requires_cnic)
            VALUES
                ('Gold', 'Gold coin, collected in store with CNIC', true),
                ('Gift Voucher', 'PKR 500 voucher', false)
            RETURNING id, prize_name
            """
        )
        defs = {name: def_id for def_id, name in cur.fetchall()}

        # 4. Assignments
        cur.execute(
            "INSERT INTO prizes (code_id, prize_definition_id) VALUES (%s, %s), (%s, %s)",
            (code_ids["WIN999"], defs["Gold"], code_ids["GIFT500"], defs["Gift Voucher"]),
        )

        conn.commit()
        print("Seeded successfully.")
        print("  Admin: admin / admin123")
        print(f"  Codes: {', '.join(DEMO_CODES)}")
        print("  WIN999 -> Gold (CNIC required), GIFT500 -> Gift Voucher")


def force_seed():
    """Clear demo data and re-seed. Use with caution."""
    with get_db_connection() as conn, conn.cursor() as cur:
        # claimable_prizes, prizes and verified_codes cascade from codes
        cur.execute("DELETE FROM codes WHERE code = ANY(%s)", (DEMO_CODES,))
        cur.execute(
            "DELETE FROM prize_definitions WHERE prize_name IN ('Gold', 'Gift Voucher')"
        )
        conn.commit()
    print("Cleared demo data. Seeding...")
    seed()


if __name__ == "__main__":
    if "--force" in sys.argv:
        force_seed()
    else:
        seed()
