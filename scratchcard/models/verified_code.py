from typing import Any, Dict, List, Optional

VERIFIED_COLS = ["id", "code_id", "name", "phone", "created_at"]


def insert_verified_code(cur, *, code_id: str, name: str, phone: str) -> str:
    cur.execute(
        """
        INSERT INTO verified_codes (code_id, name, phone)
        VALUES (%s, %s, %s)
        RETURNING id
        """,
        (code_id, name, phone),
    )
    return cur.fetchone()[0]


def get_verified_code(cur, verified_code_id: str) -> Optional[Dict[str, Any]]:
    cur.execute(
        "SELECT id, code_id, name, phone, created_at FROM verified_codes WHERE id = %s",
        (verified_code_id,),
    )
    row = cur.fetchone()
    return dict(zip(VERIFIED_COLS, row)) if row else None


def get_first_verification_for_code(cur, code_id: str) -> Optional[Dict[str, Any]]:
    cur.execute(
        """
        SELECT id, code_id, name, phone, created_at
        FROM verified_codes
        WHERE code_id = %s
        ORDER BY created_at ASC
        LIMIT 1
        """,
        (code_id,),
    )
    row = cur.fetchone()
    return dict(zip(VERIFIED_COLS, row)) if row else None


def delete_verifications_for_code(cur, code_id: str) -> int:
    cur.execute("DELETE FROM verified_codes WHERE code_id = %s", (code_id,))
    return cur.rowcount


def list_verified_codes(cur) -> List[Dict[str, Any]]:
    cur.execute(
        """
        SELECT v.id, v.name, v.phone, c.code, v.code_id, c.is_valid,
               pd.prize_name, v.created_at
        FROM verified_codes v
        LEFT JOIN codes c ON c.id = v.code_id
        LEFT JOIN prizes p ON p.code_id = v.code_id
        LEFT JOIN prize_definitions pd ON pd.id = p.prize_definition_id
        ORDER BY v.created_at DESC
        """
    )
    return [
        {
            "id": r[0],
            "name": r[1],
            "phone": r[2],
            "code": r[3],
            "codeId": r[4],
            "isValid": bool(r[5]),
            "prizeName": r[6],
            "created_at": r[7],
        }
        for r in cur.fetchall()
    ]
