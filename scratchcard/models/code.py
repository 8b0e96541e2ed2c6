from typing import Any, Dict, List, Optional

CODE_COLS = ["id", "code", "isValid", "created_at"]


def get_code_by_string(cur, code: str) -> Optional[Dict[str, Any]]:
    cur.execute(
        "SELECT id, code, is_valid, created_at FROM codes WHERE code = %s",
        (code,),
    )
    row = cur.fetchone()
    return dict(zip(CODE_COLS, row)) if row else None


def get_code(cur, code_id: str) -> Optional[Dict[str, Any]]:
    cur.execute(
        "SELECT id, code, is_valid, created_at FROM codes WHERE id = %s",
        (code_id,),
    )
    row = cur.fetchone()
    return dict(zip(CODE_COLS, row)) if row else None


def insert_code_if_absent(cur, code: str) -> Optional[str]:
    """
    Insert a fresh, unredeemed code. Returns the new id, or None when the code
    string already exists (unique index on codes.code).
    """
    cur.execute(
        """
        INSERT INTO codes (code, is_valid)
        VALUES (%s, true)
        ON CONFLICT (code) DO NOTHING
        RETURNING id
        """,
        (code,),
    )
    row = cur.fetchone()
    return row[0] if row else None


def set_code_invalid(cur, code_id: str) -> None:
    cur.execute("UPDATE codes SET is_valid = false WHERE id = %s", (code_id,))


def update_code(
    cur, code_id: str, code: str, is_valid: Optional[bool] = None
) -> Optional[Dict[str, Any]]:
    cur.execute(
        """
        UPDATE codes
        SET code = %s,
            is_valid = COALESCE(%s, is_valid)
        WHERE id = %s
        RETURNING id, code, is_valid, created_at
        """,
        (code, is_valid, code_id),
    )
    row = cur.fetchone()
    return dict(zip(CODE_COLS, row)) if row else None


def delete_code(cur, code_id: str) -> bool:
    cur.execute("DELETE FROM codes WHERE id = %s", (code_id,))
    return cur.rowcount > 0


def list_codes(cur, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Codes with their first verification and the assigned prize name, if any."""
    sql = """
      SELECT c.id, c.code, c.is_valid, v.name, v.phone, pd.prize_name
      FROM codes c
      LEFT JOIN LATERAL (
        SELECT name, phone FROM verified_codes
        WHERE code_id = c.id
        ORDER BY created_at ASC
        LIMIT 1
      ) v ON true
      LEFT JOIN prizes p ON p.code_id = c.id
      LEFT JOIN prize_definitions pd ON pd.id = p.prize_definition_id
      ORDER BY c.created_at ASC
    """
    params: tuple = ()
    if limit:
        sql += " LIMIT %s"
        params = (limit,)
    cur.execute(sql, params)
    return [
        {
            "id": r[0],
            "code": r[1],
            "isValid": r[2],
            "verified": r[3] is not None,
            "verifiedDetails": (
                {"name": r[3], "phone": r[4]} if r[3] is not None else None
            ),
            "prizeName": r[5],
        }
        for r in cur.fetchall()
    ]
