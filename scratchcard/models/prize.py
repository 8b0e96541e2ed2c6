from typing import Any, Dict, List, Optional, Tuple

PRIZE_COLS = ["id", "code_id", "prize_definition_id"]


def get_prize_by_code(cur, code_id: str) -> Optional[Dict[str, Any]]:
    cur.execute(
        "SELECT id, code_id, prize_definition_id FROM prizes WHERE code_id = %s",
        (code_id,),
    )
    row = cur.fetchone()
    return dict(zip(PRIZE_COLS, row)) if row else None


def upsert_prize(cur, *, code_id: str, prize_definition_id: str) -> Tuple[str, bool]:
    """
    Link a code to a prize definition. prizes.code_id is unique, so an existing
    assignment is repointed instead of duplicated. Returns (prize_id, inserted).
    """
    cur.execute(
        """
        INSERT INTO prizes (code_id, prize_definition_id)
        VALUES (%s, %s)
        ON CONFLICT (code_id)
        DO UPDATE SET prize_definition_id = EXCLUDED.prize_definition_id,
                      updated_at = now()
        RETURNING id, (xmax = 0) AS inserted
        """,
        (code_id, prize_definition_id),
    )
    row = cur.fetchone()
    return row[0], bool(row[1])


def delete_prize_by_code(cur, code_id: str) -> bool:
    cur.execute("DELETE FROM prizes WHERE code_id = %s", (code_id,))
    return cur.rowcount > 0


def definition_in_use(cur, prize_definition_id: str) -> bool:
    cur.execute(
        "SELECT 1 FROM prizes WHERE prize_definition_id = %s LIMIT 1",
        (prize_definition_id,),
    )
    return cur.fetchone() is not None


def list_prizes(cur) -> List[Dict[str, Any]]:
    cur.execute(
        """
        SELECT p.id, p.code_id, c.code, pd.id, pd.prize_name, pd.description,
               pd.requires_cnic
        FROM prizes p
        LEFT JOIN codes c ON c.id = p.code_id
        LEFT JOIN prize_definitions pd ON pd.id = p.prize_definition_id
        ORDER BY p.created_at ASC
        """
    )
    return [
        {
            "prize_id": r[0],
            "code_id": r[1],
            "code": r[2],
            "prize_definition": (
                {
                    "id": r[3],
                    "prize_name": r[4],
                    "description": r[5],
                    "requires_cnic": r[6],
                }
                if r[3] is not None
                else None
            ),
        }
        for r in cur.fetchall()
    ]
