from typing import Any, Dict, List, Optional

DEFINITION_COLS = [
    "id",
    "prize_name",
    "description",
    "requires_cnic",
    "created_at",
    "updated_at",
]


def create_prize_definition(
    cur, *, prize_name: str, description: str, requires_cnic: bool
) -> Dict[str, Any]:
    cur.execute(
        """
        INSERT INTO prize_definitions (prize_name, description, requires_cnic)
        VALUES (%s, %s, %s)
        RETURNING id, prize_name, description, requires_cnic, created_at, updated_at
        """,
        (prize_name, description, requires_cnic),
    )
    return dict(zip(DEFINITION_COLS, cur.fetchone()))


def get_prize_definition(cur, definition_id: str) -> Optional[Dict[str, Any]]:
    cur.execute(
        """
        SELECT id, prize_name, description, requires_cnic, created_at, updated_at
        FROM prize_definitions WHERE id = %s
        """,
        (definition_id,),
    )
    row = cur.fetchone()
    return dict(zip(DEFINITION_COLS, row)) if row else None


def list_prize_definitions(cur) -> List[Dict[str, Any]]:
    cur.execute(
        """
        SELECT id, prize_name, description, requires_cnic, created_at, updated_at
        FROM prize_definitions
        ORDER BY created_at ASC
        """
    )
    return [dict(zip(DEFINITION_COLS, r)) for r in cur.fetchall()]


def update_prize_definition(
    cur, definition_id: str, **fields
) -> Optional[Dict[str, Any]]:
    allowed = {"prize_name", "description", "requires_cnic"}
    sets = []
    vals = []
    for k, v in fields.items():
        if k in allowed:
            sets.append(f"{k} = %s")
            vals.append(v)
    if not sets:
        return get_prize_definition(cur, definition_id)
    vals.append(definition_id)
    cur.execute(
        f"""
        UPDATE prize_definitions
        SET {", ".join(sets)}, updated_at = now()
        WHERE id = %s
        RETURNING id, prize_name, description, requires_cnic, created_at, updated_at
        """,
        tuple(vals),
    )
    row = cur.fetchone()
    return dict(zip(DEFINITION_COLS, row)) if row else None


def delete_prize_definition(cur, definition_id: str) -> bool:
    cur.execute("DELETE FROM prize_definitions WHERE id = %s", (definition_id,))
    return cur.rowcount > 0
