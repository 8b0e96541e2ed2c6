from typing import Any, Dict, List, Optional

CLAIMABLE_COLS = [
    "id",
    "prize_id",
    "code_id",
    "verified_code_id",
    "cnic_image_url",
    "storageId",
    "status",
    "claimed_at",
    "created_at",
]

_SELECT = """
    SELECT id, prize_id, code_id, verified_code_id, cnic_image_url, storage_key,
           status, claimed_at, created_at
    FROM claimable_prizes
"""


def get_claimable_prize(cur, claimable_id: str) -> Optional[Dict[str, Any]]:
    cur.execute(_SELECT + " WHERE id = %s", (claimable_id,))
    row = cur.fetchone()
    return dict(zip(CLAIMABLE_COLS, row)) if row else None


def get_claimable_by_verified_code(
    cur, verified_code_id: str
) -> Optional[Dict[str, Any]]:
    cur.execute(_SELECT + " WHERE verified_code_id = %s", (verified_code_id,))
    row = cur.fetchone()
    return dict(zip(CLAIMABLE_COLS, row)) if row else None


def claimable_exists_for_code(cur, code_id: str) -> bool:
    cur.execute(
        "SELECT 1 FROM claimable_prizes WHERE code_id = %s LIMIT 1", (code_id,)
    )
    return cur.fetchone() is not None


def insert_claimable_prize(
    cur,
    *,
    prize_id: str,
    code_id: str,
    verified_code_id: str,
    cnic_image_url: Optional[str] = None,
    storage_key: Optional[str] = None,
) -> Optional[str]:
    """
    Enter a verification into the claim queue. Returns the new id, or None when
    the verification already has a claimable prize (unique verified_code_id).
    """
    cur.execute(
        """
        INSERT INTO claimable_prizes
          (prize_id, code_id, verified_code_id, cnic_image_url, storage_key, status)
        VALUES (%s, %s, %s, %s, %s, 'unClaimed')
        ON CONFLICT (verified_code_id) DO NOTHING
        RETURNING id
        """,
        (prize_id, code_id, verified_code_id, cnic_image_url, storage_key),
    )
    row = cur.fetchone()
    return row[0] if row else None


def mark_claimed(cur, claimable_id: str) -> Optional[Dict[str, Any]]:
    """Flip unClaimed -> claimed. None if the row is missing or already claimed."""
    cur.execute(
        """
        UPDATE claimable_prizes
        SET status = 'claimed', claimed_at = now()
        WHERE id = %s AND status = 'unClaimed'
        RETURNING id, prize_id, code_id, verified_code_id, cnic_image_url,
                  storage_key, status, claimed_at, created_at
        """,
        (claimable_id,),
    )
    row = cur.fetchone()
    return dict(zip(CLAIMABLE_COLS, row)) if row else None


def delete_claimables_for_code(cur, code_id: str) -> int:
    cur.execute("DELETE FROM claimable_prizes WHERE code_id = %s", (code_id,))
    return cur.rowcount


def list_claimable_prizes(cur) -> List[Dict[str, Any]]:
    cur.execute(
        """
        SELECT cp.id, c.code, v.name, v.phone, pd.id, pd.prize_name,
               pd.description, cp.cnic_image_url, cp.status, cp.claimed_at,
               cp.created_at
        FROM claimable_prizes cp
        LEFT JOIN codes c ON c.id = cp.code_id
        LEFT JOIN verified_codes v ON v.id = cp.verified_code_id
        LEFT JOIN prizes p ON p.id = cp.prize_id
        LEFT JOIN prize_definitions pd ON pd.id = p.prize_definition_id
        ORDER BY cp.created_at DESC
        """
    )
    return [
        {
            "claimable_prize_id": r[0],
            "code": r[1],
            "user": {"name": r[2], "phone": r[3]} if r[2] is not None else None,
            "prize_definition": (
                {"id": r[4], "prize_name": r[5], "description": r[6]}
                if r[4] is not None
                else None
            ),
            "cnic_image_url": r[7],
            "status": r[8],
            "claimed_at": r[9],
            "created_at": r[10],
        }
        for r in cur.fetchall()
    ]
