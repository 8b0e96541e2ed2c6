from typing import Any, Dict, Optional


def get_admin_credentials(cur) -> Optional[Dict[str, Any]]:
    cur.execute(
        "SELECT id, username, password_hash FROM admin_credentials ORDER BY updated_at DESC LIMIT 1"
    )
    row = cur.fetchone()
    if not row:
        return None
    return {"id": row[0], "username": row[1], "password_hash": row[2]}


def save_admin_credentials(cur, username: str, password_hash: str) -> Dict[str, Any]:
    """Single-admin table: replace whatever row exists."""
    cur.execute("DELETE FROM admin_credentials")
    cur.execute(
        """
        INSERT INTO admin_credentials (username, password_hash)
        VALUES (%s, %s)
        RETURNING id, username
        """,
        (username, password_hash),
    )
    row = cur.fetchone()
    return {"id": row[0], "username": row[1]}
