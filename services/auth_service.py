"""
User accounts, sessions and password resets.
"""
import secrets
from datetime import datetime, timedelta, timezone

from werkzeug.security import check_password_hash, generate_password_hash

from utils.db_utils import get_db_connection, close_db_connection, new_id, row_to_dict, utc_now
from utils.errors import Unauthorized, ValidationFailed
from utils.logger import get_logger

logger = get_logger(__name__)

USER_COLUMNS = "id, email, name, created_at"


def _expiry(**delta):
    return (datetime.now(timezone.utc) + timedelta(**delta)).isoformat()


def _is_expired(expires_at):
    return datetime.fromisoformat(expires_at) <= datetime.now(timezone.utc)


def _normalize_email(email):
    return email.strip().lower()


def create_user(email, password, name, config_dict):
    """
    Register a new account.

    Args:
        email (str): Login email (stored lowercase)
        password (str): Plain-text password, hashed before storage
        name (str): Display name (optional)
        config_dict (dict): Configuration dictionary

    Returns:
        dict: The created user
    """
    email = _normalize_email(email)
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT id FROM users WHERE email = ?", (email,))
        if cursor.fetchone():
            raise ValidationFailed("An account with this email already exists")

        user_id = new_id()
        now = utc_now()
        cursor.execute("""
            INSERT INTO users (id, email, name, password_hash, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (user_id, email, name, generate_password_hash(password), now, now))
        conn.commit()
        logger.info("Created user %s", user_id)
        return {"id": user_id, "email": email, "name": name, "createdAt": now}
    finally:
        close_db_connection(conn)


def authenticate(email, password, config_dict):
    """Return the user for valid credentials, otherwise raise Unauthorized."""
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute(f"SELECT {USER_COLUMNS}, password_hash FROM users WHERE email = ?",
                       (_normalize_email(email),))
        row = cursor.fetchone()
    finally:
        close_db_connection(conn)

    if row is None or not check_password_hash(row["password_hash"], password):
        raise Unauthorized("Invalid email or password")
    user = row_to_dict(row)
    user.pop("passwordHash")
    return user


def create_session(user_id, config_dict):
    """
    Open a session for a user.

    Returns:
        tuple: (token, expires_at)
    """
    token = secrets.token_urlsafe(32)
    expires_at = _expiry(days=config_dict.get("session_ttl_days", 7))
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("""
            INSERT INTO sessions (token, user_id, expires_at, created_at)
            VALUES (?, ?, ?, ?)
        """, (token, user_id, expires_at, utc_now()))
        conn.commit()
        return token, expires_at
    finally:
        close_db_connection(conn)


def get_session(token, config_dict):
    """
    Resolve a session token.

    Returns:
        dict: ``{"user": ..., "expiresAt": ...}`` or None when the token is
        unknown or expired. Expired sessions are removed.
    """
    if not token:
        return None
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("""
            SELECT s.expires_at, u.id, u.email, u.name, u.created_at
            FROM sessions s JOIN users u ON u.id = s.user_id
            WHERE s.token = ?
        """, (token,))
        row = cursor.fetchone()
        if row is None:
            return None
        if _is_expired(row["expires_at"]):
            cursor.execute("DELETE FROM sessions WHERE token = ?", (token,))
            conn.commit()
            return None
        user = {"id": row["id"], "email": row["email"], "name": row["name"], "createdAt": row["created_at"]}
        return {"user": user, "expiresAt": row["expires_at"]}
    finally:
        close_db_connection(conn)


def delete_session(token, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    try:
        conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
        conn.commit()
    finally:
        close_db_connection(conn)


def request_password_reset(email, config_dict):
    """
    Store a reset token for the account, if there is one.

    No email is sent; the reset link is written to the log.

    Returns:
        str: The token, or None when no account matches
    """
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT id FROM users WHERE email = ?", (_normalize_email(email),))
        row = cursor.fetchone()
        if row is None:
            logger.info("Password reset requested for unknown email")
            return None

        token = secrets.token_urlsafe(32)
        expires_at = _expiry(seconds=config_dict.get("password_reset_ttl_seconds", 3600))
        cursor.execute("""
            INSERT INTO password_resets (token, user_id, expires_at, used, created_at)
            VALUES (?, ?, ?, 0, ?)
        """, (token, row["id"], expires_at, utc_now()))
        conn.commit()
        logger.info("Password reset link for user %s: %s/reset-password?token=%s",
                    row["id"], config_dict.get("app_url", ""), token)
        return token
    finally:
        close_db_connection(conn)


def reset_password(token, password, config_dict):
    """Consume a reset token, set the new password and revoke every session of the user."""
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT user_id, expires_at, used FROM password_resets WHERE token = ?", (token,))
        row = cursor.fetchone()
        if row is None or row["used"] or _is_expired(row["expires_at"]):
            raise ValidationFailed("Invalid or expired reset token")

        user_id = row["user_id"]
        cursor.execute("UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
                       (generate_password_hash(password), utc_now(), user_id))
        cursor.execute("UPDATE password_resets SET used = 1 WHERE token = ?", (token,))
        cursor.execute("DELETE FROM sessions WHERE user_id = ?", (user_id,))
        conn.commit()
        logger.info("Password reset for user %s", user_id)
    finally:
        close_db_connection(conn)
