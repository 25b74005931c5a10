"""
Profile database service layer.

The user profile is a single row per user; every other profile section
(work experience, education, skills, ...) is a list of rows keyed by an
integer id and ordered by ``display_order``.
"""
from collections import namedtuple

from utils.db_utils import get_db_connection, close_db_connection, row_to_dict, rows_to_dicts, utc_now
from utils.errors import NotFound, ValidationFailed
from utils.logger import get_logger

logger = get_logger(__name__)

ProfileSection = namedtuple("ProfileSection", ["table", "key", "label", "bool_fields"])

# URL segment -> section definition
PROFILE_SECTIONS = {
    "work-experiences": ProfileSection("work_experiences", "workExperiences", "Work experience", ("is_current",)),
    "education": ProfileSection("education", "education", "Education", ()),
    "skills": ProfileSection("skills", "skills", "Skill", ()),
    "projects": ProfileSection("projects", "projects", "Project", ("is_ongoing",)),
    "certifications": ProfileSection("certifications", "certifications", "Certification", ()),
    "achievements": ProfileSection("achievements", "achievements", "Achievement", ()),
    "references": ProfileSection("references", "references", "Reference", ()),
}

ORDER_COLUMNS = {
    "displayOrder": "display_order",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def _section(kind):
    try:
        return PROFILE_SECTIONS[kind]
    except KeyError:
        raise NotFound(f"Unknown profile section: {kind}")


# User profile

def get_profile(user_id, config_dict):
    """Return the user's profile, or None when it has not been created."""
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT * FROM user_profiles WHERE user_id = ?", (user_id,))
        return row_to_dict(cursor.fetchone())
    finally:
        close_db_connection(conn)


def create_profile(user_id, data, config_dict):
    """
    Create the user's profile.

    Args:
        user_id (str): Owner
        data (dict): snake_case profile fields
        config_dict (dict): Configuration dictionary

    Returns:
        dict: The stored profile
    """
    if get_profile(user_id, config_dict) is not None:
        raise ValidationFailed("Profile already exists. Use PUT to update.")

    now = utc_now()
    values = dict(data, user_id=user_id, created_at=now, updated_at=now)
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)

    conn = get_db_connection(config_dict=config_dict)
    try:
        conn.execute(f"INSERT INTO user_profiles ({columns}) VALUES ({placeholders})", tuple(values.values()))
        conn.commit()
    finally:
        close_db_connection(conn)
    return get_profile(user_id, config_dict)


def update_profile(user_id, data, config_dict):
    """Apply a partial update to the user's profile."""
    if get_profile(user_id, config_dict) is None:
        raise NotFound("Profile not found")

    if data:
        values = dict(data, updated_at=utc_now())
        assignments = ", ".join(f"{column} = ?" for column in values)
        conn = get_db_connection(config_dict=config_dict)
        try:
            conn.execute(f"UPDATE user_profiles SET {assignments} WHERE user_id = ?",
                         (*values.values(), user_id))
            conn.commit()
        finally:
            close_db_connection(conn)
    return get_profile(user_id, config_dict)


# Profile sections

def list_entries(kind, user_id, config_dict, limit=None, offset=None,
                 order_by=None, order="asc", category=None):
    """
    List one profile section for a user.

    Args:
        kind (str): Section URL segment, e.g. ``work-experiences``
        user_id (str): Owner
        config_dict (dict): Configuration dictionary
        limit (int): Maximum rows (optional)
        offset (int): Rows to skip (optional)
        order_by (str): ``displayOrder``, ``createdAt`` or ``updatedAt``
        order (str): ``asc`` or ``desc``
        category (str): Skill category filter (skills only)

    Returns:
        list: camelCase dictionaries
    """
    section = _section(kind)
    sql = f'SELECT * FROM "{section.table}" WHERE user_id = ?'
    params = [user_id]
    if category and kind == "skills":
        sql += " AND category = ?"
        params.append(category)

    direction = "DESC" if order == "desc" else "ASC"
    column = ORDER_COLUMNS.get(order_by, "display_order")
    sql += f" ORDER BY {column} {direction}, id {direction}"

    if limit is not None or offset:
        sql += " LIMIT ? OFFSET ?"
        params.extend([limit if limit is not None else -1, offset or 0])

    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute(sql, params)
        return rows_to_dicts(cursor.fetchall(), section.bool_fields)
    finally:
        close_db_connection(conn)


def get_entry(kind, user_id, entry_id, config_dict):
    """Return one owned entry or raise NotFound."""
    section = _section(kind)
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute(f'SELECT * FROM "{section.table}" WHERE id = ? AND user_id = ?', (entry_id, user_id))
        row = cursor.fetchone()
    finally:
        close_db_connection(conn)
    if row is None:
        raise NotFound(f"{section.label} not found")
    return row_to_dict(row, section.bool_fields)


def create_entry(kind, user_id, data, config_dict):
    section = _section(kind)
    now = utc_now()
    values = dict(data, user_id=user_id, created_at=now, updated_at=now)
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)

    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute(f'INSERT INTO "{section.table}" ({columns}) VALUES ({placeholders})',
                       tuple(values.values()))
        conn.commit()
        entry_id = cursor.lastrowid
    finally:
        close_db_connection(conn)
    return get_entry(kind, user_id, entry_id, config_dict)


def update_entry(kind, user_id, entry_id, data, config_dict):
    """Apply a partial update; only the supplied fields change."""
    section = _section(kind)
    get_entry(kind, user_id, entry_id, config_dict)

    if data:
        values = dict(data, updated_at=utc_now())
        assignments = ", ".join(f"{column} = ?" for column in values)
        conn = get_db_connection(config_dict=config_dict)
        try:
            conn.execute(f'UPDATE "{section.table}" SET {assignments} WHERE id = ? AND user_id = ?',
                         (*values.values(), entry_id, user_id))
            conn.commit()
        finally:
            close_db_connection(conn)
    return get_entry(kind, user_id, entry_id, config_dict)


def delete_entry(kind, user_id, entry_id, config_dict):
    section = _section(kind)
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute(f'DELETE FROM "{section.table}" WHERE id = ? AND user_id = ?', (entry_id, user_id))
        conn.commit()
        deleted = cursor.rowcount
    finally:
        close_db_connection(conn)
    if not deleted:
        raise NotFound(f"{section.label} not found")


def update_display_order(kind, user_id, items, config_dict):
    """
    Bulk-update ``display_order`` values.

    Args:
        items (list): ``[{"id": int, "display_order": int}, ...]``; ids the
            user does not own are ignored

    Returns:
        int: Number of rows updated
    """
    section = _section(kind)
    now = utc_now()
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        updated = 0
        for item in items:
            cursor.execute(
                f'UPDATE "{section.table}" SET display_order = ?, updated_at = ? WHERE id = ? AND user_id = ?',
                (item["display_order"], now, item["id"], user_id)
            )
            updated += cursor.rowcount
        conn.commit()
        return updated
    finally:
        close_db_connection(conn)


def get_resume_data(user_id, config_dict):
    """
    Collect the profile and every section, each ordered by display order.

    Returns:
        dict: ``{"profile": ..., "workExperiences": [...], "education": [...], ...}``
    """
    data = {"profile": get_profile(user_id, config_dict)}
    for kind, section in PROFILE_SECTIONS.items():
        data[section.key] = list_entries(kind, user_id, config_dict)
    return data
