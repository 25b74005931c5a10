"""
Resume database service layer.
"""
from services.application_service import get_application
from utils.db_utils import get_db_connection, close_db_connection, new_id, row_to_dict, rows_to_dicts, utc_now
from utils.errors import NotFound
from utils.logger import get_logger

logger = get_logger(__name__)

BOOL_FIELDS = ("is_default", "is_tailored")


def _unset_default(cursor, user_id, except_id=None):
    if except_id is None:
        cursor.execute("UPDATE resumes SET is_default = 0 WHERE user_id = ? AND is_default = 1", (user_id,))
    else:
        cursor.execute("UPDATE resumes SET is_default = 0 WHERE user_id = ? AND is_default = 1 AND id != ?",
                       (user_id, except_id))


def _check_linked_application(data, user_id, config_dict):
    """Raise NotFound unless a linked application belongs to the user."""
    if data.get("job_application_id"):
        get_application(data["job_application_id"], user_id, config_dict)


def get_resumes(user_id, config_dict, is_default=None, is_tailored=None,
                job_application_id=None, limit=None, offset=None):
    """
    Get a user's resumes, most recently updated first.

    Args:
        user_id (str): Owner
        config_dict (dict): Configuration dictionary
        is_default (bool): Filter on the default flag (optional)
        is_tailored (bool): Filter on the tailored flag (optional)
        job_application_id (str): Filter on the linked application (optional)
        limit (int): Maximum rows (optional)
        offset (int): Rows to skip (optional)

    Returns:
        list: List of resume dictionaries
    """
    sql = "SELECT * FROM resumes WHERE user_id = ?"
    params = [user_id]
    if is_default is not None:
        sql += " AND is_default = ?"
        params.append(int(is_default))
    if is_tailored is not None:
        sql += " AND is_tailored = ?"
        params.append(int(is_tailored))
    if job_application_id:
        sql += " AND job_application_id = ?"
        params.append(job_application_id)
    sql += " ORDER BY updated_at DESC"
    if limit is not None or offset:
        sql += " LIMIT ? OFFSET ?"
        params.extend([limit if limit is not None else -1, offset or 0])

    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute(sql, params)
        return rows_to_dicts(cursor.fetchall(), BOOL_FIELDS)
    finally:
        close_db_connection(conn)


def get_resume(resume_id, user_id, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT * FROM resumes WHERE id = ? AND user_id = ?", (resume_id, user_id))
        row = cursor.fetchone()
    finally:
        close_db_connection(conn)
    if row is None:
        raise NotFound("Resume not found")
    return row_to_dict(row, BOOL_FIELDS)


def create_resume(user_id, data, config_dict):
    """
    Create a resume. When it is marked default, every other resume of the
    user is unset first.

    Args:
        user_id (str): Owner
        data (dict): title, content, is_default, job_application_id, is_tailored
        config_dict (dict): Configuration dictionary

    Returns:
        dict: The stored resume
    """
    _check_linked_application(data, user_id, config_dict)
    resume_id = new_id()
    now = utc_now()
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        if data.get("is_default"):
            _unset_default(cursor, user_id)
        cursor.execute("""
            INSERT INTO resumes (id, user_id, title, content, is_default, job_application_id,
                                 is_tailored, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            resume_id,
            user_id,
            data["title"],
            data["content"],
            int(bool(data.get("is_default"))),
            data.get("job_application_id"),
            int(bool(data.get("is_tailored"))),
            now,
            now
        ))
        conn.commit()
    finally:
        close_db_connection(conn)
    logger.info("Created resume %s for user %s", resume_id, user_id)
    return get_resume(resume_id, user_id, config_dict)


def update_resume(resume_id, user_id, data, config_dict):
    """Apply a partial update, unsetting other defaults when ``is_default`` is set."""
    get_resume(resume_id, user_id, config_dict)
    _check_linked_application(data, user_id, config_dict)

    if data:
        values = dict(data, updated_at=utc_now())
        assignments = ", ".join(f"{column} = ?" for column in values)
        conn = get_db_connection(config_dict=config_dict)
        cursor = conn.cursor()
        try:
            if values.get("is_default"):
                _unset_default(cursor, user_id, except_id=resume_id)
            cursor.execute(f"UPDATE resumes SET {assignments} WHERE id = ? AND user_id = ?",
                           (*values.values(), resume_id, user_id))
            conn.commit()
        finally:
            close_db_connection(conn)
    return get_resume(resume_id, user_id, config_dict)


def delete_resume(resume_id, user_id, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("DELETE FROM resumes WHERE id = ? AND user_id = ?", (resume_id, user_id))
        conn.commit()
        deleted = cursor.rowcount
    finally:
        close_db_connection(conn)
    if not deleted:
        raise NotFound("Resume not found")


def get_default_resume(user_id, config_dict):
    """The user's default resume, or None."""
    resumes = get_resumes(user_id, config_dict, is_default=True, limit=1)
    return resumes[0] if resumes else None


def get_resumes_count(user_id, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT COUNT(*) FROM resumes WHERE user_id = ?", (user_id,))
        return cursor.fetchone()[0]
    finally:
        close_db_connection(conn)


def get_tailored_resume_by_application(application_id, user_id, config_dict):
    """The tailored resume linked to an application, or None."""
    resumes = get_resumes(user_id, config_dict, is_tailored=True,
                          job_application_id=application_id, limit=1)
    return resumes[0] if resumes else None


def save_tailored_resume(application_id, user_id, title, content, config_dict):
    """
    Create or update the single tailored resume of an application.

    Returns:
        tuple: (resume dict, is_new)
    """
    existing = get_tailored_resume_by_application(application_id, user_id, config_dict)
    if existing:
        resume = update_resume(existing["id"], user_id, {"title": title, "content": content}, config_dict)
        return resume, False

    resume = create_resume(user_id, {
        "title": title,
        "content": content,
        "is_default": False,
        "job_application_id": application_id,
        "is_tailored": True,
    }, config_dict)
    return resume, True
