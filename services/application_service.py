"""
Job application database service layer.
"""
import csv
import io

from flask import Response

from utils.db_utils import get_db_connection, close_db_connection, new_id, row_to_dict, rows_to_dicts, utc_now
from utils.errors import NotFound
from utils.logger import get_logger
from utils.validators import APPLICATION_STATUSES

logger = get_logger(__name__)

EXPORT_COLUMNS = [
    ('company', 'Company'),
    ('position', 'Position'),
    ('status', 'Status'),
    ('location', 'Location'),
    ('salary_range', 'Salary Range'),
    ('applied_at', 'Applied At'),
    ('job_url', 'Job URL'),
    ('contact_name', 'Contact Name'),
    ('contact_email', 'Contact Email'),
    ('notes', 'Notes'),
    ('created_at', 'Created At'),
]


def _record_status(cursor, application_id, status, notes=None):
    cursor.execute("""
        INSERT INTO application_statuses (id, application_id, status, notes, created_at)
        VALUES (?, ?, ?, ?, ?)
    """, (new_id(), application_id, status, notes, utc_now()))


def get_all_applications(user_id, config_dict, status=None, company=None, limit=None, offset=None):
    """
    Get a user's applications, newest first.

    Args:
        user_id (str): Owner
        config_dict (dict): Configuration dictionary
        status (str): Status filter (optional)
        company (str): Case-insensitive company substring filter (optional)
        limit (int): Maximum rows (optional)
        offset (int): Rows to skip (optional)

    Returns:
        list: List of application dictionaries
    """
    sql = "SELECT * FROM job_applications WHERE user_id = ?"
    params = [user_id]
    if status:
        sql += " AND status = ?"
        params.append(status)
    if company:
        sql += " AND company LIKE ?"
        params.append(f"%{company}%")
    sql += " ORDER BY created_at DESC"
    if limit is not None or offset:
        sql += " LIMIT ? OFFSET ?"
        params.extend([limit if limit is not None else -1, offset or 0])

    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute(sql, params)
        return rows_to_dicts(cursor.fetchall())
    finally:
        close_db_connection(conn)


def get_application(app_id, user_id, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT * FROM job_applications WHERE id = ? AND user_id = ?", (app_id, user_id))
        row = cursor.fetchone()
    finally:
        close_db_connection(conn)
    if row is None:
        raise NotFound("Application not found")
    return row_to_dict(row)


def create_application(user_id, data, config_dict):
    """
    Create a new application entry and its first status history row.

    Args:
        user_id (str): Owner
        data (dict): snake_case application fields
        config_dict (dict): Configuration dictionary

    Returns:
        dict: The stored application
    """
    app_id = new_id()
    now = utc_now()
    values = dict(data, id=app_id, user_id=user_id, created_at=now, updated_at=now)
    values.setdefault('status', 'applied')
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)

    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute(f"INSERT INTO job_applications ({columns}) VALUES ({placeholders})",
                       tuple(values.values()))
        _record_status(cursor, app_id, values['status'])
        conn.commit()
    finally:
        close_db_connection(conn)
    logger.info("Created application %s for user %s", app_id, user_id)
    return get_application(app_id, user_id, config_dict)


def update_application(app_id, user_id, data, config_dict):
    """
    Update an existing application. A status change is appended to the
    status history.

    Returns:
        dict: The updated application
    """
    current = get_application(app_id, user_id, config_dict)

    if data:
        values = dict(data, updated_at=utc_now())
        assignments = ", ".join(f"{column} = ?" for column in values)
        conn = get_db_connection(config_dict=config_dict)
        cursor = conn.cursor()
        try:
            cursor.execute(f"UPDATE job_applications SET {assignments} WHERE id = ? AND user_id = ?",
                           (*values.values(), app_id, user_id))
            if values.get('status') and values['status'] != current['status']:
                _record_status(cursor, app_id, values['status'])
            conn.commit()
        finally:
            close_db_connection(conn)
    return get_application(app_id, user_id, config_dict)


def delete_application(app_id, user_id, config_dict):
    """Delete an application; raises NotFound when the user has no such application."""
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("DELETE FROM job_applications WHERE id = ? AND user_id = ?", (app_id, user_id))
        conn.commit()
        deleted = cursor.rowcount
    finally:
        close_db_connection(conn)
    if not deleted:
        raise NotFound("Application not found")
    logger.info("Deleted application %s", app_id)


def get_status_history(app_id, user_id, config_dict):
    """Status changes of an application, oldest first."""
    get_application(app_id, user_id, config_dict)
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("""
            SELECT id, application_id, status, notes, created_at
            FROM application_statuses
            WHERE application_id = ?
            ORDER BY created_at ASC, rowid ASC
        """, (app_id,))
        return rows_to_dicts(cursor.fetchall())
    finally:
        close_db_connection(conn)


def get_applications_count(user_id, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT COUNT(*) FROM job_applications WHERE user_id = ?", (user_id,))
        return cursor.fetchone()[0]
    finally:
        close_db_connection(conn)


def get_applications_count_by_status(user_id, config_dict):
    """
    Count applications per status.

    Returns:
        dict: Every known status mapped to its count (zero when unused)
    """
    counts = {status: 0 for status in APPLICATION_STATUSES}
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("""
            SELECT status, COUNT(*) AS total
            FROM job_applications
            WHERE user_id = ?
            GROUP BY status
        """, (user_id,))
        for row in cursor.fetchall():
            if row['status'] in counts:
                counts[row['status']] = row['total']
        return counts
    finally:
        close_db_connection(conn)


def export_applications_csv(user_id, config_dict):
    """
    Export a user's applications to CSV format.

    Args:
        user_id (str): Owner
        config_dict (dict): Configuration dictionary

    Returns:
        Response: Flask Response object with CSV data
    """
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        columns = ", ".join(column for column, _ in EXPORT_COLUMNS)
        cursor.execute(f"""
            SELECT {columns}
            FROM job_applications
            WHERE user_id = ?
            ORDER BY created_at DESC
        """, (user_id,))

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow([header for _, header in EXPORT_COLUMNS])
        for row in cursor.fetchall():
            writer.writerow(tuple(row))

        output.seek(0)
        return Response(
            output.getvalue(),
            mimetype='text/csv',
            headers={
                'Content-Disposition': 'attachment; filename=applications_export.csv'
            }
        )
    finally:
        close_db_connection(conn)
