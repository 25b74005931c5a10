"""
Dashboard statistics and recent activity.
"""
import pandas as pd

from utils.db_utils import get_db_connection, close_db_connection
from utils.validators import APPLICATION_STATUSES

ACTIVITY_COLUMNS = ["id", "type", "action", "title", "description", "createdAt"]


def get_dashboard_stats(user_id, config_dict):
    """
    Totals for the dashboard header.

    Args:
        user_id (str): Owner
        config_dict (dict): Configuration dictionary

    Returns:
        dict: totalApplications, totalResumes, totalCoverLetters and
        applicationsByStatus (every status present, zero when unused)
    """
    conn = get_db_connection(config_dict=config_dict)
    try:
        applications = pd.read_sql_query(
            "SELECT status FROM job_applications WHERE user_id = ?", conn, params=(user_id,))
        resumes = pd.read_sql_query(
            "SELECT id FROM resumes WHERE user_id = ?", conn, params=(user_id,))
        cover_letters = pd.read_sql_query(
            "SELECT id FROM cover_letters WHERE user_id = ?", conn, params=(user_id,))
    finally:
        close_db_connection(conn)

    status_counts = applications['status'].value_counts()
    return {
        "totalApplications": int(len(applications)),
        "totalResumes": int(len(resumes)),
        "totalCoverLetters": int(len(cover_letters)),
        "applicationsByStatus": {
            status: int(status_counts.get(status, 0)) for status in APPLICATION_STATUSES
        },
    }


def _recent(conn, sql, user_id, limit):
    return pd.read_sql_query(sql + " ORDER BY created_at DESC LIMIT ?", conn, params=(user_id, limit))


def get_dashboard_activity(user_id, config_dict, activity_type=None, limit=10, offset=0):
    """
    Recently created applications, resumes and cover letters, newest first.

    Args:
        user_id (str): Owner
        config_dict (dict): Configuration dictionary
        activity_type (str): ``application``, ``resume`` or ``cover_letter`` (optional)
        limit (int): Maximum number of items
        offset (int): Number of newest items to skip

    Returns:
        list: ``{id, type, action, title, description, createdAt}`` dictionaries
    """
    frames = []
    # each source may contribute up to offset + limit rows to the merged page
    window = limit + offset
    conn = get_db_connection(config_dict=config_dict)
    try:
        if activity_type in (None, 'application'):
            df = _recent(conn, "SELECT id, company, position, created_at FROM job_applications WHERE user_id = ?",
                         user_id, window)
            df['type'] = 'application'
            df['title'] = df['position'] + ' at ' + df['company']
            df['description'] = 'Applied for ' + df['position'] + ' position'
            frames.append(df)

        if activity_type in (None, 'resume'):
            df = _recent(conn, "SELECT id, title, created_at FROM resumes WHERE user_id = ?", user_id, window)
            df['type'] = 'resume'
            df['description'] = 'Created resume: ' + df['title']
            frames.append(df)

        if activity_type in (None, 'cover_letter'):
            df = _recent(conn, "SELECT id, title, is_ai_generated, created_at FROM cover_letters WHERE user_id = ?",
                         user_id, window)
            df['type'] = 'cover_letter'
            prefix = df['is_ai_generated'].map(
                lambda generated: 'Generated AI cover letter: ' if generated else 'Created cover letter: ')
            df['description'] = prefix + df['title']
            frames.append(df)
    finally:
        close_db_connection(conn)

    frames = [frame for frame in frames if not frame.empty]
    if not frames:
        return []

    activity = pd.concat(frames, ignore_index=True)
    activity['action'] = 'created'
    activity = activity.rename(columns={'created_at': 'createdAt'})
    activity = activity.sort_values(by='createdAt', ascending=False).iloc[offset:window]
    return activity[ACTIVITY_COLUMNS].to_dict('records')
