"""
Database connection utilities.
"""
import sqlite3
import uuid
from datetime import datetime, timezone

from pydantic.alias_generators import to_camel

from utils.config_utils import get_config


def get_db_connection(config_path='config.json', config_dict=None):
    """
    Get a database connection using the configuration.

    Args:
        config_path (str): Path to config file (if config_dict not provided)
        config_dict (dict): Configuration dictionary (optional, overrides config_path)

    Returns:
        sqlite3.Connection: Database connection object
    """
    if config_dict is None:
        config = get_config(config_path)
    else:
        config = config_dict

    conn = sqlite3.connect(config["db_path"])
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def close_db_connection(conn):
    """
    Close a database connection, rolling back any uncommitted writes.

    A write that raised before ``commit`` still holds the database lock until
    its transaction ends, so it is rolled back here.

    Args:
        conn (sqlite3.Connection): Database connection to close
    """
    if conn:
        if conn.in_transaction:
            conn.rollback()
        conn.close()


def utc_now():
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_id():
    return uuid.uuid4().hex


def row_to_dict(row, bool_fields=()):
    """
    Convert a sqlite3.Row into a camelCase dictionary for JSON responses.

    Args:
        row (sqlite3.Row): Database row, or None
        bool_fields (iterable): snake_case columns stored as 0/1 integers

    Returns:
        dict: camelCase keyed dictionary, or None
    """
    if row is None:
        return None
    result = {}
    for key in row.keys():
        value = row[key]
        if key in bool_fields:
            value = bool(value)
        result[to_camel(key)] = value
    return result


def rows_to_dicts(rows, bool_fields=()):
    return [row_to_dict(row, bool_fields) for row in rows]
