"""
Database schema service layer.
"""
from utils.db_utils import get_db_connection, close_db_connection
from utils.logger import get_logger

logger = get_logger(__name__)


TABLES = {
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            name TEXT,
            password_hash TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
    "sessions": """
        CREATE TABLE IF NOT EXISTS sessions (
            token TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            expires_at TEXT NOT NULL,
            created_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "password_resets": """
        CREATE TABLE IF NOT EXISTS password_resets (
            token TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            expires_at TEXT NOT NULL,
            used INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "user_profiles": """
        CREATE TABLE IF NOT EXISTS user_profiles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL UNIQUE,
            first_name TEXT,
            last_name TEXT,
            email TEXT,
            phone TEXT,
            address TEXT,
            city TEXT,
            state TEXT,
            zip_code TEXT,
            country TEXT,
            linkedin_url TEXT,
            github_url TEXT,
            portfolio_url TEXT,
            professional_summary TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "work_experiences": """
        CREATE TABLE IF NOT EXISTS work_experiences (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            job_title TEXT NOT NULL,
            company TEXT NOT NULL,
            location TEXT,
            start_date TEXT NOT NULL,
            end_date TEXT,
            is_current INTEGER DEFAULT 0,
            description TEXT,
            technologies TEXT,
            display_order INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "education": """
        CREATE TABLE IF NOT EXISTS education (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            degree TEXT NOT NULL,
            field_of_study TEXT,
            institution TEXT NOT NULL,
            location TEXT,
            start_date TEXT,
            end_date TEXT,
            gpa TEXT,
            honors TEXT,
            relevant_coursework TEXT,
            display_order INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "skills": """
        CREATE TABLE IF NOT EXISTS skills (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            proficiency_level TEXT,
            years_of_experience INTEGER,
            display_order INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "projects": """
        CREATE TABLE IF NOT EXISTS projects (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT,
            technologies TEXT,
            project_url TEXT,
            github_url TEXT,
            start_date TEXT,
            end_date TEXT,
            is_ongoing INTEGER DEFAULT 0,
            display_order INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "certifications": """
        CREATE TABLE IF NOT EXISTS certifications (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            issuing_organization TEXT NOT NULL,
            issue_date TEXT,
            expiration_date TEXT,
            credential_id TEXT,
            credential_url TEXT,
            display_order INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "achievements": """
        CREATE TABLE IF NOT EXISTS achievements (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT,
            organization TEXT,
            date TEXT,
            url TEXT,
            display_order INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "references": """
        CREATE TABLE IF NOT EXISTS "references" (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            title TEXT,
            company TEXT,
            email TEXT,
            phone TEXT,
            relationship TEXT,
            display_order INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "job_applications": """
        CREATE TABLE IF NOT EXISTS job_applications (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            company TEXT NOT NULL,
            position TEXT NOT NULL,
            job_description TEXT,
            location TEXT,
            job_url TEXT,
            salary_range TEXT,
            status TEXT NOT NULL DEFAULT 'applied',
            applied_at TEXT,
            notes TEXT,
            contact_email TEXT,
            contact_name TEXT,
            recruiter_id TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "application_statuses": """
        CREATE TABLE IF NOT EXISTS application_statuses (
            id TEXT PRIMARY KEY,
            application_id TEXT NOT NULL,
            status TEXT NOT NULL,
            notes TEXT,
            created_at TEXT NOT NULL,
            FOREIGN KEY (application_id) REFERENCES job_applications(id) ON DELETE CASCADE
        )
    """,
    "resumes": """
        CREATE TABLE IF NOT EXISTS resumes (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            content TEXT NOT NULL,
            is_default INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """,
    "cover_letters": """
        CREATE TABLE IF NOT EXISTS cover_letters (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            job_application_id TEXT,
            resume_id TEXT,
            title TEXT NOT NULL,
            content TEXT NOT NULL,
            is_ai_generated INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
            FOREIGN KEY (job_application_id) REFERENCES job_applications(id) ON DELETE SET NULL,
            FOREIGN KEY (resume_id) REFERENCES resumes(id) ON DELETE SET NULL
        )
    """,
}

# Columns added after the first release of a table: table -> [(column, definition)]
LATE_COLUMNS = {
    "resumes": [
        ("job_application_id",
         "TEXT REFERENCES job_applications(id) ON DELETE SET NULL"),
        ("is_tailored", "INTEGER DEFAULT 0"),
    ],
}


def verify_db_schema(config_dict):
    """
    Verify and update database schema to ensure all required columns and tables exist.

    Args:
        config_dict (dict): Configuration dictionary

    Returns:
        None
    """
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()

    try:
        for table_name, statement in TABLES.items():
            cursor.execute(statement)
            logger.debug("Verified %s table exists", table_name)
        conn.commit()

        for table_name, columns in LATE_COLUMNS.items():
            cursor.execute(f'PRAGMA table_info("{table_name}")')
            column_names = [column[1] for column in cursor.fetchall()]
            for column_name, definition in columns:
                if column_name not in column_names:
                    cursor.execute(f'ALTER TABLE "{table_name}" ADD COLUMN {column_name} {definition}')
                    logger.info("Added %s column to %s table", column_name, table_name)
        conn.commit()
        logger.info("Database schema verified at %s", config_dict["db_path"])
    finally:
        close_db_connection(conn)
