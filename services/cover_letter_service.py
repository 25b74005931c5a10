"""
Cover letter database service layer and AI generation.
"""
import json

from services.ai_service import generate_text
from services.application_service import get_application
from services.resume_service import get_resume
from utils.db_utils import get_db_connection, close_db_connection, new_id, row_to_dict, rows_to_dicts, utc_now
from utils.errors import AIServiceError, NotFound
from utils.logger import get_logger
from utils.text_utils import post_process_cover_letter

logger = get_logger(__name__)

BOOL_FIELDS = ("is_ai_generated",)


def get_cover_letters(user_id, config_dict, is_ai_generated=None, job_application_id=None,
                      resume_id=None, limit=None, offset=None):
    """
    Get a user's cover letters, newest first.

    Args:
        user_id (str): Owner
        config_dict (dict): Configuration dictionary
        is_ai_generated (bool): Filter on the AI flag (optional)
        job_application_id (str): Filter on the linked application (optional)
        resume_id (str): Filter on the linked resume (optional)
        limit (int): Maximum rows (optional)
        offset (int): Rows to skip (optional)

    Returns:
        list: List of cover letter dictionaries
    """
    sql = "SELECT * FROM cover_letters WHERE user_id = ?"
    params = [user_id]
    if is_ai_generated is not None:
        sql += " AND is_ai_generated = ?"
        params.append(int(is_ai_generated))
    if job_application_id:
        sql += " AND job_application_id = ?"
        params.append(job_application_id)
    if resume_id:
        sql += " AND resume_id = ?"
        params.append(resume_id)
    sql += " ORDER BY created_at DESC"
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


def get_cover_letter(letter_id, user_id, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT * FROM cover_letters WHERE id = ? AND user_id = ?", (letter_id, user_id))
        row = cursor.fetchone()
    finally:
        close_db_connection(conn)
    if row is None:
        raise NotFound("Cover letter not found")
    return row_to_dict(row, BOOL_FIELDS)


def _check_links(data, user_id, config_dict):
    """Raise NotFound unless the linked application and resume belong to the user."""
    if data.get("job_application_id"):
        get_application(data["job_application_id"], user_id, config_dict)
    if data.get("resume_id"):
        get_resume(data["resume_id"], user_id, config_dict)


def create_cover_letter(user_id, data, config_dict):
    _check_links(data, user_id, config_dict)
    letter_id = new_id()
    now = utc_now()
    conn = get_db_connection(config_dict=config_dict)
    try:
        conn.execute("""
            INSERT INTO cover_letters (id, user_id, job_application_id, resume_id, title, content,
                                       is_ai_generated, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            letter_id,
            user_id,
            data.get("job_application_id"),
            data.get("resume_id"),
            data["title"],
            data["content"],
            int(bool(data.get("is_ai_generated"))),
            now,
            now
        ))
        conn.commit()
    finally:
        close_db_connection(conn)
    return get_cover_letter(letter_id, user_id, config_dict)


def update_cover_letter(letter_id, user_id, data, config_dict):
    get_cover_letter(letter_id, user_id, config_dict)
    _check_links(data, user_id, config_dict)
    if data:
        values = dict(data, updated_at=utc_now())
        assignments = ", ".join(f"{column} = ?" for column in values)
        conn = get_db_connection(config_dict=config_dict)
        try:
            conn.execute(f"UPDATE cover_letters SET {assignments} WHERE id = ? AND user_id = ?",
                         (*values.values(), letter_id, user_id))
            conn.commit()
        finally:
            close_db_connection(conn)
    return get_cover_letter(letter_id, user_id, config_dict)


def delete_cover_letter(letter_id, user_id, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("DELETE FROM cover_letters WHERE id = ? AND user_id = ?", (letter_id, user_id))
        conn.commit()
        deleted = cursor.rowcount
    finally:
        close_db_connection(conn)
    if not deleted:
        raise NotFound("Cover letter not found")


def get_cover_letters_count(user_id, config_dict):
    conn = get_db_connection(config_dict=config_dict)
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT COUNT(*) FROM cover_letters WHERE user_id = ?", (user_id,))
        return cursor.fetchone()[0]
    finally:
        close_db_connection(conn)


def build_cover_letter_prompt(company, position, job_description=None, resume_content=None, applicant_name=None):
    background = ""
    if resume_content:
        if not isinstance(resume_content, str):
            resume_content = json.dumps(resume_content, indent=2)
        background = f"Resume/Background Information:\n{resume_content}"

    return f"""You are an expert cover letter writer. Create a professional, personalized cover letter based on the following information:

Company: {company}
Position: {position}
Applicant Name: {applicant_name or ""}

Job Description:
{job_description or ""}

{background}

Please write a compelling cover letter that:
1. Addresses the specific role and company
2. Highlights relevant experience and skills from the resume that match the job requirements
3. Shows enthusiasm for the role and company
4. Demonstrates knowledge of the company/industry
5. Includes a strong opening and closing
6. Is professional but personable
7. Is about 3-4 paragraphs long

Format the cover letter properly with appropriate salutations and structure. Do not include placeholder text like [Your Name] - use the actual information provided or leave blank if not available."""


def generate_cover_letter(request, config_dict):
    """
    Write a cover letter with the configured AI provider.

    Args:
        request (GenerateCoverLetterRequest): Company, position and optional context
        config_dict (dict): Configuration dictionary

    Returns:
        dict: ``{"coverLetter": str, "success": True}``

    Raises:
        AIServiceNotConfigured: No provider configured
        AIServiceError: The provider call failed
    """
    prompt = build_cover_letter_prompt(
        request.company,
        request.position,
        request.job_description,
        request.resume_content,
        request.applicant_name,
    )
    try:
        text = generate_text(prompt, config_dict, temperature=0.7, max_tokens=1000)
    except AIServiceError as e:
        logger.error("AI generation error: %s", e)
        raise AIServiceError("Failed to generate cover letter. Please try again.")

    return {"coverLetter": post_process_cover_letter(text), "success": True}
