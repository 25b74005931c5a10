"""
LinkedIn conversation starter generation.
"""
import json

from services.ai_service import generate_text
from services.profile_service import get_profile
from services.resume_service import get_default_resume
from utils.errors import AIServiceError
from utils.logger import get_logger
from utils.text_utils import truncate

logger = get_logger(__name__)

NO_DETAILS = "The sender has not provided profile or resume details."


def parse_resume_content(resume):
    """The JSON object stored in a resume's content, or None."""
    if not resume or not resume.get("content"):
        return None
    try:
        parsed = json.loads(resume["content"])
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _clean(value):
    return value.strip() if isinstance(value, str) and value.strip() else None


def build_profile_summary(profile, resume):
    """
    Describe the sender from their profile, falling back to their default resume.

    Args:
        profile (dict): camelCase profile, or None
        resume (dict): Default resume, or None

    Returns:
        str: One ``Label: value`` line per known detail
    """
    profile = profile or {}
    content = parse_resume_content(resume) or {}
    personal_info = content.get("personalInfo")
    if not isinstance(personal_info, dict):
        personal_info = {}

    name = " ".join(part for part in (_clean(profile.get("firstName")), _clean(profile.get("lastName"))) if part)
    if not name:
        name = _clean(personal_info.get("name"))

    lines = []
    if name:
        lines.append(f"Name: {name}")

    if profile.get("professionalSummary"):
        lines.append(f"Professional summary: {profile['professionalSummary']}")
    elif _clean(content.get("summary")):
        lines.append(f"Professional summary: {truncate(content['summary'], 400)}")

    location = ", ".join(part for part in (_clean(profile.get("city")), _clean(profile.get("country"))) if part)
    if location:
        lines.append(f"Location: {location}")

    if _clean(content.get("experience")):
        lines.append(f"Recent experience highlights: {truncate(content['experience'], 500)}")
    if _clean(content.get("skills")):
        lines.append(f"Key skills: {truncate(content['skills'], 250)}")

    return "\n".join(lines) if lines else NO_DETAILS


def generate_conversation_starter(user_id, request, config_dict):
    """
    Draft a short LinkedIn message to a prospect.

    Returns:
        dict: ``{"message": str, "success": True}``
    """
    profile_summary = build_profile_summary(
        get_profile(user_id, config_dict),
        get_default_resume(user_id, config_dict),
    )

    prompt = f"""You are a seasoned networking coach who helps professionals open LinkedIn conversations with authenticity.

Prospect information (verbatim from the user):
{request.prospect_details}

Sender profile pulled from their account:
{profile_summary}

Extra notes from the sender:
{request.additional_context or "None provided"}

Write a short LinkedIn message (2-4 sentences) that:
- Opens with a warm greeting and the recipient's name if available.
- References specific details from the prospect information.
- Connects the sender's background to the prospect's interests or work.
- Clearly states why the sender is reaching out and proposes a light next step (e.g., short chat, learning more).
- Sounds natural, friendly, and personal, with no generic praise or salesy language.
- Ends with the sender's name if it is provided above.

Return only the message text and avoid placeholders or brackets."""

    try:
        message = generate_text(prompt, config_dict, temperature=0.65, max_tokens=600)
    except AIServiceError as e:
        logger.error("AI conversation starter generation error: %s", e)
        raise AIServiceError("Failed to generate conversation starter. Please try again.")

    return {"message": message.strip(), "success": True}
