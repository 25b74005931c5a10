"""
Resume import: turn an uploaded resume into profile fields for review.

Nothing is persisted; the client decides what to save.
"""
import json
import re
from urllib.parse import urlparse

import pandas as pd
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from services.ai_service import extract_json_object, generate_text
from utils.config_utils import is_ai_configured
from utils.docx_utils import read_docx
from utils.errors import ApiError, PayloadTooLarge, ResumeImportError, UnsupportedMediaType
from utils.logger import get_logger
from utils.pdf_utils import read_pdf
from utils.validators import (
    PROFICIENCY_LEVELS,
    REFERENCE_RELATIONSHIPS,
    SKILL_CATEGORIES,
    UserProfileRequest,
)

logger = get_logger(__name__)

PDF_MIME = "application/pdf"
DOC_MIME = "application/msword"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"
OCTET_MIME = "application/octet-stream"
ALLOWED_MIME_TYPES = {PDF_MIME, DOC_MIME, DOCX_MIME, TEXT_MIME, OCTET_MIME}

EXTENSION_TYPES = {
    ".pdf": PDF_MIME,
    ".docx": DOCX_MIME,
    ".doc": DOC_MIME,
    ".txt": TEXT_MIME,
    ".md": TEXT_MIME,
}

SUMMARY_SECTION_PATTERNS = [
    re.compile(r"^summary$", re.I),
    re.compile(r"^professional summary$", re.I),
    re.compile(r"^profile$", re.I),
    re.compile(r"^about me$", re.I),
    re.compile(r"^objective$", re.I),
]

EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.I)
PHONE_PATTERN = re.compile(r"(\+?\d[\d\s().-]{7,}\d)")
LINKEDIN_PATTERN = re.compile(r"https?://(?:www\.)?linkedin\.com/[^\s)]+", re.I)
GITHUB_PATTERN = re.compile(r"https?://(?:www\.)?github\.com/[^\s)]+", re.I)
WEBSITE_PATTERN = re.compile(r"https?://(?!\S*(?:linkedin|github)\.com)[^\s)]+", re.I)
NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z\s.,'-]*$")

SUMMARY_LIMIT = 600

HEURISTIC_WARNING = "Resume import used heuristic extraction. Double-check the populated fields before saving."
NO_SECTIONS_WARNING = "Structured sections could not be inferred automatically."
AI_NOT_CONFIGURED_WARNING = ("Structured AI parsing is not configured. "
                             "Imported values use basic text extraction, please review.")
AI_FAILED_WARNING = ("AI parsing failed. Populating fields using basic text extraction, "
                     "please review and edit.")
EMPTY_TEXT_WARNING = "The uploaded resume did not contain readable text."

PROFILE_FIELDS = list(UserProfileRequest.model_fields)

IMPORT_SHAPE = {
    "firstName": "string|null", "lastName": "string|null", "email": "string|null",
    "phone": "string|null", "address": "string|null", "city": "string|null",
    "state": "string|null", "zipCode": "string|null", "country": "string|null",
    "linkedinUrl": "string|null", "githubUrl": "string|null", "portfolioUrl": "string|null",
    "professionalSummary": "string|null",
    "workExperiences": [{
        "jobTitle": "string|null", "company": "string|null", "location": "string|null",
        "startDate": "YYYY-MM|null", "endDate": "YYYY-MM|null", "isCurrent": "boolean|null",
        "description": "string|null", "technologies": ["string"],
    }],
    "education": [{
        "degree": "string|null", "fieldOfStudy": "string|null", "institution": "string|null",
        "location": "string|null", "startDate": "YYYY-MM|null", "endDate": "YYYY-MM|null",
        "gpa": "string|null", "honors": "string|null", "relevantCoursework": ["string"],
    }],
    "skills": [{
        "name": "string|null", "category": "technical|soft|language|tool|framework|other|null",
        "proficiencyLevel": "beginner|intermediate|advanced|expert|null", "yearsOfExperience": "number|null",
    }],
    "projects": [{
        "title": "string|null", "description": "string|null", "technologies": ["string"],
        "projectUrl": "string|null", "githubUrl": "string|null", "startDate": "YYYY-MM|null",
        "endDate": "YYYY-MM|null", "isOngoing": "boolean|null",
    }],
    "certifications": [{
        "name": "string|null", "issuingOrganization": "string|null", "issueDate": "YYYY-MM|null",
        "expirationDate": "YYYY-MM|null", "credentialId": "string|null", "credentialUrl": "string|null",
    }],
    "achievements": [{
        "title": "string|null", "description": "string|null", "organization": "string|null",
        "date": "YYYY-MM|null", "url": "string|null",
    }],
    "references": [{
        "name": "string|null", "title": "string|null", "company": "string|null", "email": "string|null",
        "phone": "string|null", "relationship": "manager|colleague|client|professor|mentor|other|null",
    }],
    "warnings": ["string"],
}


# Value normalisation

def string_or_none(value):
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def sanitize_phone(value):
    if not value:
        return None
    cleaned = re.sub(r"[^\d+()\s-]", "", value).strip()
    return cleaned or None


def truncate_summary(value):
    if not value:
        return None
    return value[:SUMMARY_LIMIT - 3] + "..." if len(value) > SUMMARY_LIMIT else value


def normalize_string_list(value):
    if isinstance(value, list):
        return [item for item in (string_or_none(entry) for entry in value) if item]
    if isinstance(value, str):
        return [part.strip() for part in re.split(r"[\n,;•]+", value) if part.strip()]
    return []


def normalize_resume_date(value):
    """
    Normalise a free-form resume date to ``YYYY-MM``.

    ``2021`` becomes ``2021-01``; ``Present``/``Current`` and unparseable
    values become None.
    """
    value = string_or_none(value)
    if not value:
        return None
    if re.fullmatch(r"\d{4}-(0[1-9]|1[0-2])", value):
        return value
    if re.fullmatch(r"\d{4}", value):
        return f"{value}-01"
    if re.search(r"present|current", value, re.I):
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"


def normalize_url(value):
    value = string_or_none(value)
    if not value:
        return None
    if not re.match(r"^[a-zA-Z]+://", value):
        value = f"https://{value}"
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc or " " in value:
        return None
    return value


def _choice(value, allowed):
    value = string_or_none(value)
    if not value:
        return None
    value = value.lower()
    return value if value in allowed else None


def normalize_years(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        return None
    if value in (float("inf"), float("-inf")):
        return None
    return max(0, int(round(value)))


def _looks_current(value):
    return isinstance(value, str) and re.search(r"present|current", value, re.I) is not None


# AI output normalisation, one function per section: (items, warnings)

def normalize_profile(data):
    profile = {field: string_or_none(data.get(field)) for field in
               ("firstName", "lastName", "email", "address", "city", "state", "zipCode", "country",
                "linkedinUrl", "githubUrl", "portfolioUrl")}
    profile["phone"] = sanitize_phone(string_or_none(data.get("phone")))
    profile["professionalSummary"] = truncate_summary(string_or_none(data.get("professionalSummary")))
    return profile


def normalize_work_experiences(entries):
    items, warnings = [], []
    for index, entry in enumerate(entries or [], start=1):
        if not isinstance(entry, dict):
            continue
        job_title = string_or_none(entry.get("jobTitle"))
        company = string_or_none(entry.get("company"))
        if not job_title or not company:
            warnings.append(f"Skipped a work experience entry at position {index} "
                            f"due to missing job title or company.")
            continue

        start_date = normalize_resume_date(entry.get("startDate"))
        end_date = normalize_resume_date(entry.get("endDate"))
        is_current = entry.get("isCurrent") if isinstance(entry.get("isCurrent"), bool) else None
        if not is_current and _looks_current(entry.get("endDate")):
            is_current = True
            end_date = None
        if not start_date:
            warnings.append(f'Work experience "{job_title} at {company}" is missing a recognizable start date.')

        items.append({
            "jobTitle": job_title,
            "company": company,
            "location": string_or_none(entry.get("location")),
            "startDate": start_date,
            "endDate": end_date,
            "isCurrent": is_current,
            "description": string_or_none(entry.get("description")),
            "technologies": normalize_string_list(entry.get("technologies")),
        })
    return items, warnings


def normalize_education(entries):
    items, warnings = [], []
    for index, entry in enumerate(entries or [], start=1):
        if not isinstance(entry, dict):
            continue
        degree = string_or_none(entry.get("degree"))
        institution = string_or_none(entry.get("institution"))
        if not degree or not institution:
            warnings.append(f"Skipped an education entry at position {index} "
                            f"due to missing degree or institution.")
            continue
        items.append({
            "degree": degree,
            "fieldOfStudy": string_or_none(entry.get("fieldOfStudy")),
            "institution": institution,
            "location": string_or_none(entry.get("location")),
            "startDate": normalize_resume_date(entry.get("startDate")),
            "endDate": normalize_resume_date(entry.get("endDate")),
            "gpa": string_or_none(entry.get("gpa")),
            "honors": string_or_none(entry.get("honors")),
            "relevantCoursework": normalize_string_list(entry.get("relevantCoursework")),
        })
    return items, warnings


def normalize_skills(entries):
    items, warnings, seen = [], [], set()
    for index, entry in enumerate(entries or [], start=1):
        if not isinstance(entry, dict):
            continue
        name = string_or_none(entry.get("name"))
        if not name:
            warnings.append(f"Skipped a skill entry at position {index} due to missing name.")
            continue
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        items.append({
            "name": name,
            "category": _choice(entry.get("category"), SKILL_CATEGORIES),
            "proficiencyLevel": _choice(entry.get("proficiencyLevel"), PROFICIENCY_LEVELS),
            "yearsOfExperience": normalize_years(entry.get("yearsOfExperience")),
        })
    return items, warnings


def normalize_projects(entries):
    items, warnings = [], []
    for index, entry in enumerate(entries or [], start=1):
        if not isinstance(entry, dict):
            continue
        title = string_or_none(entry.get("title"))
        if not title:
            warnings.append(f"Skipped a project entry at position {index} due to missing title.")
            continue
        end_date = normalize_resume_date(entry.get("endDate"))
        is_ongoing = entry.get("isOngoing") if isinstance(entry.get("isOngoing"), bool) else None
        if is_ongoing is None and end_date is None and _looks_current(entry.get("endDate")):
            is_ongoing = True
        items.append({
            "title": title,
            "description": string_or_none(entry.get("description")),
            "technologies": normalize_string_list(entry.get("technologies")),
            "projectUrl": normalize_url(entry.get("projectUrl")),
            "githubUrl": normalize_url(entry.get("githubUrl")),
            "startDate": normalize_resume_date(entry.get("startDate")),
            "endDate": end_date,
            "isOngoing": is_ongoing,
        })
    return items, warnings


def normalize_certifications(entries):
    items, warnings = [], []
    for index, entry in enumerate(entries or [], start=1):
        if not isinstance(entry, dict):
            continue
        name = string_or_none(entry.get("name"))
        organization = string_or_none(entry.get("issuingOrganization"))
        if not name or not organization:
            warnings.append(f"Skipped a certification entry at position {index} "
                            f"due to missing name or issuing organization.")
            continue
        items.append({
            "name": name,
            "issuingOrganization": organization,
            "issueDate": normalize_resume_date(entry.get("issueDate")),
            "expirationDate": normalize_resume_date(entry.get("expirationDate")),
            "credentialId": string_or_none(entry.get("credentialId")),
            "credentialUrl": normalize_url(entry.get("credentialUrl")),
        })
    return items, warnings


def normalize_achievements(entries):
    items, warnings = [], []
    for index, entry in enumerate(entries or [], start=1):
        if not isinstance(entry, dict):
            continue
        title = string_or_none(entry.get("title"))
        if not title:
            warnings.append(f"Skipped an achievement entry at position {index} due to missing title.")
            continue
        items.append({
            "title": title,
            "description": string_or_none(entry.get("description")),
            "organization": string_or_none(entry.get("organization")),
            "date": normalize_resume_date(entry.get("date")),
            "url": normalize_url(entry.get("url")),
        })
    return items, warnings


def normalize_references(entries):
    items, warnings = [], []
    for index, entry in enumerate(entries or [], start=1):
        if not isinstance(entry, dict):
            continue
        name = string_or_none(entry.get("name"))
        if not name:
            warnings.append(f"Skipped a reference entry at position {index} due to missing name.")
            continue
        items.append({
            "name": name,
            "title": string_or_none(entry.get("title")),
            "company": string_or_none(entry.get("company")),
            "email": string_or_none(entry.get("email")),
            "phone": sanitize_phone(string_or_none(entry.get("phone"))),
            "relationship": _choice(entry.get("relationship"), REFERENCE_RELATIONSHIPS),
        })
    return items, warnings


SECTION_NORMALIZERS = {
    "workExperiences": normalize_work_experiences,
    "education": normalize_education,
    "skills": normalize_skills,
    "projects": normalize_projects,
    "certifications": normalize_certifications,
    "achievements": normalize_achievements,
    "references": normalize_references,
}


def collect_warnings(profile, extras=()):
    """De-duplicated warnings plus the missing name/email/phone notices."""
    warnings = []
    for warning in extras:
        warning = warning.strip() if isinstance(warning, str) else ""
        if warning and warning not in warnings:
            warnings.append(warning)

    for missing, message in (
        (not profile.get("firstName") or not profile.get("lastName"), "Name was not fully detected."),
        (not profile.get("email"), "Email address was not detected."),
        (not profile.get("phone"), "Phone number was not detected."),
    ):
        if missing and message not in warnings:
            warnings.append(message)
    return warnings


def empty_profile():
    return {to_camel(name): None for name in PROFILE_FIELDS}


def _validated_profile(profile):
    """Blank out values the profile validator would reject (bad emails or URLs)."""
    cleaned = dict(profile)
    try:
        UserProfileRequest.model_validate(cleaned)
    except ValidationError as e:
        for error in e.errors():
            if error["loc"]:
                cleaned[error["loc"][0]] = None
    return cleaned


# Heuristic extraction

def find_likely_name(lines):
    for line in lines[:6]:
        if len(line) > 60:
            continue
        if NAME_PATTERN.match(line) and len(line.split()) <= 6:
            return re.sub(r"\s{2,}", " ", line).strip()
    return None


def extract_summary(lines):
    summary = ""
    collecting = False
    for line in lines:
        normalized = re.sub(r"[*_#>-]", "", line).strip()
        is_heading = any(pattern.match(normalized) for pattern in SUMMARY_SECTION_PATTERNS)

        if is_heading and not collecting:
            collecting = True
            continue

        if collecting:
            if re.match(r"^#{1,6}\s", line) or is_heading:
                break
            if not line:
                if summary:
                    break
                continue
            summary = f"{summary} {line}".strip()
            if len(summary) >= SUMMARY_LIMIT:
                summary = summary[:SUMMARY_LIMIT - 3] + "..."
                break
    return summary or None


def _first_match(pattern, text):
    match = pattern.search(text)
    return match.group(0) if match else None


def fallback_extract_profile(text):
    """
    Regex-based extraction used when the AI provider is unavailable.

    Only the profile fields are filled; every section list is empty.
    """
    text = text.replace("\r", "\n")
    lines = [line.strip() for line in text.split("\n") if line.strip()]

    first_name = last_name = None
    name = find_likely_name(lines)
    if name:
        parts = name.split()
        first_name = parts[0]
        if len(parts) > 1:
            last_name = " ".join(parts[1:])

    profile = empty_profile()
    profile.update({
        "firstName": first_name,
        "lastName": last_name,
        "email": _first_match(EMAIL_PATTERN, text),
        "phone": _first_match(PHONE_PATTERN, text),
        "linkedinUrl": _first_match(LINKEDIN_PATTERN, text),
        "githubUrl": _first_match(GITHUB_PATTERN, text),
        "portfolioUrl": _first_match(WEBSITE_PATTERN, text),
        "professionalSummary": extract_summary(lines),
    })
    profile = _validated_profile(profile)

    result = {key: [] for key in SECTION_NORMALIZERS}
    result["profile"] = profile
    result["warnings"] = collect_warnings(profile, [HEURISTIC_WARNING, NO_SECTIONS_WARNING])
    return result


# AI extraction

def ai_extract_profile(text, config):
    prompt = f"""You are assisting with resume onboarding for a job-application tool.
The resume content has already been converted to plain text.

Populate the JSON structure below using only facts that appear in the resume. Use null for fields that are missing, keep URLs complete, and limit the professional summary to 600 characters or fewer. Do not invent information.

Respond with a single JSON object of this shape and nothing else:
{json.dumps(IMPORT_SHAPE, indent=2)}

Resume text:
\"\"\"
{text}
\"\"\""""

    response = generate_text(prompt, config, temperature=0.2, max_tokens=8000)
    data = extract_json_object(response)

    profile = _validated_profile(normalize_profile(data))
    result = {"profile": profile}
    section_warnings = [w for w in data.get("warnings") or [] if isinstance(w, str)]
    for key, normalize in SECTION_NORMALIZERS.items():
        items, warnings = normalize(data.get(key))
        result[key] = items
        section_warnings.extend(warnings)
    result["warnings"] = collect_warnings(profile, section_warnings)
    return result


def extract_profile(text, config):
    """Structured extraction with AI when configured, heuristics otherwise."""
    if not text or not text.strip():
        result = {key: [] for key in SECTION_NORMALIZERS}
        result["profile"] = empty_profile()
        result["warnings"] = [EMPTY_TEXT_WARNING]
        return result

    if is_ai_configured(config):
        try:
            return ai_extract_profile(text, config)
        except (ApiError, ValueError) as e:
            logger.warning("AI-based resume parsing failed. Falling back to heuristics: %s", e)
            fallback = fallback_extract_profile(text)
            fallback["warnings"].append(AI_FAILED_WARNING)
            return fallback

    fallback = fallback_extract_profile(text)
    fallback["warnings"].append(AI_NOT_CONFIGURED_WARNING)
    return fallback


# File handling

def resolve_file_type(mime_type, filename):
    """
    Decide how to read an upload.

    Raises:
        UnsupportedMediaType: The declared type is not a resume format
    """
    mime_type = (mime_type or OCTET_MIME).split(";")[0].strip().lower()
    if mime_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedMediaType("Unsupported file type. Please upload a PDF, DOC, or DOCX file.")
    if mime_type == OCTET_MIME and filename:
        for extension, sniffed in EXTENSION_TYPES.items():
            if filename.lower().endswith(extension):
                return sniffed
    return mime_type


def extract_text(data, file_type):
    """
    Read the text of an upload.

    Raises:
        ResumeImportError: The file could not be read
    """
    if file_type == TEXT_MIME:
        text = data.decode("utf-8", errors="replace")
        if not text.strip():
            raise ResumeImportError("Uploaded text file did not contain readable content.")
        return text

    if file_type in (DOCX_MIME, DOC_MIME) or (file_type == OCTET_MIME and data[:2] == b"PK"):
        try:
            return read_docx(data)
        except Exception as e:
            logger.warning("Unable to read Word document: %s", e)
            raise ResumeImportError(
                "Unable to read the Word document. Please upload a PDF or DOCX file.", 422)

    # PDF, or an unknown binary treated as PDF
    text = read_pdf(data)
    if text is None:
        raise ResumeImportError("Unable to read the uploaded PDF. Please try again.", 422)
    return text


def import_profile_from_resume(data, mime_type, filename, config):
    """
    Parse an uploaded resume into profile fields.

    Args:
        data (bytes): File contents
        mime_type (str): Declared content type
        filename (str): Original file name (used to sniff octet-stream uploads)
        config (dict): Configuration dictionary

    Returns:
        dict: profile, section lists, markdown (the extracted text) and warnings
    """
    file_type = resolve_file_type(mime_type, filename)

    if not data:
        raise ResumeImportError("Uploaded file is empty. Please choose a valid resume.")

    max_bytes = config.get("max_resume_upload_bytes", 8 * 1024 * 1024)
    if len(data) > max_bytes:
        raise PayloadTooLarge(
            f"Resume file is too large. Please upload a file under {max_bytes // (1024 * 1024)}MB.")

    text = extract_text(data, file_type)
    result = extract_profile(text, config)
    result["markdown"] = text
    logger.info("Imported resume (%s, %d bytes, %d warnings)", file_type, len(data), len(result["warnings"]))
    return result
