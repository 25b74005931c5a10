"""
Resume generation from profile data: validation, HTML, preview and PDF.
"""
from flask import render_template

from services.ai_content_selection_service import AIContentSelectionService
from services.profile_service import get_resume_data
from utils.logger import get_logger
from utils.pdf_utils import build_resume_pdf
from utils.validators import ResumeContentSelection

logger = get_logger(__name__)

TEMPLATES = {
    "professional": "resume_professional.html",
}
DEFAULT_TEMPLATE = "professional"

# (profile data key, content selection include flag, content selection id list)
SELECTABLE_SECTIONS = [
    ("workExperiences", "include_work_experience", "work_experience_ids"),
    ("education", "include_education", "education_ids"),
    ("projects", "include_projects", "project_ids"),
    ("certifications", "include_certifications", "certification_ids"),
    ("achievements", "include_achievements", "achievement_ids"),
    ("references", "include_references", "reference_ids"),
]

# ManualOverrides field -> profile data key
OVERRIDE_SECTIONS = {
    "work_experience_ids": "workExperiences",
    "education_ids": "education",
    "skill_ids": "skills",
    "project_ids": "projects",
    "certification_ids": "certifications",
    "achievement_ids": "achievements",
}

# IntelligentContentSelection key -> profile data key
AI_SELECTION_SECTIONS = {
    "selectedWorkExperiences": "workExperiences",
    "selectedEducation": "education",
    "selectedSkills": "skills",
    "selectedProjects": "projects",
    "selectedCertifications": "certifications",
    "selectedAchievements": "achievements",
}


def _only(items, ids):
    wanted = set(ids)
    return [item for item in items if item["id"] in wanted]


def _contact_items(profile):
    items = [profile.get("email"), profile.get("phone")]
    if profile.get("city") and profile.get("state"):
        items.append(f"{profile['city']}, {profile['state']}")
    items.extend([profile.get("linkedinUrl"), profile.get("githubUrl"), profile.get("portfolioUrl")])
    return [item for item in items if item]


def filter_resume_data(resume_data, selection):
    """
    Apply a content selection to profile data.

    Args:
        resume_data (dict): Output of ``get_resume_data``
        selection (ResumeContentSelection): What to include

    Returns:
        dict: Template context shared by the HTML and PDF renderers
    """
    profile = resume_data.get("profile")
    context = {
        "profile": profile,
        "include_personal_info": selection.include_personal_info,
        "include_summary": selection.include_summary,
        "full_name": "",
        "contact_items": [],
    }
    if profile:
        context["full_name"] = " ".join(
            part for part in (profile.get("firstName"), profile.get("lastName")) if part
        )
        context["contact_items"] = _contact_items(profile)

    for data_key, include_flag, ids_field in SELECTABLE_SECTIONS:
        items = []
        if getattr(selection, include_flag):
            items = resume_data.get(data_key, [])
            ids = getattr(selection, ids_field)
            if ids is not None:
                items = _only(items, ids)
        context_key = "work_experiences" if data_key == "workExperiences" else data_key
        context[context_key] = items

    skills_by_category = {}
    if selection.include_skills:
        for skill in resume_data.get("skills", []):
            if selection.skill_categories is None or skill["category"] in selection.skill_categories:
                skills_by_category.setdefault(skill["category"], []).append(skill["name"])
    context["skills_by_category"] = skills_by_category
    return context


def render_resume_html(resume_data, selection, template, title, preview=False):
    template_name = TEMPLATES.get(template, TEMPLATES[DEFAULT_TEMPLATE])
    context = filter_resume_data(resume_data, selection)
    return render_template(template_name, title=title, preview=preview, **context)


def validate_resume_generation(user_id, request, config_dict):
    """
    Check that the selected sections can be filled from the user's profile.

    Args:
        user_id (str): Owner
        request (GenerateResumeRequest): Title, template and content selection
        config_dict (dict): Configuration dictionary

    Returns:
        dict: ``{"valid": bool, "errors": [str, ...]}``
    """
    errors = []
    selection = request.content_selection
    resume_data = get_resume_data(user_id, config_dict)

    if selection.include_personal_info and not resume_data["profile"]:
        errors.append("User profile is required when personal information is included")

    if selection.include_work_experience and not resume_data["workExperiences"]:
        errors.append("No work experience found. Add work experience or disable it in content selection")

    if selection.include_education and not resume_data["education"]:
        errors.append("No education found. Add education or disable it in content selection")

    if selection.include_skills and not resume_data["skills"]:
        errors.append("No skills found. Add skills or disable them in content selection")

    if selection.work_experience_ids:
        available = {exp["id"] for exp in resume_data["workExperiences"]}
        missing = [str(item_id) for item_id in selection.work_experience_ids if item_id not in available]
        if missing:
            errors.append(f"Work experience IDs not found: {', '.join(missing)}")

    if selection.education_ids:
        available = {edu["id"] for edu in resume_data["education"]}
        missing = [str(item_id) for item_id in selection.education_ids if item_id not in available]
        if missing:
            errors.append(f"Education IDs not found: {', '.join(missing)}")

    return {"valid": not errors, "errors": errors}


def generate_resume_html(user_id, request, config_dict, preview=False):
    resume_data = get_resume_data(user_id, config_dict)
    return render_resume_html(resume_data, request.content_selection, request.template, request.title, preview)


def generate_resume_pdf(user_id, request, config_dict):
    """Render the selected profile content as a PDF document (bytes)."""
    resume_data = get_resume_data(user_id, config_dict)
    context = filter_resume_data(resume_data, request.content_selection)
    return build_resume_pdf(context, request.title)


def apply_intelligent_selection(resume_data, ai_selection):
    filtered = {"profile": resume_data["profile"], "references": []}
    for selection_key, data_key in AI_SELECTION_SECTIONS.items():
        filtered[data_key] = _only(resume_data.get(data_key, []), ai_selection.get(selection_key, []))
    return filtered


def apply_manual_overrides(resume_data, overrides):
    """Sections with an override list keep only those ids; other sections are kept whole."""
    filtered = {"profile": resume_data["profile"], "references": []}
    for field, data_key in OVERRIDE_SECTIONS.items():
        ids = getattr(overrides, field)
        items = resume_data.get(data_key, [])
        filtered[data_key] = _only(items, ids) if ids is not None else items
    return filtered


def build_job_application_resume(user_id, application, request, config_dict):
    """
    Pick the profile content for an application's tailored resume.

    AI selection runs when requested and the application has a job
    description; manual overrides, when present, replace its result.

    Returns:
        tuple: (filtered resume data, AI selection dict or None)
    """
    resume_data = get_resume_data(user_id, config_dict)
    filtered = resume_data
    ai_selection = None

    if request.use_ai_selection and application.get("jobDescription"):
        service = AIContentSelectionService(config_dict)
        ai_selection = service.select_optimal_content(
            application["jobDescription"],
            resume_data,
            request.max_work_experiences,
            request.max_projects,
            request.max_skills,
        )
        filtered = apply_intelligent_selection(resume_data, ai_selection)

    if request.manual_overrides:
        filtered = apply_manual_overrides(resume_data, request.manual_overrides)

    return filtered, ai_selection


def _selection_for(filtered):
    return ResumeContentSelection(
        include_personal_info=bool(filtered["profile"]),
        include_summary=bool(filtered["profile"] and filtered["profile"].get("professionalSummary")),
        include_projects=True,
        include_certifications=True,
        include_achievements=True,
        include_references=bool(filtered.get("references")),
    )


def generate_job_application_resume_html(user_id, application, request, config_dict, preview=False):
    """
    Returns:
        tuple: (html, AI selection dict or None)
    """
    filtered, ai_selection = build_job_application_resume(user_id, application, request, config_dict)
    html = render_resume_html(filtered, _selection_for(filtered), request.template, request.title, preview)
    return html, ai_selection


def generate_job_application_resume_pdf(user_id, application, request, config_dict):
    """
    Returns:
        tuple: (pdf bytes, AI selection dict or None)
    """
    filtered, ai_selection = build_job_application_resume(user_id, application, request, config_dict)
    context = filter_resume_data(filtered, _selection_for(filtered))
    return build_resume_pdf(context, request.title), ai_selection
