"""
Request validation models.

Request bodies and query strings use camelCase keys; the models expose
snake_case attributes that match the database columns.
"""
import re
from typing import Annotated, Any, List, Literal, Optional, Union, get_args
from urllib.parse import urlparse

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    create_model,
)
from pydantic.alias_generators import to_camel


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

APPLICATION_STATUSES = ("applied", "interviewing", "offer", "rejected", "withdrawn")
SKILL_CATEGORIES = ("technical", "soft", "language", "tool", "framework", "other")
PROFICIENCY_LEVELS = ("beginner", "intermediate", "advanced", "expert")
REFERENCE_RELATIONSHIPS = ("manager", "colleague", "client", "professor", "mentor", "other")
RESUME_TEMPLATES = ("professional", "modern", "minimal", "creative")


def _check_url(value):
    if value is None or value == "":
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid URL format")
    return value


def _check_email(value):
    if value is None or value == "":
        return value
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value


def _require_email(value):
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value


def _reject_null(value):
    if value is None:
        raise ValueError("Field cannot be null")
    return value


def _allows_none(annotation):
    return annotation is Any or type(None) in get_args(annotation)


def _blank_to_none(value):
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
YearMonth = Annotated[str, StringConstraints(pattern=r"^\d{4}-\d{2}$")]
UrlOrBlank = Annotated[Optional[str], AfterValidator(_check_url)]
EmailOrBlank = Annotated[Optional[str], AfterValidator(_check_email)]
DisplayOrder = Annotated[int, Field(ge=0)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def partial_model(model, name):
    """
    Build a copy of ``model`` where every field may be omitted.

    Fields that do not accept None in ``model`` still reject an explicit null.
    """
    fields = {}
    for field_name, info in model.model_fields.items():
        inner = info.annotation
        if info.metadata:
            inner = Annotated[(inner, *info.metadata)]
        annotation = Optional[inner]
        if not _allows_none(info.annotation):
            annotation = Annotated[annotation, AfterValidator(_reject_null)]
        fields[field_name] = (annotation, None)
    return create_model(name, __base__=CamelModel, **fields)


# Profile

class UserProfileRequest(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: EmailOrBlank = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    linkedin_url: UrlOrBlank = None
    github_url: UrlOrBlank = None
    portfolio_url: UrlOrBlank = None
    professional_summary: Optional[str] = None


class WorkExperienceRequest(CamelModel):
    job_title: NonEmptyStr
    company: NonEmptyStr
    location: Optional[str] = None
    start_date: YearMonth
    end_date: Optional[YearMonth] = None
    is_current: bool = False
    description: Optional[str] = None
    technologies: Optional[str] = None
    display_order: DisplayOrder = 0


class EducationRequest(CamelModel):
    degree: NonEmptyStr
    field_of_study: Optional[str] = None
    institution: NonEmptyStr
    location: Optional[str] = None
    start_date: Optional[YearMonth] = None
    end_date: Optional[YearMonth] = None
    gpa: Optional[str] = None
    honors: Optional[str] = None
    relevant_coursework: Optional[str] = None
    display_order: DisplayOrder = 0


class SkillRequest(CamelModel):
    name: NonEmptyStr
    category: Literal[SKILL_CATEGORIES]
    proficiency_level: Optional[Literal[PROFICIENCY_LEVELS]] = None
    years_of_experience: Optional[Annotated[int, Field(ge=0)]] = None
    display_order: DisplayOrder = 0


class ProjectRequest(CamelModel):
    title: NonEmptyStr
    description: Optional[str] = None
    technologies: Optional[str] = None
    project_url: UrlOrBlank = None
    github_url: UrlOrBlank = None
    start_date: Optional[YearMonth] = None
    end_date: Optional[YearMonth] = None
    is_ongoing: bool = False
    display_order: DisplayOrder = 0


class CertificationRequest(CamelModel):
    name: NonEmptyStr
    issuing_organization: NonEmptyStr
    issue_date: Optional[YearMonth] = None
    expiration_date: Optional[YearMonth] = None
    credential_id: Optional[str] = None
    credential_url: UrlOrBlank = None
    display_order: DisplayOrder = 0


class AchievementRequest(CamelModel):
    title: NonEmptyStr
    description: Optional[str] = None
    organization: Optional[str] = None
    date: Optional[YearMonth] = None
    url: UrlOrBlank = None
    display_order: DisplayOrder = 0


class ReferenceRequest(CamelModel):
    name: NonEmptyStr
    title: Optional[str] = None
    company: Optional[str] = None
    email: EmailOrBlank = None
    phone: Optional[str] = None
    relationship: Optional[Literal[REFERENCE_RELATIONSHIPS]] = None
    display_order: DisplayOrder = 0


UpdateUserProfileRequest = partial_model(UserProfileRequest, "UpdateUserProfileRequest")
UpdateWorkExperienceRequest = partial_model(WorkExperienceRequest, "UpdateWorkExperienceRequest")
UpdateEducationRequest = partial_model(EducationRequest, "UpdateEducationRequest")
UpdateSkillRequest = partial_model(SkillRequest, "UpdateSkillRequest")
UpdateProjectRequest = partial_model(ProjectRequest, "UpdateProjectRequest")
UpdateCertificationRequest = partial_model(CertificationRequest, "UpdateCertificationRequest")
UpdateAchievementRequest = partial_model(AchievementRequest, "UpdateAchievementRequest")
UpdateReferenceRequest = partial_model(ReferenceRequest, "UpdateReferenceRequest")


class ProfileQuery(CamelModel):
    limit: Optional[Annotated[int, Field(gt=0, le=100)]] = None
    offset: Optional[Annotated[int, Field(ge=0)]] = None
    category: Optional[str] = None
    order_by: Optional[Literal["displayOrder", "createdAt", "updatedAt"]] = None
    order: Literal["asc", "desc"] = "asc"


class OrderItem(CamelModel):
    id: int
    display_order: DisplayOrder


class BulkUpdateOrderRequest(CamelModel):
    items: Annotated[List[OrderItem], Field(min_length=1)]


# Resumes

class ResumeRequest(CamelModel):
    title: NonEmptyStr
    content: NonEmptyStr
    is_default: bool = False
    job_application_id: Optional[str] = None
    is_tailored: bool = False


UpdateResumeRequest = partial_model(ResumeRequest, "UpdateResumeRequest")


class ResumesQuery(CamelModel):
    is_default: Optional[bool] = None
    is_tailored: Optional[bool] = None
    job_application_id: Optional[str] = None
    limit: Optional[Annotated[int, Field(gt=0, le=100)]] = None
    offset: Optional[Annotated[int, Field(ge=0)]] = None


class SaveTailoredResumeRequest(CamelModel):
    title: NonEmptyStr
    content: NonEmptyStr


# Applications

class ApplicationRequest(CamelModel):
    company: NonEmptyStr
    position: NonEmptyStr
    job_description: Optional[str] = None
    location: Optional[str] = None
    job_url: UrlOrBlank = None
    salary_range: Optional[str] = None
    status: Literal[APPLICATION_STATUSES] = "applied"
    applied_at: Optional[str] = None
    notes: Optional[str] = None
    contact_email: EmailOrBlank = None
    contact_name: Optional[str] = None
    recruiter_id: Optional[str] = None


UpdateApplicationRequest = partial_model(ApplicationRequest, "UpdateApplicationRequest")


class ApplicationsQuery(CamelModel):
    status: Optional[Literal[APPLICATION_STATUSES]] = None
    company: Optional[str] = None
    limit: Optional[Annotated[int, Field(gt=0, le=100)]] = None
    offset: Optional[Annotated[int, Field(ge=0)]] = None


# Cover letters

class CoverLetterRequest(CamelModel):
    title: NonEmptyStr
    content: NonEmptyStr
    is_ai_generated: bool = False
    job_application_id: Optional[str] = None
    resume_id: Optional[str] = None


UpdateCoverLetterRequest = partial_model(CoverLetterRequest, "UpdateCoverLetterRequest")


class CoverLettersQuery(CamelModel):
    is_ai_generated: Optional[bool] = None
    job_application_id: Optional[str] = None
    resume_id: Optional[str] = None
    limit: Optional[Annotated[int, Field(gt=0, le=100)]] = None
    offset: Optional[Annotated[int, Field(ge=0)]] = None


class GenerateCoverLetterRequest(CamelModel):
    company: NonEmptyStr
    position: NonEmptyStr
    job_description: Optional[str] = None
    resume_content: Optional[Union[str, dict, list]] = None
    applicant_name: Optional[str] = None


# Conversation starters

class GenerateConversationStarterRequest(CamelModel):
    prospect_details: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=20, max_length=2000),
    ]
    additional_context: Annotated[
        Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=1200)]],
        BeforeValidator(_blank_to_none),
    ] = None


# Dashboard

class ActivityQuery(CamelModel):
    type: Optional[Literal["application", "resume", "cover_letter"]] = None
    limit: Annotated[int, Field(gt=0, le=50)] = 10
    offset: Optional[Annotated[int, Field(ge=0)]] = None


# Resume generation

class ResumeContentSelection(CamelModel):
    include_personal_info: bool = True
    include_summary: bool = True
    include_work_experience: bool = True
    work_experience_ids: Optional[List[int]] = None
    include_education: bool = True
    education_ids: Optional[List[int]] = None
    include_skills: bool = True
    skill_categories: Optional[List[str]] = None
    include_projects: bool = False
    project_ids: Optional[List[int]] = None
    include_certifications: bool = False
    certification_ids: Optional[List[int]] = None
    include_achievements: bool = False
    achievement_ids: Optional[List[int]] = None
    include_references: bool = False
    reference_ids: Optional[List[int]] = None


class GenerateResumeRequest(CamelModel):
    title: NonEmptyStr
    template: Literal[RESUME_TEMPLATES] = "professional"
    content_selection: ResumeContentSelection


class ManualOverrides(CamelModel):
    work_experience_ids: Optional[List[int]] = None
    education_ids: Optional[List[int]] = None
    skill_ids: Optional[List[int]] = None
    project_ids: Optional[List[int]] = None
    certification_ids: Optional[List[int]] = None
    achievement_ids: Optional[List[int]] = None


class JobApplicationResumeRequest(CamelModel):
    application_id: NonEmptyStr
    title: NonEmptyStr
    template: Literal[RESUME_TEMPLATES] = "professional"
    use_ai_selection: bool = Field(default=True, alias="useAISelection")
    max_work_experiences: Annotated[int, Field(ge=1, le=10)] = 4
    max_projects: Annotated[int, Field(ge=0, le=8)] = 3
    max_skills: Annotated[int, Field(ge=5, le=20)] = 12
    manual_overrides: Optional[ManualOverrides] = None


# AI responses

class ContentRelevanceScore(CamelModel):
    id: int
    type: Literal["work", "education", "skill", "project", "certification", "achievement"]
    score: Annotated[float, Field(ge=0, le=100)]
    reasoning: str = ""
    matched_keywords: List[str] = Field(default_factory=list)


class IntelligentContentSelection(CamelModel):
    selected_work_experiences: List[int] = Field(default_factory=list)
    selected_education: List[int] = Field(default_factory=list)
    selected_skills: List[int] = Field(default_factory=list)
    selected_projects: List[int] = Field(default_factory=list)
    selected_certifications: List[int] = Field(default_factory=list)
    selected_achievements: List[int] = Field(default_factory=list)
    relevance_scores: List[ContentRelevanceScore] = Field(default_factory=list)
    overall_strategy: str = ""
    key_matching_points: List[str] = Field(default_factory=list)


class JobAnalysis(CamelModel):
    requirements: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    seniority: Literal["entry", "mid", "senior", "executive"]
    industry: str = ""
    summary: str = ""


# Auth

class SignUpRequest(CamelModel):
    email: Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_require_email)]
    password: Annotated[str, StringConstraints(min_length=8)]
    name: Optional[str] = None


class SignInRequest(CamelModel):
    email: NonEmptyStr
    password: NonEmptyStr


class ForgotPasswordRequest(CamelModel):
    email: NonEmptyStr


class ResetPasswordRequest(CamelModel):
    token: NonEmptyStr
    password: Annotated[str, StringConstraints(min_length=8)]


def parse_body(model, payload: Any):
    """Validate a JSON body; a missing body validates as an empty object."""
    return model.model_validate(payload if payload is not None else {})
