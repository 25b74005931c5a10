"""
AI-assisted selection of the profile content that best fits a job description.
"""
import json

from pydantic import ValidationError

from services.ai_service import extract_json_object, generate_text
from utils.errors import AIServiceError, ApiError
from utils.logger import get_logger
from utils.validators import IntelligentContentSelection, JobAnalysis

logger = get_logger(__name__)

FALLBACK_STRATEGY = "Fallback selection - most recent content"
FALLBACK_MATCHING_POINTS = ["Recent work experience", "All educational background", "Core skills"]

JOB_ANALYSIS_SHAPE = {
    "requirements": ["string"],
    "skills": ["string"],
    "keywords": ["string"],
    "seniority": "entry | mid | senior | executive",
    "industry": "string",
    "summary": "string",
}

SELECTION_SHAPE = {
    "selectedWorkExperiences": ["number"],
    "selectedEducation": ["number"],
    "selectedSkills": ["number"],
    "selectedProjects": ["number"],
    "selectedCertifications": ["number"],
    "selectedAchievements": ["number"],
    "relevanceScores": [{
        "id": "number",
        "type": "work | education | skill | project | certification | achievement",
        "score": "number 0-100",
        "reasoning": "string",
        "matchedKeywords": ["string"],
    }],
    "overallStrategy": "string",
    "keyMatchingPoints": ["string"],
}

# IntelligentContentSelection field -> profile data key
SELECTION_SECTIONS = {
    "selected_work_experiences": "workExperiences",
    "selected_education": "education",
    "selected_skills": "skills",
    "selected_projects": "projects",
    "selected_certifications": "certifications",
    "selected_achievements": "achievements",
}


def _listing(items, render):
    return "\n".join(render(item) + "\n---" for item in items)


class AIContentSelectionService:
    """
    Scores profile entries against a job description with the configured
    language model and picks what goes on a tailored resume.
    """

    def __init__(self, config):
        self.config = config

    def analyze_job_description(self, job_description):
        """
        Extract requirements, skills and keywords from a job description.

        Returns:
            dict: ``JobAnalysis`` fields

        Raises:
            AIServiceError: The call failed or the reply was not a valid analysis
        """
        prompt = f"""Analyze this job description and extract key information:

JOB DESCRIPTION:
{job_description}

Focus on technical skills, qualifications, experience requirements, and key responsibilities. Be concise and specific.

Respond with a single JSON object of this shape and nothing else:
{json.dumps(JOB_ANALYSIS_SHAPE, indent=2)}"""

        try:
            response = generate_text(prompt, self.config, temperature=0.3, max_tokens=1500)
            analysis = JobAnalysis.model_validate(extract_json_object(response))
        except (ApiError, ValueError, ValidationError) as e:
            logger.error("Error analyzing job description: %s", e)
            raise AIServiceError("Failed to analyze job description")
        return analysis.model_dump()

    def select_optimal_content(self, job_description, profile_data,
                               max_work_experiences=4, max_projects=3, max_skills=12):
        """
        Pick the most relevant profile entries for a job.

        Any failure, whether a provider error or an unparseable reply,
        returns the fallback selection instead of raising.

        Args:
            job_description (str): Job posting text
            profile_data (dict): Output of ``get_resume_data``
            max_work_experiences (int): Upper bound on work experiences
            max_projects (int): Upper bound on projects
            max_skills (int): Upper bound on skills

        Returns:
            dict: camelCase ``IntelligentContentSelection``
        """
        try:
            job_analysis = self.analyze_job_description(job_description)
        except AIServiceError:
            job_analysis = {}

        prompt = self.build_content_scoring_prompt(
            job_description, job_analysis, profile_data,
            max_work_experiences, max_projects, max_skills
        )

        try:
            response = generate_text(prompt, self.config, temperature=0.2, max_tokens=3000)
            selection = IntelligentContentSelection.model_validate(extract_json_object(response))
        except (ApiError, ValueError, ValidationError) as e:
            logger.warning("Error selecting optimal content, using fallback: %s", e)
            return self.get_fallback_selection(profile_data, max_work_experiences, max_projects, max_skills)

        return self.validate_and_format_selection(
            selection, profile_data, max_work_experiences, max_projects, max_skills
        )

    def build_content_scoring_prompt(self, job_description, job_analysis, profile_data,
                                     max_work_experiences, max_projects, max_skills):
        work = _listing(profile_data.get("workExperiences", []), lambda exp: (
            f"ID: {exp['id']}\n"
            f"Title: {exp['jobTitle']}\n"
            f"Company: {exp['company']}\n"
            f"Duration: {exp['startDate']} - {exp.get('endDate') or 'Current'}\n"
            f"Description: {exp.get('description') or 'No description'}\n"
            f"Technologies: {exp.get('technologies') or 'Not specified'}"
        ))
        skills = _listing(profile_data.get("skills", []), lambda skill: (
            f"ID: {skill['id']}\n"
            f"Name: {skill['name']}\n"
            f"Category: {skill['category']}\n"
            f"Level: {skill.get('proficiencyLevel') or 'Not specified'}\n"
            f"Experience: {skill.get('yearsOfExperience') or 0} years"
        ))
        projects = _listing(profile_data.get("projects", []), lambda project: (
            f"ID: {project['id']}\n"
            f"Title: {project['title']}\n"
            f"Description: {project.get('description') or 'No description'}\n"
            f"Technologies: {project.get('technologies') or 'Not specified'}\n"
            f"Duration: {project.get('startDate')} - {project.get('endDate') or 'Ongoing'}"
        ))
        education = _listing(profile_data.get("education", []), lambda edu: (
            f"ID: {edu['id']}\n"
            f"Degree: {edu['degree']}\n"
            f"Field: {edu.get('fieldOfStudy') or 'Not specified'}\n"
            f"Institution: {edu['institution']}\n"
            f"Courses: {edu.get('relevantCoursework') or 'Not specified'}"
        ))
        certifications = _listing(profile_data.get("certifications", []), lambda cert: (
            f"ID: {cert['id']}\n"
            f"Name: {cert['name']}\n"
            f"Issuer: {cert['issuingOrganization']}\n"
            f"Date: {cert.get('issueDate') or 'Unknown'}"
        ))
        achievements = _listing(profile_data.get("achievements", []), lambda ach: (
            f"ID: {ach['id']}\n"
            f"Title: {ach['title']}\n"
            f"Description: {ach.get('description') or 'No description'}\n"
            f"Organization: {ach.get('organization') or 'Not specified'}"
        ))

        return f"""You are an expert resume optimization AI. Analyze the job description and select the most relevant profile content to maximize interview success.

JOB DESCRIPTION:
{job_description}

JOB REQUIREMENTS: {', '.join(job_analysis.get('requirements') or []) or 'None specified'}
REQUIRED SKILLS: {', '.join(job_analysis.get('skills') or []) or 'None specified'}
SENIORITY: {job_analysis.get('seniority') or 'Unknown'}
INDUSTRY: {job_analysis.get('industry') or 'Unknown'}

AVAILABLE PROFILE CONTENT:

WORK EXPERIENCES:
{work}

SKILLS:
{skills}

PROJECTS:
{projects}

EDUCATION:
{education}

CERTIFICATIONS:
{certifications}

ACHIEVEMENTS:
{achievements}

SELECTION LIMITS:
- Max Work Experiences: {max_work_experiences}
- Max Projects: {max_projects}
- Max Skills: {max_skills}
- All Education: Include all relevant
- All Certifications: Include all relevant
- All Achievements: Include all relevant

Analyze the profile content and select the most relevant items for this job application. For each selected item, provide a relevance score (0-100), reasoning, and matched keywords.

Prioritize:
1. Direct skill matches
2. Relevant work experience
3. Industry/domain experience
4. Seniority-appropriate content
5. Recent and significant achievements
6. Educational background relevance

Be selective - quality over quantity. Choose items that directly support the application.

Respond with a single JSON object of this shape and nothing else:
{json.dumps(SELECTION_SHAPE, indent=2)}"""

    def validate_and_format_selection(self, selection, profile_data,
                                      max_work_experiences=4, max_projects=3, max_skills=12):
        """Drop ids that are not in the profile and cap each list at its limit."""
        limits = {
            "selected_work_experiences": max_work_experiences,
            "selected_projects": max_projects,
            "selected_skills": max_skills,
        }
        result = {}
        for field, data_key in SELECTION_SECTIONS.items():
            valid_ids = {item["id"] for item in profile_data.get(data_key, [])}
            ids = [item_id for item_id in getattr(selection, field) if item_id in valid_ids]
            if field in limits:
                ids = ids[:limits[field]]
            result[field] = ids

        formatted = IntelligentContentSelection(
            **result,
            relevance_scores=selection.relevance_scores,
            overall_strategy=selection.overall_strategy,
            key_matching_points=selection.key_matching_points,
        )
        return formatted.model_dump(by_alias=True)

    def get_fallback_selection(self, profile_data, max_work_experiences=4, max_projects=3, max_skills=12):
        """Most recent entries in display order, used whenever the model cannot be used."""
        return {
            "selectedWorkExperiences": [exp["id"] for exp in profile_data.get("workExperiences", [])[:max_work_experiences]],
            "selectedEducation": [edu["id"] for edu in profile_data.get("education", [])],
            "selectedSkills": [skill["id"] for skill in profile_data.get("skills", [])[:max_skills]],
            "selectedProjects": [project["id"] for project in profile_data.get("projects", [])[:max_projects]],
            "selectedCertifications": [cert["id"] for cert in profile_data.get("certifications", [])],
            "selectedAchievements": [ach["id"] for ach in profile_data.get("achievements", [])],
            "relevanceScores": [],
            "overallStrategy": FALLBACK_STRATEGY,
            "keyMatchingPoints": list(FALLBACK_MATCHING_POINTS),
        }
