import io
import json

import pytest
from docx import Document

import services.resume_import_service as import_service
from services.resume_import_service import (
    AI_FAILED_WARNING,
    AI_NOT_CONFIGURED_WARNING,
    HEURISTIC_WARNING,
    fallback_extract_profile,
    normalize_resume_date,
    normalize_skills,
    normalize_url,
    normalize_work_experiences,
    normalize_years,
    resolve_file_type,
)
from utils.errors import UnsupportedMediaType

RESUME_TEXT = """Jane Doe
jane.doe@example.com | +1 (555) 123-4567
https://www.linkedin.com/in/janedoe https://github.com/janedoe https://janedoe.dev

## Summary
Backend engineer with eight years of experience building APIs.
Enjoys mentoring.

## Experience
Senior Engineer, Acme (2020 - Present)
"""


def upload(client, data, filename="resume.txt", content_type="text/plain"):
    return client.post(
        '/api/profile/resume-import',
        data={"file": (io.BytesIO(data), filename, content_type)},
        content_type='multipart/form-data',
    )


@pytest.mark.parametrize("value, expected", [
    ("2021-03", "2021-03"),
    ("2021", "2021-01"),
    ("March 2021", "2021-03"),
    ("Present", None),
    ("current role", None),
    ("someday", None),
    ("", None),
    (None, None),
])
def test_normalize_resume_date(value, expected):
    assert normalize_resume_date(value) == expected


def test_normalize_url():
    assert normalize_url("github.com/jane") == "https://github.com/jane"
    assert normalize_url("http://example.com") == "http://example.com"
    assert normalize_url("not a url") is None
    assert normalize_url(None) is None


def test_normalize_years():
    assert normalize_years(2.6) == 3
    assert normalize_years(-4) == 0
    assert normalize_years("5") is None
    assert normalize_years(True) is None


def test_normalize_work_experiences_current_role():
    items, warnings = normalize_work_experiences([
        {"jobTitle": "Engineer", "company": "Acme", "startDate": "2020", "endDate": "Present",
         "technologies": "Python, Flask; SQL"},
        {"jobTitle": "Intern"},
    ])
    assert items == [{
        "jobTitle": "Engineer",
        "company": "Acme",
        "location": None,
        "startDate": "2020-01",
        "endDate": None,
        "isCurrent": True,
        "description": None,
        "technologies": ["Python", "Flask", "SQL"],
    }]
    assert warnings == ["Skipped a work experience entry at position 2 due to missing job title or company."]


def test_normalize_skills_restricts_enums_and_dedupes():
    items, _ = normalize_skills([
        {"name": "Python", "category": "Technical", "proficiencyLevel": "guru", "yearsOfExperience": 4.4},
        {"name": "python", "category": "technical"},
    ])
    assert items == [{"name": "Python", "category": "technical", "proficiencyLevel": None, "yearsOfExperience": 4}]


def test_fallback_extraction():
    result = fallback_extract_profile(RESUME_TEXT)
    profile = result["profile"]
    assert profile["firstName"] == "Jane"
    assert profile["lastName"] == "Doe"
    assert profile["email"] == "jane.doe@example.com"
    assert profile["linkedinUrl"] == "https://www.linkedin.com/in/janedoe"
    assert profile["githubUrl"] == "https://github.com/janedoe"
    assert profile["portfolioUrl"] == "https://janedoe.dev"
    assert profile["professionalSummary"] == (
        "Backend engineer with eight years of experience building APIs. Enjoys mentoring.")
    assert result["workExperiences"] == []
    assert HEURISTIC_WARNING in result["warnings"]
    assert "Phone number was not detected." not in result["warnings"]


def test_fallback_warns_about_missing_fields():
    result = fallback_extract_profile("Experience\n2019-2021 at a company somewhere in town, doing things")
    assert "Name was not fully detected." in result["warnings"]
    assert "Email address was not detected." in result["warnings"]
    assert "Phone number was not detected." in result["warnings"]


def test_resolve_file_type():
    assert resolve_file_type("application/octet-stream", "cv.DOCX") == import_service.DOCX_MIME
    assert resolve_file_type("text/plain; charset=utf-8", "cv.txt") == "text/plain"
    with pytest.raises(UnsupportedMediaType):
        resolve_file_type("image/png", "cv.png")


def test_import_text_without_ai(auth_client):
    response = upload(auth_client, RESUME_TEXT.encode("utf-8"))
    assert response.status_code == 200
    body = response.get_json()
    assert body["profile"]["firstName"] == "Jane"
    assert body["markdown"].startswith("Jane Doe")
    assert AI_NOT_CONFIGURED_WARNING in body["warnings"]
    for key in ("workExperiences", "education", "skills", "projects", "certifications",
                "achievements", "references"):
        assert body[key] == []

    # nothing is persisted
    assert auth_client.get('/api/profile').get_json() is None


def test_import_docx(auth_client):
    document = Document()
    for line in RESUME_TEXT.split("\n"):
        document.add_paragraph(line)
    buffer = io.BytesIO()
    document.save(buffer)

    response = upload(auth_client, buffer.getvalue(), "resume.docx", "application/octet-stream")
    assert response.status_code == 200
    assert response.get_json()["profile"]["email"] == "jane.doe@example.com"


def test_import_with_ai(auth_client, ai_config, monkeypatch):
    reply = "```json\n" + json.dumps({
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane.doe@example.com",
        "phone": "+1 (555) 123-4567 ext",
        "linkedinUrl": "linkedin.com/in/janedoe",
        "workExperiences": [{"jobTitle": "Senior Engineer", "company": "Acme",
                             "startDate": "Jan 2020", "endDate": "Present"}],
        "skills": [{"name": "Python", "category": "technical", "yearsOfExperience": 8}],
        "warnings": ["Dates were approximate."],
    }) + "\n```"
    monkeypatch.setattr(import_service, 'generate_text', lambda prompt, config, **kwargs: reply)

    body = upload(auth_client, RESUME_TEXT.encode("utf-8")).get_json()
    # profile URLs are not rewritten; invalid ones are dropped
    assert body["profile"]["linkedinUrl"] is None
    assert body["profile"]["phone"] == "+1 (555) 123-4567"
    assert body["workExperiences"][0]["startDate"] == "2020-01"
    assert body["workExperiences"][0]["isCurrent"] is True
    assert body["skills"][0]["yearsOfExperience"] == 8
    assert body["warnings"] == ["Dates were approximate."]


def test_import_falls_back_when_ai_fails(auth_client, ai_config, monkeypatch):
    monkeypatch.setattr(import_service, 'generate_text', lambda prompt, config, **kwargs: "no json")
    body = upload(auth_client, RESUME_TEXT.encode("utf-8")).get_json()
    assert body["profile"]["firstName"] == "Jane"
    assert AI_FAILED_WARNING in body["warnings"]


def test_import_errors(app, auth_client):
    response = auth_client.post('/api/profile/resume-import', data={}, content_type='multipart/form-data')
    assert response.status_code == 400
    assert response.get_json()["error"] == "No resume file uploaded. Please select a file to import."

    assert upload(auth_client, b"").status_code == 400
    assert upload(auth_client, b"\x89PNG", "photo.png", "image/png").status_code == 415

    app.config['CONFIG']['max_resume_upload_bytes'] = 10
    assert upload(auth_client, b"x" * 11).status_code == 413


def test_unreadable_pdf(auth_client):
    response = upload(auth_client, b"definitely not a pdf", "resume.pdf", "application/pdf")
    assert response.status_code == 422
