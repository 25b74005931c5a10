import services.ai_content_selection_service as selection_module

SELECTION = {
    "includePersonalInfo": True,
    "includeSummary": True,
    "includeWorkExperience": True,
    "includeEducation": True,
    "includeSkills": True,
    "includeProjects": True,
    "includeCertifications": True,
    "includeAchievements": True,
    "includeReferences": False,
}


def generation_body(**selection):
    return {"title": "Jane Doe Resume", "template": "professional",
            "contentSelection": dict(SELECTION, **selection)}


def test_validate_empty_profile(auth_client):
    response = auth_client.post('/api/resume-generation', json=generation_body())
    assert response.status_code == 200
    body = response.get_json()
    assert body["valid"] is False
    assert "User profile is required when personal information is included" in body["errors"]
    assert "No work experience found. Add work experience or disable it in content selection" in body["errors"]


def test_validate_unknown_ids(auth_client, full_profile):
    response = auth_client.post('/api/resume-generation', json=generation_body(
        workExperienceIds=[full_profile["work-experiences"], 9999]))
    body = response.get_json()
    assert body["valid"] is False
    assert body["errors"] == ["Work experience IDs not found: 9999"]


def test_validate_complete_profile(auth_client, full_profile):
    body = auth_client.post('/api/resume-generation', json=generation_body()).get_json()
    assert body == {"valid": True, "errors": []}


def test_get_resume_data(auth_client, full_profile):
    data = auth_client.get('/api/resume-generation').get_json()
    assert data["profile"]["lastName"] == "Doe"
    assert len(data["skills"]) == 1


def test_html_rendering(auth_client, full_profile):
    response = auth_client.post('/api/resume-generation/html', json=generation_body())
    assert response.status_code == 200
    assert response.mimetype == 'text/html'
    html = response.get_data(as_text=True)
    assert "Jane Doe" in html
    assert "Senior Engineer" in html
    assert "Jan 2020 - Present" in html
    assert "Sep 2012 - Jun 2016" in html
    assert "Hackathon winner" in html
    # references were not selected
    assert "John Smith" not in html
    assert "box-shadow" not in html


def test_preview_adds_preview_styles(auth_client, full_profile):
    html = auth_client.post('/api/resume-generation/preview', json=generation_body()).get_data(as_text=True)
    assert "box-shadow" in html


def test_other_templates_render_with_professional(auth_client, full_profile):
    response = auth_client.post('/api/resume-generation/html', json=dict(generation_body(), template="creative"))
    assert response.status_code == 200
    assert "Senior Engineer" in response.get_data(as_text=True)


def test_excluded_section_is_not_rendered(auth_client, full_profile):
    html = auth_client.post('/api/resume-generation/html',
                            json=generation_body(includeWorkExperience=False)).get_data(as_text=True)
    assert "Senior Engineer" not in html


def test_pdf_requires_valid_selection(auth_client):
    response = auth_client.post('/api/resume-generation/pdf', json=generation_body())
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Resume validation failed"
    assert body["details"]


def test_pdf_download(auth_client, full_profile):
    response = auth_client.post('/api/resume-generation/pdf', json=generation_body())
    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    assert response.data.startswith(b'%PDF')
    assert 'filename="Jane_Doe_Resume.pdf"' in response.headers['Content-Disposition']


def test_invalid_template(auth_client):
    response = auth_client.post('/api/resume-generation/html', json=dict(generation_body(), template="fancy"))
    assert response.status_code == 400


# Tailored resumes for an application

def create_application(client, job_description="Python backend role"):
    return client.post('/api/applications', json={
        "company": "Acme Inc.",
        "position": "Backend Engineer",
        "jobDescription": job_description,
    }).get_json()


def test_application_resume_info(auth_client):
    application = create_application(auth_client)
    response = auth_client.get(f"/api/applications/{application['id']}/resume")
    body = response.get_json()
    assert body["hasJobDescription"] is True
    assert body["tailoredResume"] is None


def test_ai_selection_requires_job_description(auth_client, full_profile):
    application = create_application(auth_client, job_description=None)
    response = auth_client.post(f"/api/applications/{application['id']}/resume",
                                json={"title": "Tailored"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Job description is required for AI-powered resume generation"


def test_ai_tailored_resume_uses_fallback_when_unconfigured(auth_client, full_profile):
    application = create_application(auth_client)
    response = auth_client.post(f"/api/applications/{application['id']}/resume?format=preview",
                                json={"title": "Tailored"})
    assert response.status_code == 200
    body = response.get_json()
    assert body["aiSelection"]["overallStrategy"] == "Fallback selection - most recent content"
    assert body["application"] == {"id": application["id"], "company": "Acme Inc.",
                                   "position": "Backend Engineer"}
    assert "Senior Engineer" in body["html"]
    assert "box-shadow" in body["html"]


def test_ai_tailored_resume_keeps_selected_items(auth_client, ai_config, full_profile, monkeypatch):
    auth_client.post('/api/profile/work-experiences', json={
        "jobTitle": "Barista", "company": "Cafe", "startDate": "2010-01", "endDate": "2011-01"})
    replies = [
        '{"seniority": "senior", "skills": ["Python"]}',
        '{"selectedWorkExperiences": [%d], "selectedSkills": [%d], "overallStrategy": "Backend focus"}'
        % (full_profile["work-experiences"], full_profile["skills"]),
    ]
    monkeypatch.setattr(selection_module, 'generate_text', lambda prompt, config, **kwargs: replies.pop(0))

    application = create_application(auth_client)
    body = auth_client.post(f"/api/applications/{application['id']}/resume",
                            json={"title": "Tailored"}).get_json()
    assert body["aiSelection"]["overallStrategy"] == "Backend focus"
    assert "Senior Engineer" in body["html"]
    assert "Barista" not in body["html"]


def test_manual_overrides_replace_selection(auth_client, full_profile):
    application = create_application(auth_client, job_description=None)
    body = auth_client.post(f"/api/applications/{application['id']}/resume", json={
        "title": "Tailored",
        "useAISelection": False,
        "manualOverrides": {"workExperienceIds": []},
    }).get_json()
    assert body["aiSelection"] is None
    assert "Senior Engineer" not in body["html"]
    assert "State University" in body["html"]


def test_application_resume_pdf(auth_client, full_profile):
    application = create_application(auth_client)
    response = auth_client.post(f"/api/applications/{application['id']}/resume?format=pdf",
                                json={"title": "My Resume", "useAISelection": False})
    assert response.status_code == 200
    assert response.data.startswith(b'%PDF')
    assert 'filename="My_Resume_Acme_Inc_.pdf"' in response.headers['Content-Disposition']


def test_save_tailored_resume_creates_then_updates(auth_client):
    application = create_application(auth_client)
    url = f"/api/applications/{application['id']}/resume"

    first = auth_client.put(url, json={"title": "Tailored", "content": "{}"}).get_json()
    assert first["isNew"] is True
    assert first["resume"]["isTailored"] is True
    assert first["resume"]["jobApplicationId"] == application["id"]

    second = auth_client.put(url, json={"title": "Tailored v2", "content": "{\"a\": 1}"}).get_json()
    assert second["isNew"] is False
    assert second["resume"]["id"] == first["resume"]["id"]

    info = auth_client.get(url).get_json()
    assert info["tailoredResume"]["title"] == "Tailored v2"


def test_application_resume_unknown_application(auth_client):
    response = auth_client.post('/api/applications/missing/resume', json={"title": "x", "useAISelection": False})
    assert response.status_code == 404
