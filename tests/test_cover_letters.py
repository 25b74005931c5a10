import io

from docx import Document

import services.cover_letter_service as cover_letter_service
from utils.errors import AIServiceError

GENERATE_BODY = {
    "company": "Acme",
    "position": "Backend Engineer",
    "jobDescription": "Build APIs in Python",
    "resumeContent": {"summary": "Engineer with 8 years of experience"},
    "applicantName": "Jane Doe",
}


def create_letter(client, **fields):
    body = {"title": "Acme letter", "content": "Dear hiring manager,\n\nI am excited to apply."}
    body.update(fields)
    response = client.post('/api/cover-letters', json=body)
    assert response.status_code == 201
    return response.get_json()


def test_cover_letter_crud(auth_client):
    letter = create_letter(auth_client)
    assert letter["isAiGenerated"] is False

    url = f"/api/cover-letters/{letter['id']}"
    response = auth_client.put(url, json={"title": "Renamed"})
    assert response.get_json()["title"] == "Renamed"
    assert response.get_json()["content"] == letter["content"]

    assert auth_client.delete(url).status_code == 200
    assert auth_client.get(url).status_code == 404
    assert auth_client.delete(url).status_code == 404


def test_list_filters(auth_client):
    create_letter(auth_client, title="Manual")
    create_letter(auth_client, title="Generated", isAiGenerated=True)

    generated = auth_client.get('/api/cover-letters?isAiGenerated=true').get_json()
    assert [letter["title"] for letter in generated] == ["Generated"]
    assert len(auth_client.get('/api/cover-letters').get_json()) == 2


def test_generate_requires_configured_provider(auth_client):
    response = auth_client.post('/api/cover-letters/generate', json=GENERATE_BODY)
    assert response.status_code == 503
    assert response.get_json() == {"error": "AI service not configured. Please contact administrator."}


def test_generate_post_processes_output(auth_client, ai_config, monkeypatch):
    prompts = []

    def fake_generate_text(prompt, config, temperature=0.7, max_tokens=1000):
        prompts.append(prompt)
        return "Dear Hiring Manager \u2014 hello.\n\n• Improved uptime by 90 %\n\nSincerely,\nJane Doe"

    monkeypatch.setattr(cover_letter_service, 'generate_text', fake_generate_text)

    response = auth_client.post('/api/cover-letters/generate', json=GENERATE_BODY)
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert "\u2014" not in body["coverLetter"]
    assert "Improved uptime by 90%" in body["coverLetter"]
    assert "•" not in body["coverLetter"]

    assert "Acme" in prompts[0]
    assert "Engineer with 8 years of experience" in prompts[0]


def test_generate_provider_failure(auth_client, ai_config, monkeypatch):
    def failing_generate_text(prompt, config, temperature=0.7, max_tokens=1000):
        raise AIServiceError("Groq API error: 500")

    monkeypatch.setattr(cover_letter_service, 'generate_text', failing_generate_text)

    response = auth_client.post('/api/cover-letters/generate', json=GENERATE_BODY)
    assert response.status_code == 500
    assert response.get_json()["error"] == "Failed to generate cover letter. Please try again."


def test_generate_validation(auth_client):
    response = auth_client.post('/api/cover-letters/generate', json={"company": "Acme"})
    assert response.status_code == 400


def test_pdf_export(auth_client):
    letter = create_letter(auth_client, title="Acme / Backend")
    response = auth_client.get(f"/api/cover-letters/{letter['id']}/pdf")
    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    assert response.data.startswith(b'%PDF')
    assert 'Acme___Backend.pdf' in response.headers['Content-Disposition']


def test_docx_export(auth_client):
    letter = create_letter(auth_client)
    response = auth_client.get(f"/api/cover-letters/{letter['id']}/docx")
    assert response.status_code == 200

    document = Document(io.BytesIO(response.data))
    text = "\n".join(paragraph.text for paragraph in document.paragraphs)
    assert "I am excited to apply." in text


def test_cover_letters_count(app, auth_client):
    create_letter(auth_client)
    create_letter(auth_client, title="Second")
    assert cover_letter_service.get_cover_letters_count(auth_client.user["id"], app.config['CONFIG']) == 2


def test_linked_records_must_belong_to_user(auth_client, other_client):
    body = {"title": "Acme letter", "content": "Hello"}

    response = auth_client.post('/api/cover-letters', json=dict(body, jobApplicationId="no-such-application"))
    assert response.status_code == 404
    assert response.get_json() == {"error": "Application not found"}
    assert auth_client.post('/api/cover-letters', json=dict(body, resumeId="no-such-resume")).status_code == 404

    their_application = other_client.post('/api/applications', json={"company": "Acme", "position": "Dev"})
    their_resume = other_client.post('/api/resumes', json={"title": "Theirs", "content": "{}"})
    response = auth_client.post('/api/cover-letters', json=dict(
        body, jobApplicationId=their_application.get_json()["id"]))
    assert response.status_code == 404
    response = auth_client.post('/api/cover-letters', json=dict(body, resumeId=their_resume.get_json()["id"]))
    assert response.status_code == 404

    letter = create_letter(auth_client)
    response = auth_client.put(f"/api/cover-letters/{letter['id']}", json={
        "resumeId": their_resume.get_json()["id"]})
    assert response.status_code == 404
    assert auth_client.get('/api/cover-letters').get_json()[0]["resumeId"] is None


def test_create_with_own_links(auth_client):
    application = auth_client.post('/api/applications', json={"company": "Acme", "position": "Dev"}).get_json()
    resume = auth_client.post('/api/resumes', json={"title": "Main", "content": "{}"}).get_json()

    letter = create_letter(auth_client, jobApplicationId=application["id"], resumeId=resume["id"])
    assert letter["jobApplicationId"] == application["id"]
    assert letter["resumeId"] == resume["id"]
