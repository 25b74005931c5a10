import pytest

from app import create_app


@pytest.fixture
def config(tmp_path):
    return {
        "db_path": str(tmp_path / "test.db"),
        "ai_provider": "groq",
        "groq_api_key": "",
        "OpenAI_API_KEY": "",
        "ollama_model": "",
        "log_level": "WARNING",
        "log_file": None,
    }


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def ai_config(app):
    """Mark the AI provider as configured; tests patch the actual call."""
    app.config['CONFIG']['groq_api_key'] = 'test-key'
    return app.config['CONFIG']


@pytest.fixture
def client(app):
    return app.test_client()


def sign_up(client, email="jane@example.com", password="password123", name="Jane Doe"):
    response = client.post('/api/auth/sign-up', json={
        "email": email,
        "password": password,
        "name": name,
    })
    assert response.status_code == 201
    return response.get_json()["user"]


@pytest.fixture
def auth_client(client):
    """A test client holding a live session cookie."""
    client.user = sign_up(client)
    return client


@pytest.fixture
def other_client(app):
    """A second, independent user."""
    other = app.test_client()
    other.user = sign_up(other, email="other@example.com")
    return other


@pytest.fixture
def full_profile(auth_client):
    """Profile with one entry in each section; returns the created ids."""
    auth_client.post('/api/profile', json={
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
        "phone": "+1 555 123 4567",
        "city": "Austin",
        "country": "USA",
        "professionalSummary": "Backend engineer focused on data platforms.",
    })
    ids = {}
    entries = {
        "work-experiences": {"jobTitle": "Senior Engineer", "company": "Acme",
                             "startDate": "2020-01", "isCurrent": True,
                             "description": "Built APIs", "technologies": "Python, Flask"},
        "education": {"degree": "BSc", "institution": "State University",
                      "fieldOfStudy": "Computer Science", "startDate": "2012-09", "endDate": "2016-06"},
        "skills": {"name": "Python", "category": "technical", "proficiencyLevel": "expert"},
        "projects": {"title": "Job Tracker", "description": "Side project", "isOngoing": True},
        "certifications": {"name": "AWS SA", "issuingOrganization": "Amazon", "issueDate": "2021-05"},
        "achievements": {"title": "Hackathon winner", "date": "2019-11"},
        "references": {"name": "John Smith", "relationship": "manager"},
    }
    for kind, body in entries.items():
        response = auth_client.post(f'/api/profile/{kind}', json=body)
        assert response.status_code == 201
        ids[kind] = response.get_json()["id"]
    return ids
