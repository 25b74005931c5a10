import json
import sqlite3

import pytest

from services.resume_service import get_default_resume, get_resumes_count, update_resume


def create_resume(client, title, is_default=False):
    response = client.post('/api/resumes', json={
        "title": title,
        "content": json.dumps({"summary": f"{title} summary"}),
        "isDefault": is_default,
    })
    assert response.status_code == 201
    return response.get_json()


def test_create_default_unsets_previous_default(auth_client):
    first = create_resume(auth_client, "First", is_default=True)
    second = create_resume(auth_client, "Second", is_default=True)

    assert auth_client.get(f"/api/resumes/{first['id']}").get_json()["isDefault"] is False
    assert auth_client.get(f"/api/resumes/{second['id']}").get_json()["isDefault"] is True

    defaults = auth_client.get('/api/resumes?isDefault=true').get_json()
    assert [resume["id"] for resume in defaults] == [second["id"]]


def test_update_to_default_unsets_others(auth_client):
    first = create_resume(auth_client, "First", is_default=True)
    second = create_resume(auth_client, "Second")

    response = auth_client.put(f"/api/resumes/{second['id']}", json={"isDefault": True})
    assert response.get_json()["isDefault"] is True
    assert auth_client.get(f"/api/resumes/{first['id']}").get_json()["isDefault"] is False


def test_default_is_per_user(auth_client, other_client):
    mine = create_resume(auth_client, "Mine", is_default=True)
    create_resume(other_client, "Theirs", is_default=True)

    assert auth_client.get(f"/api/resumes/{mine['id']}").get_json()["isDefault"] is True


def test_resume_not_found(auth_client, other_client):
    resume = create_resume(auth_client, "Private")
    assert other_client.get(f"/api/resumes/{resume['id']}").status_code == 404
    assert other_client.put(f"/api/resumes/{resume['id']}", json={"title": "x"}).status_code == 404
    assert auth_client.delete('/api/resumes/does-not-exist').status_code == 404


def test_resume_requires_title_and_content(auth_client):
    response = auth_client.post('/api/resumes', json={"title": "", "content": "{}"})
    assert response.status_code == 400


def test_delete_resume(auth_client):
    resume = create_resume(auth_client, "Temporary")
    assert auth_client.delete(f"/api/resumes/{resume['id']}").status_code == 200
    assert auth_client.get(f"/api/resumes/{resume['id']}").status_code == 404


def test_service_helpers(app, auth_client):
    config = app.config['CONFIG']
    user_id = auth_client.user["id"]
    assert get_default_resume(user_id, config) is None

    create_resume(auth_client, "One")
    default = create_resume(auth_client, "Two", is_default=True)

    assert get_resumes_count(user_id, config) == 2
    assert get_default_resume(user_id, config)["id"] == default["id"]


def test_update_rejects_null_content(auth_client):
    resume = create_resume(auth_client, "Main")
    response = auth_client.put(f"/api/resumes/{resume['id']}", json={"content": None})
    assert response.status_code == 400
    assert auth_client.get(f"/api/resumes/{resume['id']}").get_json()["content"] == resume["content"]


def test_failed_write_releases_database_lock(app, auth_client):
    resume = create_resume(auth_client, "Main")
    with pytest.raises(sqlite3.IntegrityError):
        update_resume(resume['id'], auth_client.user["id"], {"content": None}, app.config['CONFIG'])

    response = auth_client.put(f"/api/resumes/{resume['id']}", json={"title": "Renamed"})
    assert response.status_code == 200
    assert response.get_json()["title"] == "Renamed"


def test_linked_application_must_belong_to_user(auth_client, other_client):
    response = auth_client.post('/api/resumes', json={
        "title": "Tailored", "content": "{}", "jobApplicationId": "no-such-application"})
    assert response.status_code == 404
    assert response.get_json() == {"error": "Application not found"}

    theirs = other_client.post('/api/applications', json={"company": "Acme", "position": "Dev"}).get_json()
    response = auth_client.post('/api/resumes', json={
        "title": "Tailored", "content": "{}", "jobApplicationId": theirs["id"]})
    assert response.status_code == 404

    resume = create_resume(auth_client, "Main")
    response = auth_client.put(f"/api/resumes/{resume['id']}", json={"jobApplicationId": theirs["id"]})
    assert response.status_code == 404
    assert auth_client.get(f"/api/resumes/{resume['id']}").get_json()["jobApplicationId"] is None
