def test_profile_lifecycle(auth_client):
    response = auth_client.get('/api/profile')
    assert response.status_code == 200
    assert response.get_json() is None

    response = auth_client.put('/api/profile', json={"city": "Austin"})
    assert response.status_code == 404

    response = auth_client.post('/api/profile', json={"firstName": "Jane", "lastName": "Doe"})
    assert response.status_code == 201
    assert response.get_json()["firstName"] == "Jane"

    response = auth_client.post('/api/profile', json={"firstName": "Again"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Profile already exists. Use PUT to update."

    response = auth_client.put('/api/profile', json={"city": "Austin"})
    profile = response.get_json()
    assert profile["city"] == "Austin"
    # fields that were not sent are untouched
    assert profile["firstName"] == "Jane"


def test_profile_rejects_invalid_urls(auth_client):
    response = auth_client.post('/api/profile', json={"linkedinUrl": "linkedin.com/in/jane"})
    assert response.status_code == 400

    response = auth_client.post('/api/profile', json={"linkedinUrl": "", "githubUrl": None})
    assert response.status_code == 201


def test_work_experience_crud(auth_client):
    response = auth_client.post('/api/profile/work-experiences', json={
        "jobTitle": "Engineer",
        "company": "Acme",
        "startDate": "2021-03",
        "isCurrent": True,
    })
    assert response.status_code == 201
    entry = response.get_json()
    assert isinstance(entry["id"], int)
    assert entry["isCurrent"] is True
    assert entry["displayOrder"] == 0

    entry_url = f"/api/profile/work-experiences/{entry['id']}"
    response = auth_client.put(entry_url, json={"company": "Acme Corp"})
    assert response.get_json()["company"] == "Acme Corp"
    assert response.get_json()["jobTitle"] == "Engineer"

    assert auth_client.get(entry_url).status_code == 200
    assert auth_client.delete(entry_url).status_code == 200
    assert auth_client.get(entry_url).status_code == 404
    assert auth_client.delete(entry_url).status_code == 404


def test_work_experience_date_format(auth_client):
    response = auth_client.post('/api/profile/work-experiences', json={
        "jobTitle": "Engineer",
        "company": "Acme",
        "startDate": "March 2021",
    })
    assert response.status_code == 400


def test_skill_enums_and_category_filter(auth_client):
    assert auth_client.post('/api/profile/skills', json={"name": "Go", "category": "magic"}).status_code == 400
    assert auth_client.post('/api/profile/skills', json={
        "name": "Python", "category": "technical", "yearsOfExperience": -1}).status_code == 400

    auth_client.post('/api/profile/skills', json={"name": "Python", "category": "technical"})
    auth_client.post('/api/profile/skills', json={"name": "Public speaking", "category": "soft"})

    response = auth_client.get('/api/profile/skills?category=soft')
    assert [skill["name"] for skill in response.get_json()] == ["Public speaking"]


def test_unknown_section_is_404(auth_client):
    assert auth_client.get('/api/profile/hobbies').status_code == 404


def test_entries_are_private(auth_client, other_client):
    entry = auth_client.post('/api/profile/education', json={
        "degree": "BSc", "institution": "State University"}).get_json()

    assert other_client.get(f"/api/profile/education/{entry['id']}").status_code == 404
    assert other_client.get('/api/profile/education').get_json() == []


def test_bulk_reorder(auth_client, other_client):
    first = auth_client.post('/api/profile/projects', json={"title": "First"}).get_json()
    second = auth_client.post('/api/profile/projects', json={"title": "Second", "displayOrder": 1}).get_json()

    response = auth_client.put('/api/profile/projects/order', json={"items": [
        {"id": first["id"], "displayOrder": 5},
        {"id": second["id"], "displayOrder": 0},
    ]})
    assert response.get_json() == {"success": True, "updated": 2}

    titles = [project["title"] for project in auth_client.get('/api/profile/projects').get_json()]
    assert titles == ["Second", "First"]

    # another user's reorder touches nothing
    response = other_client.put('/api/profile/projects/order', json={"items": [
        {"id": first["id"], "displayOrder": 0},
    ]})
    assert response.get_json()["updated"] == 0


def test_list_query_validation(auth_client):
    assert auth_client.get('/api/profile/skills?limit=0').status_code == 400
    assert auth_client.get('/api/profile/skills?orderBy=name').status_code == 400
    assert auth_client.get('/api/profile/skills?limit=5&order=desc').status_code == 200


def test_full_profile(auth_client, full_profile):
    data = auth_client.get('/api/profile/full').get_json()
    assert data["profile"]["firstName"] == "Jane"
    assert [exp["id"] for exp in data["workExperiences"]] == [full_profile["work-experiences"]]
    for key in ("education", "skills", "projects", "certifications", "achievements", "references"):
        assert len(data[key]) == 1


def test_update_rejects_null_for_required_fields(auth_client):
    entry = auth_client.post('/api/profile/work-experiences', json={
        "jobTitle": "Engineer", "company": "Acme", "startDate": "2021-03"}).get_json()
    entry_url = f"/api/profile/work-experiences/{entry['id']}"

    response = auth_client.put(entry_url, json={"jobTitle": None})
    assert response.status_code == 400
    assert response.get_json()["details"][0]["loc"] == ["jobTitle"]
    assert auth_client.put(entry_url, json={"isCurrent": None}).status_code == 400

    # nullable columns can still be cleared
    response = auth_client.put(entry_url, json={"location": None, "company": "Globex"})
    assert response.status_code == 200
    assert response.get_json()["jobTitle"] == "Engineer"
    assert response.get_json()["company"] == "Globex"
