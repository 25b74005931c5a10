def seed(client):
    client.post('/api/applications', json={"company": "Acme", "position": "Engineer"})
    client.post('/api/applications', json={"company": "Globex", "position": "Lead", "status": "interviewing"})
    client.post('/api/resumes', json={"title": "Main resume", "content": "{}"})
    client.post('/api/cover-letters', json={"title": "Acme letter", "content": "Hello", "isAiGenerated": True})


def test_stats(auth_client):
    seed(auth_client)
    stats = auth_client.get('/api/dashboard/stats').get_json()
    assert stats == {
        "totalApplications": 2,
        "totalResumes": 1,
        "totalCoverLetters": 1,
        "applicationsByStatus": {"applied": 1, "interviewing": 1, "offer": 0, "rejected": 0, "withdrawn": 0},
    }


def test_stats_empty(auth_client):
    stats = auth_client.get('/api/dashboard/stats').get_json()
    assert stats["totalApplications"] == 0
    assert set(stats["applicationsByStatus"].values()) == {0}


def test_activity_merges_sources_newest_first(auth_client):
    seed(auth_client)
    activity = auth_client.get('/api/dashboard/activity').get_json()

    assert len(activity) == 4
    assert [item["type"] for item in activity] == ["cover_letter", "resume", "application", "application"]
    assert activity[0]["description"] == "Generated AI cover letter: Acme letter"
    assert activity[1]["description"] == "Created resume: Main resume"
    assert activity[2]["title"] == "Lead at Globex"
    assert {item["action"] for item in activity} == {"created"}
    created = [item["createdAt"] for item in activity]
    assert created == sorted(created, reverse=True)


def test_activity_type_and_limit(auth_client):
    seed(auth_client)
    applications = auth_client.get('/api/dashboard/activity?type=application&limit=1').get_json()
    assert len(applications) == 1
    assert applications[0]["description"] == "Applied for Lead position"


def test_activity_query_validation(auth_client):
    assert auth_client.get('/api/dashboard/activity?limit=51').status_code == 400
    assert auth_client.get('/api/dashboard/activity?type=profile').status_code == 400


def test_activity_empty(auth_client):
    assert auth_client.get('/api/dashboard/activity').get_json() == []


def test_activity_offset(auth_client):
    seed(auth_client)
    everything = auth_client.get('/api/dashboard/activity').get_json()

    page = auth_client.get('/api/dashboard/activity?limit=2&offset=1').get_json()
    assert [item["id"] for item in page] == [item["id"] for item in everything[1:3]]
    assert auth_client.get('/api/dashboard/activity?offset=4').get_json() == []
    assert auth_client.get('/api/dashboard/activity?offset=-1').status_code == 400
