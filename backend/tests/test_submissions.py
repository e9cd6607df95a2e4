"""Tests for POST/PUT /api/jobs/{id}/submissions"""


def test_post_submission_appends(client, create_job, freelancer):
    job = create_job()
    body = {"freelancerId": str(freelancer.id), "githubLink": "https://github.com/x/y"}
    r1 = client.post(f"/api/jobs/{job['id']}/submissions", json=body)
    r2 = client.post(f"/api/jobs/{job['id']}/submissions", json={**body, "description": "v2"})
    assert r1.status_code == 201 and r2.status_code == 201
    assert r1.json()["submission"]["id"] != r2.json()["submission"]["id"]
    assert r1.json()["jobId"] == job["id"]

    stored = client.get(f"/api/jobs/{job['id']}").json()
    assert len(stored["submissions"]) == 2


def test_put_submission_is_idempotent_per_freelancer(client, create_job, freelancer):
    """Two PUTs with different descriptions leave exactly one entry with the latest description."""
    job = create_job()
    url = f"/api/jobs/{job['id']}/submissions"
    r1 = client.put(url, json={"freelancerId": str(freelancer.id), "description": "first"})
    assert r1.status_code == 201
    r2 = client.put(url, json={"freelancerId": str(freelancer.id), "description": "second"})
    assert r2.status_code == 200
    assert r2.json()["submission"]["id"] == r1.json()["submission"]["id"]

    subs = client.get(f"/api/jobs/{job['id']}").json()["submissions"]
    mine = [s for s in subs if s["freelancerId"] == str(freelancer.id)]
    assert len(mine) == 1
    assert mine[0]["description"] == "second"


def test_put_submission_keeps_unsent_fields(client, create_job, freelancer):
    job = create_job()
    url = f"/api/jobs/{job['id']}/submissions"
    client.put(url, json={"freelancerId": str(freelancer.id), "deployLink": "https://app.example.com"})
    r = client.put(url, json={"freelancerId": str(freelancer.id), "githubLink": "https://github.com/x/y"})
    sub = r.json()["submission"]
    assert sub["deployLink"] == "https://app.example.com"
    assert sub["githubLink"] == "https://github.com/x/y"


def test_put_submission_separate_per_freelancer(client, create_job, freelancer, second_freelancer):
    job = create_job()
    url = f"/api/jobs/{job['id']}/submissions"
    client.put(url, json={"freelancerId": str(freelancer.id), "description": "a"})
    client.put(url, json={"freelancerId": str(second_freelancer.id), "description": "b"})
    assert len(client.get(f"/api/jobs/{job['id']}").json()["submissions"]) == 2


def test_submission_requires_freelancer(client, create_job):
    job = create_job()
    r = client.post(f"/api/jobs/{job['id']}/submissions", json={"description": "x"})
    assert r.status_code == 400
    assert r.json() == {"error": "freelancerId is required"}


def test_submission_unknown_job(client, freelancer):
    r = client.put("/api/jobs/999/submissions", json={"freelancerId": str(freelancer.id)})
    assert r.status_code == 404
    r = client.post("/api/jobs/abc/submissions", json={"freelancerId": str(freelancer.id)})
    assert r.status_code == 400
