from api_helpers import (
    create_job,
    open_job,
    recruiter_with_org,
    signup_headers,
)


def test_candidate_cannot_create_job(client):
    headers = signup_headers(client, email="cand@x.com")
    r = create_job(client, headers)
    assert r.status_code == 403, r.text


def test_recruiter_without_organization_cannot_create_job(client):
    headers = signup_headers(client, email="noorg@x.com", role="RECRUITER")
    r = create_job(client, headers)
    assert r.status_code == 403, r.text
    assert "organization" in r.json()["error"].lower()


def test_create_job_defaults(client):
    headers = recruiter_with_org(client, email="r@x.com", slug="acme")
    org_id = client.get("/auth/me", headers=headers).json()["user"]["organization_id"]

    r = create_job(client, headers, requirements=["Python", "  ", "SQL"])
    assert r.status_code == 201, r.text
    job = r.json()["job"]
    assert job["status"] == "DRAFT"
    assert job["visibility"] == "PUBLIC"
    assert job["organization_id"] == org_id
    assert job["requirements"] == ["Python", "SQL"]

    bare = create_job(client, headers).json()["job"]
    assert bare["requirements"] == []


def test_create_job_validation(client):
    headers = recruiter_with_org(client, email="v@x.com", slug="val")
    assert client.post("/jobs", headers=headers, json={"description": "x"}).status_code == 400
    assert create_job(client, headers, title="   ").status_code == 400
    assert create_job(client, headers, visibility="SECRET").status_code == 400


def test_job_organization_is_copied_at_creation(client, db_session):
    headers = recruiter_with_org(client, email="mover@x.com", slug="origin")
    job = create_job(client, headers).json()["job"]

    from backend.app.models.user import User

    user = db_session.query(User).filter(User.email == "mover@x.com").one()
    user.organization_id = None
    db_session.commit()

    r = client.get(f"/jobs/{job['id']}", headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["job"]["organization_id"] == job["organization_id"]
    assert client.get("/jobs/mine", headers=headers).json()["jobs"][0]["organization_id"] == job["organization_id"]


def test_ownership_enforced_on_update_status_delete(client):
    owner = recruiter_with_org(client, email="owner@x.com", slug="owners")
    other = recruiter_with_org(client, email="other@x.com", slug="others")
    job = create_job(client, owner).json()["job"]

    assert client.put(f"/jobs/{job['id']}", headers=other, json={"title": "Taken over"}).status_code == 403
    assert client.patch(f"/jobs/{job['id']}/status", headers=other, json={"status": "ONGOING"}).status_code == 403
    assert client.delete(f"/jobs/{job['id']}", headers=other).status_code == 403

    r = client.put(f"/jobs/{job['id']}", headers=owner, json={"title": "Senior Engineer", "visibility": "PRIVATE"})
    assert r.status_code == 200, r.text
    assert r.json()["job"]["title"] == "Senior Engineer"
    assert r.json()["job"]["visibility"] == "PRIVATE"
    assert client.patch(f"/jobs/{job['id']}/status", headers=owner, json={"status": "ONGOING"}).status_code == 200
    assert client.delete(f"/jobs/{job['id']}", headers=owner).status_code == 200
    assert client.get(f"/jobs/{job['id']}", headers=owner).status_code == 404


def test_same_org_recruiter_is_not_owner(client):
    owner = recruiter_with_org(client, email="lead@x.com", slug="shared")
    org_id = client.get("/auth/me", headers=owner).json()["user"]["organization_id"]
    colleague = signup_headers(client, email="mate@x.com", role="RECRUITER")
    client.post(f"/organizations/{org_id}/members", headers=owner, json={"email": "mate@x.com", "role": "RECRUITER"})

    job = create_job(client, owner).json()["job"]
    assert client.get(f"/jobs/{job['id']}", headers=colleague).status_code == 200
    assert client.put(f"/jobs/{job['id']}", headers=colleague, json={"title": "Nope"}).status_code == 403


def test_missing_job_not_found(client):
    headers = recruiter_with_org(client, email="nf@x.com", slug="nf")
    assert client.put("/jobs/9999", headers=headers, json={"title": "Ghost"}).status_code == 404
    assert client.patch("/jobs/9999/status", headers=headers, json={"status": "CLOSED"}).status_code == 404
    assert client.delete("/jobs/9999", headers=headers).status_code == 404
    assert client.get("/jobs/9999").status_code == 404


def test_status_transitions(client):
    headers = recruiter_with_org(client, email="st@x.com", slug="status")
    job = create_job(client, headers).json()["job"]
    url = f"/jobs/{job['id']}/status"

    assert client.patch(url, headers=headers, json={"status": "PAUSED"}).status_code == 400
    assert client.patch(url, headers=headers, json={"status": "ongoing"}).json()["job"]["status"] == "ONGOING"
    assert client.patch(url, headers=headers, json={"status": "DRAFT"}).status_code == 400
    assert client.patch(url, headers=headers, json={"status": "CLOSED"}).json()["job"]["status"] == "CLOSED"
    assert client.patch(url, headers=headers, json={"status": "ONGOING"}).status_code == 200
    # Status edits through the general update follow the same table.
    assert client.put(f"/jobs/{job['id']}", headers=headers, json={"status": "DRAFT"}).status_code == 400


def test_get_job_visibility(client):
    owner = recruiter_with_org(client, email="vis@x.com", slug="vis")
    outsider = signup_headers(client, email="outsider@x.com")
    draft = create_job(client, owner, title="Draft role").json()["job"]
    public = open_job(client, owner, title="Open role")
    private = open_job(client, owner, title="Hidden role", visibility="PRIVATE")

    assert client.get(f"/jobs/{public['id']}").status_code == 200
    assert client.get(f"/jobs/{draft['id']}").status_code == 404
    assert client.get(f"/jobs/{private['id']}", headers=outsider).status_code == 404

    r = client.get(f"/jobs/{private['id']}", headers=owner)
    assert r.status_code == 200, r.text
    job = r.json()["job"]
    assert job["recruiter"]["email"] == "vis@x.com"
    assert "password" not in job["recruiter"]
    assert job["organization"]["slug"] == "vis"


def test_listings(client):
    acme = recruiter_with_org(client, email="acme@x.com", slug="acme")
    globex = recruiter_with_org(client, email="globex@x.com", slug="globex")
    acme_org = client.get("/auth/me", headers=acme).json()["user"]["organization_id"]

    first = open_job(client, acme, title="First")
    create_job(client, acme, title="Draft")
    open_job(client, acme, title="Private", visibility="PRIVATE")
    last = open_job(client, acme, title="Last")
    open_job(client, globex, title="Globex job")

    mine = client.get("/jobs/mine", headers=acme).json()["jobs"]
    assert [j["title"] for j in mine] == ["Last", "Private", "Draft", "First"]

    org_jobs = client.get(f"/jobs/organization/{acme_org}", headers=acme)
    assert org_jobs.status_code == 200
    assert len(org_jobs.json()["jobs"]) == 4
    assert client.get(f"/jobs/organization/{acme_org}", headers=globex).status_code == 403
    assert client.get("/jobs/organization/9999", headers=acme).status_code == 404

    public = client.get("/jobs/public").json()["jobs"]
    assert [j["title"] for j in public] == ["Globex job", "Last", "First"]
    assert public[1]["organization"] == {"name": "Acme", "slug": "acme"}
    assert {j["id"] for j in public} >= {first["id"], last["id"]}


def test_list_mine_requires_recruiter(client):
    candidate = signup_headers(client, email="c@x.com")
    assert client.get("/jobs/mine", headers=candidate).status_code == 403
    assert client.get("/jobs/mine").status_code == 401
