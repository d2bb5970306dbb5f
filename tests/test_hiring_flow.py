from api_helpers import create_job, create_org, signup_headers


def test_end_to_end_hiring_flow(client, db_session):
    """Recruiter sets up an organization and job; a candidate applies and is shortlisted."""
    recruiter = signup_headers(client, email="r@x.com", role="RECRUITER")
    org = create_org(client, recruiter, name="Acme", slug="acme").json()["organization"]
    assert [m["email"] for m in org["members"]] == ["r@x.com"]
    assert client.get("/auth/me", headers=recruiter).json()["user"]["organization_id"] == org["id"]

    job = create_job(client, recruiter, title="Engineer", description="...").json()["job"]
    assert job["status"] == "DRAFT"
    assert job["organization_id"] == org["id"]

    r = client.patch(f"/jobs/{job['id']}/status", headers=recruiter, json={"status": "ONGOING"})
    assert r.json()["job"]["status"] == "ONGOING"

    candidate = signup_headers(client, email="c@x.com")
    applied = client.post(f"/applications/jobs/{job['id']}", headers=candidate)
    assert applied.status_code == 201, applied.text
    application = applied.json()["application"]
    assert application["status"] == "APPLIED"
    assert client.post(f"/applications/jobs/{job['id']}", headers=candidate).status_code == 409

    r = client.patch(f"/applications/{application['id']}/status", headers=recruiter, json={"status": "SHORTLISTED"})
    assert r.status_code == 200, r.text
    assert r.json()["application"]["status"] == "SHORTLISTED"

    r2 = signup_headers(client, email="r2@x.com", role="RECRUITER")
    denied = client.patch(f"/applications/{application['id']}/status", headers=r2, json={"status": "REJECTED"})
    assert denied.status_code == 403

    from backend.app.models.application import Application

    stored = db_session.query(Application).filter(Application.id == application["id"]).one()
    assert stored.status == "SHORTLISTED"
