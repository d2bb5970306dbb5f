"""Small request helpers shared by the API tests."""

PASSWORD = "Testpass123!"


def register(client, *, email: str, role: str | None = None, password: str = PASSWORD, **extra):
    body = {"email": email, "password": password, **extra}
    if role is not None:
        body["role"] = role
    return client.post("/auth/register", json=body)


def login(client, *, email: str, password: str = PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup_headers(client, *, email: str, role: str | None = None, **extra) -> dict:
    r = register(client, email=email, role=role, **extra)
    assert r.status_code == 201, r.text
    return auth_headers(r.json()["access_token"])


def create_org(client, headers: dict, *, name: str = "Acme", slug: str = "acme", **extra):
    return client.post("/organizations", headers=headers, json={"name": name, "slug": slug, **extra})


def recruiter_with_org(client, *, email: str, slug: str) -> dict:
    headers = signup_headers(client, email=email, role="RECRUITER")
    r = create_org(client, headers, name=slug.title(), slug=slug)
    assert r.status_code == 201, r.text
    return headers


def create_job(client, headers: dict, **fields):
    body = {"title": "Engineer", "description": "Build and run things.", **fields}
    return client.post("/jobs", headers=headers, json=body)


def open_job(client, headers: dict, **fields) -> dict:
    r = create_job(client, headers, **fields)
    assert r.status_code == 201, r.text
    job = r.json()["job"]
    r = client.patch(f"/jobs/{job['id']}/status", headers=headers, json={"status": "ONGOING"})
    assert r.status_code == 200, r.text
    return r.json()["job"]
