TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"


def register(client, email="a@x.com", password="pw", full_name="A"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "fullName": full_name},
    )


def login(client, email="a@x.com", password="pw"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def auth_headers(client, email="a@x.com", password="pw", full_name="A"):
    r = register(client, email, password, full_name)
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


def create_task(client, headers, title="t", **fields):
    r = client.post("/api/tasks", json={"title": title, **fields}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()
