import requests

BASE_URL = "http://127.0.0.1:8000"


class ApiError(Exception):
    def __init__(self, status_code: int, body):
        self.status_code = status_code
        self.body = body
        code = body.get("error", {}).get("code") if isinstance(body, dict) else None
        super().__init__(f"HTTP {status_code}: {code or body}")


class TaskManagerClient:
    # session: anything with the requests.Session interface, e.g. TestClient
    def __init__(self, base_url: str = BASE_URL, session=None, token: str | None = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.token = token

    def _request(self, method: str, path: str, json=None):
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        r = self.session.request(method, f"{self.base_url}{path}", json=json, headers=headers)
        if r.status_code >= 400:
            try:
                body = r.json()
            except ValueError:
                body = r.text
            raise ApiError(r.status_code, body)
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    # Auth

    def register(self, email, password, full_name):
        data = self._request(
            "POST", "/api/auth/register", {"email": email, "password": password, "fullName": full_name}
        )
        self.token = data["token"]
        return data

    def login(self, email, password):
        data = self._request("POST", "/api/auth/login", {"email": email, "password": password})
        self.token = data["token"]
        return data

    # Tasks

    def create_task(self, title, description=None, status=None, priority=None, due_date=None):
        payload = {"title": title, "description": description, "dueDate": due_date}
        if status is not None:
            payload["status"] = status
        if priority is not None:
            payload["priority"] = priority
        return self._request("POST", "/api/tasks", payload)

    def get_tasks(self):
        return self._request("GET", "/api/tasks")

    def get_task(self, task_id):
        return self._request("GET", f"/api/tasks/{task_id}")

    def get_tasks_by_status(self, status):
        return self._request("GET", f"/api/tasks/status/{status}")

    def get_tasks_by_priority(self, priority):
        return self._request("GET", f"/api/tasks/priority/{priority}")

    def update_task(self, task_id, title, description=None, status=None, priority=None, due_date=None):
        payload = {"title": title, "description": description, "dueDate": due_date}
        if status is not None:
            payload["status"] = status
        if priority is not None:
            payload["priority"] = priority
        return self._request("PUT", f"/api/tasks/{task_id}", payload)

    def delete_task(self, task_id):
        self._request("DELETE", f"/api/tasks/{task_id}")


if __name__ == "__main__":
    # Smoke run against a live server
    import uuid

    client = TaskManagerClient()
    email = f"smoke-{uuid.uuid4().hex[:8]}@example.com"
    print("REGISTER:", client.register(email, "smoke-password", "Smoke Test")["email"])

    id1 = client.create_task("Task A", "Desc A", priority="HIGH", due_date="2025-09-25T09:00:00")["id"]
    id2 = client.create_task("Task B", "Desc B", priority="LOW")["id"]
    client.create_task("Task C", "Desc C", status="IN_PROGRESS")

    print("GET ALL:")
    for task in client.get_tasks():
        print(task)

    print("HIGH PRIORITY:", client.get_tasks_by_priority("HIGH"))
    print("UPDATE:", client.update_task(id1, "Task A", "Done now", status="DONE"))
    print("DONE:", client.get_tasks_by_status("DONE"))

    client.delete_task(id2)
    try:
        client.get_task(id2)
    except ApiError as e:
        print("DELETED:", e.status_code)
