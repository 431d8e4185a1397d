"""HTTP tests for the task and stats endpoints, backed by FakeTaskStore."""

from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from task_planner.main import create_app

MISSING_ID = str(ObjectId())


def test_lifespan_opens_and_closes_store(settings, store):
    with TestClient(create_app(settings, store=store)):
        assert store.opened
    assert store.closed


def test_create_then_list_round_trip(client):
    response = client.post("/api/tasks", json={"title": "Buy milk", "priority": 2})
    assert response.status_code == 201
    created = response.json()
    assert created["id"]
    assert created["createdAt"]

    tasks = client.get("/api/tasks").json()
    assert len(tasks) == 1
    assert tasks[0]["title"] == "Buy milk"
    assert tasks[0]["priority"] == 2
    assert tasks[0]["createdAt"] == created["createdAt"]


def test_create_applies_defaults(create_task):
    task = create_task(title="Buy milk")
    assert task["priority"] == 2
    assert task["taskType"] == "personal"
    assert task["createdAt"] == task["updatedAt"]


def test_create_keeps_extra_fields(create_task, client):
    created = create_task(
        title="Buy groceries", store="Whole Foods", items=["milk", "eggs"], budget=75
    )
    assert created["store"] == "Whole Foods"
    assert created["items"] == ["milk", "eggs"]

    fetched = client.get(f"/api/tasks/{created['id']}").json()
    assert fetched["budget"] == 75


def test_create_normalizes_task_type(create_task):
    assert create_task(title="Run 5k", taskType="Health")["taskType"] == "health"


def test_create_invalid_payload_returns_400(client, store):
    response = client.post("/api/tasks", json={"title": "ab"})
    assert response.status_code == 400
    assert response.json() == {
        "error": '"title" length must be at least 3 characters long'
    }
    assert store.documents == {}


def test_create_with_malformed_body_returns_400(client):
    response = client.post(
        "/api/tasks", content="not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_list_filters_by_category_and_priority(create_task, client):
    create_task(title="Write report", category="work", priority=4)
    create_task(title="Email client", category="work", priority=2)
    create_task(title="Clean garage", category="home", priority=4)

    tasks = client.get("/api/tasks", params={"category": "work", "priority": "4"}).json()
    assert [task["title"] for task in tasks] == ["Write report"]


def test_list_search_matches_title_case_insensitively(create_task, client):
    create_task(title="Buy milk")
    create_task(title="Call mom")

    tasks = client.get("/api/tasks", params={"search": "MILK"}).json()
    assert [task["title"] for task in tasks] == ["Buy milk"]


def test_list_with_non_numeric_priority_returns_400(client):
    response = client.get("/api/tasks", params={"priority": "high"})
    assert response.status_code == 400
    assert response.json() == {"error": '"priority" must be an integer'}


def test_get_unknown_task_returns_404(client):
    response = client.get(f"/api/tasks/{MISSING_ID}")
    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}


def test_update_merges_fields(create_task, client):
    created = create_task(title="Buy milk", priority=2, store="Corner shop")

    response = client.put(
        f"/api/tasks/{created['id']}", json={"title": "Buy oat milk", "priority": 5}
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Buy oat milk"
    assert updated["priority"] == 5
    assert updated["store"] == "Corner shop"
    assert updated["taskType"] == "personal"


def test_update_keeps_created_at(create_task, client):
    created = create_task(title="Buy milk")

    updated = client.put(
        f"/api/tasks/{created['id']}",
        json={"title": "Buy milk", "createdAt": "1999-01-01T00:00:00Z"},
    ).json()
    assert updated["createdAt"] == created["createdAt"]


def test_update_invalid_payload_does_not_mutate(create_task, client, store):
    created = create_task(title="Buy milk", priority=2)

    response = client.put(
        f"/api/tasks/{created['id']}", json={"title": "Buy milk", "priority": 9}
    )
    assert response.status_code == 400
    assert client.get(f"/api/tasks/{created['id']}").json()["priority"] == 2


def test_update_unknown_task_returns_404_without_creating(client, store):
    response = client.put(f"/api/tasks/{MISSING_ID}", json={"title": "Ghost task"})
    assert response.status_code == 404
    assert store.documents == {}


def test_update_with_malformed_id_returns_404(client):
    response = client.put("/api/tasks/not-an-id", json={"title": "Ghost task"})
    assert response.status_code == 404


def test_delete_removes_task(create_task, client):
    created = create_task(title="Buy milk")

    response = client.delete(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}
    assert client.get("/api/tasks").json() == []


def test_delete_unknown_task_returns_404(client):
    assert client.delete(f"/api/tasks/{MISSING_ID}").status_code == 404
    assert client.delete("/api/tasks/not-an-id").status_code == 404


def test_stats_on_empty_store(client):
    assert client.get("/api/stats").json() == {
        "totalTasks": 0,
        "avgPriority": 0,
        "highPriorityCount": 0,
        "categoryStats": {},
    }


def test_stats_over_all_tasks(create_task, client):
    for priority, category in [(5, "work"), (3, "work"), (1, None), (4, "home")]:
        if category:
            create_task(title=f"Task {priority}", priority=priority, category=category)
        else:
            create_task(title=f"Task {priority}", priority=priority)

    assert client.get("/api/stats").json() == {
        "totalTasks": 4,
        "avgPriority": 3.3,
        "highPriorityCount": 2,
        "categoryStats": {"work": 2, "home": 1, "Uncategorized": 1},
    }


def test_store_failure_returns_generic_500(client, store):
    store.fail_with = ServerSelectionTimeoutError("localhost:27017: connection refused")

    response = client.get("/api/tasks")
    assert response.status_code == 500
    assert response.json() == {"error": "Server error getting tasks"}

    response = client.get("/api/stats")
    assert response.status_code == 500
    assert response.json() == {"error": "Server error getting statistics"}


def test_create_with_oversized_extra_integer_returns_400(client, store):
    response = client.post("/api/tasks", json={"title": "Buy milk", "budget": 2**64})
    assert response.status_code == 400
    assert response.json() == {"error": '"budget" contains a number that is too large'}
    assert store.documents == {}


def test_update_with_dotted_extra_key_returns_400(create_task, client):
    created = create_task(title="Buy milk")

    response = client.put(
        f"/api/tasks/{created['id']}", json={"title": "Buy milk", "meta.x": 1}
    )
    assert response.status_code == 400
    assert response.json() == {"error": '"meta.x" is not allowed'}
    assert "meta.x" not in client.get(f"/api/tasks/{created['id']}").json()
