from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from todo_app.services import TaskValidationError, task_service


def _create(client, title="Test Todo", **extra):
    response = client.post("/api/createTask", json={"title": title, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def _ts(value):
    # fromisoformat only accepts a trailing "Z" from Python 3.11
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_task(client):
    data = _create(client, "Buy milk")

    assert data["title"] == "Buy milk"
    assert data["description"] is None
    assert data["completed"] is False
    assert isinstance(data["id"], int)
    assert data["created_at"] == data["updated_at"]


def test_create_task_with_description(client):
    data = _create(client, "Buy milk", description="Get 2% milk")

    assert data["description"] == "Get 2% milk"


def test_create_task_rejects_empty_title(client):
    response = client.post("/api/createTask", json={"title": ""})

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "title"]
    assert client.get("/api/listTasks").json() == []


def test_create_task_rejects_missing_title(client):
    response = client.post("/api/createTask", json={"description": "no title"})

    assert response.status_code == 422
    assert "title" in response.json()["detail"][0]["loc"]
    assert client.get("/api/listTasks").json() == []


def test_list_tasks_empty(client):
    response = client.get("/api/listTasks")

    assert response.status_code == 200
    assert response.json() == []


def test_list_tasks_in_creation_order(client):
    for title in ("A", "B", "C"):
        _create(client, title)

    assert [t["title"] for t in client.get("/api/listTasks").json()] == ["A", "B", "C"]


def test_toggle_task(client):
    task = _create(client, description="A todo for testing")

    response = client.post("/api/toggleTask", json={"id": task["id"], "completed": True})

    assert response.status_code == 200
    data = response.json()
    assert data["completed"] is True
    assert data["description"] == "A todo for testing"
    assert data["created_at"] == task["created_at"]
    assert _ts(data["updated_at"]) > _ts(task["updated_at"])


def test_toggle_task_requires_completed(client):
    task = _create(client)

    response = client.post("/api/toggleTask", json={"id": task["id"]})

    assert response.status_code == 422


def test_toggle_task_not_found(client):
    response = client.post("/api/toggleTask", json={"id": 999, "completed": True})

    assert response.status_code == 404
    assert "999" in response.json()["detail"]
    assert client.get("/api/listTasks").json() == []


def test_update_task_partial(client):
    task = _create(client, "A", description="d")

    response = client.post("/api/updateTask", json={"id": task["id"], "title": "B"})

    assert response.status_code == 200
    data = response.json()
    assert (data["title"], data["description"], data["completed"]) == ("B", "d", False)
    assert _ts(data["updated_at"]) > _ts(task["updated_at"])


def test_update_task_clears_description(client):
    task = _create(client, "A", description="d")

    data = client.post("/api/updateTask", json={"id": task["id"], "description": None}).json()

    assert data["description"] is None
    assert data["title"] == "A"


def test_update_task_omitted_description_is_kept(client):
    task = _create(client, "A", description="d")

    data = client.post("/api/updateTask", json={"id": task["id"], "completed": True}).json()

    assert data["description"] == "d"
    assert data["completed"] is True


def test_update_task_rejects_empty_title(client):
    task = _create(client, "A")

    response = client.post("/api/updateTask", json={"id": task["id"], "title": ""})

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "title"]
    assert client.get("/api/listTasks").json()[0]["title"] == "A"


def test_update_task_rejects_null_title(client):
    task = _create(client, "A")

    response = client.post("/api/updateTask", json={"id": task["id"], "title": None})

    assert response.status_code == 422


def test_update_task_not_found(client):
    response = client.post("/api/updateTask", json={"id": 999, "title": "B"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Task with id 999 not found"


def test_delete_task_twice(client):
    task = _create(client)

    first = client.post("/api/deleteTask", json={"id": task["id"]})
    second = client.post("/api/deleteTask", json={"id": task["id"]})

    assert first.status_code == 200
    assert first.json() == {"success": True}
    assert second.json() == {"success": True}
    assert client.get("/api/listTasks").json() == []


def test_delete_missing_task(client):
    response = client.post("/api/deleteTask", json={"id": 999})

    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_store_failure_returns_500(client):
    failure = OperationalError("SELECT", {}, Exception("unable to open database file"))

    with patch.object(task_service, "list_tasks", side_effect=failure):
        response = client.get("/api/listTasks")

    assert response.status_code == 500
    assert response.json() == {"detail": "Task store unavailable"}


def test_timestamps_are_utc(client):
    data = _create(client)

    assert _ts(data["created_at"]).utcoffset() == timedelta(0)
    assert _ts(data["updated_at"]).utcoffset() == timedelta(0)


def test_update_task_not_found_leaves_store_unchanged(client):
    task = _create(client, "A", description="d")

    response = client.post("/api/updateTask", json={"id": 999, "title": "B", "completed": True})

    assert response.status_code == 404
    assert client.get("/api/listTasks").json() == [task]


@pytest.mark.parametrize("task_id", [2**63, -(2**63) - 1])
def test_out_of_range_ids_are_rejected(client, task_id):
    toggled = client.post("/api/toggleTask", json={"id": task_id, "completed": True})
    updated = client.post("/api/updateTask", json={"id": task_id, "title": "B"})
    deleted = client.post("/api/deleteTask", json={"id": task_id})

    for response in (toggled, updated, deleted):
        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"] == ["body", "id"]


def test_largest_id_is_not_found(client):
    response = client.post("/api/toggleTask", json={"id": 2**63 - 1, "completed": True})

    assert response.status_code == 404
    assert client.post("/api/deleteTask", json={"id": 2**63 - 1}).json() == {"success": True}


def test_service_validation_error_maps_to_422(client):
    error = TaskValidationError("title", "Title must not be empty")

    with patch.object(task_service, "create_task", side_effect=error):
        response = client.post("/api/createTask", json={"title": "A"})

    assert response.status_code == 422
    assert response.json() == {
        "detail": [{"loc": ["body", "title"], "msg": "Title must not be empty", "type": "value_error"}]
    }
