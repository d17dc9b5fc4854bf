"""
Tests for the FastAPI planning endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from src.api import main
from src.api.main import app
from src.task_planner import project_store


@pytest.fixture
def client():
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def stored_solar(solar_project):
    project_store.save_project(solar_project)
    return solar_project


class TestProjects:
    """Test project CRUD endpoints."""

    def test_health(self, client):
        assert client.get("/").json() == {"status": "ok"}

    def test_create_and_fetch(self, client):
        payload = {
            "id": "p1",
            "name": "Demo",
            "start_date": "2025-01-01",
            "tasks": [
                {"id": "a", "name": "A", "duration": 3},
                {"id": "b", "name": "B", "duration": 2, "delay_before_start": 1, "dependency": "a"},
            ],
        }
        response = client.post("/projects", json=payload)
        assert response.status_code == 201
        assert response.json()["tasks"][1]["dependency"] == "a"

        fetched = client.get("/projects/p1").json()
        assert fetched["start_date"] == "2025-01-01"
        assert [project["id"] for project in client.get("/projects").json()] == ["p1"]

    def test_invalid_payload(self, client):
        response = client.post("/projects", json={"id": "p1", "name": "Bad", "tasks": [{"id": "a", "name": "A", "duration": 0}]})
        assert response.status_code == 422
        assert response.json() == {"error": "Invalid request payload."}

    def test_unknown_project(self, client):
        response = client.get("/projects/nope")
        assert response.status_code == 404
        assert "Project not found" in response.json()["error"]

    def test_delete(self, client, stored_solar):
        assert client.delete("/projects/solar").status_code == 204
        assert client.delete("/projects/solar").status_code == 404


class TestComputeDates:
    """Test the forward planning action."""

    def test_success_commits_dates(self, client, stored_solar):
        response = client.post("/projects/solar/compute-dates")
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Task dates computed successfully"
        assert body["project"]["end_date"] == "2025-01-10"

        stored = project_store.get_project("solar")
        assert stored.end_date.isoformat() == "2025-01-10"
        assert stored.tasks[1].start_date.isoformat() == "2025-01-04"

    def test_recompute_clears_existing_dates(self, client, stored_solar):
        client.post("/projects/solar/compute-dates")
        project = project_store.get_project("solar")
        project.start_date = project.start_date.replace(month=3)
        project_store.save_project(project)

        kept = client.post("/projects/solar/compute-dates").json()
        assert kept["project"]["tasks"][0]["start_date"] == "2025-01-01"

        moved = client.post("/projects/solar/compute-dates", params={"recompute": "true"}).json()
        assert moved["project"]["tasks"][0]["start_date"] == "2025-03-01"
        assert moved["project"]["end_date"] == "2025-03-10"

    def test_missing_start_date(self, client, stored_solar):
        project = project_store.get_project("solar")
        project.start_date = None
        project_store.save_project(project)

        response = client.post("/projects/solar/compute-dates")
        assert response.status_code == 400
        assert response.json() == {"error": "Project start date is required"}

    def test_no_tasks(self, client):
        client.post("/projects", json={"id": "empty", "name": "Empty", "start_date": "2025-01-01"})
        response = client.post("/projects/empty/compute-dates")
        assert response.status_code == 400
        assert response.json() == {"error": "Project has no tasks"}

    def test_cycle_leaves_store_untouched(self, client, cyclic_project):
        project_store.save_project(cyclic_project)

        response = client.post("/projects/loop/compute-dates")
        assert response.status_code == 409
        assert response.json()["error"].startswith("Error: Circular dependency detected")
        assert project_store.get_project("loop") == cyclic_project

    def test_unknown_project(self, client):
        response = client.post("/projects/nope/compute-dates")
        assert response.status_code == 404

    def test_unexpected_failure(self, client, stored_solar, monkeypatch):
        def boom(project):
            project.tasks[0].start_date = project.start_date
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(main, "compute_forward", boom)

        response = client.post("/projects/solar/compute-dates")
        assert response.status_code == 500
        assert response.json() == {"error": "An error occurred while computing dates: disk on fire"}
        assert project_store.get_project("solar").tasks[0].start_date is None


class TestRetroplanning:
    """Test the backward planning action."""

    def test_missing_end_date(self, client, stored_solar):
        response = client.post("/projects/solar/retroplanning")
        assert response.status_code == 400
        assert response.json() == {"error": "Project end date is required for retroplanning"}

    def test_success(self, client, solar_project):
        payload = solar_project.model_dump(mode="json")
        payload.update(start_date=None, end_date="2025-01-10")
        client.post("/projects", json=payload)

        response = client.post("/projects/solar/retroplanning")
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Retroplanning computed successfully"
        assert body["project"]["start_date"] == "2025-01-01"
        assert body["project"]["tasks"][2]["end_date"] == "2025-01-08"


class TestUploadAndExport:
    """Test CSV upload and download."""

    def test_upload_replaces_tasks(self, client, stored_solar):
        csv_bytes = b"id,name,duration,dependency\nx,X,2,\ny,Y,1,x\n"
        response = client.post(
            "/projects/solar/tasks/upload",
            files={"file": ("tasks.csv", csv_bytes, "text/csv")},
        )
        assert response.status_code == 200
        assert [task["id"] for task in response.json()["tasks"]] == ["x", "y"]
        assert [task.id for task in project_store.get_project("solar").tasks] == ["x", "y"]

    def test_upload_rejects_other_extensions(self, client, stored_solar):
        response = client.post(
            "/projects/solar/tasks/upload",
            files={"file": ("tasks.docx", b"whatever", "application/octet-stream")},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported file type. Allowed: csv."}

    def test_upload_rejects_empty_file(self, client, stored_solar):
        response = client.post("/projects/solar/tasks/upload", files={"file": ("tasks.csv", b"", "text/csv")})
        assert response.status_code == 400
        assert response.json() == {"error": "Uploaded file is empty."}

    def test_upload_respects_size_limit(self, client, stored_solar, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_BYTES", "10")
        response = client.post(
            "/projects/solar/tasks/upload",
            files={"file": ("tasks.csv", b"id,name\na,A\nb,B\n", "text/csv")},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "File too large. Limit is 10 bytes."}

    def test_upload_missing_column(self, client, stored_solar):
        response = client.post(
            "/projects/solar/tasks/upload",
            files={"file": ("tasks.csv", b"id,duration\na,2\n", "text/csv")},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "CSV is missing required columns: name"}

    def test_upload_invalid_values(self, client, stored_solar):
        response = client.post(
            "/projects/solar/tasks/upload",
            files={"file": ("tasks.csv", b"id,name,duration\na,A,-2\n", "text/csv")},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "CSV contains invalid task values."}

    def test_export(self, client, stored_solar):
        client.post("/projects/solar/compute-dates")
        response = client.get("/projects/solar/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="solar.csv"' in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0] == "id,name,duration,delay_before_start,dependency,start_date,end_date"
        assert lines[1] == "survey,Site survey,3,0,,2025-01-01,2025-01-03"
