"""Tests for project administration: schemas and the list/create/update handlers."""

import datetime
import uuid

import pytest
from pydantic import ValidationError

from app.core.database import get_db_session
from app.main import app
from app.schemas.project import ProjectCreate, ProjectUpdate
from conftest import make_project


class _Result:
    def __init__(self, value=None, rows=()):
        self._value = value
        self._rows = list(rows)

    def scalar_one(self):
        return self._value

    def all(self):
        return self._rows


class FakeSession:
    """Just enough AsyncSession for the projects router."""

    def __init__(self, projects=(), feedback_count=0, fail_commit=False):
        self.projects = {p.id: p for p in projects}
        # (project, feedback_count) rows for the list query
        self.rows = []
        self.feedback_count = feedback_count
        self.fail_commit = fail_commit
        self.added = []
        self.commits = 0
        self.rollbacks = 0
        self.statements = []

    async def get(self, model, ident):
        return self.projects.get(ident)

    def add(self, obj):
        self.added.append(obj)

    async def commit(self):
        if self.fail_commit:
            raise RuntimeError("database unavailable")
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    async def refresh(self, obj):
        # Stand-in for server defaults.
        now = datetime.datetime.now(datetime.timezone.utc)
        if obj.id is None:
            obj.id = uuid.uuid4()
        if obj.created_at is None:
            obj.created_at = now
        obj.updated_at = now

    async def execute(self, stmt):
        self.statements.append(stmt)
        return _Result(self.feedback_count, self.rows)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def admin_client(client, session):
    app.dependency_overrides[get_db_session] = lambda: session
    return client


class TestSchemas:
    def test_create_strips_and_defaults(self):
        payload = ProjectCreate(name="  Shop ", domain="https://shop.example", description="  ")
        assert payload.name == "Shop"
        assert payload.description is None
        assert payload.is_active is True

    @pytest.mark.parametrize("name", ["", "   "])
    def test_create_rejects_blank_name(self, name):
        with pytest.raises(ValidationError):
            ProjectCreate(name=name, domain="https://shop.example")

    def test_create_rejects_client_chosen_key(self):
        with pytest.raises(ValidationError):
            ProjectCreate(name="Shop", domain="https://shop.example", apiKey="mine")

    def test_update_accepts_camel_case(self):
        payload = ProjectUpdate.model_validate({"isActive": False, "regenerateApiKey": True})
        assert payload.is_active is False
        assert payload.regenerate_api_key is True
        assert payload.model_fields_set == {"is_active", "regenerate_api_key"}


class TestListProjects:
    def test_feedback_counts_per_project(self, admin_client, session):
        newer = make_project(name="Shop")
        older = make_project(name="Blog")
        session.rows = [(newer, 3), (older, 0)]

        response = admin_client.get("/projects")

        assert response.status_code == 200
        body = response.json()
        assert [(p["name"], p["feedbackCount"]) for p in body] == [("Shop", 3), ("Blog", 0)]
        assert body[0]["id"] == str(newer.id)
        assert body[0]["apiKey"] == newer.api_key
        assert "feedback_count" not in body[0]

    def test_query_outer_joins_and_orders_newest_first(self, admin_client, session):
        admin_client.get("/projects")

        sql = str(session.statements[0]).upper()
        assert "LEFT OUTER JOIN FEEDBACK" in sql
        assert "GROUP BY PROJECTS.ID" in sql
        assert "ORDER BY PROJECTS.CREATED_AT DESC" in sql

    def test_no_projects(self, admin_client):
        response = admin_client.get("/projects")

        assert response.status_code == 200
        assert response.json() == []


class TestCreateProject:
    def test_issues_key(self, admin_client, session):
        response = admin_client.post(
            "/projects", json={"name": "Shop", "domain": "https://shop.example"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Shop"
        assert body["isActive"] is True
        assert body["feedbackCount"] == 0
        assert len(body["apiKey"]) == 32
        assert session.commits == 1

    def test_commit_failure_is_500(self, admin_client, session):
        session.fail_commit = True

        response = admin_client.post(
            "/projects", json={"name": "Shop", "domain": "https://shop.example"}
        )

        assert response.status_code == 500
        assert session.rollbacks == 1


class TestUpdateProject:
    def test_partial_update_keeps_key(self, admin_client, session):
        project = make_project(name="Shop", description="old")
        session.projects[project.id] = project
        session.feedback_count = 7
        original_key = project.api_key

        response = admin_client.patch(
            f"/projects/{project.id}", json={"isActive": False, "description": None}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["isActive"] is False
        assert body["description"] is None
        assert body["name"] == "Shop"
        assert body["apiKey"] == original_key
        assert body["feedbackCount"] == 7

    def test_regenerate_key(self, admin_client, session):
        project = make_project()
        session.projects[project.id] = project
        original_key = project.api_key

        response = admin_client.patch(f"/projects/{project.id}", json={"regenerateApiKey": True})

        assert response.status_code == 200
        assert response.json()["apiKey"] != original_key
        assert project.api_key == response.json()["apiKey"]

    def test_null_name_is_ignored(self, admin_client, session):
        project = make_project(name="Shop")
        session.projects[project.id] = project

        response = admin_client.patch(f"/projects/{project.id}", json={"name": None})

        assert response.status_code == 200
        assert response.json()["name"] == "Shop"

    def test_unknown_project_is_404(self, admin_client):
        response = admin_client.patch(f"/projects/{uuid.uuid4()}", json={"name": "X"})

        assert response.status_code == 404
        assert response.json() == {"detail": "Project not found"}
