"""Tests for widget key helpers and the X-API-Key dependency."""

import pytest
from fastapi import HTTPException

from app.auth.dependencies import get_optional_project
from app.auth.keys import generate_api_key, masked
from conftest import make_project


class _Result:
    def __init__(self, value):
        self._value = value

    def scalar_one_or_none(self):
        return self._value


class LookupSession:
    """AsyncSession stand-in that answers every query with one project (or None)."""

    def __init__(self, project=None):
        self.project = project
        self.queries = 0

    async def execute(self, stmt):
        self.queries += 1
        return _Result(self.project)


class TestKeys:
    def test_generate_is_random_hex(self):
        first, second = generate_api_key(), generate_api_key()
        assert first != second
        assert len(first) == 32
        int(first, 16)

    def test_masked(self):
        assert masked("xkeysib-abcdef123") == "xkeysi..."
        assert masked("") == "NOT SET"


class TestGetOptionalProject:
    @pytest.mark.asyncio
    async def test_no_key_means_unassigned(self):
        session = LookupSession()

        assert await get_optional_project(api_key=None, session=session) is None
        assert session.queries == 0

    @pytest.mark.asyncio
    async def test_active_project(self):
        project = make_project()

        resolved = await get_optional_project(api_key=project.api_key, session=LookupSession(project))

        assert resolved is project

    @pytest.mark.asyncio
    @pytest.mark.parametrize("project", [None, make_project(is_active=False)])
    async def test_unknown_or_inactive_is_generic_401(self, project):
        with pytest.raises(HTTPException) as exc_info:
            await get_optional_project(api_key="whatever", session=LookupSession(project))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid or inactive API key."
