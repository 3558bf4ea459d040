"""
Unit tests for the FastAPI authorization dependencies.

Dependencies are called directly with mocked requests.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi import HTTPException

from mdb_rbac.auth import default_org_id, get_rbac_engine, require_right
from mdb_rbac.core.types import AccessDecision, Reason
from mdb_rbac.exceptions import RbacStorageError
from mdb_rbac.observability import clear_rbac_context, get_logging_context


def make_request(user=None, path_params=None, query_params=None, engine=None):
    request = MagicMock()
    request.app.state = SimpleNamespace(rbac_engine=engine)
    request.state = SimpleNamespace(user=user)
    request.path_params = path_params or {}
    request.query_params = query_params or {}
    return request


def make_engine(decision=None, error=None):
    engine = MagicMock()
    engine.check_right = AsyncMock(return_value=decision, side_effect=error)
    return engine


@pytest.fixture(autouse=True)
def reset_context():
    yield
    clear_rbac_context()


class TestGetRbacEngine:
    """Tests for get_rbac_engine."""

    @pytest.mark.asyncio
    async def test_returns_engine_from_app_state(self):
        engine = make_engine()
        assert await get_rbac_engine(make_request(engine=engine)) is engine

    @pytest.mark.asyncio
    async def test_missing_engine_is_server_error(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_rbac_engine(make_request())
        assert exc_info.value.status_code == 500


class TestDefaultOrgId:
    """Tests for org id extraction."""

    def test_path_param_wins(self):
        request = make_request(path_params={"org_id": "p"}, query_params={"org_id": "q"})
        assert default_org_id(request) == "p"

    def test_query_param_fallback(self):
        assert default_org_id(make_request(query_params={"org_id": "q"})) == "q"

    def test_missing(self):
        assert default_org_id(make_request()) is None


class TestRequireRight:
    """Tests for the require_right dependency."""

    @pytest.mark.asyncio
    async def test_allowed_returns_decision(self):
        user_id, org_id = ObjectId(), ObjectId()
        decision = AccessDecision(allowed=True, reason=Reason.ALLOWED, decision_layer="role")
        engine = make_engine(decision)
        request = make_request(user={"_id": user_id}, path_params={"org_id": str(org_id)})

        result = await require_right("posts:write")(request, engine=engine)

        assert result is decision
        engine.check_right.assert_awaited_once_with(user_id, str(org_id), "posts:write")
        assert get_logging_context()["right"] == "posts:write"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reason",
        [Reason.DENIED, Reason.NO_MATCH, Reason.NOT_ORG_MEMBER, Reason.INVALID_RIGHT],
    )
    async def test_every_negative_reason_is_403(self, reason):
        engine = make_engine(AccessDecision(allowed=False, reason=reason))
        request = make_request(user={"_id": ObjectId()}, query_params={"org_id": "o"})

        with pytest.raises(HTTPException) as exc_info:
            await require_right("posts:write")(request, engine=engine)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Access denied"

    @pytest.mark.asyncio
    async def test_unauthenticated_is_401(self):
        engine = make_engine()
        request = make_request(path_params={"org_id": "o"})

        with pytest.raises(HTTPException) as exc_info:
            await require_right("posts:write")(request, engine=engine)

        assert exc_info.value.status_code == 401
        engine.check_right.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_org_is_400(self):
        engine = make_engine()
        request = make_request(user={"_id": ObjectId()})

        with pytest.raises(HTTPException) as exc_info:
            await require_right("posts:write")(request, engine=engine)

        assert exc_info.value.status_code == 400
        engine.check_right.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storage_error_is_500(self):
        engine = make_engine(error=RbacStorageError("boom"))
        request = make_request(user={"_id": ObjectId()}, path_params={"org_id": "o"})

        with pytest.raises(HTTPException) as exc_info:
            await require_right("posts:write")(request, engine=engine)

        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, RbacStorageError)

    @pytest.mark.asyncio
    async def test_custom_org_getter_and_object_user(self):
        decision = AccessDecision(allowed=True, reason=Reason.ALLOWED, decision_layer="org")
        engine = make_engine(decision)
        user = SimpleNamespace(id="user-1")
        request = make_request(user=user)
        request.headers = {"x-org-id": "org-9"}

        dependency = require_right("posts:write", get_org_id=lambda r: r.headers["x-org-id"])
        await dependency(request, engine=engine)

        engine.check_right.assert_awaited_once_with("user-1", "org-9", "posts:write")

    @pytest.mark.asyncio
    async def test_user_dict_id_fallbacks(self):
        decision = AccessDecision(allowed=True, reason=Reason.ALLOWED)
        engine = make_engine(decision)
        request = make_request(user={"user_id": "u-2"}, path_params={"org_id": "o"})

        await require_right("posts:write")(request, engine=engine)

        assert engine.check_right.await_args.args[0] == "u-2"
