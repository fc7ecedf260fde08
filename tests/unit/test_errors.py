"""Tests for the error taxonomy and its JSON rendering."""

import json

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, field_validator

from reviewbox.core.errors import (
    AccessDenied,
    AuthenticationError,
    Conflict,
    InternalError,
    NotFound,
    ReviewBoxError,
    ValidationError,
    error_response,
    register_exception_handlers,
    review_box_error_handler,
)


@pytest.mark.unit
class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        ("error_class", "status_code"),
        [
            (ValidationError, 400),
            (AuthenticationError, 401),
            (AccessDenied, 403),
            (NotFound, 404),
            (Conflict, 409),
            (InternalError, 500),
        ],
    )
    def test_status_codes(self, error_class: type[ReviewBoxError], status_code: int) -> None:
        assert error_class.status_code == status_code
        assert issubclass(error_class, ReviewBoxError)

    def test_default_message(self) -> None:
        assert AccessDenied().message == "Access denied"
        assert NotFound("Group not found").message == "Group not found"

    def test_error_body(self) -> None:
        response = error_response(409, "You have already reviewed this subject")
        assert json.loads(response.body) == {
            "success": False,
            "error": "You have already reviewed this subject",
        }

    def test_unauthorized_carries_challenge(self) -> None:
        assert error_response(401, "Not authenticated").headers["www-authenticate"] == "Bearer"


class _Body(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be blank")
        return v


@pytest.fixture
async def error_client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/conflict")
    async def conflict() -> None:
        raise Conflict("Duplicate")

    @app.post("/body")
    async def body(data: _Body) -> dict:
        return {"name": data.name}

    @app.get("/missing")
    async def missing() -> None:
        from fastapi import HTTPException

        raise HTTPException(status_code=404, detail="Nothing here")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.mark.unit
class TestExceptionHandlers:
    async def test_domain_error(self, error_client: AsyncClient) -> None:
        response = await error_client.get("/conflict")
        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "Duplicate"}

    async def test_validator_message_passed_through(self, error_client: AsyncClient) -> None:
        response = await error_client.post("/body", json={"name": "  "})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Name must not be blank"}

    async def test_schema_error_names_field(self, error_client: AsyncClient) -> None:
        response = await error_client.post("/body", json={})
        assert response.status_code == 400
        assert response.json()["error"].startswith("name:")

    async def test_http_exception(self, error_client: AsyncClient) -> None:
        response = await error_client.get("/missing")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Nothing here"}

    async def test_unknown_route(self, error_client: AsyncClient) -> None:
        response = await error_client.get("/nowhere")
        assert response.status_code == 404
        assert response.json()["success"] is False

    async def test_domain_handler_called_directly(self) -> None:
        request = Request({"type": "http", "method": "GET", "path": "/groups", "headers": []})
        response = await review_box_error_handler(request, AccessDenied("Owners only"))
        assert response.status_code == 403
        assert json.loads(response.body) == {"success": False, "error": "Owners only"}
