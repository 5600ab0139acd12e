"""Unit tests for exception handlers."""

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.exception_handlers import setup_exception_handlers
from core.exceptions import ProfileNotFoundError, StoreUnavailableError, ValidationError


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise ProfileNotFoundError("some-id")

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "PROFILE_NOT_FOUND"
        assert "some-id" in body["message"]
        assert body["details"]["profile_id"] == "some-id"

    async def test_domain_validation_error_is_400_with_field_list(self) -> None:
        app = _create_test_app()

        @app.get("/raise-validation")
        async def _() -> None:
            raise ValidationError.single("preferences.gender_preferences", "required")

        response = await _get(app, "/raise-validation")

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"] == [{"field": "preferences.gender_preferences", "message": "required"}]

    async def test_store_unavailable_is_503(self) -> None:
        app = _create_test_app()

        @app.get("/raise-store")
        async def _() -> None:
            raise StoreUnavailableError("transaction", "OperationalError")

        response = await _get(app, "/raise-store")

        assert response.status_code == 503
        assert response.json()["error_code"] == "STORE_UNAVAILABLE"

    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    async def test_request_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel

        app = _create_test_app()

        class Body(BaseModel):
            version: int

        @app.post("/validate")
        async def _(body: Body) -> None:
            return None

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"version": "x"})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.version"

    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()

        @app.get("/boom")
        async def _() -> None:
            raise RuntimeError("boom")

        response = await _get(app, "/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["message"] == "boom"
