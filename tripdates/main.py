from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from tripdates.config import build_clock, load_runtime_config
from tripdates.core.placeholders import (
    SUPPORTED_PLACEHOLDERS,
    DatePlaceholderResolver,
    PlaceholderError,
    UnsupportedPlaceholderError,
)
from tripdates.data.provider import (
    TestCaseNotFoundError,
    TestDataError,
    TestDataProvider,
)
from tripdates.observability.logging import configure_logging


MAX_TOKEN_LENGTH = 128


class ResolveRequest(BaseModel):
    token: str
    reference_date: str | None = Field(default=None, alias="referenceDate")

    model_config = ConfigDict(populate_by_name=True)


class ResolveResponse(BaseModel):
    token: str
    reference_date: str | None = Field(default=None, serialization_alias="referenceDate")
    resolved: str


def _placeholder_http_error(e: PlaceholderError) -> HTTPException:
    detail: dict[str, Any] = {"error": str(e)}
    if isinstance(e, UnsupportedPlaceholderError):
        detail["token"] = e.token
        detail["supported"] = list(e.supported)
    return HTTPException(status_code=400, detail=detail)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    rc = load_runtime_config()
    app.state.runtime_config = rc
    configure_logging(debug=rc.settings.debug)
    app.state.resolver = DatePlaceholderResolver(build_clock(rc.settings))
    app.state.provider = TestDataProvider(rc.fixture_path, app.state.resolver)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Trip Dates", version="0.1.0", lifespan=lifespan)

    @app.get("/healthz")
    async def healthz() -> dict[str, Any]:
        rc = app.state.runtime_config
        fixtures_ok = rc.fixture_path.is_file()
        return {
            "status": "ok" if fixtures_ok else "degraded",
            "env": rc.settings.environment,
            "today": app.state.resolver.today().isoformat(),
            "checks": {"fixtures": fixtures_ok},
        }

    @app.get("/placeholders")
    async def list_placeholders() -> dict[str, list[str]]:
        return {"placeholders": list(SUPPORTED_PLACEHOLDERS)}

    @app.post("/resolve", response_model=ResolveResponse, response_model_by_alias=True)
    async def resolve(payload: ResolveRequest) -> ResolveResponse:
        if len(payload.token) > MAX_TOKEN_LENGTH:
            raise HTTPException(status_code=400, detail=f"token length exceeds {MAX_TOKEN_LENGTH} characters")
        resolver: DatePlaceholderResolver = app.state.resolver
        try:
            resolved = resolver.resolve(payload.token, payload.reference_date)
        except PlaceholderError as e:
            raise _placeholder_http_error(e)
        return ResolveResponse(token=payload.token, reference_date=payload.reference_date, resolved=resolved)

    @app.get("/test-cases")
    async def list_test_cases() -> dict[str, list[str]]:
        provider: TestDataProvider = app.state.provider
        try:
            return {"testCases": provider.available_test_cases()}
        except TestDataError as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/test-cases/{test_case_id}")
    async def get_test_case(test_case_id: str) -> Any:
        provider: TestDataProvider = app.state.provider
        try:
            data = provider.get_test_data(test_case_id)
        except TestCaseNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except PlaceholderError as e:
            raise _placeholder_http_error(e)
        except TestDataError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return data.model_dump(by_alias=True)

    return app


# For ASGI servers
app = create_app()
