"""Test fixtures for testing-maturity-assessment.

Provides the reference and small test models, a lead payload and an async
HTTP client whose service dependencies are replaced with mocks. Plain
builders live in ``factories.py``.
"""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from factories import ADMIN_PASSWORD, ADMIN_USERNAME, build_model
from testing_maturity.api.routes.admin import get_credential_verifier
from testing_maturity.api.routes.assessment import get_assessment_service, get_model_loader
from testing_maturity.core.auth import StaticCredentialVerifier
from testing_maturity.core.maturity_model import MaturityModel
from testing_maturity.core.model_loader import JsonFileModelSource, ModelLoader
from testing_maturity.main import app


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


@pytest.fixture()
def small_model() -> MaturityModel:
    """Two areas, four dimensions, ten questions."""
    return build_model()


@pytest.fixture(scope="session")
def reference_model() -> MaturityModel:
    """The packaged reference model."""
    return ModelLoader(JsonFileModelSource()).load()


@pytest.fixture()
def lead_data() -> dict[str, Any]:
    """Valid lead contact payload."""
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "company": "Analytical Engines Ltd",
        "role": "QA Lead",
        "consent": True,
    }


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_service() -> AsyncMock:
    """AssessmentService replacement for route tests."""
    return AsyncMock()


@pytest.fixture()
def model_loader(small_model: MaturityModel) -> MagicMock:
    """ModelLoader replacement returning the small model."""
    loader = MagicMock(spec=ModelLoader)
    loader.load.return_value = small_model
    return loader


@pytest_asyncio.fixture()
async def client(
    mock_service: AsyncMock,
    model_loader: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with service, model and admin dependencies overridden."""
    app.dependency_overrides[get_assessment_service] = lambda: mock_service
    app.dependency_overrides[get_model_loader] = lambda: model_loader
    app.dependency_overrides[get_credential_verifier] = lambda: StaticCredentialVerifier(
        ADMIN_USERNAME, ADMIN_PASSWORD
    )

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
