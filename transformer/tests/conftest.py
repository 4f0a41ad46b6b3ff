from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from transformer.app.config import Settings, TemplateEngineConfig
from transformer.app.main import create_app
from transformer.app.services.template_engine import TemplateEngine
from transformer.app.services.transform import TransformService


# ---------------------------------------------------------------------------
# Template fixtures
# ---------------------------------------------------------------------------

TEMPLATES = {
    "customer-transform.ftl": (
        '{"id": "${customerId}", '
        '"name": "${personalInfo.firstName} ${personalInfo.lastName}"}'
    ),
    "echo.ftl": (
        '{"customerId": ${customerId|json}, '
        '"firstName": ${personalInfo.firstName|json}, '
        '"accounts": ${accounts|json}}'
    ),
    "accounts.ftl": (
        '{"numbers": ['
        '{% for a in accounts %}"${a.accountNumber}"'
        '{% if not loop.last %}, {% endif %}{% endfor %}'
        ']}'
    ),
    "raw-order.ftl": (
        '{"order": "${order.id}", "total": ${order.total}, '
        '"items": ${order["items"]|length}}'
    ),
    "not-json.ftl": "Hello ${customerId}",
    "broken.ftl": '{"id": "${customerId"}',
    "nested/summary.ftl": '{"summary": "${customerId|json_string}"}',
}


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    base = tmp_path / "templates"
    for name, body in TEMPLATES.items():
        path = base / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
    return base


@pytest.fixture
def engine(template_dir: Path) -> TemplateEngine:
    return TemplateEngine(TemplateEngineConfig(base_dir=template_dir))


@pytest.fixture
def service(engine: TemplateEngine) -> TransformService:
    return TransformService(engine)


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(template_dir: Path) -> Settings:
    return Settings(template_base_path=template_dir)


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def ann_lee() -> dict:
    return {
        "customerId": "C1",
        "personalInfo": {"firstName": "Ann", "lastName": "Lee"},
    }
