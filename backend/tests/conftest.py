import pytest
from fastapi.testclient import TestClient

from rams.config import get_settings
from rams.schemas.rams import FormSnapshot
from rams.services import copilot
from rams.services.ai import AIResponse
from rams.services.compliance import augmenter, review

COMPLETE_FORM = {
    "projectName": (
        "Riverside Court Block C refurbishment: replacement of timber sash windows to the "
        "east elevation of the building, including making good of reveals, sills and "
        "internal linings to all affected flats on floors one to three of the block"
    ),
    "clientName": (
        "Riverside Housing Association Limited, acting as the commercial client under "
        "CDM 2015 for the Riverside Court refurbishment programme, with day to day client "
        "representation provided by the appointed estates manager at the head office"
    ),
    "scopeOfWork": (
        "Removal of twenty four existing timber sash windows and installation of new "
        "factory finished timber sash units on the east elevation of Block C, working from "
        "the existing access platforms, including making good of reveals and internal linings"
    ),
    "methodStatement": (
        "Site setup: the area below each opening is segregated with barriers before removal "
        "begins. Each existing sash is unscrewed, lowered by two operatives and taken to the "
        "skip. New frames are offered up, packed, fixed with approved screws and sealed. Work "
        "is inspected by the supervisor before the next opening starts."
    ),
    "controls": (
        "All operatives receive a site induction and a task briefing before starting. The work "
        "area is segregated with barriers and signage. Tools are inspected before use and "
        "defective items quarantined. Waste is removed daily to the designated skip. The "
        "supervisor monitors the work continuously and stops it if conditions change."
    ),
    "emergencyContacts": (
        "Emergency services: 999. Site manager: Dan Hughes 07700 900123. First aider: Priya "
        "Shah 07700 900456. Nearest A&E: Royal Infirmary, Lauriston Place. HSE Incident "
        "Contact Centre (RIDDOR reporting): 0345 300 9923. Site office holds the accident book."
    ),
    "trade": "Window Fitter",
    "taskType": "Window replacement",
}


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch):
    """Development settings with AI unconfigured unless a test opts in."""
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("AI_ENABLED", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    from rams.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def complete_form() -> dict:
    return dict(COMPLETE_FORM)


@pytest.fixture
def complete_snapshot() -> FormSnapshot:
    return FormSnapshot.model_validate(COMPLETE_FORM)


class FakeAI:
    """Stands in for generate_response; replies with canned content or raises."""

    def __init__(self) -> None:
        self.content = "[]"
        self.error: Exception | None = None
        self.calls: list[dict] = []

    def __call__(self, **kwargs) -> AIResponse:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return AIResponse(
            content=self.content,
            tokens_used={"input": 10, "output": 10},
            model="test-model",
            latency_ms=1,
        )


@pytest.fixture
def fake_ai(monkeypatch) -> FakeAI:
    """Configure AI and route every model call to a FakeAI."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    get_settings.cache_clear()

    fake = FakeAI()
    for module in (augmenter, review, copilot):
        monkeypatch.setattr(module, "generate_response", fake)
    return fake
