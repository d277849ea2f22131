import pytest
from fastapi.testclient import TestClient

from integralforme.api.deps import get_gateway, get_translator
from integralforme.api.main import app
from integralforme.shared.services.gateway import DailyPuzzleGateway
from integralforme.shared.services.translator import TranslationProxy

from fakes import FakeResponse, FakeSession, make_row


@pytest.fixture
def puzzle_row():
    return make_row()


@pytest.fixture
def store_session():
    return FakeSession()


@pytest.fixture
def translate_session():
    return FakeSession(response=FakeResponse(payload={"translatedText": "Olá"}))


@pytest.fixture
def gateway(store_session):
    return DailyPuzzleGateway(
        host="example.supabase.co",
        api_key="anon-key",
        session=store_session,
        session_factory=lambda: store_session,
    )


@pytest.fixture
def translator(translate_session):
    return TranslationProxy(base_url="https://translate.example/", session=translate_session)


@pytest.fixture
def client(gateway, translator):
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_translator] = lambda: translator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
