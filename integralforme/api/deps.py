"""FastAPI dependencies — hand routers what the lifespan resolved.

Tests swap these out through ``app.dependency_overrides``.
"""

from fastapi import Request

from integralforme.shared.config import Settings
from integralforme.shared.services.gateway import DailyPuzzleGateway
from integralforme.shared.services.translator import TranslationProxy


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> DailyPuzzleGateway:
    return request.app.state.gateway


def get_translator(request: Request) -> TranslationProxy:
    return request.app.state.translator
