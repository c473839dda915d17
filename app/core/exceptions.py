"""
Исключения предметной области FitJourney.

InvalidInputError: структурно некорректные входные данные (диапазон дат,
отрицательная цель и т.п.), отклоняются до вычислений.
NotFoundError: сущность не найдена или принадлежит другому пользователю.

Пустые данные ошибкой не считаются: движки возвращают нулевые результаты.
"""
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"


class FitJourneyError(Exception):
    code = ErrorCode.INVALID_INPUT
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidInputError(FitJourneyError, ValueError):
    code = ErrorCode.INVALID_INPUT
    status_code = 422


class NotFoundError(FitJourneyError, LookupError):
    code = ErrorCode.NOT_FOUND
    status_code = 404


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
        }
    }
    if details:
        content["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def fitjourney_error_handler(request: Request, exc: FitJourneyError) -> JSONResponse:
    return create_error_response(
        status_code=exc.status_code,
        code=exc.code.value,
        message=exc.message,
        details=exc.details,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Подключить обработчики доменных исключений к приложению."""
    app.add_exception_handler(FitJourneyError, fitjourney_error_handler)
