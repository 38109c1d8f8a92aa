"""Таксономия ошибок предметной области.

Сервисы бросают эти исключения, а HTTP-слой превращает их в ответы
``{"status": "fail", "message": ...}`` с соответствующим кодом.
"""

from __future__ import annotations


class AppError(Exception):
    """Ожидаемая (операционная) ошибка с HTTP-кодом."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"


class ValidationFailed(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409


__all__ = ["AppError", "Conflict", "Forbidden", "NotFound", "Unauthorized", "ValidationFailed"]
