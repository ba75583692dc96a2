# responses.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from videotube.schemas import ApiResponse

logger = logging.getLogger(__name__)


def api_response(data, message: str, status_code: int = status.HTTP_200_OK) -> ApiResponse:
    """성공 응답 봉투 {statusCode, data, message, success}"""
    return ApiResponse(
        status_code=status_code,
        data=data,
        message=message,
        success=status_code < 400,
    )


def error_body(status_code: int, message: str) -> dict:
    return {"statusCode": status_code, "message": message, "success": False}


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """HTTPException / 검증 오류 / DB 오류 / 그 밖의 예외를 공통 에러 봉투로 변환"""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(status.HTTP_400_BAD_REQUEST, _validation_message(exc)),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"DB 오류: {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database operation failed"),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"처리되지 않은 오류: {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
        )
