"""JSON envelope helpers: every API response is {success, data|error|errors, message?}."""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel


def dump(schema: type[BaseModel], obj: Any) -> dict[str, Any]:
    """Serialize an ORM object through a read schema into camelCase JSON data."""
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


def dump_many(schema: type[BaseModel], objs) -> list[dict[str, Any]]:
    return [dump(schema, obj) for obj in objs]


def success(data: Any = None, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def failure(error: str, status_code: int, errors: list[dict] | None = None) -> JSONResponse:
    body: dict[str, Any] = {"success": False}
    if errors:
        body["errors"] = errors
    else:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)
