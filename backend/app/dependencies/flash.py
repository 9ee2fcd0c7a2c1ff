"""Flash messages stored in the cookie session for the next rendered page."""

from fastapi import Request

FLASH_KEY = "_flashes"


def flash(request: Request, message: str, category: str = "info") -> None:
    messages = list(request.session.get(FLASH_KEY, []))
    messages.append({"category": category, "message": message})
    request.session[FLASH_KEY] = messages


def pop_flashes(request: Request) -> list[dict]:
    return request.session.pop(FLASH_KEY, [])
