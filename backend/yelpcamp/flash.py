"""
One-shot messages kept in the session until the next rendered page.
"""
from fastapi import Request
from starlette.responses import RedirectResponse

_KEY = "_flash"

def flash(request: Request, category: str, message: str) -> None:
    queue = request.session.setdefault(_KEY, {})
    queue.setdefault(category, []).append(message)
    # nested mutation: reassign so the cookie is rewritten
    request.session[_KEY] = queue

def pop_flashed(request: Request, category: str) -> list[str]:
    queue = request.session.get(_KEY) or {}
    messages = queue.pop(category, [])
    if queue:
        request.session[_KEY] = queue
    else:
        request.session.pop(_KEY, None)
    return messages

def back_url(request: Request, fallback: str = "/") -> str:
    return request.headers.get("referer") or fallback

def redirect(request: Request, url: str) -> RedirectResponse:
    if url == "back":
        url = back_url(request)
    return RedirectResponse(url, status_code=302)
