from pathlib import Path

from fastapi import Request
from starlette.templating import Jinja2Templates

from yelpcamp.flash import pop_flashed

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    """Render a page; pending flash messages are consumed here."""
    context = dict(context or {})
    errors = pop_flashed(request, "error")
    # an inline error from the handler is shown after any flashed ones
    inline = context.pop("error", None)
    if inline:
        errors += [inline] if isinstance(inline, str) else list(inline)
    ctx = {
        "current_user": getattr(request.state, "user", None),
        "error": errors,
        "success": pop_flashed(request, "success"),
    }
    ctx.update(context)
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
