from collections.abc import Mapping
from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response
from starlette.status import HTTP_200_OK

from app.core.config import settings

templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)
templates.env.globals["project_name"] = settings.PROJECT_NAME
templates.env.globals["catalog_prefix"] = settings.CATALOG_PREFIX


# Render a named template as the response to `request`.
def render(
    request: Request,
    name: str,
    context: Mapping[str, object],
    status_code: int = HTTP_200_OK,
) -> Response:
    return templates.TemplateResponse(
        request, name, dict(context), status_code=status_code
    )
