from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from statuspage.api.routers import (
    audit,
    auth,
    automations,
    components,
    health,
    incidents,
    maintenance,
    public,
    roles,
    settings as settings_router,
    users,
)
from statuspage.core.config import settings
from statuspage.core.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StatusPageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[StatusPageError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
}

app = FastAPI(title="Status Page API")

app.include_router(health.router)
app.include_router(public.router)
app.include_router(auth.router)
app.include_router(roles.router)
app.include_router(users.router)
app.include_router(components.groups_router)
app.include_router(components.router)
app.include_router(incidents.router)
app.include_router(maintenance.router)
app.include_router(automations.router)
app.include_router(audit.router)
app.include_router(settings_router.router)


@app.exception_handler(StatusPageError)
async def handle_service_error(request: Request, exc: StatusPageError) -> JSONResponse:
    code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.info("request rejected", extra={"path": request.url.path, "status_code": code})
    return JSONResponse(status_code=code, content={"detail": exc.message})


def run() -> None:
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
