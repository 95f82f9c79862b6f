"""
Gestionnaires d’exceptions utilisés par la factory.
- HTTPException: JSON standard {"detail": ...}.
- RemoteCallError (Dintero indisponible / réponse en erreur): 502 JSON.
- SessionValidationError non traitée par une vue: 400 JSON.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from dintero_checkout.checkout.exceptions import RemoteCallError, SessionValidationError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_json(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RemoteCallError)
    async def remote_call_error(request: Request, exc: RemoteCallError):
        logger.error("Dintero indisponible path=%s status=%s error=%s", request.url.path, exc.status_code, exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(SessionValidationError)
    async def session_validation_error(request: Request, exc: SessionValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})
