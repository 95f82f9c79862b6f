from fastapi import APIRouter, Request
from dintero_checkout import config
from dintero_checkout.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return rate_limit_health_info(request)

@router.get("/dintero")
def health_dintero(request: Request):
    """État de configuration Dintero (aucun appel distant, aucun secret exposé)."""
    client = getattr(request.app.state, "dintero_client", None)
    return {
        "environment": config.DINTERO_ENVIRONMENT,
        "embed_type": getattr(client, "embed_type", config.DINTERO_EMBED_TYPE),
        "configured": all([config.DINTERO_ACCOUNT_ID, config.DINTERO_CLIENT_ID,
                           config.DINTERO_CLIENT_SECRET, config.DINTERO_PROFILE_ID]),
        "client_ready": client is not None,
    }
