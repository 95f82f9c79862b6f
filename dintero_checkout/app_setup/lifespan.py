"""
Lifespan FastAPI: ressources partagées du service de checkout.
- Client Dintero unique (pool httpx + cache du token OAuth), fermé à l'arrêt.
- Rate limiting FastAPILimiter (Redis), avec options de test (fakeredis).
- Variables d'environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: pas de Redis (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: fallback mémoire si Redis est indisponible
"""
import os
import logging
from contextlib import asynccontextmanager

import httpx
import redis.asyncio as redis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from dintero_checkout import config
from dintero_checkout.checkout.dintero_client import make_dintero_client

logger = logging.getLogger("uvicorn.error")

async def _init_rate_limit(app: FastAPI) -> None:
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return

    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            from fakeredis.aioredis import FakeRedis
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled on checkout session endpoint")
    except Exception as e:
        # Sans fallback local, la création de session reste servie sans limite
        app.state.rate_limit_enabled = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        logger.warning("Rate limiting init error (local_fallback=%s): %s", app.state.rate_limit_enabled, e)

@asynccontextmanager
async def lifespan(app: FastAPI):
    http = httpx.Client(timeout=config.DINTERO_TIMEOUT_SECONDS)
    app.state.dintero_client = make_dintero_client(http_client=http)
    logger.info("Dintero client ready environment=%s embed_type=%s",
                config.DINTERO_ENVIRONMENT, config.DINTERO_EMBED_TYPE)
    await _init_rate_limit(app)
    try:
        yield
    finally:
        http.close()
        app.state.dintero_client = None
