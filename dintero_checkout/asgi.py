"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn/uvicorn-workers) importe `dintero_checkout.asgi:app`.
- Toute la configuration FastAPI est centralisée dans dintero_checkout.app_setup.factory.
"""

from dintero_checkout.app import app
