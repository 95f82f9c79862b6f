"""
Registre central des routers.
- API v1: checkout (sessions Dintero)
- Web: retour de paiement Dintero (redirections)
- Health
"""
from fastapi import FastAPI
from dintero_checkout.checkout import views as checkout_views
from dintero_checkout.orders import views as orders_views
from dintero_checkout.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(checkout_views.router)
    # Retour navigateur
    app.include_router(orders_views.router)
    # Health & monitoring
    app.include_router(health_router)
