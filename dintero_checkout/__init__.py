"""Backend FastAPI du checkout Dintero (sessions de paiement liées au panier)."""
