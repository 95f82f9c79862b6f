# module dintero_checkout.app
from dintero_checkout.app_setup.factory import create_app

# App globale
app = create_app()
