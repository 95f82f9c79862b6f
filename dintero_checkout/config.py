# dintero_checkout.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend checkout.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Dintero), sécurité cookies, CORS/hosts
- Fournit les URLs de retour/callback du checkout et les chemins de redirection
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _env_flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

def _env_list(name: str, default: str = "") -> list:
    return [x.strip() for x in os.getenv(name, default).split(",") if x.strip()]

# Supabase: stockage des paniers (quotes), commandes, coupons, tarifs de livraison
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Dintero: identifiants du compte et du profil de paiement
# - DINTERO_ENVIRONMENT=test préfixe l'account id par "T-", sinon "P-"
DINTERO_ENVIRONMENT = _clean_env(os.getenv("DINTERO_ENVIRONMENT") or "test").lower()
DINTERO_ACCOUNT_ID = _clean_env(os.getenv("DINTERO_ACCOUNT_ID") or "")
DINTERO_CLIENT_ID = _clean_env(os.getenv("DINTERO_CLIENT_ID") or "")
DINTERO_CLIENT_SECRET = _clean_env(os.getenv("DINTERO_CLIENT_SECRET") or "")
DINTERO_PROFILE_ID = _clean_env(os.getenv("DINTERO_PROFILE_ID") or "")
DINTERO_EMBED_TYPE = _clean_env(os.getenv("DINTERO_EMBED_TYPE") or "embedded").lower()
DINTERO_API_URL = _clean_env(os.getenv("DINTERO_API_URL") or "https://api.dintero.com/v1").rstrip("/")
DINTERO_CHECKOUT_URL = _clean_env(os.getenv("DINTERO_CHECKOUT_URL") or "https://checkout.dintero.com/v1").rstrip("/")
DINTERO_TIMEOUT_SECONDS = float(_clean_env(os.getenv("DINTERO_TIMEOUT_SECONDS") or "20"))

# Conditions générales: ids d'agreements à accepter avant validation d'une session non-express
CHECKOUT_ENFORCE_AGREEMENTS = _env_flag("CHECKOUT_ENFORCE_AGREEMENTS", "true")
CHECKOUT_AGREEMENT_IDS = _env_list("CHECKOUT_AGREEMENT_IDS")

# Cookies/ Sécurité
COOKIE_SECURE = _env_flag("COOKIE_SECURE", "false")
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "replace_me_with_a_long_random_secret")

# CORS (dev)
CORS_ORIGINS = _env_list("CORS_ORIGINS", "*")
ALLOWED_HOSTS = _env_list("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")

BASE_URL = _clean_env(os.getenv("BASE_URL") or "http://localhost:8000").rstrip("/")

# Retour Dintero (navigateur); callback serveur-à-serveur optionnel (URL absolue)
CHECKOUT_RETURN_PATH = os.getenv("CHECKOUT_RETURN_PATH", "/checkout/payment/success")
CHECKOUT_CALLBACK_URL = _clean_env(os.getenv("CHECKOUT_CALLBACK_URL") or "")

# Pages front après retour de paiement
CHECKOUT_SUCCESS_PATH = os.getenv("CHECKOUT_SUCCESS_PATH", "/checkout/onepage/success")
CHECKOUT_CART_PATH = os.getenv("CHECKOUT_CART_PATH", "/checkout/cart")
