"""Flask application factory for the route-matrix proxy."""
import atexit
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask

from .auth import shared_token_verifier
from .cache import CacheStore, CacheSweeper
from .matrix_client import REQUEST_TIMEOUT
from .proxy import RouteMatrixProxy

load_dotenv()


def _get_env(name: str, default: str = "") -> str:
    value = os.getenv(name, default)
    if value is None:
        return default
    return value.strip()


def _get_env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def _get_env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def create_app(test_config: Optional[Dict[str, Any]] = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = _get_env("SECRET_KEY", "dev-secret")
    app.config["FLASK_ENV"] = _get_env("FLASK_ENV", "development")
    app.config["ROUTES_API_TIMEOUT"] = _get_env_float("ROUTES_API_TIMEOUT", REQUEST_TIMEOUT)
    app.config["CACHE_SWEEP_ENABLED"] = _get_env_bool("CACHE_SWEEP_ENABLED", True)
    app.config["AUTH_REQUIRED"] = _get_env_bool("AUTH_REQUIRED", False)
    app.config["AUTH_VERIFIER"] = shared_token_verifier(_get_env("API_AUTH_TOKEN", ""))
    if test_config:
        app.config.update(test_config)

    proxy = app.config.get("ROUTE_MATRIX_PROXY")
    if proxy is None:
        proxy = RouteMatrixProxy(CacheStore(), timeout=app.config["ROUTES_API_TIMEOUT"])
    app.extensions["route_matrix"] = proxy

    if app.config["CACHE_SWEEP_ENABLED"]:
        sweeper = CacheSweeper(proxy.cache)
        sweeper.start()
        atexit.register(sweeper.stop)
        app.extensions["route_matrix_sweeper"] = sweeper

    from .routes import api_bp  # pylint: disable=import-outside-toplevel

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
