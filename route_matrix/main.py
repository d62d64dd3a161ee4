"""Gunicorn/WSGI entrypoint with Flask CLI support."""
from __future__ import annotations

import logging

from route_matrix import create_app

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000, debug=app.config.get("FLASK_ENV") == "development")
