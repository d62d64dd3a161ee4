"""REST API blueprint exposing the route-matrix proxy."""
from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest as MalformedBody

from .auth import require_auth
from .errors import InternalError, RouteMatrixError
from .models import RouteMatrixRequest
from .proxy import RouteMatrixProxy

api_bp = Blueprint("api", __name__)


def get_proxy() -> RouteMatrixProxy:
    return current_app.extensions["route_matrix"]


def _load_matrix_request() -> RouteMatrixRequest:
    # Parsed regardless of Content-Type; an unparseable body is a server-side failure.
    try:
        payload = request.get_json(force=True)
    except MalformedBody as exc:
        raise InternalError("Invalid JSON body") from exc
    if payload is None:
        raise InternalError("Invalid JSON body")
    if not isinstance(payload, dict):
        payload = {}
    try:
        return RouteMatrixRequest.parse_obj(payload)
    except ValidationError as exc:
        raise InternalError(str(exc)) from exc


@api_bp.errorhandler(RouteMatrixError)
def handle_route_matrix_error(exc: RouteMatrixError):
    if exc.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        current_app.logger.error("Route-matrix request failed: %s", exc.message)
    return jsonify(exc.to_dict()), exc.status_code


@api_bp.post("/route-matrix")
@require_auth
def route_matrix():
    result = get_proxy().fetch(_load_matrix_request())
    return jsonify(result.payload), HTTPStatus.OK
