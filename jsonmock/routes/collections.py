import re

from flask import Blueprint, abort, current_app, json, jsonify, request

from ..extensions import get_store
from ..storage.errors import StoreWriteError

bp = Blueprint("collections", __name__)

ID_RE = re.compile(r"[+-]?[0-9]+")
# Same bounds as a signed 64-bit id
ID_MIN, ID_MAX = -(2 ** 63), 2 ** 63 - 1
METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def split_path(path: str):
    """Return (collection, id token or None) for a request path."""
    parts = (path or "").strip("/").split("/")
    token = parts[1] if len(parts) > 1 else None
    return parts[0], token


def parse_id(token):
    if token is None or not ID_RE.fullmatch(token):
        return None
    rid = int(token)
    if not ID_MIN <= rid <= ID_MAX:
        return None
    return rid


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _read_record():
    """Decode the request body as one record.

    Returns (record, None) or (None, error response).
    """
    try:
        body = json.loads(request.get_data(as_text=True))
    except ValueError as e:
        return None, _error(str(e), 400)
    if not isinstance(body, dict):
        return None, _error("Request body must be a JSON object", 400)
    return body, None


def _handle_get(collection, token):
    store = get_store()
    if not store.has_collection(collection):
        return _error("Collection not found", 404)

    if token is None:
        return jsonify(store.list_records(collection)), 200

    rid = parse_id(token)
    if rid is None:
        return _error("Invalid ID", 400)
    record = store.get_record(collection, rid)
    if record is None:
        return _error("Item not found", 404)
    return jsonify(record), 200


def _handle_post(collection, token):
    record, err = _read_record()
    if err:
        return err
    try:
        record = get_store().create(collection, record)
    except StoreWriteError:
        current_app.logger.exception("Failed to save after create in /%s", collection)
        return _error("Failed to save data", 500)
    return jsonify(record), 201


def _handle_put(collection, token):
    if token is None:
        return _error("ID required", 400)
    rid = parse_id(token)
    if rid is None:
        return _error("Invalid ID", 400)
    record, err = _read_record()
    if err:
        return err
    try:
        record = get_store().replace(collection, rid, record)
    except StoreWriteError:
        current_app.logger.exception("Failed to save after replace in /%s/%s", collection, rid)
        return _error("Failed to save data", 500)
    if record is None:
        return _error("Item not found", 404)
    return jsonify(record), 200


def _handle_delete(collection, token):
    if token is None:
        return _error("ID required", 400)
    rid = parse_id(token)
    if rid is None:
        return _error("Invalid ID", 400)
    try:
        found = get_store().delete(collection, rid)
    except StoreWriteError:
        current_app.logger.exception("Failed to save after delete in /%s/%s", collection, rid)
        return _error("Failed to save data", 500)
    if not found:
        return _error("Item not found", 404)
    return "", 200


HANDLERS = {
    "GET": _handle_get,
    "POST": _handle_post,
    "PUT": _handle_put,
    "DELETE": _handle_delete,
}


def _is_preflight():
    return (
        request.method == "OPTIONS"
        and "Origin" in request.headers
        and "Access-Control-Request-Method" in request.headers
    )


@bp.route("/", defaults={"subpath": ""}, methods=METHODS, provide_automatic_options=False)
@bp.route("/<path:subpath>", methods=METHODS, provide_automatic_options=False)
def handle_collection(subpath):
    # CORS headers are added by flask-cors after the view
    if _is_preflight():
        return "", 200
    # Flask routes HEAD to GET views; it is not served here
    handler = HANDLERS.get(request.method)
    if handler is None:
        abort(405)
    collection, token = split_path(subpath)
    return handler(collection, token)


@bp.app_errorhandler(404)
def not_found(e):
    # Paths the router cannot match at all
    return _error("Not found", 404)


@bp.app_errorhandler(405)
def method_not_allowed(e):
    return _error("Method not allowed", 405)


@bp.after_app_request
def log_request(response):
    collection, _ = split_path(request.path)
    current_app.logger.info(
        "%s %s /%s - Status: %d",
        request.method, request.remote_addr, collection, response.status_code,
    )
    return response
