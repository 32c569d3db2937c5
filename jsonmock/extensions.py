# jsonmock/extensions.py
from flask import current_app
from flask_cors import CORS

# CORS is a real Flask extension (keeps init_app)
cors = CORS()

STORE_KEY = "jsonmock"


def get_store():
    """Document store owned by the running app."""
    return current_app.extensions[STORE_KEY]
