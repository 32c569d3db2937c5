from flask import Flask

from .config import Config
from .extensions import STORE_KEY, cors
from .logs import configure_logging
from .storage.json_store import DocumentStore


def create_app(config_class: type[Config] = Config, db_path=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    if db_path is not None:
        app.config["DB_PATH"] = str(db_path)

    # Collection names come straight from the raw path
    app.url_map.merge_slashes = False
    # Records keep the key order clients sent
    app.json.sort_keys = False

    configure_logging(app)

    # Extensions
    cors.init_app(app, origins=app.config["CORS_ORIGINS"])

    # Store is loaded once; a missing or malformed file aborts startup
    app.extensions[STORE_KEY] = DocumentStore.load(app.config["DB_PATH"])

    # Blueprints
    from .routes.collections import bp as collections_bp

    app.register_blueprint(collections_bp)

    return app
