from flask import Flask

from .sessions import SessionRegistry
from .store import RunStore


def create_app(test_config=None):
    """Application factory for the genesim Flask app."""
    app = Flask(__name__, instance_relative_config=False)

    # Basic configuration
    app.config.from_object('config.Config')

    if test_config is not None:
        app.config.update(test_config)

    app.extensions["genesim.store"] = RunStore(app.config["STORE_PATH"])
    app.extensions["genesim.sessions"] = SessionRegistry(idle_timeout=app.config["IDLE_TIMEOUT"])

    # Register blueprints or routes
    from . import routes
    app.register_blueprint(routes.bp)

    return app
