import os

from flask import Flask

from farm_records.config import config_by_name
from farm_records.extensions import db, login_manager
from farm_records.routes import register_blueprints, register_error_handlers
from farm_records.storage import DatabaseStorage


def create_app(config_name='dev', storage=None):
    """Build the application.

    ``storage`` is the repository every handler talks to; it is created once
    here and shared by all requests. Defaults to the SQLAlchemy-backed one.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_by_name[config_name])

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        os.makedirs(app.instance_path, exist_ok=True)
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///' + os.path.join(app.instance_path, 'farm_records.db')

    app.logger.setLevel(app.config['LOG_LEVEL'])

    db.init_app(app)
    login_manager.init_app(app)

    app.extensions['storage'] = storage if storage is not None else DatabaseStorage()

    register_blueprints(app)
    register_error_handlers(app)

    app.logger.debug("App created with %s config, storage=%s", config_name, type(app.extensions['storage']).__name__)
    return app
