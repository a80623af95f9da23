from werkzeug.exceptions import HTTPException

from farm_records.routes.common import error


def register_blueprints(app):
    from farm_records.routes.auth import auth_bp
    from farm_records.routes.crop import crop_bp
    from farm_records.routes.dashboard import dashboard_bp
    from farm_records.routes.farm import farm_bp
    from farm_records.routes.health import health_bp
    from farm_records.routes.recommendation import recommendation_bp
    from farm_records.routes.weather import weather_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(farm_bp)
    app.register_blueprint(crop_bp)
    app.register_blueprint(weather_bp)
    app.register_blueprint(recommendation_bp)
    app.register_blueprint(dashboard_bp)


def register_error_handlers(app):
    # unknown urls, wrong methods and the like answer in the same shape as the handlers
    def _http_error_handler(e):
        return error(e.name, e.code)

    def _unexpected_error_handler(e):
        app.logger.exception("Unhandled %s", type(e).__name__)
        return error('Internal server error', 500)

    app.register_error_handler(HTTPException, _http_error_handler)
    app.register_error_handler(Exception, _unexpected_error_handler)
