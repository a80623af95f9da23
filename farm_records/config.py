import os


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key')

    uri = os.environ.get('DATABASE_URL')
    if uri and uri.startswith('postgresql://'):
        uri = uri.replace('postgresql://', 'postgresql+psycopg://', 1)

    # None falls back to a sqlite file in the instance folder (see create_app)
    SQLALCHEMY_DATABASE_URI = uri
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    DASHBOARD_WORKERS = max(1, int(os.environ.get('DASHBOARD_WORKERS', 4)))
    PASSWORD_HASH_METHOD = 'scrypt'


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    PASSWORD_HASH_METHOD = 'pbkdf2:sha256:1000'
    DASHBOARD_WORKERS = 1


class ProdConfig(Config):
    SESSION_COOKIE_SECURE = True


config_by_name = {
    'dev': Config,
    'test': TestConfig,
    'prod': ProdConfig,
}
