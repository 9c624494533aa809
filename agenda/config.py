import os


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key')

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///agenda.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Outbound email (Flask-Mail)
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'localhost')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 25))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'false').lower() == 'true'
    MAIL_USE_SSL = os.environ.get('MAIL_USE_SSL', 'false').lower() == 'true'
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'noreply@agenda.local')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', '€')

    # Default page size for paginated listings
    PAGE_SIZE = int(os.environ.get('PAGE_SIZE', 10))


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    MAIL_SUPPRESS_SEND = True
    LOG_LEVEL = 'DEBUG'
