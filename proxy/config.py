import os


class Config:
    # Upstream
    CHALLONGE_BASE_URL = os.getenv(
        'CHALLONGE_BASE_URL',
        'https://api.challonge.com/v1/tournaments'
    )
    UPSTREAM_TIMEOUT = float(os.getenv('UPSTREAM_TIMEOUT', '10'))

    # Players-set fan-out
    PLAYER_SET_MAX_WORKERS = int(os.getenv('PLAYER_SET_MAX_WORKERS', '8'))
    PLAYER_SET_DEADLINE = float(os.getenv('PLAYER_SET_DEADLINE', '30'))
    PLAYER_SET_FAILURE_POLICY = os.getenv('PLAYER_SET_FAILURE_POLICY', 'abort')

    # Browser access
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    CHALLONGE_BASE_URL = 'https://challonge.test/v1/tournaments'
    PLAYER_SET_MAX_WORKERS = 4
    PLAYER_SET_DEADLINE = 5.0
    PLAYER_SET_FAILURE_POLICY = 'abort'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
