import os
import logging
from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from shared.errors import ProxyError
from .config import config
from .challonge_client import ChallongeClient
from .player_set import PlayerSetService

# Hardening headers sent with every response
SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'X-DNS-Prefetch-Control': 'off',
    'X-Download-Options': 'noopen',
    'X-Permitted-Cross-Domain-Policies': 'none',
    'Referrer-Policy': 'no-referrer',
    'Strict-Transport-Security': 'max-age=15552000; includeSubDomains',
    'Cross-Origin-Resource-Policy': 'same-origin',
}

MASKED_PARAMS = ('api_key',)


def create_app(config_name: str = None) -> Flask:
    """Application factory for the proxy service."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config.get(config_name, config['default']))

    logging.basicConfig(level=app.config['LOG_LEVEL'])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Keep upstream and aggregate key order in responses
    app.json.sort_keys = False

    CORS(app, origins=_parse_origins(app.config['CORS_ORIGINS']))

    # Initialize services
    challonge = ChallongeClient(
        base_url=app.config['CHALLONGE_BASE_URL'],
        timeout=app.config['UPSTREAM_TIMEOUT']
    )
    player_set = PlayerSetService(
        challonge,
        max_workers=app.config['PLAYER_SET_MAX_WORKERS'],
        deadline=app.config['PLAYER_SET_DEADLINE'],
        failure_policy=app.config['PLAYER_SET_FAILURE_POLICY']
    )

    # Store services on app for access in routes
    app.challonge = challonge
    app.player_set = player_set

    register_hooks(app)
    register_error_handlers(app)
    register_routes(app)

    from .routes import challonge as challonge_routes
    app.register_blueprint(challonge_routes.bp)

    return app


def _parse_origins(value: str):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def _masked(params) -> dict:
    if not isinstance(params, dict):
        return params
    return {k: ('***' if k in MASKED_PARAMS else v) for k, v in params.items()}


def register_hooks(app: Flask):
    """Register request logging and response headers."""

    @app.after_request
    def log_and_harden(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)

        body = request.get_json(silent=True) if request.is_json else None
        app.logger.info(
            f"{request.method} {request.path} "
            f"params={_masked(request.args.to_dict())} "
            f"body={_masked(body)} "
            f"res={response.status_code}"
        )
        return response


def register_error_handlers(app: Flask):
    """Map proxy errors to a single JSON error response."""

    @app.errorhandler(ProxyError)
    def handle_proxy_error(e: ProxyError):
        if e.status_code >= 500:
            app.logger.error(f"{request.method} {request.path} failed: {e}")
        else:
            app.logger.info(f"{request.method} {request.path} rejected: {e}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({'error': e.description}), e.code


def register_routes(app: Flask):
    """Register service routes."""

    @app.route('/hello')
    def hello():
        return jsonify({'hello': True})

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'upstream': app.config['CHALLONGE_BASE_URL']
        })
