#!/usr/bin/env python3
"""
Entry point for the Challonge Proxy.

Usage:
    python run.py

Environment Variables:
    FLASK_ENV: development or production (default: development)
    PORT: Port to run on (default: 3001)
    CHALLONGE_BASE_URL, UPSTREAM_TIMEOUT, PLAYER_SET_*: see proxy/config.py
"""
import os

from proxy.app import create_app


def run_proxy():
    """Run the proxy service."""
    app = create_app()
    port = int(os.getenv('PORT', 3001))
    debug = os.getenv('FLASK_ENV', 'development') == 'development'

    print(f"Starting Challonge Proxy on port {port}...")
    app.run(host='0.0.0.0', port=port, debug=debug)


if __name__ == '__main__':
    run_proxy()
