"""
Pytest configuration and fixtures for Challonge proxy tests.
"""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Set testing environment before importing app
os.environ['FLASK_ENV'] = 'testing'

from proxy.app import create_app
from shared.aggregation import Participant


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app('testing')
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def participant_node():
    """Participant node as returned by the upstream API."""
    def make(pid, name, tournament_id):
        return {'participant': {'id': pid, 'name': name, 'tournament_id': tournament_id}}
    return make


@pytest.fixture
def make_participant():
    def make(pid, name, tournament_id='100'):
        return Participant(id=pid, name=name, tournament_id=tournament_id)
    return make


@pytest.fixture
def upstream_response(mocker):
    """Build a fake requests.Response."""
    def make(status_code=200, body=None):
        resp = mocker.MagicMock()
        resp.status_code = status_code
        resp.json.return_value = body
        return resp
    return make
