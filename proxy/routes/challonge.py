from flask import Blueprint, request, jsonify, current_app

from shared.errors import MissingParameter
from shared.identifiers import TournamentRef, resolve
from proxy.player_set import PARTIAL, parse_tournament_ids

bp = Blueprint('challonge', __name__)


def require(params, field: str):
    value = params.get(field)
    if value is None or value == '':
        raise MissingParameter(field)
    return value


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# --- Tournaments ---

@bp.route('/tournaments', methods=['GET'])
def list_tournaments():
    params = request.args
    subdomain = require(params, 'subdomain')
    api_key = require(params, 'api_key')
    created_after = require(params, 'created_after')

    return jsonify(current_app.challonge.list_tournaments(api_key, subdomain, created_after))


@bp.route('/tournament', methods=['GET'])
def get_tournament():
    """Tournament by id or subdomain + name, including its matches."""
    params = request.args
    api_key = require(params, 'api_key')
    id_path = resolve(TournamentRef.from_params(params))

    return jsonify(current_app.challonge.get_tournament(id_path, api_key))


# --- Matches ---

@bp.route('/matches', methods=['GET'])
def get_matches():
    params = request.args
    api_key = require(params, 'api_key')
    id_path = resolve(TournamentRef.from_params(params))

    return jsonify(current_app.challonge.get_matches(id_path, api_key))


@bp.route('/match', methods=['PUT'])
def update_match():
    """Submit a match winner and score."""
    data = json_body()
    api_key = require(data, 'api_key')
    id_path = resolve(TournamentRef.from_params(data))
    match_id = require(data, 'match_id')
    winner_id = require(data, 'winner_id')

    resp = current_app.challonge.update_match(
        id_path, match_id, api_key,
        winner_id=winner_id,
        scores_csv=data.get('scores_csv')
    )
    if resp.status_code == 200:
        return jsonify({'success': True})
    return jsonify({'success': False}), 500


@bp.route('/match/reopen', methods=['POST'])
def reopen_match():
    data = json_body()
    api_key = require(data, 'api_key')
    id_path = resolve(TournamentRef.from_params(data))
    match_id = require(data, 'match_id')

    resp = current_app.challonge.reopen_match(id_path, match_id, api_key)
    if resp.status_code == 200:
        return jsonify({'success': True})
    return jsonify({'success': False}), 500


# --- Participants ---

@bp.route('/players', methods=['GET'])
def get_players():
    params = request.args
    api_key = require(params, 'api_key')
    id_path = resolve(TournamentRef.from_params(params))

    return jsonify(current_app.challonge.get_participants_raw(id_path, api_key))


@bp.route('/players-set', methods=['GET'])
def get_players_set():
    """
    Players across several tournaments, merged by name.

    ``tournament_ids`` is a comma-separated list of upstream ids.
    """
    params = request.args
    raw_ids = require(params, 'tournament_ids')
    api_key = require(params, 'api_key')

    tournament_ids = parse_tournament_ids(raw_ids)
    if not tournament_ids:
        raise MissingParameter('tournament_ids')

    service = current_app.player_set
    result, failures = service.build(tournament_ids, api_key)

    payload = result.to_dict()
    if service.failure_policy == PARTIAL:
        payload['failed'] = [
            {'tournamentId': f.tournament_id, 'error': str(f.cause)}
            for f in failures
        ]
    return jsonify(payload)
