"""
Thin client for the Challonge v1 tournaments API.

Builds upstream URLs from resolved tournament identifiers and turns every
transport error, non-success status or unparseable body into an
UpstreamFailure. The api key is forwarded as a query parameter and never
logged.
"""
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests

from shared.aggregation import Participant
from shared.errors import UpstreamFailure

logger = logging.getLogger(__name__)

SUFFIX = '.json'


class ChallongeClient:
    """Forwards proxy requests to Challonge."""

    def __init__(
        self,
        base_url: str = 'https://api.challonge.com/v1/tournaments',
        timeout: float = 10,
        session: requests.Session = None
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, *segments: str) -> str:
        if not segments:
            return f"{self.base_url}{SUFFIX}"
        path = '/'.join(quote(str(s), safe='') for s in segments)
        return f"{self.base_url}/{path}{SUFFIX}"

    def _request(
        self,
        method: str,
        url: str,
        api_key: str,
        tournament_id: Optional[str] = None,
        params: dict = None,
        json: dict = None
    ) -> requests.Response:
        query = dict(params or {})
        query['api_key'] = api_key

        try:
            resp = self.session.request(
                method, url, params=query, json=json, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            # str(e) carries the full request url, api key included
            cause = f"{type(e).__name__} on {method} {url}"
            logger.error(f"Upstream request failed: {cause}")
            raise UpstreamFailure(tournament_id, cause) from None

        if resp.status_code >= 400:
            logger.error(f"{method} {url} returned {resp.status_code}")
            raise UpstreamFailure(
                tournament_id,
                f"upstream returned {resp.status_code}",
                status_code=resp.status_code
            )

        logger.debug(f"{method} {url} -> {resp.status_code}")
        return resp

    def _json(self, resp: requests.Response, tournament_id: Optional[str]) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamFailure(
                tournament_id, f"unparseable body: {e}", status_code=resp.status_code
            ) from e

    # ==================== Tournaments ====================

    def list_tournaments(self, api_key: str, subdomain: str, created_after: str) -> Any:
        resp = self._request(
            'GET', self._url(), api_key,
            params={'subdomain': subdomain, 'created_after': created_after}
        )
        return self._json(resp, None)

    def get_tournament(self, tournament_id: str, api_key: str) -> Any:
        """Fetch one tournament with its matches but without participants."""
        resp = self._request(
            'GET', self._url(tournament_id), api_key, tournament_id,
            params={'include_participants': 0, 'include_matches': 1}
        )
        return self._json(resp, tournament_id)

    # ==================== Matches ====================

    def get_matches(self, tournament_id: str, api_key: str) -> Any:
        resp = self._request('GET', self._url(tournament_id, 'matches'), api_key, tournament_id)
        return self._json(resp, tournament_id)

    def update_match(
        self,
        tournament_id: str,
        match_id: str,
        api_key: str,
        winner_id: str,
        scores_csv: str = None
    ) -> requests.Response:
        body = {
            'match': {
                'winner_id': winner_id,
                'scores_csv': scores_csv or '0-0'
            }
        }
        return self._request(
            'PUT', self._url(tournament_id, 'matches', match_id),
            api_key, tournament_id, json=body
        )

    def reopen_match(self, tournament_id: str, match_id: str, api_key: str) -> requests.Response:
        return self._request(
            'POST', self._url(tournament_id, 'matches', match_id, 'reopen'),
            api_key, tournament_id
        )

    # ==================== Participants ====================

    def get_participants_raw(self, tournament_id: str, api_key: str) -> Any:
        resp = self._request(
            'GET', self._url(tournament_id, 'participants'), api_key, tournament_id
        )
        return self._json(resp, tournament_id)

    def get_participants(self, tournament_id: str, api_key: str) -> List[Participant]:
        """Fetch the participants of one tournament as Participant records."""
        data = self.get_participants_raw(tournament_id, api_key)
        if not isinstance(data, list):
            raise UpstreamFailure(tournament_id, "expected a list of participants")
        return [Participant.from_upstream(node, tournament_id) for node in data]
