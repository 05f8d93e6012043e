from typing import Optional


class ProxyError(Exception):
    """Base class for errors the proxy maps to a JSON error response."""

    status_code = 500

    def to_dict(self) -> dict:
        return {'error': str(self)}


class MissingParameter(ProxyError):
    status_code = 400

    def __init__(self, field: str, reason: str = None):
        self.field = field
        self.reason = reason or f"{field} param is required"
        super().__init__(self.reason)

    def to_dict(self) -> dict:
        return {'error': self.reason, 'field': self.field}


class MalformedRecord(ProxyError):
    status_code = 502

    def __init__(self, tournament_id: Optional[str], index: int, field: str):
        self.tournament_id = tournament_id
        self.index = index
        self.field = field
        super().__init__(
            f"Participant #{index} of tournament {tournament_id} has no {field}"
        )

    def to_dict(self) -> dict:
        return {
            'error': str(self),
            'tournament_id': self.tournament_id,
            'field': self.field
        }


class UpstreamFailure(ProxyError):
    status_code = 502

    def __init__(self, tournament_id: Optional[str], cause, status_code: int = None):
        self.tournament_id = tournament_id
        self.cause = cause
        self.upstream_status = status_code
        if tournament_id:
            message = f"Upstream request for tournament {tournament_id} failed: {cause}"
        else:
            message = f"Upstream request failed: {cause}"
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            'error': str(self),
            'tournament_id': self.tournament_id,
            'upstream_status': self.upstream_status
        }
