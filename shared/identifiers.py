from dataclasses import dataclass
from typing import Optional, Union, Mapping

from .errors import MissingParameter


def _present(value) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return value != ''


@dataclass(frozen=True)
class TournamentRef:
    """
    Reference to an upstream tournament.

    Either the upstream-assigned ``tournament_id`` or the ``subdomain`` and
    ``short_name`` pair the tournament URL is derived from. When both are
    given the explicit id wins.
    """
    tournament_id: Optional[Union[str, int]] = None
    subdomain: Optional[str] = None
    short_name: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping) -> "TournamentRef":
        """Build a reference from request args or a JSON body."""
        return cls(
            tournament_id=params.get('tournament_id'),
            subdomain=params.get('subdomain'),
            short_name=params.get('name')
        )


def resolve(ref: TournamentRef) -> str:
    """
    Return the path segment the upstream API uses for ``ref``.

    Raises:
        MissingParameter: neither representation is usable, or the named
            reference lacks its subdomain or short name.
    """
    if _present(ref.tournament_id):
        return str(ref.tournament_id)

    if not _present(ref.subdomain) and not _present(ref.short_name):
        raise MissingParameter('tournament_id', 'tournament_id or subdomain/name is required')
    if not _present(ref.subdomain):
        raise MissingParameter('subdomain')
    if not _present(ref.short_name):
        raise MissingParameter('name')

    return f"{ref.subdomain}-{ref.short_name}"
