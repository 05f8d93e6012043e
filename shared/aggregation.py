"""
Cross-tournament player aggregation.

Participants from several tournaments are merged by exact name into a
single cross-reference: the distinct names in first-seen order, every
(tournament, participant id) pair a name was entered under, and a reverse
lookup from participant id to name.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .errors import MalformedRecord


@dataclass(frozen=True)
class Participant:
    id: Optional[str]
    name: Optional[str]
    tournament_id: Optional[str]

    @classmethod
    def from_upstream(cls, node: dict, tournament_id: str = None) -> "Participant":
        """
        Build a participant from an upstream ``{"participant": {...}}`` node.

        Missing fields are kept as None so aggregation can reject the record.
        """
        record = node.get('participant', node) if isinstance(node, dict) else None
        if not isinstance(record, dict):
            record = {}
        pid = record.get('id')
        tid = record.get('tournament_id')
        if tid is None:
            tid = tournament_id
        return cls(
            id=str(pid) if pid is not None else None,
            name=record.get('name'),
            tournament_id=str(tid) if tid is not None else None
        )


@dataclass(frozen=True)
class TournamentEntry:
    tournament_id: str
    player_id: str

    def to_dict(self) -> dict:
        return {'tournamentId': self.tournament_id, 'playerId': self.player_id}


@dataclass
class PlayerAggregate:
    names: List[str] = field(default_factory=list)
    entities: Dict[str, List[TournamentEntry]] = field(default_factory=dict)
    player_index: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'entities': {
                name: [entry.to_dict() for entry in entries]
                for name, entries in self.entities.items()
            },
            'names': list(self.names),
            'playerIndex': dict(self.player_index)
        }


def _missing(value) -> bool:
    return value is None or value == ''


def _fold(acc: PlayerAggregate, participant: Participant) -> PlayerAggregate:
    entries = acc.entities.get(participant.name)
    if entries is None:
        # only place names grows, so it keeps first-seen order
        entries = acc.entities[participant.name] = []
        acc.names.append(participant.name)

    entries.append(TournamentEntry(participant.tournament_id, participant.id))
    acc.player_index[participant.id] = participant.name
    return acc


def aggregate(batches: Iterable[Sequence[Participant]]) -> PlayerAggregate:
    """
    Merge participant batches into a PlayerAggregate.

    Batches are folded in the order given and participants in the order
    upstream returned them. Names are compared byte for byte, with no
    case or whitespace normalisation.

    Raises:
        MalformedRecord: a participant has no name or id. Nothing is
            returned in that case.
    """
    acc = PlayerAggregate()
    for batch in batches:
        for index, participant in enumerate(batch):
            if _missing(participant.name):
                raise MalformedRecord(participant.tournament_id, index, 'name')
            if _missing(participant.id):
                raise MalformedRecord(participant.tournament_id, index, 'id')
            acc = _fold(acc, participant)
    return acc
