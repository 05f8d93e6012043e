"""
Unit tests for cross-tournament player aggregation.
Tests: Participant.from_upstream, aggregate, PlayerAggregate.to_dict
"""
import pytest
from shared.aggregation import (
    Participant,
    PlayerAggregate,
    TournamentEntry,
    aggregate
)
from shared.errors import MalformedRecord


class TestParticipantFromUpstream:
    """Tests for building participants from upstream nodes."""

    def test_unwraps_participant_node(self, participant_node):
        p = Participant.from_upstream(participant_node(11111, 'ebomb', 12345))
        assert p == Participant(id='11111', name='ebomb', tournament_id='12345')

    def test_ids_are_strings(self, participant_node):
        p = Participant.from_upstream(participant_node(7, 'x', 8))
        assert isinstance(p.id, str)
        assert isinstance(p.tournament_id, str)

    def test_falls_back_to_requested_tournament(self):
        p = Participant.from_upstream({'participant': {'id': 1, 'name': 'a'}}, '555')
        assert p.tournament_id == '555'

    def test_missing_fields_kept_as_none(self):
        p = Participant.from_upstream({'participant': {'tournament_id': 1}})
        assert p.id is None
        assert p.name is None

    def test_non_dict_node(self):
        p = Participant.from_upstream(None, '9')
        assert p == Participant(id=None, name=None, tournament_id='9')


class TestAggregateScenarios:
    """End-to-end aggregation scenarios."""

    def test_same_name_across_tournaments(self, make_participant):
        batches = [
            [make_participant('1', 'ebomb', '100')],
            [make_participant('2', 'ebomb', '200')],
        ]
        result = aggregate(batches).to_dict()

        assert result['names'] == ['ebomb']
        assert result['entities']['ebomb'] == [
            {'tournamentId': '100', 'playerId': '1'},
            {'tournamentId': '200', 'playerId': '2'},
        ]
        assert result['playerIndex'] == {'1': 'ebomb', '2': 'ebomb'}

    def test_empty_batch_list(self):
        assert aggregate([]).to_dict() == {'entities': {}, 'names': [], 'playerIndex': {}}

    def test_all_empty_batches(self):
        assert aggregate([[], [], []]) == PlayerAggregate()

    def test_first_seen_order(self, make_participant):
        batches = [
            [make_participant('1', 'A'), make_participant('2', 'B')],
            [make_participant('3', 'A', '200')],
        ]
        assert aggregate(batches).names == ['A', 'B']

    def test_order_follows_batches_not_names(self, make_participant):
        batches = [
            [make_participant('1', 'zed')],
            [make_participant('2', 'amy', '200'), make_participant('3', 'zed', '200')],
        ]
        result = aggregate(batches)
        assert result.names == ['zed', 'amy']
        assert [e.tournament_id for e in result.entities['zed']] == ['100', '200']

    def test_no_name_normalisation(self, make_participant):
        """Names differing only in case or whitespace are distinct players."""
        batches = [[
            make_participant('1', 'Ebomb'),
            make_participant('2', 'ebomb'),
            make_participant('3', 'ebomb '),
        ]]
        assert aggregate(batches).names == ['Ebomb', 'ebomb', 'ebomb ']

    def test_player_index_last_write_wins(self, make_participant):
        batches = [
            [make_participant('1', 'first')],
            [make_participant('1', 'second', '200')],
        ]
        assert aggregate(batches).player_index == {'1': 'second'}


class TestAggregateInvariants:
    """Structural guarantees of the aggregate."""

    @pytest.fixture
    def batches(self, make_participant):
        return [
            [make_participant('1', 'a'), make_participant('2', 'b'), make_participant('3', 'a')],
            [],
            [make_participant('4', 'c', '200'), make_participant('5', 'b', '200')],
        ]

    def test_names_unique(self, batches):
        names = aggregate(batches).names
        assert len(names) == len(set(names))

    def test_names_match_entity_keys(self, batches):
        result = aggregate(batches)
        assert set(result.names) == set(result.entities)

    def test_every_participant_indexed(self, batches):
        result = aggregate(batches)
        assert sorted(result.player_index) == ['1', '2', '3', '4', '5']

    def test_entries_keep_encounter_order(self, batches):
        result = aggregate(batches)
        assert result.entities['a'] == [
            TournamentEntry('100', '1'),
            TournamentEntry('100', '3'),
        ]
        assert [e.player_id for e in result.entities['b']] == ['2', '5']

    def test_structurally_idempotent(self, batches):
        assert aggregate(batches) == aggregate(batches)
        assert aggregate(batches).to_dict() == aggregate(batches).to_dict()

    def test_returns_fresh_aggregate(self, batches):
        first = aggregate(batches)
        first.names.append('mutated')
        assert 'mutated' not in aggregate(batches).names


class TestMalformedRecords:
    """Records without a name or id abort the aggregation."""

    def test_missing_name(self, make_participant):
        batches = [[make_participant('1', 'a'), make_participant('2', None)]]
        with pytest.raises(MalformedRecord) as exc:
            aggregate(batches)
        assert exc.value.field == 'name'
        assert exc.value.index == 1
        assert exc.value.tournament_id == '100'

    def test_missing_id(self, make_participant):
        with pytest.raises(MalformedRecord) as exc:
            aggregate([[make_participant(None, 'a')]])
        assert exc.value.field == 'id'

    def test_empty_name(self, make_participant):
        with pytest.raises(MalformedRecord):
            aggregate([[make_participant('1', '')]])

    def test_error_body(self, make_participant):
        with pytest.raises(MalformedRecord) as exc:
            aggregate([[make_participant('1', None, '42')]])
        body = exc.value.to_dict()
        assert body['tournament_id'] == '42'
        assert body['field'] == 'name'
        assert exc.value.status_code == 502
