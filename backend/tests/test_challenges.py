import pytest

from codebreaker.errors import TargetNotPresent

from codebreaker.services.games.challenges import ChallengeBroker
from codebreaker.services.games.store import SessionStore
from codebreaker.services.presence import PresenceRegistry


@pytest.fixture()
def presence():
    registry = PresenceRegistry()
    registry.register('sid-a', 'alice')
    registry.register('sid-b', 'bob')
    return registry


@pytest.fixture()
def store():
    return SessionStore()


@pytest.fixture()
def broker(presence, store, notifier):
    return ChallengeBroker(presence, store, notifier)


def test_challenge_forwarded_to_target(broker, notifier):
    assert broker.send_challenge('sid-a', 'sid-b')
    assert notifier.events_for('sid-b', 'challenge_received') == [
        {'username': 'alice', 'connectionId': 'sid-a'}
    ]
    assert notifier.names_for('sid-a') == []


def test_challenge_to_absent_target_dropped(broker, notifier, store):
    assert not broker.send_challenge('sid-a', 'sid-ghost')
    assert notifier.sent == []
    assert len(store) == 0


def test_challenge_from_unregistered_dropped(broker, notifier):
    assert not broker.send_challenge('sid-ghost', 'sid-b')
    assert notifier.sent == []


def test_accept_creates_session_with_roles(broker, notifier, store):
    session = broker.accept_challenge('sid-b', 'sid-a')
    assert session is not None
    assert session.player_a == 'sid-a'
    assert session.player_b == 'sid-b'
    assert store.get(session.id) is session
    assert session.id.startswith('sid-a_sid-b_')

    [to_challenger] = notifier.events_for('sid-a', 'challenge_accepted')
    [to_accepter] = notifier.events_for('sid-b', 'challenge_accepted')
    assert to_challenger == {
        'gameId': session.id, 'role': 'challenger', 'opponent': 'bob', 'opponentConnectionId': 'sid-b',
    }
    assert to_accepter == {
        'gameId': session.id, 'role': 'accepter', 'opponent': 'alice', 'opponentConnectionId': 'sid-a',
    }


def test_accept_after_challenger_left_dropped(broker, presence, notifier, store):
    presence.unregister('sid-a')
    assert broker.accept_challenge('sid-b', 'sid-a') is None
    assert len(store) == 0
    assert notifier.sent == []


def test_rapid_rematches_get_distinct_sessions(broker, store):
    first = broker.accept_challenge('sid-b', 'sid-a')
    second = broker.accept_challenge('sid-b', 'sid-a')
    assert first.id != second.id
    assert len(store) == 2


def test_self_or_absent_target_raises_target_not_present(broker):
    with pytest.raises(TargetNotPresent):
        broker._check_challenge('sid-a', 'sid-a')
    with pytest.raises(TargetNotPresent):
        broker._check_challenge('sid-a', 'sid-ghost')
    assert broker._check_challenge('sid-a', 'sid-b').username == 'alice'
