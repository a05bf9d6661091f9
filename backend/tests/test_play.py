import threading

import pytest

from codebreaker.errors import SecretsNotReady, SessionNotFound
from codebreaker.services.games import play
from codebreaker.services.games.store import SessionStore
from codebreaker.services.presence import PresenceRegistry


@pytest.fixture()
def store():
    store = SessionStore()
    store.create('g1', 'alice', 'bob')
    return store


@pytest.fixture()
def presence():
    registry = PresenceRegistry()
    for sid in ('alice', 'bob', 'carol'):
        registry.register(sid, sid.title())
    return registry


def _commit_both(store, notifier):
    play.commit_secret(store, notifier, 'alice', 'g1', [1, 2, 3, 4])
    play.commit_secret(store, notifier, 'bob', 'g1', [4, 3, 2, 1])


def test_first_commit_tells_only_the_opponent(store, notifier):
    play.commit_secret(store, notifier, 'bob', 'g1', [4, 3, 2, 1])
    assert notifier.sent == [('alice', 'opponent_code_set', {'gameId': 'g1'})]


def test_second_commit_tells_both(store, notifier):
    _commit_both(store, notifier)
    assert notifier.events_for('alice', 'both_codes_set') == [{'gameId': 'g1'}]
    assert notifier.events_for('bob', 'both_codes_set') == [{'gameId': 'g1'}]


def test_commit_unknown_game(store, notifier):
    with pytest.raises(SessionNotFound):
        play.commit_secret(store, notifier, 'alice', 'nope', [1, 2, 3, 4])
    assert notifier.sent == []


def test_guess_before_ready_sends_nothing(store, notifier):
    with pytest.raises(SecretsNotReady):
        play.submit_guess(store, notifier, 'alice', 'g1', [1, 2, 3, 4])
    assert notifier.sent == []


def test_winning_guess_notifications(store, notifier):
    _commit_both(store, notifier)
    notifier.sent.clear()

    play.submit_guess(store, notifier, 'alice', 'g1', [4, 3, 2, 1])

    [feedback] = notifier.events_for('alice', 'guess_feedback')
    assert feedback['guessData'] == {'guess': [4, 3, 2, 1], 'feedback': ['black'] * 4}
    assert feedback['isWin'] is True
    assert feedback['gameOver'] is True
    assert feedback['attemptsLeft'] == 9
    assert notifier.events_for('bob', 'opponent_guess') == [
        {'gameId': 'g1', 'guessData': {'guess': [4, 3, 2, 1], 'feedback': ['black'] * 4}}
    ]
    assert notifier.events_for('bob', 'opponent_game_status') == [
        {'gameId': 'g1', 'opponentWon': True, 'opponentLost': False}
    ]


def test_non_final_guess_has_no_status_notice(store, notifier):
    _commit_both(store, notifier)
    notifier.sent.clear()
    play.submit_guess(store, notifier, 'bob', 'g1', [1, 2, 4, 3])
    assert notifier.names_for('alice') == ['opponent_guess']
    [feedback] = notifier.events_for('bob', 'guess_feedback')
    assert feedback['guessData']['feedback'] == ['black', 'black', 'white', 'white']
    assert feedback['gameOver'] is False


def test_exhausted_row_tells_opponent_they_held_out(store, notifier):
    _commit_both(store, notifier)
    for _ in range(10):
        play.submit_guess(store, notifier, 'bob', 'g1', [5, 5, 5, 5])
    assert notifier.events_for('alice', 'opponent_game_status') == [
        {'gameId': 'g1', 'opponentWon': False, 'opponentLost': True}
    ]


def test_abandon_notifies_each_surviving_opponent(presence, notifier):
    store = SessionStore()
    store.create('g1', 'alice', 'bob')
    store.create('g2', 'carol', 'alice')
    store.create('g3', 'bob', 'carol')
    presence.unregister('alice')

    removed = play.abandon_sessions_for(store, presence, notifier, 'alice')

    assert {s.id for s in removed} == {'g1', 'g2'}
    assert notifier.events_for('bob', 'opponent_disconnected') == [{'gameId': 'g1'}]
    assert notifier.events_for('carol', 'opponent_disconnected') == [{'gameId': 'g2'}]
    assert 'g3' in store
    with pytest.raises(SessionNotFound):
        play.submit_guess(store, notifier, 'bob', 'g1', [1, 2, 3, 4])


class LockCheckingNotifier:
    """Records, for every send, whether another thread could take the session lock."""

    def __init__(self, session):
        self.session = session
        self.lock_free_during_send = []

    def send(self, connection, event, payload):
        result = []

        def try_lock():
            acquired = self.session.lock.acquire(blocking=False)
            if acquired:
                self.session.lock.release()
            result.append(acquired)

        other = threading.Thread(target=try_lock)
        other.start()
        other.join()
        self.lock_free_during_send.append(result[0])


def test_notifications_sent_while_session_lock_held(store):
    session = store.get('g1')
    checker = LockCheckingNotifier(session)
    play.commit_secret(store, checker, 'alice', 'g1', [1, 2, 3, 4])
    play.commit_secret(store, checker, 'bob', 'g1', [4, 3, 2, 1])
    play.submit_guess(store, checker, 'alice', 'g1', [4, 3, 2, 1])
    # opponent_code_set, both_codes_set x2, guess_feedback, opponent_guess, opponent_game_status
    assert len(checker.lock_free_during_send) == 6
    assert not any(checker.lock_free_during_send)
