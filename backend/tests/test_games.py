import pytest

from duoparty import events
from duoparty.errors import GameNotFound, SessionNotFound, StaleRound, ValidationError
from duoparty.services.games import GameManager
from duoparty.services.scoring import answering_index
from duoparty.services.sessions import SessionManager


@pytest.fixture()
def sessions(store, registry, recording_scheduler, logger):
    return SessionManager(store, registry, recording_scheduler, logger)


@pytest.fixture()
def games(store, bank, logger):
    return GameManager(store, bank, logger)


@pytest.fixture()
def room(sessions):
    session = sessions.create('Test', 'local')
    sessions.join_local(session.room, 'Alice', 'Bob', 'sid-1')
    return session.room


def _start(games, room, mode='chill'):
    out = games.start(room, mode)
    return out[0].payload['gameId']


def test_answering_index_follows_round_parity():
    assert [answering_index(r) for r in range(1, 7)] == [0, 1, 0, 1, 0, 1]


def test_start_game(games, store, room):
    out = games.start(room, 'chill')
    assert [e.event for e in out] == [events.LOCAL_GAME_STARTED]
    game_id = out[0].payload['gameId']

    game = store.get_game(game_id)
    assert game.current_round == 1
    assert game.mode == 'chill'
    assert game.room_id == room
    assert len(game.questions) == 20

    session = store.get_session(room)
    assert session.status == 'in_game'
    assert session.current_game_id == game_id
    assert session.used_questions == [q['id'] for q in game.questions]


def test_start_game_unknown_session(games, store):
    with pytest.raises(SessionNotFound):
        games.start('missing', 'chill')
    assert 'missing' not in store._locks


def test_successive_starts_never_redraw(store, make_bank, logger, sessions, room):
    games = GameManager(store, make_bank(per_mode=50), logger)
    drawn = []
    for _ in range(2):
        game = store.get_game(_start(games, room))
        drawn.extend(q['id'] for q in game.questions)
    # third start only finds the 10 questions left
    game = store.get_game(_start(games, room))
    drawn.extend(q['id'] for q in game.questions)

    assert len(game.questions) == 10
    assert len(drawn) == len(set(drawn)) == 50
    assert store.get_session(room).used_questions == drawn


def test_restart_replaces_live_game(games, store, room):
    first = _start(games, room)
    second = _start(games, room)
    assert store.get_game(first) is None
    assert store.get_session(room).current_game_id == second


def test_accepted_answer_scores_answering_player(games, store, room):
    game_id = _start(games, room)
    out = games.answer(game_id, True)

    session = store.get_session(room)
    assert [p.points for p in session.players] == [10, 0]
    game = store.get_game(game_id)
    assert game.current_round == 2

    assert [e.event for e in out] == [events.LOCAL_UPDATE_SCORE, events.LOCAL_NEXT_ROUND]
    assert out[0].payload == {'players': [p.to_dict() for p in session.players]}
    assert out[1].payload == {'currentRound': 2, 'question': game.questions[1]}

    # round 2 belongs to the second player
    games.answer(game_id, True)
    assert [p.points for p in store.get_session(room).players] == [10, 10]


def test_rejected_answer_keeps_points(games, store, room):
    game_id = _start(games, room)
    games.answer(game_id, False)
    assert [p.points for p in store.get_session(room).players] == [0, 0]
    assert store.get_game(game_id).current_round == 2


def test_full_game_ends_after_round_twenty(games, store, room):
    game_id = _start(games, room)
    for _ in range(19):
        out = games.answer(game_id, True)
        assert out[-1].event == events.LOCAL_NEXT_ROUND
    assert store.get_game(game_id).current_round == 20

    out = games.answer(game_id, True)
    assert [e.event for e in out] == [events.LOCAL_UPDATE_SCORE, events.LOCAL_END_GAME]
    assert [p['points'] for p in out[1].payload['players']] == [100, 100]
    assert store.get_game(game_id) is None
    session = store.get_session(room)
    assert session.current_game_id is None
    assert session.status == 'in_game_selection_menu'


def test_short_question_list_ends_early(store, make_bank, logger, room):
    games = GameManager(store, make_bank(per_mode=3), logger)
    game_id = _start(games, room)
    assert games.answer(game_id, True)[-1].event == events.LOCAL_NEXT_ROUND
    assert games.answer(game_id, True)[-1].event == events.LOCAL_NEXT_ROUND
    out = games.answer(game_id, True)
    assert out[-1].event == events.LOCAL_END_GAME
    assert store.get_game(game_id) is None


def test_empty_question_list_ends_on_first_answer(store, make_bank, logger, room):
    games = GameManager(store, make_bank(per_mode=0), logger)
    game_id = _start(games, room)
    out = games.answer(game_id, True)
    assert [e.event for e in out] == [events.LOCAL_UPDATE_SCORE, events.LOCAL_END_GAME]
    assert [p['points'] for p in out[1].payload['players']] == [0, 0]


@pytest.mark.parametrize('accepted', [None, 'yes', 1, 0])
def test_answer_requires_boolean(games, store, room, accepted):
    game_id = _start(games, room)
    with pytest.raises(ValidationError):
        games.answer(game_id, accepted)
    assert store.get_game(game_id).current_round == 1


def test_answer_unknown_records(games, store, redis_client, room):
    with pytest.raises(GameNotFound):
        games.answer('missing', True)
    game_id = _start(games, room)
    redis_client.delete(f'session:{room}')
    with pytest.raises(SessionNotFound):
        games.answer(game_id, True)


def test_stale_round_is_rejected(games, store, room):
    game_id = _start(games, room)
    games.answer(game_id, True, expected_round=1)
    with pytest.raises(StaleRound):
        games.answer(game_id, True, expected_round=1)
    assert store.get_game(game_id).current_round == 2
    assert [p.points for p in store.get_session(room).players] == [10, 0]


def test_report_then_reject_advances_one_round(games, bank, store, room):
    game_id = _start(games, room)
    question = store.get_game(game_id).questions[0]

    assert games.report(game_id, question['id']) == []
    assert bank.reports == [(question['id'], game_id, room, 1)]
    assert store.get_game(game_id).current_round == 1

    # the reporting client follows up with a rejection
    out = games.answer(game_id, False)
    assert [e.event for e in out] == [events.LOCAL_UPDATE_SCORE, events.LOCAL_NEXT_ROUND]
    assert store.get_game(game_id).current_round == 2
    assert [p.points for p in store.get_session(room).players] == [0, 0]


def test_report_other_question_is_audit_only(games, bank, store, room):
    game_id = _start(games, room)
    assert games.report(game_id, 'not-the-current-one') == []
    assert len(bank.reports) == 1
    assert store.get_game(game_id).current_round == 1


def test_out_of_bounds_round_ends_game(games, store, room):
    game_id = _start(games, room)
    game = store.get_game(game_id)
    game.current_round = 25
    store.save(game=game)

    out = games.answer(game_id, True)
    assert [e.event for e in out] == [events.LOCAL_UPDATE_SCORE, events.LOCAL_END_GAME]
    assert store.get_game(game_id) is None
    assert store.get_session(room).current_game_id is None
    assert [p.points for p in store.get_session(room).players] == [0, 0]
