import random
import threading

import pytest

from maze_runner.maze import START
from maze_runner.models import PlayerUpdate
from maze_runner.state import ROUND_ACTIVE, ROUND_OVER, GameState, PlayerNotRegistered


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def state(clock):
    gs = GameState(31, 21, clock=clock, rng=random.Random(11))
    gs.configure(31, 21)
    return gs


def finish(state, sid, name='P'):
    return state.update(sid, PlayerUpdate(x=29, y=19, name=name, color='#00ff00', finished=True))


def test_register_spawns_at_start(state):
    player = state.register('a')
    assert (player.x, player.y) == START
    assert player.name == 'Anon'
    assert player.color == '#ff0000'
    assert not player.finished
    assert player.finish_rank == 0


def test_update_overwrites_position_name_color(state):
    state.register('a')
    player = state.update('a', PlayerUpdate(x=3, y=5, name='Alice', color='#123456'))
    assert (player.x, player.y, player.name, player.color) == (3, 5, 'Alice', '#123456')
    assert not player.finished


def test_update_unknown_player_raises(state):
    with pytest.raises(PlayerNotRegistered):
        state.update('ghost', PlayerUpdate())


def test_unregister_is_noop_when_absent(state):
    assert state.unregister('ghost') is None
    assert state.snapshot().players == ()


def test_finish_ranks_follow_arrival_order(state, clock):
    for sid in 'abcd':
        state.register(sid)
    times = []
    for i, sid in enumerate('cadb'):
        clock.now += 3
        player = finish(state, sid, name=sid)
        assert player.finish_rank == i + 1
        times.append(player.finish_time)
    assert times == sorted(times)
    assert all(t >= 0 for t in times)
    assert state.finish_rank == 4


def test_finish_time_is_whole_seconds_since_round_start(state, clock):
    state.register('a')
    clock.now += 12.7
    player = finish(state, 'a')
    assert player.finish_time == 12


def test_duplicate_finish_is_ignored(state, clock):
    state.register('a')
    state.register('b')
    first = finish(state, 'a')
    clock.now += 30
    again = finish(state, 'a')
    assert again.finish_rank == first.finish_rank == 1
    assert again.finish_time == first.finish_time
    assert state.finish_rank == 1


def test_unfinish_report_does_not_revert(state):
    state.register('a')
    state.register('b')
    finish(state, 'a')
    player = state.update('a', PlayerUpdate(x=1, y=1, name='P', finished=False))
    assert player.finished
    assert player.finish_rank == 1


def test_game_over_latches_on_last_finisher(state):
    state.register('a')
    state.register('b')
    finish(state, 'a')
    assert state.phase == ROUND_ACTIVE
    assert not state.snapshot().game_over
    finish(state, 'b')
    assert state.phase == ROUND_OVER
    snap = state.snapshot()
    assert snap.all_finished and snap.game_over


def test_game_over_survives_disconnects(state):
    state.register('a')
    finish(state, 'a')
    assert state.snapshot().game_over
    state.unregister('a')
    snap = state.snapshot()
    assert snap.game_over
    assert not snap.all_finished
    assert state.phase == ROUND_OVER


def test_empty_registry_is_never_game_over(state):
    snap = state.snapshot()
    assert not snap.all_finished
    assert not snap.game_over


def test_leaving_unfinished_player_ends_round(state):
    state.register('a')
    state.register('b')
    finish(state, 'a')
    state.unregister('b')
    assert state.snapshot().game_over


def test_disconnect_keeps_other_ranks(state):
    for sid in 'abc':
        state.register(sid)
    finish(state, 'a', name='A')
    finish(state, 'b', name='B')
    state.unregister('a')
    snap = state.snapshot()
    assert [p.name for p in snap.players] == ['B', 'Anon']
    assert snap.players[0].finish_rank == 2
    assert snap.recipients == ('b', 'c')
    assert finish(state, 'c').finish_rank == 3


def test_reset_starts_new_round(state, clock):
    state.register('a')
    state.register('b')
    finish(state, 'a')
    finish(state, 'b')
    old_maze = state.maze()
    clock.now += 100
    state.reset()
    snap = state.snapshot()
    assert not snap.game_over
    assert state.phase == ROUND_ACTIVE
    assert state.finish_rank == 0
    for p in snap.players:
        assert (p.x, p.y) == START
        assert not p.finished
        assert p.finish_rank == 0 and p.finish_time == 0
    new_maze = state.maze()
    assert new_maze is not old_maze
    assert new_maze.is_passage(*START)
    assert new_maze.is_passage(*new_maze.goal)
    # finish times measure from the new round start
    clock.now += 4
    assert finish(state, 'a').finish_time == 4
    assert state.finish_rank == 1


def test_snapshot_is_a_copy(state):
    state.register('a')
    snap = state.snapshot()
    state.update('a', PlayerUpdate(x=7, y=7, name='Moved'))
    assert snap.players[0].x == 1
    assert snap.players[0].name == 'Anon'


def test_two_player_race_scenario(state):
    state.register('p1')
    state.register('p2')
    p1 = finish(state, 'p1', name='P1')
    assert p1.finish_rank == 1
    assert not state.snapshot().game_over
    p2 = finish(state, 'p2', name='P2')
    assert p2.finish_rank == 2
    snap = state.snapshot()
    assert snap.to_dict()['allFinished'] is True
    assert snap.to_dict()['gameOver'] is True
    ranks = {p['name']: p['finishRank'] for p in snap.to_dict()['players']}
    assert ranks == {'P1': 1, 'P2': 2}


def test_concurrent_finishers_get_unique_ranks(state):
    sids = [f"p{i}" for i in range(40)]
    for sid in sids:
        state.register(sid)
    barrier = threading.Barrier(len(sids))

    def racer(sid):
        barrier.wait()
        for _ in range(5):
            finish(state, sid, name=sid)

    threads = [threading.Thread(target=racer, args=(sid,)) for sid in sids]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ranks = sorted(p.finish_rank for p in state.snapshot().players)
    assert ranks == list(range(1, len(sids) + 1))
    assert state.snapshot().game_over


def test_maze_queries(state):
    rows = state.maze_rows()
    assert len(rows) == 21 and len(rows[0]) == 31
    assert state.maze_info() == {'goalX': 29, 'goalY': 19, 'width': 31, 'height': 21}
