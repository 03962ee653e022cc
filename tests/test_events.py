import random

from falling_blocks.game import Action, BlockDropGame, EventBus, GameEvent


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_emit_without_subscribers_is_harmless():
    EventBus().emit("nobody_listens", value=1)


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    calls = []

    def handler(sender, **kwargs):
        calls.append(kwargs)

    bus.subscribe("move", handler)
    bus.unsubscribe("move", handler)
    bus.emit("move", dx=1)
    assert calls == []


def test_publish_forwards_game_events_in_order():
    bus = EventBus()
    seen = []
    bus.subscribe("lock", lambda sender, **kw: seen.append(("lock", kw)))
    bus.subscribe("lines_cleared", lambda sender, **kw: seen.append(("lines_cleared", kw)))
    bus.publish([GameEvent("lock", {"piece": None}), GameEvent("lines_cleared", {"count": 2})])
    assert seen == [("lock", {"piece": None}), ("lines_cleared", {"count": 2})]


def test_game_publishes_action_events_on_its_bus():
    game = BlockDropGame(rng=random.Random(2))
    moves = []
    game.bus.subscribe("move", lambda sender, **kw: moves.append(kw["dx"]))

    events = game.step(Action.LEFT)

    assert moves == [-1]
    assert events == [GameEvent("move", {"dx": -1})]


def test_game_tracks_state_across_calls():
    game = BlockDropGame(rng=random.Random(2))
    start = game.state
    game.step(Action.HARD_DROP)
    assert game.state is not start
    assert game.state.board.filled_cells() == 4
    assert game.get_state()["score"] == game.score == 0


def test_game_reset_with_seed_is_reproducible():
    game = BlockDropGame(rng=random.Random(9))
    game.reset(seed=123)
    first = game.state.active
    game.step(Action.HARD_DROP)
    events = game.reset(seed=123)
    assert [e.name for e in events] == ["reset"]
    assert game.state.active.same_as(first)
    assert game.state.board.filled_cells() == 0


def test_game_over_is_observable():
    game = BlockDropGame(rng=random.Random(4))
    over = []
    game.bus.subscribe("game_over", lambda sender, **kw: over.append(kw["score"]))
    for _ in range(40):
        game.step(Action.HARD_DROP)
        if game.game_over:
            break
    assert game.game_over
    assert over == [game.score]


def test_game_reset_restarts_a_paused_session():
    game = BlockDropGame(rng=random.Random(4))
    game.step(Action.HARD_DROP)
    game.step(Action.PAUSE)
    assert game.state.is_paused
    events = game.reset()
    assert [e.name for e in events] == ["reset"]
    assert game.state.is_running
    assert game.state.board.filled_cells() == 0
