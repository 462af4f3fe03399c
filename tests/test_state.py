from zen.state import ScoreBoard, ScoreState


def test_empty_board():
	snap = ScoreBoard().snapshot()
	assert snap == ScoreState()
	assert snap.as_dict() == {"raw_score": None, "smoothed_score": None, "last_updated": None, "tick": 0}


def test_commit_in_tick_order():
	board = ScoreBoard()
	t1 = board.next_tick()
	t2 = board.next_tick()
	assert t2 > t1
	assert board.commit(t1, 80, 80, now=1.0)
	assert board.commit(t2, 60, 74, now=2.0)
	snap = board.snapshot()
	assert (snap.raw_score, snap.smoothed_score, snap.last_updated, snap.tick) == (60, 74, 2.0, t2)


def test_stale_tick_is_dropped():
	board = ScoreBoard()
	old = board.next_tick()
	new = board.next_tick()
	assert board.commit(new, 50, 50, now=2.0)
	assert not board.commit(old, 90, 90, now=3.0)
	assert board.snapshot().smoothed_score == 50
	assert board.dropped_writes == 1


def test_snapshots_are_immutable_values():
	board = ScoreBoard()
	before = board.snapshot()
	board.commit(board.next_tick(), 10, 10, now=1.0)
	assert before.smoothed_score is None
	assert board.snapshot() is not before
