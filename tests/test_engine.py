import pytest

from conftest import answer_correctly, answer_wrongly, type_answer
from mathblitz.engine import FEEDBACK_DELAY_MS, QUESTIONS_PER_ROUND, RoundEngine
from mathblitz.errors import GenerationError, InvalidDifficulty
from mathblitz.models import Phase, RoundState

DELAY = FEEDBACK_DELAY_MS / 1000.0


def check_invariants(engine):
    s = engine.state
    assert 0 <= s.correct_count <= s.total_count <= engine.questions_per_round
    assert s.streak <= s.correct_count
    assert (s.current_problem is not None) == (s.phase in (Phase.PLAYING, Phase.FEEDBACK))


def test_starts_in_difficulty_selection(engine):
    assert engine.phase == Phase.SELECTING_DIFFICULTY
    assert engine.current_problem is None
    assert engine.accuracy == 100
    assert engine.questions_per_round == QUESTIONS_PER_ROUND == 20


def test_select_difficulty_issues_first_problem(engine, fixed_generator):
    engine.select_difficulty(7)
    assert engine.phase == Phase.PLAYING
    assert engine.difficulty == 7
    assert engine.current_problem is not None
    assert fixed_generator.calls == 1


def test_select_invalid_difficulty_changes_nothing(engine):
    engine.select_difficulty(3)
    before = engine.state
    with pytest.raises(InvalidDifficulty):
        engine.select_difficulty(26)
    assert engine.state is before


def test_failed_generation_keeps_current_round(engine, fixed_generator):
    engine.select_difficulty(3)
    answer_correctly(engine)
    before = engine.state

    def broken(difficulty):
        raise GenerationError("no problem")

    engine.generator = broken
    with pytest.raises(GenerationError):
        engine.select_difficulty(8)
    with pytest.raises(GenerationError):
        engine.reset_level()
    assert engine.state is before
    assert engine.feedback_pending
    check_invariants(engine)

    engine.generator = fixed_generator
    engine.update(DELAY)
    assert engine.phase == Phase.PLAYING
    assert engine.total_count == 1


def test_state_is_read_only(engine):
    engine.select_difficulty(2)
    assert isinstance(engine.state, RoundState)
    with pytest.raises(AttributeError):
        engine.state = RoundState()
    assert engine.phase == Phase.PLAYING


def test_last_answer_shows_feedback_before_game_over(engine):
    engine.select_difficulty(2)
    for _ in range(QUESTIONS_PER_ROUND - 1):
        answer_correctly(engine)
        engine.update(DELAY)
    answer_correctly(engine)
    assert engine.phase == Phase.FEEDBACK
    assert engine.total_count == QUESTIONS_PER_ROUND
    assert engine.feedback_pending

    engine.update(DELAY)
    assert engine.phase == Phase.GAME_OVER
    assert engine.current_problem is None
    assert not engine.feedback_pending


def test_end_to_end_level_one(seeded_engine):
    engine = seeded_engine
    engine.select_difficulty(1)
    first = engine.current_problem
    left, op, right = first.expression.split(" ")
    assert op in ("+", "−")
    assert 1 <= int(left) <= 20 and 1 <= int(right) <= 20

    answer_correctly(engine)
    assert (engine.correct_count, engine.total_count, engine.streak) == (1, 1, 1)
    assert engine.score > 0
    assert engine.phase == Phase.FEEDBACK
    assert engine.feedback is True

    engine.update(DELAY)
    assert engine.phase == Phase.PLAYING
    assert engine.current_problem is not None
    assert engine.current_problem is not first
    assert engine.pending_input == ""
    assert engine.feedback is None


def test_feedback_waits_for_delay(engine):
    engine.select_difficulty(2)
    answer_correctly(engine)
    engine.update(DELAY / 2)
    assert engine.phase == Phase.FEEDBACK
    engine.update(DELAY / 2)
    assert engine.phase == Phase.PLAYING


def test_empty_submit_is_noop(engine):
    engine.select_difficulty(2)
    before = engine.state
    engine.handle_input_key("RESULT")
    assert engine.state is before
    assert engine.history == ()
    assert not engine.feedback_pending


def test_round_ends_after_quota(engine, fixed_generator):
    engine.select_difficulty(4)
    for i in range(QUESTIONS_PER_ROUND):
        assert engine.phase == Phase.PLAYING
        (answer_correctly if i % 3 else answer_wrongly)(engine)
        check_invariants(engine)
        engine.update(DELAY)
        check_invariants(engine)

    assert engine.phase == Phase.GAME_OVER
    assert engine.total_count == QUESTIONS_PER_ROUND
    assert fixed_generator.calls == QUESTIONS_PER_ROUND
    assert len(engine.history) == QUESTIONS_PER_ROUND

    engine.handle_input_key("5")
    engine.handle_input_key("RESULT")
    engine.update(10)
    assert engine.phase == Phase.GAME_OVER
    assert fixed_generator.calls == QUESTIONS_PER_ROUND


def test_score_never_decreases(seeded_engine):
    engine = seeded_engine
    engine.select_difficulty(9)
    last = 0
    for i in range(QUESTIONS_PER_ROUND):
        (answer_wrongly if i % 4 == 3 else answer_correctly)(engine)
        assert engine.score >= last
        last = engine.score
        engine.update(DELAY)
    assert engine.phase == Phase.GAME_OVER


def test_wrong_answer_resets_streak(engine):
    engine.select_difficulty(3)
    for _ in range(3):
        answer_correctly(engine)
        engine.update(DELAY)
    assert engine.streak == 3
    answer_wrongly(engine)
    assert engine.streak == 0
    assert engine.feedback is False


def test_history_is_chronological(engine):
    engine.select_difficulty(1)
    expressions = []
    for _ in range(3):
        expressions.append(engine.current_problem.expression)
        answer_correctly(engine)
        engine.update(DELAY)
    assert [a.problem.expression for a in engine.history] == expressions
    assert list(engine.history_frame()["expression"]) == expressions


@pytest.mark.parametrize("phase", list(Phase))
def test_restart_from_any_phase(engine, phase):
    drive_to(engine, phase)
    engine.restart()
    assert engine.phase == Phase.SELECTING_DIFFICULTY
    assert (engine.score, engine.streak, engine.total_count, engine.correct_count) == (0, 0, 0, 0)
    assert engine.history == ()
    assert engine.current_problem is None
    engine.update(DELAY * 5)
    assert engine.phase == Phase.SELECTING_DIFFICULTY


def test_reset_level_keeps_difficulty(engine):
    engine.select_difficulty(6)
    answer_correctly(engine)
    engine.update(DELAY)
    answer_correctly(engine)
    engine.reset_level()
    assert engine.phase == Phase.PLAYING
    assert engine.difficulty == 6
    assert (engine.score, engine.streak, engine.total_count) == (0, 0, 0)
    assert engine.history == ()
    assert engine.current_problem is not None


def test_stale_feedback_timer_cannot_touch_new_round(engine):
    engine.select_difficulty(5)
    answer_correctly(engine)
    assert engine.feedback_pending
    engine.select_difficulty(8)
    fresh = engine.state
    engine.update(DELAY * 3)
    assert engine.state is fresh
    assert engine.total_count == 0


def test_leaving_to_selection_cancels_feedback(engine):
    engine.select_difficulty(5)
    answer_wrongly(engine)
    engine.show_difficulty_selection()
    engine.update(DELAY * 3)
    assert engine.phase == Phase.SELECTING_DIFFICULTY
    assert engine.current_problem is None
    assert engine.difficulty == 5


def test_typing_allowed_during_feedback_but_not_submitting(engine):
    engine.select_difficulty(2)
    answer_correctly(engine)
    engine.handle_input_key("7")
    assert engine.pending_input.endswith("7")
    engine.handle_input_key("RESULT")
    assert engine.total_count == 1
    engine.update(DELAY)
    assert engine.pending_input == ""


def test_direct_input_methods(engine):
    engine.select_difficulty(1)
    engine.append_digit("1")
    engine.append_decimal_point()
    engine.append_digit("5")
    engine.backspace()
    assert engine.pending_input == "1."
    engine.clear_input()
    assert engine.pending_input == ""
    engine.append_digit(str(engine.current_problem.answer))
    engine.submit()
    assert engine.phase == Phase.FEEDBACK


def test_summary(engine):
    engine.select_difficulty(1)
    answer_correctly(engine)
    engine.update(DELAY)
    type_answer(engine, "999")
    s = engine.summary()
    assert s["correct"] == 1 and s["incorrect"] == 1 and s["total"] == 2
    assert s["accuracy"] == 50
    assert s["progress"] == 10
    assert s["difficulty"] == 1


class RecordingScheduler:
    """Stands in for an event loop's call_later."""

    def __init__(self):
        self.calls = []

    def call_later(self, delay, callback):
        handle = Handle(callback)
        self.calls.append((delay, handle))
        return handle


class Handle:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


def test_external_scheduler(fixed_generator):
    sched = RecordingScheduler()
    engine = RoundEngine(generator=fixed_generator, scheduler=sched)
    engine.select_difficulty(2)
    answer_correctly(engine)
    delay, handle = sched.calls[-1]
    assert delay == pytest.approx(DELAY)

    engine.update(1.0)  # nothing to tick
    assert engine.phase == Phase.FEEDBACK
    handle.callback()
    assert engine.phase == Phase.PLAYING

    answer_correctly(engine)
    _, handle = sched.calls[-1]
    engine.reset_level()
    assert handle.cancelled
    handle.callback()  # fired anyway: must not affect the new round
    assert engine.total_count == 0
    assert engine.phase == Phase.PLAYING


def drive_to(engine, phase):
    if phase == Phase.SELECTING_DIFFICULTY:
        return
    engine.select_difficulty(2)
    if phase == Phase.PLAYING:
        answer_correctly(engine)
        engine.update(DELAY)
    elif phase == Phase.FEEDBACK:
        answer_correctly(engine)
    elif phase == Phase.GAME_OVER:
        for _ in range(engine.questions_per_round):
            answer_correctly(engine)
            engine.update(DELAY)
    assert engine.phase == phase
