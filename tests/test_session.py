import pytest

from harmonic_algorithm.constants import FUNCTIONALITIES
from harmonic_algorithm.filters import Filters
from harmonic_algorithm.markov import TransitionTable
from harmonic_algorithm.pitch_utils.chords import Cadence, Chord
from harmonic_algorithm.pitch_utils.spelling import Enharmonic
from harmonic_algorithm.recommender import recommend
from harmonic_algorithm.session import (
    EXIT_TEXT,
    FILTER_QUESTIONS,
    UNRECOGNISED,
    Action,
    SessionContext,
    SessionSettings,
    SessionState,
    Stage,
    menu_options,
    parse_entropy,
    parse_length,
    prompt_lines,
    recommendations,
    step,
)

from tests.test_helpers import C_MAJOR, FixedSampler


@pytest.fixture
def context(table):
    return SessionContext(table, sampler=FixedSampler())


def drive(context, inputs, state=None):
    state = SessionState() if state is None else state
    outputs = []
    for text in inputs:
        state, lines = step(state, text, context)
        outputs.extend(lines)
    return state, outputs


def action_choice(state, context, action):
    return str(menu_options(state, context).index(action) + 1)


@pytest.fixture
def browsing(context):
    state, _ = drive(context, ["1", "1", "1", "*", "0#", "*"])
    return state


def test_choose_starting_chord(context):
    state, outputs = drive(context, ["2", "3"])
    assert outputs == []
    assert state.stage is Stage.CHOOSE_FUNCTIONALITY
    assert state.enharmonic is Enharmonic.SHARP
    assert state.root == 2
    lines = prompt_lines(state, context)
    assert len(lines) == 1 + len(FUNCTIONALITIES)
    assert lines[1] == "1 - maj"

    state, _ = drive(context, [str(list(FUNCTIONALITIES).index("min") + 1)], state)
    assert state.stage is Stage.CHOOSE_FILTERS
    d_minor = Chord((2, 5, 9))
    assert state.cadence == Cadence(d_minor, d_minor)


@pytest.mark.parametrize(
    "stage_inputs", [[], ["1"], ["1", "1"]], ids=["enharmonic", "root", "functionality"]
)
@pytest.mark.parametrize("bad_input", ["", "0", "99", "maj", "-1"])
def test_unrecognised_menu_input(context, stage_inputs, bad_input):
    state, _ = drive(context, stage_inputs)
    new_state, lines = step(state, bad_input, context)
    assert new_state == state
    assert lines == [UNRECOGNISED]


def test_root_names_follow_notation(context):
    state, _ = drive(context, ["1"])
    assert "2 - Db" in prompt_lines(state, context)
    state, _ = drive(context, ["2"])
    assert "2 - C#" in prompt_lines(state, context)


def test_filters_dialogue(context):
    state, _ = drive(context, ["1", "1", "1"])
    assert prompt_lines(state, context) == [FILTER_QUESTIONS[0]]
    state, outputs = drive(context, ["E A D G", "9#", "bb", "H"], state)
    assert outputs == [UNRECOGNISED, UNRECOGNISED]
    assert state.stage is Stage.CHOOSE_FILTERS
    assert prompt_lines(state, context) == [FILTER_QUESTIONS[2]]
    state, _ = drive(context, ["D G"], state)
    assert state.stage is Stage.BROWSING
    assert state.filters == Filters.from_strings("E A D G", "bb", "D G")
    assert state.answers == ()


def test_browsing_menu(browsing, context):
    recs = recommendations(browsing, context)
    assert len(recs) == SessionSettings().n_recommendations
    options = menu_options(browsing, context)
    assert options == [*recs, *Action]
    lines = prompt_lines(browsing, context)
    assert lines[0].startswith("The current chord is C E G")
    assert len(lines) == 1 + len(options)
    assert lines[-1] == f"{len(options)} - [ Quit ]"


def test_choose_recommendation(browsing, context):
    recs = recommendations(browsing, context)
    state, outputs = drive(context, ["3"], browsing)
    assert outputs == []
    assert state.cadence == recs[2]
    assert state.cadence.previous == browsing.cadence.next
    assert recommendations(state, context) == recommend(
        recs[2], state.filters, 14, context.table
    )


def test_toggles(browsing, context):
    state, _ = drive(
        context, [action_choice(browsing, context, Action.TOGGLE_COUNT)], browsing
    )
    assert state.expanded
    assert len(recommendations(state, context)) == 29
    assert "[ Show Less ]" in prompt_lines(state, context)[-4]

    state, _ = drive(
        context, [action_choice(state, context, Action.TOGGLE_ENHARMONIC)], state
    )
    assert state.enharmonic is Enharmonic.SHARP
    assert "Switch to Flat Notation" in prompt_lines(state, context)[-3]

    state, _ = drive(
        context, [action_choice(state, context, Action.TOGGLE_COUNT)], state
    )
    assert not state.expanded


def test_new_start(browsing, context):
    state, _ = drive(
        context, [action_choice(browsing, context, Action.NEW_START)], browsing
    )
    assert state == SessionState(enharmonic=browsing.enharmonic)


def test_modify_filters(browsing, context):
    state, _ = drive(
        context, [action_choice(browsing, context, Action.MODIFY_FILTERS)], browsing
    )
    assert state.stage is Stage.CHOOSE_FILTERS
    state, _ = drive(context, ["C D", "*", "*"], state)
    assert state.stage is Stage.BROWSING
    assert recommendations(state, context) == []
    lines = prompt_lines(state, context)
    assert "No chords satisfy the current filters." in lines
    # only the actions are left
    assert len(lines) == 2 + len(Action)
    state, _ = drive(context, ["1"], state)
    assert state.stage is Stage.CHOOSE_FILTERS


def test_random_sequence(browsing, context):
    state, _ = drive(
        context, [action_choice(browsing, context, Action.RANDOM_SEQUENCE)], browsing
    )
    assert state.stage is Stage.RANDOM_SEQUENCE
    assert "default 4, max 16" in prompt_lines(state, context)[0]
    state, _ = drive(context, ["3"], state)
    assert "default 2" in prompt_lines(state, context)[0]
    state, outputs = drive(context, [""], state)
    assert state.stage is Stage.BROWSING
    # the starting chord and the three generated ones
    assert len(outputs) == 4
    assert outputs[0] == "C E G"
    # zero draws always pick the top recommendation
    expected = browsing.cadence
    for _ in range(3):
        expected = recommend(expected, browsing.filters, 1, context.table)[0]
    assert state.cadence == expected


def test_random_sequence_cut_short(context):
    state = SessionState(
        stage=Stage.RANDOM_SEQUENCE,
        cadence=Cadence(C_MAJOR, C_MAJOR),
        filters=Filters.from_strings("C D", "*", "*"),
    )
    state, outputs = drive(context, ["5", "5"], state)
    assert outputs == ["C E G", "No chords satisfy the current filters; sequence cut short."]
    assert state.cadence == Cadence(C_MAJOR, C_MAJOR)


def test_quit(browsing, context):
    state, outputs = drive(
        context, [action_choice(browsing, context, Action.QUIT)], browsing
    )
    assert state.stage is Stage.EXIT
    assert outputs == [EXIT_TEXT]
    assert step(state, "1", context) == (state, [])


def test_default_sampler_uses_seed():
    context = SessionContext(TransitionTable({}), settings=SessionSettings(seed=3))
    other = SessionContext(TransitionTable({}), settings=SessionSettings(seed=3))
    assert [context.sampler.draw(2.0) for _ in range(5)] == [
        other.sampler.draw(2.0) for _ in range(5)
    ]


@pytest.mark.parametrize(
    "text,expected", [("", 4), ("7", 7), ("7.9", 7), ("0", 4), ("-3", 4), ("99", 16), ("x", 4), ("inf", 4)]
)
def test_parse_length(text, expected):
    assert parse_length(text, SessionSettings()) == expected


@pytest.mark.parametrize(
    "text,expected", [("", 0.2), ("1", 0.1), ("7", 0.7), ("10", 1.0), ("50", 1.0), ("-2", 0.0), ("x", 0.2), ("nan", 0.2), ("inf", 0.2), ("-inf", 0.2)]
)
def test_parse_entropy(text, expected):
    assert parse_entropy(text, SessionSettings()) == pytest.approx(expected)


@pytest.mark.parametrize("entropy_text", ["nan", "NaN", "inf"])
def test_random_sequence_with_non_finite_entropy(browsing, context, entropy_text):
    state, outputs = drive(
        context,
        [action_choice(browsing, context, Action.RANDOM_SEQUENCE), "4", entropy_text],
        browsing,
    )
    assert state.stage is Stage.BROWSING
    # the starting chord and the four generated ones
    assert len(outputs) == 5


def test_recommendations_use_session_filters(browsing, context):
    assert context.recommender.table is context.table
    assert context.recommender.filters == Filters()
    expected = context.recommender.with_filters(browsing.filters)(browsing.cadence, 14)
    assert recommendations(browsing, context) == expected
    assert all(browsing.filters.allows(c.next) for c in expected)
