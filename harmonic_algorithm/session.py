"""
The interactive session as a finite-state machine.

`step()` takes the current `SessionState` and a line of user input and returns
the next state and the lines to show the user. `prompt_lines()` renders the
question or menu for a state. Neither does any I/O, so the whole dialogue can
be driven (and tested) without a terminal; see `__main__.py` for the loop that
connects it to stdin/stdout.
"""
from __future__ import annotations

import logging
import math
import typing as t
from dataclasses import dataclass, field, replace
from enum import Enum, auto

from harmonic_algorithm.constants import (
    DEFAULT_N_RECOMMENDATIONS,
    EXPANDED_N_RECOMMENDATIONS,
    FUNCTIONALITIES,
)
from harmonic_algorithm.filters import Filters, parse_note_names, parse_roots
from harmonic_algorithm.markov import TransitionTable
from harmonic_algorithm.pitch_utils.chords import Cadence, chord_from_functionality
from harmonic_algorithm.pitch_utils.scale import parse_key_signature
from harmonic_algorithm.pitch_utils.spelling import Enharmonic, chord_name
from harmonic_algorithm.pitch_utils.types import TET, PitchClass
from harmonic_algorithm.recommender import Recommender
from harmonic_algorithm.sequence_generator import (
    GammaSampler,
    NumpyGammaSampler,
    SequenceSettings,
    generate_sequence,
)

LOGGER = logging.getLogger(__name__)

UNRECOGNISED = "Unrecognised input, please retry:"

EXIT_TEXT = "Thanks for using The Harmonic Algorithm!"


class Stage(Enum):
    CHOOSE_ENHARMONIC = auto()
    CHOOSE_ROOT = auto()
    CHOOSE_FUNCTIONALITY = auto()
    CHOOSE_FILTERS = auto()
    BROWSING = auto()
    RANDOM_SEQUENCE = auto()
    EXIT = auto()


class Action(Enum):
    MODIFY_FILTERS = "Modify Filter"
    RANDOM_SEQUENCE = "Random Sequence"
    TOGGLE_COUNT = "Show More / Less"
    TOGGLE_ENHARMONIC = "Switch Notation"
    NEW_START = "Select New Starting Chord"
    QUIT = "Quit"


FILTER_QUESTIONS = (
    "Enter tuning (with strings separated by spaces) or * for chromatic:",
    "Enter upper structure key signature (eg. bbb, ##, 2b, 0#) or * :",
    "Enter desired 'next' root notes, a key signature, or * :",
)
FILTER_PARSERS = (parse_note_names, parse_key_signature, parse_roots)


@dataclass
class SessionSettings(SequenceSettings):
    n_recommendations: int = DEFAULT_N_RECOMMENDATIONS
    expanded_n_recommendations: int = EXPANDED_N_RECOMMENDATIONS


@dataclass
class SessionContext:
    table: TransitionTable
    settings: SessionSettings = field(default_factory=SessionSettings)
    sampler: GammaSampler | None = None
    recommender: Recommender = field(init=False)

    def __post_init__(self):
        self.recommender = Recommender(self.table)
        if self.sampler is None:
            self.sampler = NumpyGammaSampler(self.settings.seed)


@dataclass(frozen=True)
class SessionState:
    stage: Stage = Stage.CHOOSE_ENHARMONIC
    enharmonic: Enharmonic = Enharmonic.FLAT
    root: PitchClass = 0
    cadence: t.Optional[Cadence] = None
    filters: Filters = Filters()
    expanded: bool = False
    # Answers given so far in a multi-question dialogue (filters, random sequence)
    answers: t.Tuple[str, ...] = ()


def numbered(options: t.Iterable[str]) -> t.List[str]:
    """
    >>> numbered(["maj", "min"])
    ['1 - maj', '2 - min']
    """
    return [f"{i} - {option}" for i, option in enumerate(options, start=1)]


def parse_choice(text: str, n_options: int) -> int | None:
    """
    Returns the 0-based index of a 1-based menu choice, or None.

    >>> parse_choice("2", 3)
    1
    >>> parse_choice("4", 3) is None, parse_choice("x", 3) is None
    (True, True)
    """
    text = text.strip()
    if not text.isdigit():
        return None
    choice = int(text)
    if not 1 <= choice <= n_options:
        return None
    return choice - 1


def recommendations(state: SessionState, context: SessionContext) -> t.List[Cadence]:
    if state.cadence is None:
        return []
    settings = context.settings
    count = (
        settings.expanded_n_recommendations
        if state.expanded
        else settings.n_recommendations
    )
    recommender = context.recommender.with_filters(state.filters)
    return recommender(state.cadence, count)


def _action_label(action: Action, state: SessionState) -> str:
    if action is Action.TOGGLE_COUNT:
        return "Show Less" if state.expanded else "Show More"
    if action is Action.TOGGLE_ENHARMONIC:
        return f"Switch to {state.enharmonic.toggled().name.capitalize()} Notation"
    return action.value


def menu_options(
    state: SessionState, context: SessionContext
) -> t.List[t.Any]:
    if state.stage is Stage.CHOOSE_ENHARMONIC:
        return list(Enharmonic)
    if state.stage is Stage.CHOOSE_ROOT:
        return list(range(TET))
    if state.stage is Stage.CHOOSE_FUNCTIONALITY:
        return list(FUNCTIONALITIES)
    if state.stage is Stage.BROWSING:
        return [*recommendations(state, context), *Action]
    return []


def _render_option(option, state: SessionState) -> str:
    if isinstance(option, Cadence):
        return chord_name(option.next, state.enharmonic)
    if isinstance(option, Action):
        return f"[ {_action_label(option, state)} ]"
    if isinstance(option, Enharmonic):
        return option.label
    if isinstance(option, int):
        return state.enharmonic.name_of(option)
    return str(option)


def prompt_lines(state: SessionState, context: SessionContext) -> t.List[str]:
    if state.stage is Stage.CHOOSE_ENHARMONIC:
        header = ["Do you want to begin with ♭ (flat) or ♯ (sharp) notation?"]
    elif state.stage is Stage.CHOOSE_ROOT:
        header = ["Select starting root note:"]
    elif state.stage is Stage.CHOOSE_FUNCTIONALITY:
        header = ["Select starting functionality:"]
    elif state.stage is Stage.CHOOSE_FILTERS:
        return [FILTER_QUESTIONS[len(state.answers)]]
    elif state.stage is Stage.RANDOM_SEQUENCE:
        settings = context.settings
        if not state.answers:
            return [
                f"Enter desired length of sequence (default "
                f"{settings.default_length}, max {settings.max_length}):"
            ]
        return [
            "Choose entropy level as a number between 1 and 10 (default "
            f"{round(settings.default_entropy * 10)}):"
        ]
    elif state.stage is Stage.BROWSING:
        assert state.cadence is not None
        header = [
            f"The current chord is {chord_name(state.cadence.next, state.enharmonic)}"
            " -- Select next chord or choose another option:"
        ]
        if not recommendations(state, context):
            header.append("No chords satisfy the current filters.")
    else:
        return []
    options = menu_options(state, context)
    return header + numbered(_render_option(option, state) for option in options)


def parse_length(text: str, settings: SequenceSettings) -> int:
    """
    >>> settings = SequenceSettings()
    >>> parse_length("", settings), parse_length("6", settings), parse_length("40", settings)
    (4, 6, 16)
    """
    try:
        length = int(float(text))
    except (ValueError, OverflowError):
        return settings.default_length
    if length < 1:
        return settings.default_length
    return min(length, settings.max_length)


def parse_entropy(text: str, settings: SequenceSettings) -> float:
    """
    Users enter entropy from 1 to 10.

    >>> settings = SequenceSettings()
    >>> parse_entropy("", settings), parse_entropy("5", settings), parse_entropy("12", settings)
    (0.2, 0.5, 1.0)
    >>> parse_entropy("nan", settings)
    0.2
    """
    try:
        entropy = float(text)
    except ValueError:
        return settings.default_entropy
    if not math.isfinite(entropy):
        return settings.default_entropy
    if entropy >= 10:
        return 1.0
    return max(entropy, 0.0) / 10


Transition = t.Tuple[SessionState, t.List[str]]


def _step_browsing(
    state: SessionState, text: str, context: SessionContext
) -> Transition:
    options = menu_options(state, context)
    i = parse_choice(text, len(options))
    if i is None:
        return state, [UNRECOGNISED]
    option = options[i]
    if isinstance(option, Cadence):
        return replace(state, cadence=option), []
    if option is Action.MODIFY_FILTERS:
        return replace(state, stage=Stage.CHOOSE_FILTERS, answers=()), []
    if option is Action.RANDOM_SEQUENCE:
        return replace(state, stage=Stage.RANDOM_SEQUENCE, answers=()), []
    if option is Action.TOGGLE_COUNT:
        return replace(state, expanded=not state.expanded), []
    if option is Action.TOGGLE_ENHARMONIC:
        return replace(state, enharmonic=state.enharmonic.toggled()), []
    if option is Action.NEW_START:
        return SessionState(enharmonic=state.enharmonic), []
    return replace(state, stage=Stage.EXIT), [EXIT_TEXT]


def _step_filters(state: SessionState, text: str) -> Transition:
    i = len(state.answers)
    try:
        FILTER_PARSERS[i](text)
    except ValueError as exc:
        LOGGER.debug(f"rejected filter input {text!r}: {exc}")
        return state, [UNRECOGNISED]
    answers = state.answers + (text,)
    if len(answers) < len(FILTER_QUESTIONS):
        return replace(state, answers=answers), []
    filters = Filters.from_strings(*answers)
    LOGGER.info(f"filters set to {filters}")
    return replace(state, stage=Stage.BROWSING, filters=filters, answers=()), []


def _step_random_sequence(
    state: SessionState, text: str, context: SessionContext
) -> Transition:
    if not state.answers:
        return replace(state, answers=(text,)), []
    assert state.cadence is not None
    assert context.sampler is not None
    settings = context.settings
    length = parse_length(state.answers[0], settings)
    entropy = parse_entropy(text, settings)
    cadences, final = generate_sequence(
        state.cadence,
        state.filters,
        length,
        entropy,
        context.table,
        context.sampler,
        window=settings.window,
    )
    lines = [chord_name(state.cadence.next, state.enharmonic)]
    lines += [chord_name(cadence.next, state.enharmonic) for cadence in cadences]
    if len(cadences) < length:
        lines.append("No chords satisfy the current filters; sequence cut short.")
    return replace(state, stage=Stage.BROWSING, cadence=final, answers=()), lines


def step(state: SessionState, text: str, context: SessionContext) -> Transition:
    """
    >>> context = SessionContext(TransitionTable({}))
    >>> state, _ = step(SessionState(), "2", context)
    >>> state.stage, state.enharmonic
    (<Stage.CHOOSE_ROOT: 2>, <Enharmonic.SHARP: '#'>)
    >>> step(state, "13", context)[1]
    ['Unrecognised input, please retry:']
    """
    if state.stage is Stage.CHOOSE_FILTERS:
        return _step_filters(state, text)
    if state.stage is Stage.RANDOM_SEQUENCE:
        return _step_random_sequence(state, text, context)
    if state.stage is Stage.BROWSING:
        return _step_browsing(state, text, context)
    if state.stage is Stage.EXIT:
        return state, []

    options = menu_options(state, context)
    i = parse_choice(text, len(options))
    if i is None:
        return state, [UNRECOGNISED]
    if state.stage is Stage.CHOOSE_ENHARMONIC:
        return replace(state, stage=Stage.CHOOSE_ROOT, enharmonic=options[i]), []
    if state.stage is Stage.CHOOSE_ROOT:
        return replace(state, stage=Stage.CHOOSE_FUNCTIONALITY, root=options[i]), []
    chord = chord_from_functionality(state.root, options[i])
    return (
        replace(
            state,
            stage=Stage.CHOOSE_FILTERS,
            cadence=Cadence(chord, chord),
            answers=(),
        ),
        [],
    )
