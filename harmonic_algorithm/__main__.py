import argparse
import logging

from harmonic_algorithm.config.read_config import load_config_from_yaml_basic
from harmonic_algorithm.corpus import load_chorale_records
from harmonic_algorithm.markov import train
from harmonic_algorithm.session import (
    EXIT_TEXT,
    SessionContext,
    SessionSettings,
    SessionState,
    Stage,
    prompt_lines,
    step,
)
from harmonic_algorithm.utils.logs import LOG_LEVELS, configure_logging

DEFAULT_CORPUS = "data/jsbach_chorals_harmony.data"


def get_parser():
    parser = argparse.ArgumentParser(
        prog="harmonic_algorithm",
        description="Recommends chord progressions learned from the Bach chorales",
    )
    parser.add_argument(
        "corpus",
        nargs="?",
        default=DEFAULT_CORPUS,
        help="path to the UCI Bach chorales harmony dataset",
    )
    parser.add_argument("-c", "--config", help="path to yaml settings file")
    parser.add_argument("-l", "--log-file", help="path to log file")
    parser.add_argument(
        "-L",
        "--log-level",
        choices=LOG_LEVELS,
        default="warning",
        help="log level",
    )
    parser.add_argument(
        "--append-to-log",
        action="store_true",
        help="append to log file (if it exists)",
    )
    parser.add_argument("-s", "--seed", type=int, default=None)
    return parser


def run_session(context: SessionContext, input_func=input, print_func=print):
    state = SessionState()
    while state.stage is not Stage.EXIT:
        print_func("")
        for line in prompt_lines(state, context):
            print_func(line)
        try:
            text = input_func(">> ")
        except (EOFError, KeyboardInterrupt):
            print_func(EXIT_TEXT)
            return
        state, lines = step(state, text, context)
        for line in lines:
            print_func(line)


def main(args=None):
    args = get_parser().parse_args(args)
    configure_logging(args.log_file, args.log_level, args.append_to_log)
    settings = load_config_from_yaml_basic(SessionSettings, args.config)
    if args.seed is not None:
        logging.debug(f"Setting seed {args.seed}")
        settings.seed = args.seed
    print(f"Loading Bach chorales from {args.corpus}")
    table = train(load_chorale_records(args.corpus))
    print("Welcome to The Harmonic Algorithm!")
    run_session(SessionContext(table, settings=settings))


if __name__ == "__main__":
    main()
