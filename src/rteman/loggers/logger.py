import logging
import sys

BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE = range(8)

RESET_SEQ = "\033[0m"
COLOR_SEQ = "\033[1;%dm"
BOLD_SEQ = "\033[1m"

COLORS = {
    'WARNING': YELLOW,
    'INFO': WHITE,
    'DEBUG': BLUE,
    'CRITICAL': YELLOW,
    'ERROR': RED
}

FORMAT = (
    "[%(asctime)s %(levelname)-18s "
    "$BOLD%(filename)s{%(lineno)d}$RESET:%(funcName)s()] "
    "%(message)s"
)


def formatter_message(message, use_color=True):
    if use_color:
        return message.replace("$RESET", RESET_SEQ).replace("$BOLD", BOLD_SEQ)
    return message.replace("$RESET", "").replace("$BOLD", "")


class ColoredFormatter(logging.Formatter):
    def __init__(self, msg, use_color=True):
        logging.Formatter.__init__(self, formatter_message(msg, use_color))
        self.use_color = use_color

    def format(self, record):
        levelname = record.levelname
        if self.use_color and levelname in COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                COLOR_SEQ % (30 + COLORS[levelname]) + levelname + RESET_SEQ
            )
        return logging.Formatter.format(self, record)


def set_verbosity(verbose: int = 0, quiet: bool = False) -> None:
    """
    Adjust the level of the rteman console handler.

    The default level is WARNING so that command output written to stdout
    (e.g. ``rteman list``) is not interleaved with diagnostics; ``-v`` enables
    INFO and ``-vv`` DEBUG, ``--quiet`` only lets errors through.
    """
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    for handler in logger.handlers:
        handler.setLevel(level)


# create logger
logger = logging.getLogger('rteman')
logger.setLevel(logging.DEBUG)

# Only configure the logger if it doesn't have handlers already
if not logger.handlers:

    # diagnostics go to stderr, command output owns stdout
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(logging.WARNING)
    ch.setFormatter(ColoredFormatter(FORMAT, use_color=sys.stderr.isatty()))
    logger.addHandler(ch)

    logger.propagate = False
