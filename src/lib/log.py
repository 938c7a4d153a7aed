"""
Build logging for blogmark.

LOG() and WARN() write through loguru, gated by the verbosity of whichever
ProgramState is connected to the current context. While a document is being
compiled its slug rides along in the record's `extra`, so a warning about an
unclosed fence or a download without a file names the article it came from.

With no state connected (the parser or passes used as a library, the test
suite) both calls are no-ops.

Usage:
    from blogmark.lib.log import LOG, WARN, document_logContext, state_connectToLogger

    state_connectToLogger(state)
    LOG("Compiling 12 documents", level=1)

    with document_logContext("my-first-post"):
        LOG("Directive 'download' resolved", level=2)
        WARN("Unclosed code fence at line 12; running to end of document")
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional
import sys

from loguru import logger

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)
_document: ContextVar[str] = ContextVar('document', default='-')

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<magenta>{extra[document]: <24}</magenta> │ "
    "<cyan>{function}</cyan>:<cyan>{line}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"document": "-"})
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make a build's ProgramState the verbosity source for this context.

    Args:
        state: ProgramState (anything with a `verbosity` attribute)
    """
    _program_state.set(state)


@contextmanager
def document_logContext(document: str) -> Iterator[None]:
    """Tag every record emitted inside the block with a document slug"""
    token = _document.set(document)
    try:
        yield
    finally:
        _document.reset(token)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit a debug record when the connected verbosity reaches `level`.

    Levels follow the -v count on the command line: 1 for the build summary,
    2 for per-document progress, 3 for parser and pass internals.
    """
    state = _program_state.get()

    if state is not None and getattr(state, 'verbosity', 0) >= level:
        logger.opt(depth=1).bind(document=_document.get()).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """Emit a warning for a recoverable content problem (verbosity ignored)"""
    if _program_state.get() is not None:
        logger.opt(depth=1).bind(document=_document.get()).warning(message, **kwargs)
