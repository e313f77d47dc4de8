import datetime
import inspect
import logging.config
import typing as t

from classroom.model.id import ShortUUIDKey

from .logging import TRACE, TraceLogLevelLogger

TimestampProvider = t.Callable[..., datetime.datetime]
KeyProvider = t.Callable[[], ShortUUIDKey]


class LoggingProvider(object):
    def __init__(self, config: dict[str, t.Any], debug: bool):
        LoggingProvider.create_trace_loglevel()
        logging.config.dictConfig(config)
        if debug:
            self.capture_warnings(True)

    @staticmethod
    def create_trace_loglevel():
        """
        Register the TRACE level and make it the default logger class
        """
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.addLevelName(TRACE, "TRACE")

    @staticmethod
    def get_logger(name: str | None = None, n_frames: int = 1) -> TraceLogLevelLogger:
        """Return the named logger, or the logger of the module `n_frames` up the stack."""
        if not name:
            frame = inspect.currentframe()
            for _ in range(n_frames):
                assert frame is not None
                frame = frame.f_back
            assert frame is not None, "caller frame unavailable"
            name = frame.f_globals["__name__"]

        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool):
        logging.captureWarnings(capture)
