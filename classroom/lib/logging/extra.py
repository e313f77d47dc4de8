import inspect
import json
import logging
import string
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from .json import JSONEncoder
from .style import LogStyle

ReservedKeys = {
    "exception",
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "id",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


class ExtraFormatter(logging.Formatter):
    """Wraps a base formatter and appends any `extra=` fields as JSON.

    On a TTY the JSON is highlighted with pygments unless the base formatter
    was configured with `no_color`.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None,
        datefmt: str | None = None,
        indent: bool = True,
        pyg_style: t.Type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        *,
        defaults: t.Any = None,
        **kwargs: t.Any,
    ):
        self.base = base(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults, **kwargs)
        self.pyg_style = pyg_style
        self.indent = indent
        self._stream: t.IO[str] | None = None

    def format(self, record: logging.LogRecord) -> str:
        self._indent_continuation(record)
        message = self.base.format(record)

        extra = {k: v for k, v in record.__dict__.items() if k not in ReservedKeys}
        if not extra:
            return message
        return message + " " + self._render(extra).strip()

    def _indent_continuation(self, record: logging.LogRecord) -> None:
        # align continuation lines of a multi-line message under its first line
        msg = record.getMessage()
        if "\n" not in msg:
            return
        formatted = self.base.format(record)
        idx = formatted.find(msg)
        indent = " " * len([c for c in formatted[:idx] if c in string.printable])
        line, *lines = msg.splitlines()
        body = textwrap.indent("\n".join(lines), prefix=indent)
        record.msg = record.message = f"{line}\n{body}"
        record.args = None

    def _render(self, extra: dict[str, t.Any]) -> str:
        encoder = JSONEncoder()
        js = json.dumps(extra, sort_keys=True, indent=(4 if self.indent else None), default=encoder.default)
        if not self._use_color():
            return js
        hl = pygments.highlight  # pyright: ignore [reportUnknownMemberType, reportUnknownVariableType]
        return hl(js, JsonLexer(), Terminal256Formatter[str](style=self.pyg_style), None)

    def _use_color(self) -> bool:
        if getattr(self.base, "no_color", False):
            return False
        if self._stream is None:
            # Handler.format() is our caller; its stream is not known at construction
            frame = inspect.currentframe()
            while frame is not None and not isinstance(frame.f_locals.get("self"), logging.Handler):
                frame = frame.f_back
            if frame is None:
                return False
            self._stream = getattr(frame.f_locals["self"], "stream", None)
        return self._stream is not None and self._stream.isatty()

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)
