"""Log formatters for prewarm."""

import logging
from datetime import datetime

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName',
    'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'taskName',
})


def _quote(value: str) -> str:
    if ' ' in value or '"' in value or '=' in value:
        return '"' + value.replace('"', '\\"') + '"'
    return value


def extra_fields(record: logging.LogRecord) -> list[tuple[str, object]]:
    """Return the structured context attached to a record, in insertion order."""
    return [
        (key, value)
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith('_')
    ]


def render_pairs(pairs: list[tuple[str, object]]) -> str:
    """Render key/value pairs as ``key=value`` tokens."""
    tokens = []
    for key, value in pairs:
        if isinstance(value, bool):
            value = str(value).lower()
        tokens.append(f'{key}={_quote(str(value))}')
    return ' '.join(tokens)


class LogfmtFormatter(logging.Formatter):
    """Logfmt formatter: level=INFO ts=2025-01-01T12:00:00 component=x msg="message" key=value"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as logfmt key=value pairs.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        pairs: list[tuple[str, object]] = [
            ('level', record.levelname),
            ('ts', datetime.fromtimestamp(record.created).isoformat()),
            ('component', record.name),
            ('msg', record.getMessage()),
        ]

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            if exc_text:
                pairs.append(('error', exc_text.replace('\n', '\\n')))

        pairs.extend(extra_fields(record))
        return render_pairs(pairs)


class ConsoleFormatter(logging.Formatter):
    """Human-oriented formatter: [12:00:00] message key=value"""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        line = f'[{ts}] {record.getMessage()}'

        if record.levelno >= logging.WARNING:
            line = f'[{ts}] {record.levelname}: {record.getMessage()}'

        context = render_pairs(extra_fields(record))
        if context:
            line = f'{line} {context}'

        if record.exc_info:
            line = f'{line}\n{self.formatException(record.exc_info)}'

        return line
