"""Logging configuration for article-editor.

Provides logging setup with inline image payload masking. Images pasted
into the editor may carry their content as base64 data URIs; those
payloads are shortened in all log output.
"""

import logging
import re


class DataUriMaskingFilter(logging.Filter):
    """Logging filter that shortens inline data URI payloads.

    The media type is kept so log lines stay informative, the payload is
    replaced with its length.
    """

    DATA_URI_PATTERN = re.compile(r"(data:[\w.+-]+/[\w.+-]+(?:;[\w=.-]+)*;base64,)([A-Za-z0-9+/=]+)")

    # Payloads shorter than this are left alone
    MIN_MASKED_LENGTH = 16

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter and shorten data URIs in log records.

        Args:
            record: Log record to process

        Returns:
            Always True (record is always passed through, just modified)
        """
        if record.msg:
            record.msg = self._mask_data_uris(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            new_args: list[object] = []
            for arg in record.args:
                if isinstance(arg, str):
                    new_args.append(self._mask_data_uris(arg))
                else:
                    new_args.append(arg)
            record.args = tuple(new_args)
        return True

    def _mask_data_uris(self, text: str) -> str:
        """Replace every base64 payload in text with a length marker.

        Args:
            text: Text potentially containing data URIs

        Returns:
            Text with long payloads replaced by [N bytes]
        """

        def mask_match(m: re.Match[str]) -> str:
            payload = m.group(2)
            if len(payload) < self.MIN_MASKED_LENGTH:
                return m.group(0)
            return f"{m.group(1)}[{len(payload)} bytes]"

        return self.DATA_URI_PATTERN.sub(mask_match, text)


def setup_logging(level: int = logging.INFO, name: str | None = None) -> logging.Logger:
    """Set up logging with data URI masking.

    Args:
        level: Logging level (default: INFO)
        name: Logger name (default: "article_editor")

    Returns:
        Configured logger instance
    """
    logger_name = name or "article_editor"
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    handler.addFilter(DataUriMaskingFilter())

    logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the article_editor namespace.

    Args:
        name: Logger name suffix (e.g., "cli" for "article_editor.cli")

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"article_editor.{name}")
    return logging.getLogger("article_editor")
