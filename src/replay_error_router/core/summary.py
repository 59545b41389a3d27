from __future__ import annotations

from typing import Any, Optional

DEFAULT_MAX_ERROR_HEADER_LENGTH = 300


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _safe_str(value: Any) -> Optional[str]:
    try:
        return str(value)
    except Exception:
        return None


def describe_failure(failure: Any) -> Optional[str]:
    """Return the full descriptive text of a failure, or None when there is no failure.

    Exceptions render as ``"<module>.<QualName>: <message>"`` (just the qualified name
    when the message is empty); strings are used as-is. A failure whose ``__str__``
    raises is described by its qualified type name.
    """
    if failure is None:
        return None
    if isinstance(failure, str):
        return failure
    name = _qualified_name(type(failure))
    message = _safe_str(failure)
    if isinstance(failure, BaseException):
        return f"{name}: {message}" if message else name
    return name if message is None else message


def summarize_failure(
    failure: Any, max_length: int = DEFAULT_MAX_ERROR_HEADER_LENGTH
) -> Optional[str]:
    """Build a short, single-line failure description suitable for a response header.

    A dotted namespace before the first ``:`` is dropped, so
    ``"org.example.NotFound: gone"`` becomes ``"NotFound: gone"``. The result is cut to
    ``max_length`` characters and newlines become spaces.
    """
    if max_length < 0:
        raise ValueError("max_length must be >= 0")

    message = describe_failure(failure)
    if message is None:
        return None

    class_end = message.find(":")
    if class_end > 0:
        last_period = message.rfind(".", 0, class_end + 1)
        if last_period > 0:
            message = message[last_period + 1 :]

    if len(message) > max_length:
        message = message[:max_length]
    return message.replace("\n", " ")
