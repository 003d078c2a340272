"""
=============================================================================
HTTP RESPONSE
=============================================================================

A Message plus a status code and reason phrase.

    HTTP/1.1 404 Not Found\\r\\n
    ────┬─── ─┬─ ────┬────
        │     │      │
    Version  Code  Phrase   (defaults to the registry entry for the code)

=============================================================================
STATUS CODE RULES
=============================================================================

    Response(404)             → 404, "Not Found"
    Response(404, reason_phrase="Nope")
                              → 404, "Nope"
    Response(599)             → 599, ""      (legal, just unnamed)
    Response(600)             → InvalidStatusCode
    Response(200.0)           → InvalidStatusCode  (integers only)

=============================================================================
"""

from typing import Any, Optional

from ..core.stream import Stream
from ..errors import InvalidReasonPhrase, InvalidStatusCode
from .message import Message
from .status_codes import MAX_STATUS_CODE, MIN_STATUS_CODE, reason_phrase_for


def validate_status_code(code: Any) -> int:
    """
    Accept an integer (or a string of digits) in [100, 599].

    Raises:
        InvalidStatusCode: If code is a float, non-numeric, or out of range
    """
    if isinstance(code, bool) or isinstance(code, float):
        raise InvalidStatusCode("Invalid status code; must be an integer")

    if isinstance(code, str) and code.isascii() and code.isdigit():
        code = int(code)

    if not isinstance(code, int):
        raise InvalidStatusCode("Invalid status code; must be an integer")

    if not MIN_STATUS_CODE <= code <= MAX_STATUS_CODE:
        raise InvalidStatusCode(
            f"Invalid status code; must be an integer between {MIN_STATUS_CODE} and {MAX_STATUS_CODE}"
        )

    return int(code)


def validate_reason_phrase(phrase: Any) -> str:
    if not isinstance(phrase, str):
        raise InvalidReasonPhrase("Invalid reason phrase; must be a string")

    if "\r" in phrase or "\n" in phrase:
        raise InvalidReasonPhrase("Invalid reason phrase; cannot contain line breaks")

    return phrase


class Response(Message):
    """
    Immutable HTTP response.

    Example:
        response = Response(201, headers={"Location": "/users/7"})
        response.status_code        # 201
        response.reason_phrase      # "Created"

        gone = response.with_status(410)

    Args:
        status_code: Integer in [100, 599]; default 200
        headers: Mapping (or iterable of pairs) of header name to value(s)
        body: Stream; defaults to an empty writable temporary stream
        protocol_version: "1.0", "1.1" (default) or "2"
        reason_phrase: Custom phrase; "" means use the standard one
    """

    def __init__(
        self,
        status_code: int = 200,
        headers: Optional[Any] = None,
        body: Optional[Stream] = None,
        protocol_version: str = "1.1",
        reason_phrase: str = "",
    ):
        status_code = validate_status_code(status_code)
        reason_phrase = validate_reason_phrase(reason_phrase)

        super().__init__(headers=headers, body=body, protocol_version=protocol_version)

        self._status_code = status_code
        self._reason_phrase = reason_phrase

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason_phrase(self) -> str:
        """
        The explicit phrase if one was given, else the registry phrase for
        the code, else "".
        """
        if self._reason_phrase:
            return self._reason_phrase
        return reason_phrase_for(self._status_code)

    def with_status(self, code: int, reason_phrase: str = "") -> "Response":
        code = validate_status_code(code)
        reason_phrase = validate_reason_phrase(reason_phrase)

        if code == self._status_code and reason_phrase == self._reason_phrase:
            return self
        return self._clone(status_code=code, reason_phrase=reason_phrase)
