"""
=============================================================================
SERVER-SIDE REQUEST
=============================================================================

An incoming request as seen by the application, after the web server or
framework has already done the parsing:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Request (method, uri, headers, body)                              │
    │     +                                                               │
    │   server_params     environment of the server (read-only)           │
    │   cookie_params     parsed Cookie header                            │
    │   query_params      parsed query string                             │
    │   uploaded_files    tree of UploadedFile (mapping / list / leaf)    │
    │   parsed_body       decoded form or JSON body, or None              │
    │   attributes        values attached by routing / middleware         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing here parses anything; the values are stored as given.

Attributes are how middleware talks to handlers:

    request = request.with_attribute("user_id", 42)
    request.get_attribute("user_id")            # 42
    request.get_attribute("missing", "n/a")     # "n/a"

=============================================================================
"""

import copy
from typing import Any, Dict, Mapping, Optional, Union

from ..core.stream import Stream
from ..errors import InvalidParsedBody, InvalidUploadedFile
from .request import Request
from .uploaded_file import UploadedFile
from .uri import Uri


def validate_uploaded_files(files: Any) -> Any:
    """
    Check that every leaf of a (possibly nested) mapping or list is an
    UploadedFile.

    Raises:
        InvalidUploadedFile: On the first leaf that is not
    """
    if isinstance(files, UploadedFile):
        return files

    if isinstance(files, Mapping):
        children = files.values()
    elif isinstance(files, (list, tuple)):
        children = files
    else:
        raise InvalidUploadedFile("Invalid file; uploaded files must be UploadedFile instances")

    for child in children:
        validate_uploaded_files(child)

    return files


def validate_parsed_body(data: Any) -> Any:
    """None, a mapping, a list or an object are fine; scalars are not."""
    if isinstance(data, (str, bytes, int, float, bool)):
        raise InvalidParsedBody("Invalid body; must be mapping, list, object or None")
    return data


def _copy_tree(value: Any) -> Any:
    # Rebuild containers, keep leaves (UploadedFile objects) shared
    if isinstance(value, Mapping):
        return {key: _copy_tree(child) for key, child in value.items()}
    if isinstance(value, (list, tuple)):
        return [_copy_tree(child) for child in value]
    return value


class ServerRequest(Request):
    """
    Immutable server-side request.

    Args:
        method, uri, headers, body, protocol_version: as for Request
        server_params: Server environment values
        cookie_params: Cookie name → value
        query_params: Query parameter name → value
        uploaded_files: Nested mapping/list of UploadedFile
        parsed_body: Decoded body; None, mapping, list or object

    Raises:
        InvalidUploadedFile: If uploaded_files holds anything else
        InvalidParsedBody: If parsed_body is a scalar
    """

    def __init__(
        self,
        method: str = "",
        uri: Optional[Union[Uri, str]] = None,
        headers: Optional[Any] = None,
        body: Optional[Stream] = None,
        protocol_version: str = "1.1",
        server_params: Optional[Dict[str, Any]] = None,
        cookie_params: Optional[Dict[str, Any]] = None,
        query_params: Optional[Dict[str, Any]] = None,
        uploaded_files: Optional[Dict[str, Any]] = None,
        parsed_body: Any = None,
    ):
        uploaded_files = validate_uploaded_files(uploaded_files or {})
        parsed_body = validate_parsed_body(parsed_body)

        super().__init__(
            method=method,
            uri=uri,
            headers=headers,
            body=body,
            protocol_version=protocol_version,
        )

        self._server_params = dict(server_params or {})
        self._cookie_params = dict(cookie_params or {})
        self._query_params = dict(query_params or {})
        self._uploaded_files = _copy_tree(uploaded_files)
        self._parsed_body = parsed_body
        self._attributes: Dict[str, Any] = {}

    # =========================================================================
    # SERVER / COOKIE / QUERY PARAMS
    # =========================================================================

    @property
    def server_params(self) -> Dict[str, Any]:
        return dict(self._server_params)

    @property
    def cookie_params(self) -> Dict[str, Any]:
        return dict(self._cookie_params)

    def with_cookie_params(self, cookies: Mapping[str, Any]) -> "ServerRequest":
        return self._clone(cookie_params=dict(cookies))

    @property
    def query_params(self) -> Dict[str, Any]:
        return dict(self._query_params)

    def with_query_params(self, query: Mapping[str, Any]) -> "ServerRequest":
        return self._clone(query_params=dict(query))

    # =========================================================================
    # UPLOADED FILES AND PARSED BODY
    # =========================================================================

    @property
    def uploaded_files(self) -> Dict[str, Any]:
        return _copy_tree(self._uploaded_files)

    def with_uploaded_files(self, uploaded_files: Mapping[str, Any]) -> "ServerRequest":
        validate_uploaded_files(uploaded_files)
        return self._clone(uploaded_files=_copy_tree(uploaded_files))

    @property
    def parsed_body(self) -> Any:
        """
        The decoded body. Mappings and lists come back as copies; any
        other object is returned as stored.
        """
        if isinstance(self._parsed_body, (dict, list)):
            return copy.copy(self._parsed_body)
        return self._parsed_body

    def with_parsed_body(self, data: Any) -> "ServerRequest":
        data = validate_parsed_body(data)

        if isinstance(data, (dict, list)):
            data = copy.copy(data)
        return self._clone(parsed_body=data)

    # =========================================================================
    # ATTRIBUTES
    # =========================================================================

    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "ServerRequest":
        attributes = dict(self._attributes)
        attributes[name] = value
        return self._clone(attributes=attributes)

    def without_attribute(self, name: str) -> "ServerRequest":
        if name not in self._attributes:
            return self

        attributes = dict(self._attributes)
        del attributes[name]
        return self._clone(attributes=attributes)
