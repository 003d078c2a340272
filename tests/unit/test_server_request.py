"""
Unit tests for ServerRequest.
"""

from pathlib import Path
from types import SimpleNamespace

import pytest

from httpmessage.core import create_stream
from httpmessage.errors import InvalidParsedBody, InvalidUploadedFile
from httpmessage.http.request import Request
from httpmessage.http.server_request import ServerRequest
from httpmessage.http.uploaded_file import UploadedFile


@pytest.fixture
def upload(upload_file: Path) -> UploadedFile:
    """A valid path-backed upload."""
    return UploadedFile.from_path(upload_file, 16, client_filename="avatar.png")


@pytest.fixture
def server_request() -> ServerRequest:
    """A POST request with server, cookie and query params."""
    return ServerRequest(
        "POST",
        "http://example.com/profile?tab=photos",
        server_params={"REMOTE_ADDR": "10.0.0.1"},
        cookie_params={"session": "abc"},
        query_params={"tab": "photos"},
    )


class TestServerRequestConstruction:
    """Tests for building a ServerRequest."""

    def test_is_a_request(self, server_request: ServerRequest):
        """Test that request behavior is inherited."""
        assert isinstance(server_request, Request)
        assert server_request.method == "POST"
        assert server_request.get_header_line("Host") == "example.com"
        assert server_request.request_target == "/profile?tab=photos"

    def test_params(self, server_request: ServerRequest):
        """Test the stored parameter mappings."""
        assert server_request.server_params == {"REMOTE_ADDR": "10.0.0.1"}
        assert server_request.cookie_params == {"session": "abc"}
        assert server_request.query_params == {"tab": "photos"}

    def test_defaults(self):
        """Test that everything defaults to empty."""
        request = ServerRequest()

        assert request.server_params == {}
        assert request.cookie_params == {}
        assert request.query_params == {}
        assert request.uploaded_files == {}
        assert request.parsed_body is None
        assert request.attributes == {}

    def test_getters_return_copies(self, server_request: ServerRequest):
        """Test that mutating returned values does not change the request."""
        server_request.server_params["REMOTE_ADDR"] = "evil"
        server_request.cookie_params.clear()
        server_request.query_params["tab"] = "other"

        assert server_request.server_params == {"REMOTE_ADDR": "10.0.0.1"}
        assert server_request.cookie_params == {"session": "abc"}
        assert server_request.query_params == {"tab": "photos"}

    def test_invalid_uploaded_files_rejected(self):
        """Test that uploaded files are validated on construction."""
        with pytest.raises(InvalidUploadedFile):
            ServerRequest(uploaded_files={"avatar": "not a file"})

    def test_scalar_parsed_body_rejected(self):
        """Test that a scalar parsed body is rejected on construction."""
        with pytest.raises(InvalidParsedBody):
            ServerRequest(parsed_body="name=John")


class TestParamMutators:
    """Tests for cookie and query parameter mutators."""

    def test_with_cookie_params(self, server_request: ServerRequest):
        """Test replacing cookies."""
        updated = server_request.with_cookie_params({"theme": "dark"})

        assert updated.cookie_params == {"theme": "dark"}
        assert server_request.cookie_params == {"session": "abc"}
        assert isinstance(updated, ServerRequest)

    def test_with_query_params(self, server_request: ServerRequest):
        """Test replacing query params without touching the URI."""
        updated = server_request.with_query_params({"tab": "posts"})

        assert updated.query_params == {"tab": "posts"}
        assert updated.uri.query == "tab=photos"

    def test_caller_dict_not_shared(self, server_request: ServerRequest):
        """Test that later changes to the passed dict are not visible."""
        cookies = {"a": "1"}
        updated = server_request.with_cookie_params(cookies)
        cookies["b"] = "2"

        assert updated.cookie_params == {"a": "1"}


class TestUploadedFiles:
    """Tests for the uploaded file tree."""

    def test_flat_files(self, server_request: ServerRequest, upload: UploadedFile):
        """Test a single named upload."""
        updated = server_request.with_uploaded_files({"avatar": upload})

        assert updated.uploaded_files == {"avatar": upload}
        assert server_request.uploaded_files == {}

    def test_nested_files(self, server_request: ServerRequest, upload: UploadedFile):
        """Test nested mappings and lists of uploads."""
        tree = {"gallery": {"photos": [upload, upload]}}
        updated = server_request.with_uploaded_files(tree)

        assert updated.uploaded_files["gallery"]["photos"] == [upload, upload]

    def test_nested_invalid_leaf(self, server_request: ServerRequest, upload: UploadedFile):
        """Test that a bad leaf anywhere in the tree is rejected."""
        with pytest.raises(InvalidUploadedFile):
            server_request.with_uploaded_files({"gallery": [upload, {"bad": 42}]})

    def test_tree_is_copied(self, server_request: ServerRequest, upload: UploadedFile):
        """Test that the stored tree cannot be changed from outside."""
        tree = {"gallery": [upload]}
        updated = server_request.with_uploaded_files(tree)
        tree["gallery"].append("junk")
        updated.uploaded_files["gallery"].append("junk")

        assert updated.uploaded_files == {"gallery": [upload]}


class TestParsedBody:
    """Tests for the parsed body."""

    @pytest.mark.parametrize("data", [None, {"name": "John"}, [1, 2], SimpleNamespace(name="John")])
    def test_accepted_values(self, server_request: ServerRequest, data):
        """Test that None, mappings, lists and objects are accepted."""
        updated = server_request.with_parsed_body(data)

        if isinstance(data, (dict, list)):
            assert updated.parsed_body == data
        else:
            assert updated.parsed_body is data

    @pytest.mark.parametrize("data", ["text", b"bytes", 42, 1.5, True])
    def test_scalars_rejected(self, server_request: ServerRequest, data):
        """Test that scalar values are rejected."""
        with pytest.raises(InvalidParsedBody):
            server_request.with_parsed_body(data)

    def test_parsed_body_is_a_copy(self, server_request: ServerRequest):
        """Test that a dict body cannot be changed through the getter."""
        updated = server_request.with_parsed_body({"name": "John"})
        updated.parsed_body["name"] = "Jane"

        assert updated.parsed_body == {"name": "John"}

    def test_body_stream_untouched(self):
        """Test that the parsed body is independent of the raw body."""
        request = ServerRequest("POST", body=create_stream(b"name=John"))
        updated = request.with_parsed_body({"name": "John"})

        assert str(updated.body) == "name=John"


class TestAttributes:
    """Tests for request attributes."""

    def test_with_attribute(self, server_request: ServerRequest):
        """Test adding an attribute."""
        updated = server_request.with_attribute("user_id", 42)

        assert updated.get_attribute("user_id") == 42
        assert updated.attributes == {"user_id": 42}
        assert server_request.attributes == {}

    def test_get_attribute_default(self, server_request: ServerRequest):
        """Test the default for a missing attribute."""
        assert server_request.get_attribute("missing") is None
        assert server_request.get_attribute("missing", "n/a") == "n/a"

    def test_without_attribute(self, server_request: ServerRequest):
        """Test removing an attribute."""
        request = server_request.with_attribute("a", 1).with_attribute("b", 2)
        updated = request.without_attribute("a")

        assert updated.attributes == {"b": 2}
        assert request.attributes == {"a": 1, "b": 2}

    def test_without_missing_attribute_returns_self(self, server_request: ServerRequest):
        """Test that removing an absent attribute is a no-op."""
        assert server_request.without_attribute("missing") is server_request

    def test_attributes_survive_other_mutators(self, server_request: ServerRequest):
        """Test that attributes are carried through unrelated copies."""
        updated = server_request.with_attribute("route", "profile").with_header("X-Foo", "bar")

        assert updated.get_attribute("route") == "profile"
        assert updated.has_header("X-Foo")
