"""
Unit tests for Request: method, URI, Host synchronization and request target.
"""

import logging

import pytest

from httpmessage.errors import InvalidMethod, InvalidRequestTarget, InvalidUri
from httpmessage.http.request import Request, validate_method
from httpmessage.http.uri import Uri


class TestRequestConstruction:
    """Tests for building a Request."""

    def test_defaults(self):
        """Test an entirely default request."""
        request = Request()

        assert request.method == ""
        assert str(request.uri) == ""
        assert request.request_target == "/"
        assert request.headers == {}

    def test_method_uppercased_on_construction(self):
        """Test that the constructor normalizes the method."""
        assert Request("get").method == "GET"

    def test_uri_string_parsed(self, sample_request: Request):
        """Test that a string URI becomes a Uri."""
        assert isinstance(sample_request.uri, Uri)
        assert sample_request.uri.host == "www.example.com"

    def test_invalid_uri_type(self):
        """Test that a URI must be a Uri or a string."""
        with pytest.raises(InvalidUri):
            Request("GET", 42)

    @pytest.mark.parametrize("method", ["GET", "get", "PATCH", "M-SEARCH", "custom.method", "", None])
    def test_valid_methods(self, method):
        """Test method names accepted by the token grammar."""
        assert validate_method(method) == (method or "")

    @pytest.mark.parametrize("method", ["GET POST", "GE(T", "GET\r\n", 42])
    def test_invalid_methods(self, method):
        """Test method names that are rejected."""
        with pytest.raises(InvalidMethod):
            Request(method)

        with pytest.raises(InvalidMethod):
            Request().with_method(method)


class TestHostHeader:
    """Tests for synthesizing Host from the URI."""

    def test_host_synthesized_first(self, sample_request: Request):
        """Test that Host is added from the URI as the first header."""
        assert list(sample_request.headers) == ["Host", "Accept"]
        assert sample_request.get_header_line("host") == "www.example.com"

    def test_host_includes_non_default_port(self):
        """Test that a non-default port is appended."""
        request = Request("GET", "http://example.com:8080/")

        assert request.get_header("Host") == ["example.com:8080"]

    def test_host_omits_default_port(self):
        """Test that the scheme's default port is not appended."""
        request = Request("GET", "https://example.com:443/")

        assert request.get_header("Host") == ["example.com"]

    def test_caller_host_wins_on_construction(self):
        """Test that a supplied Host header (any case) is kept."""
        request = Request("GET", "http://example.com/", headers={"host": "other.org"})

        assert request.headers == {"host": ["other.org"]}

    def test_no_host_without_uri_host(self):
        """Test that a URI without a host adds no Host header."""
        assert not Request("GET", "/relative/path").has_header("Host")

    def test_with_uri_replaces_host(self, sample_request: Request):
        """Test that with_uri re-synthesizes Host, replacing any case."""
        request = sample_request.with_header("HOST", "stale")
        updated = request.with_uri(Uri("http://example.org:8080/x"))

        assert updated.headers == {"Host": ["example.org:8080"], "Accept": ["application/json"]}

    def test_with_uri_preserve_host(self, sample_request: Request):
        """Test that preserve_host keeps an existing Host header."""
        updated = sample_request.with_uri(Uri("http://example.org/"), preserve_host=True)

        assert updated.get_header_line("Host") == "www.example.com"
        assert updated.uri.host == "example.org"

    def test_with_uri_preserve_host_without_existing(self):
        """Test that preserve_host still adds Host when there is none."""
        request = Request("GET", "/path")
        updated = request.with_uri(Uri("http://example.org/"), preserve_host=True)

        assert updated.get_header_line("Host") == "example.org"

    def test_with_uri_hostless_keeps_existing_host(self, sample_request: Request):
        """Test that a URI with no host leaves the Host header alone."""
        updated = sample_request.with_uri(Uri("/other"))

        assert updated.get_header_line("Host") == "www.example.com"

    def test_with_uri_leaves_original(self, sample_request: Request):
        """Test that the original request keeps its URI and Host."""
        sample_request.with_uri(Uri("http://example.org/"))

        assert sample_request.uri.host == "www.example.com"
        assert sample_request.get_header_line("Host") == "www.example.com"

    def test_host_sync_logged(self, caplog):
        """Test that synthesizing Host is logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="httpmessage"):
            Request("GET", "http://example.com/")

        assert "example.com" in caplog.text


class TestRequestTarget:
    """Tests for request-target derivation and overrides."""

    def test_target_from_path_and_query(self, sample_request: Request):
        """Test that the target is path plus query."""
        assert sample_request.request_target == "/api/users?page=1"

    def test_target_defaults_to_slash(self):
        """Test that an empty path gives "/"."""
        assert Request("GET", "http://example.com").request_target == "/"

    def test_target_query_only(self):
        """Test a URI with a query but no path."""
        assert Request("GET", "http://example.com?x=1").request_target == "?x=1"

    def test_target_follows_uri_changes(self, sample_request: Request):
        """Test that the derived target is never cached."""
        assert sample_request.request_target == "/api/users?page=1"

        updated = sample_request.with_uri(sample_request.uri.with_path("/orders").with_query(""))

        assert updated.request_target == "/orders"

    def test_explicit_target_returned_verbatim(self, sample_request: Request):
        """Test that an override wins, however it looks."""
        assert sample_request.with_request_target("*").request_target == "*"
        assert sample_request.with_request_target("no-slash").request_target == "no-slash"

    def test_explicit_target_survives_uri_change(self, sample_request: Request):
        """Test that an override is not replaced by a new URI."""
        request = sample_request.with_request_target("*")

        assert request.with_uri(Uri("http://example.org/x")).request_target == "*"

    @pytest.mark.parametrize("target", ["/a b", "/a\tb", "/a\nb", 42])
    def test_invalid_targets(self, target):
        """Test that whitespace and non-strings are rejected."""
        with pytest.raises(InvalidRequestTarget):
            Request().with_request_target(target)


class TestRequestMutators:
    """Tests for Request copy-on-write methods."""

    def test_with_method_preserves_case(self, sample_request: Request):
        """Test that with_method keeps the case as given."""
        assert sample_request.with_method("patch").method == "patch"
        assert sample_request.method == "GET"

    def test_no_op_mutators_return_self(self, sample_request: Request):
        """Test that unchanged values return the same instance."""
        assert sample_request.with_method("GET") is sample_request
        assert sample_request.with_uri(sample_request.uri) is sample_request

        request = sample_request.with_request_target("/x")
        assert request.with_request_target("/x") is request

    def test_with_uri_requires_uri(self, sample_request: Request):
        """Test that with_uri only accepts Uri objects."""
        with pytest.raises(InvalidUri):
            sample_request.with_uri("http://example.org/")

    def test_inherited_mutators_keep_type(self, sample_request: Request):
        """Test that Message mutators return a Request."""
        updated = sample_request.with_header("X-Foo", "bar").with_protocol_version("2")

        assert isinstance(updated, Request)
        assert updated.method == "GET"
        assert updated.protocol_version == "2"
