import pytest

from verstamp.util.http_util import HttpEnvelope, initialize_session, do_request, prepare_request_data


class DummySession:
    """
    Poor man's requests-like session that echoes back the request details.
    """
    def get(self, **kwargs):
        return {
            "url": kwargs.get("url"),
            "method": "get",
            "json": None,
            "headers": kwargs.get("headers"),
            "params": kwargs.get("params"),
        }

    def put(self, **kwargs):
        return {
            "url": kwargs.get("url"),
            "method": "put",
            "json": kwargs.get("json"),
            "headers": kwargs.get("headers"),
            "params": kwargs.get("params"),
        }


@pytest.fixture
def dummy_session():
    # setup
    session = initialize_session(DummySession())
    yield session
    # teardown
    initialize_session(None)


def test_get_echoes_inputs(dummy_session):
    payload = {
        "url": "https://api.github.com/repos/o/r/contents/a.proj",
        "params": {"ref": "main"},
        "headers": {"Accept": "application/vnd.github+json"},
    }

    result = do_request("get", **payload)

    assert result == {
        "url": "https://api.github.com/repos/o/r/contents/a.proj",
        "method": "get",
        "json": None,
        "headers": {"Accept": "application/vnd.github+json"},
        "params": {"ref": "main"},
    }


def test_put_with_json_echoes_inputs(dummy_session):
    payload = {
        "url": "https://api.github.com/repos/o/r/contents/a.proj",
        "json": {"message": "release", "sha": "abc"},
    }

    result = do_request("put", **payload)

    assert result == {
        "url": "https://api.github.com/repos/o/r/contents/a.proj",
        "method": "put",
        "json": {"message": "release", "sha": "abc"},
        "headers": None,
        "params": None,
    }


def test_unsupported_method_is_rejected(dummy_session):
    with pytest.raises(AssertionError, match="unsupported method"):
        do_request("connect", url="https://example.com")


def test_mapping_request_fields_to_requests_api():
    method, requests_api_fields = prepare_request_data(
        {"method": "PUT",
         "url": "example.com",
         "query": {"ref": "main"},
         "body": {"content": "aGk="},
         "headers": {"X": "1"},
         "timeout": None,
         })

    assert method == "put"
    assert requests_api_fields == {
        "url": "example.com",
        "params": {"ref": "main"},
        "json": {"content": "aGk="},
        "headers": {"X": "1"},
    }


def test_envelope_json_and_headers():
    envelope = HttpEnvelope(
        status_code=200,
        headers={"Content-Type": "application/json"},
        text='{"a": 1}',
        url="https://example.com",
        method="GET",
    )
    assert envelope.ok
    assert envelope.json() == {"a": 1}
    assert envelope.header("content-type") == "application/json"
    assert envelope.next_page_url() is None


def test_envelope_json_is_none_for_empty_or_invalid_body():
    empty = HttpEnvelope(204, {}, "", "u", "GET")
    invalid = HttpEnvelope(500, {}, "<html>", "u", "GET")
    assert empty.json() is None
    assert invalid.json() is None
    assert not invalid.ok


def test_envelope_next_page_url():
    envelope = HttpEnvelope(
        200, {}, "{}", "u", "GET",
        links={"next": {"url": "https://api.github.com/x?page=2", "rel": "next"}},
    )
    assert envelope.next_page_url() == "https://api.github.com/x?page=2"
