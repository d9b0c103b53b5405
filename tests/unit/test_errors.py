"""Unit tests for backend error classification."""

import httpx
import openai
import pytest

from companion.errors import (
    AuthError,
    ErrorKind,
    GenerationError,
    ModelUnavailableError,
    NetworkError,
    RateLimitError,
    ServerError,
    classify_openai_error,
)

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def status_error(status: int, body=None) -> openai.APIStatusError:
    response = httpx.Response(status, request=_REQUEST)
    return openai.APIStatusError(f"status {status}", response=response, body=body)


class TestClassifyOpenAIError:

    @pytest.mark.parametrize(
        "status, expected",
        [
            (401, AuthError),
            (403, AuthError),
            (429, RateLimitError),
            (404, ModelUnavailableError),
            (500, ServerError),
            (503, ServerError),
            (400, ServerError),
        ],
    )
    def test_status_codes(self, status, expected):
        error = classify_openai_error(status_error(status))
        assert type(error) is expected
        assert error.status_code == status

    def test_model_not_found_code(self):
        exc = status_error(400, body={"code": "model_not_found", "message": "nope"})
        assert isinstance(classify_openai_error(exc), ModelUnavailableError)

    def test_connection_error(self):
        exc = openai.APIConnectionError(request=_REQUEST)
        assert isinstance(classify_openai_error(exc), NetworkError)

    def test_timeout(self):
        exc = openai.APITimeoutError(request=_REQUEST)
        assert isinstance(classify_openai_error(exc), NetworkError)

    def test_transport_error(self):
        exc = httpx.ConnectError("refused", request=_REQUEST)
        assert isinstance(classify_openai_error(exc), NetworkError)

    def test_escalation_kinds(self):
        assert RateLimitError("x").escalates_to_fallback
        assert ModelUnavailableError("x").escalates_to_fallback
        assert not ServerError("x").escalates_to_fallback
        assert not AuthError("x").escalates_to_fallback


class TestGenerationError:

    def test_message_is_keyed_to_kind(self):
        auth = GenerationError(ErrorKind.AUTH, "401", attempts=4)
        server = GenerationError(ErrorKind.SERVER, "500", attempts=4)
        assert auth.user_message != server.user_message
        assert "credentials" in str(auth)
        assert "try again later" in str(server)
