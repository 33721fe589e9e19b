"""Unit tests for RPC error classification."""

import httpx
import pytest
from solana.exceptions import SolanaRpcException, handle_exceptions
from solana.rpc.core import RPCException
from solders.rpc.errors import InvalidParamsMessage

from spl_quick_wallet.shared.network import (
    NetworkErrorType,
    TimeoutConfig,
    classify_error,
    create_network_error,
)

RPC_URL = "https://api.devnet.solana.com"


def provider_error(cause):
    """Raise ``cause`` through the same wrapper the solana HTTP provider uses."""

    @handle_exceptions(SolanaRpcException, httpx.HTTPError)
    def make_request(provider, body):
        raise cause

    with pytest.raises(SolanaRpcException) as exc_info:
        make_request(None, "GetBalance")
    return exc_info.value


def status_error(status_code):
    request = httpx.Request("POST", RPC_URL)
    response = httpx.Response(status_code, request=request, text="Service Unavailable")
    return httpx.HTTPStatusError("server error", request=request, response=response)


class TestTimeoutConfig:
    def test_default_values(self):
        config = TimeoutConfig()
        assert config.connect_timeout == 5.0
        assert config.read_timeout == 15.0

    def test_request_timeout(self):
        timeout = TimeoutConfig(connect_timeout=3.0, read_timeout=10.0).request_timeout
        assert isinstance(timeout, httpx.Timeout)
        assert timeout.connect == 3.0
        assert timeout.read == 10.0


@pytest.mark.unit
class TestClassifyError:
    def test_timeout(self):
        error = provider_error(httpx.ReadTimeout("read timed out"))
        assert classify_error(error) == NetworkErrorType.TIMEOUT

    def test_connection_error(self):
        error = provider_error(httpx.ConnectError("refused"))
        assert classify_error(error) == NetworkErrorType.CONNECTION_ERROR

    def test_http_error(self):
        assert classify_error(provider_error(status_error(503))) == NetworkErrorType.HTTP_ERROR

    def test_rpc_error(self):
        error = RPCException(InvalidParamsMessage("Invalid param: WrongSize"))
        assert classify_error(error) == NetworkErrorType.RPC_ERROR

    def test_unknown(self):
        assert classify_error(ValueError("x")) == NetworkErrorType.UNKNOWN


@pytest.mark.unit
class TestCreateNetworkError:
    def test_timeout_message_includes_url(self):
        error = create_network_error(
            provider_error(httpx.ConnectTimeout("slow")), RPC_URL, "Fetch SOL balance"
        )
        assert error.error_type == NetworkErrorType.TIMEOUT
        assert error.message.startswith("Fetch SOL balance: ")
        assert RPC_URL in error.message

    def test_http_error_keeps_status(self):
        error = create_network_error(provider_error(status_error(503)), RPC_URL)
        assert error.error_type == NetworkErrorType.HTTP_ERROR
        assert error.status_code == 503
        assert "503" in error.message

    def test_rpc_error_uses_node_message(self):
        original = RPCException(InvalidParamsMessage("Invalid param: WrongSize"))
        error = create_network_error(original, RPC_URL, "Fetch SOL balance")
        assert error.error_type == NetworkErrorType.RPC_ERROR
        assert str(error) == "Fetch SOL balance: Invalid param: WrongSize"
        assert error.original_error is original

    def test_unknown_error(self):
        error = create_network_error(RuntimeError("boom"), RPC_URL)
        assert error.error_type == NetworkErrorType.UNKNOWN
        assert error.message == "Network error: boom"
