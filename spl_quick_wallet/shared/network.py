"""Error classification and timeouts for Solana RPC access."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.core import RPCException

logger = logging.getLogger(__name__)

RPC_EXCEPTIONS = (SolanaRpcException, RPCException)


class NetworkErrorType(Enum):
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"
    RPC_ERROR = "rpc_error"
    UNKNOWN = "unknown"


@dataclass
class NetworkError(Exception):
    error_type: NetworkErrorType
    message: str
    original_error: Exception | None = None
    status_code: int | None = None
    rpc_code: int | None = None
    rpc_data: Any = None

    def __str__(self) -> str:
        return self.message


@dataclass
class TimeoutConfig:
    connect_timeout: float = 5.0
    read_timeout: float = 15.0

    @property
    def request_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.read_timeout, connect=self.connect_timeout)


DEFAULT_TIMEOUT_CONFIG = TimeoutConfig()


def _transport_cause(error: Exception) -> Exception:
    # SolanaRpcException wraps the httpx error raised by the HTTP provider.
    if isinstance(error, SolanaRpcException) and isinstance(error.__cause__, Exception):
        return error.__cause__
    return error


def classify_error(error: Exception) -> NetworkErrorType:
    cause = _transport_cause(error)
    if isinstance(cause, httpx.TimeoutException):
        return NetworkErrorType.TIMEOUT
    elif isinstance(cause, httpx.TransportError):
        return NetworkErrorType.CONNECTION_ERROR
    elif isinstance(cause, httpx.HTTPStatusError):
        return NetworkErrorType.HTTP_ERROR
    elif isinstance(cause, RPCException):
        return NetworkErrorType.RPC_ERROR
    return NetworkErrorType.UNKNOWN


def _rpc_error_details(error: RPCException) -> tuple[str, int | None, Any]:
    detail = error.args[0] if error.args else None
    message = getattr(detail, "message", None) or str(detail or error) or "Unknown RPC error"
    return message, getattr(detail, "code", None), getattr(detail, "data", None)


def create_network_error(
    error: Exception, rpc_url: str, context: str = ""
) -> NetworkError:
    error_type = classify_error(error)
    cause = _transport_cause(error)
    context_prefix = f"{context}: " if context else ""

    if error_type == NetworkErrorType.TIMEOUT:
        message = (
            f"{context_prefix}Connection timeout. RPC node may be unavailable: {rpc_url}"
        )
    elif error_type == NetworkErrorType.CONNECTION_ERROR:
        message = (
            f"{context_prefix}Cannot connect to RPC node: {rpc_url}. "
            "Check your network connection."
        )
    elif error_type == NetworkErrorType.HTTP_ERROR:
        response = getattr(cause, "response", None)
        status_code = getattr(response, "status_code", None)
        response_text = getattr(response, "text", None)
        message = f"{context_prefix}HTTP error {status_code}: {response_text or 'Unknown error'}"
        return NetworkError(
            error_type=error_type,
            message=message,
            original_error=error,
            status_code=status_code,
        )
    elif error_type == NetworkErrorType.RPC_ERROR:
        rpc_message, code, data = _rpc_error_details(cause)
        logger.warning("RPC request failed: %s%s", context_prefix, rpc_message)
        return NetworkError(
            error_type=error_type,
            message=f"{context_prefix}{rpc_message}",
            original_error=error,
            rpc_code=code,
            rpc_data=data,
        )
    else:
        message = f"{context_prefix}Network error: {str(cause)}"

    return NetworkError(
        error_type=error_type,
        message=message,
        original_error=error,
    )
