import aiohttp
import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol
from aiohttp_retry import RetryClient, ExponentialRetry
from connection_pool import HTTPSessionManager
from exceptions import RpcError

logger = logging.getLogger(__name__)


class TransactionSource(Protocol):
    """What the backfill needs from a Solana node."""

    async def get_signatures(self, account: str, before: Optional[str], limit: int) -> List[Dict[str, Any]]:
        ...

    async def get_transaction(self, signature: str) -> Optional[Dict[str, Any]]:
        ...


class SolanaRpcClient:
    def __init__(self, rpc_url: str, session_manager: HTTPSessionManager, retry_attempts: int = 3):
        if not rpc_url:
            raise ValueError("SOLANA_CLUSTER_URL must be provided")
        self.rpc_url = rpc_url
        self.session_manager = session_manager
        self.client: Optional[RetryClient] = None
        self._request_id = 0

        self.retry_options = ExponentialRetry(
            attempts=retry_attempts,
            statuses={429, 500, 502, 503, 504},
            exceptions={aiohttp.ClientError, asyncio.TimeoutError},
            factor=2
        )

    async def __aenter__(self):
        """Async context manager entry"""
        await self.session_manager.start()
        self.client = RetryClient(
            client_session=self.session_manager.session,
            retry_options=self.retry_options
        )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        """Async context manager exit with proper cleanup"""
        await self.close()

        if exc_type and not isinstance(exc, asyncio.CancelledError):
            logger.error(f"SolanaRpcClient error: {exc}")

    async def get_signatures(self, account: str, before: Optional[str] = None, limit: int = 1000) -> List[Dict[str, Any]]:
        """Signatures for `account` strictly older than `before`, newest first"""
        options: Dict[str, Any] = {"limit": limit}
        if before:
            options["before"] = before

        result = await self._call("getSignaturesForAddress", [account, options])
        if not isinstance(result, list):
            raise RpcError("getSignaturesForAddress", f"unexpected result type {type(result).__name__}")
        return result

    async def get_transaction(self, signature: str) -> Optional[Dict[str, Any]]:
        """Full transaction with jsonParsed instructions, or None if the node has no record"""
        return await self._call(
            "getTransaction",
            [signature, {"encoding": "jsonParsed", "maxSupportedTransactionVersion": 0}]
        )

    async def _call(self, method: str, params: list) -> Any:
        if not self.client:
            raise RuntimeError("Client not initialized")

        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params
        }

        try:
            async with self.client.post(self.rpc_url, json=payload) as response:
                response.raise_for_status()
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise RpcError(method, str(e) or type(e).__name__) from e

        if not isinstance(data, dict):
            raise RpcError(method, "malformed JSON-RPC response")

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(method, error.get("message", "unknown error"), error.get("code"))
            raise RpcError(method, str(error))

        return data.get("result")

    async def close(self):
        """Cleanup client resources"""
        try:
            await self.session_manager.stop()
        except Exception as e:
            logger.warning(f"Error closing client: {str(e)}")
        finally:
            self.client = None
