"""Tauros REST API client for market data, orders, transfers and webhooks."""

from __future__ import annotations

import json
from typing import Any, Self, TYPE_CHECKING

import httpx
from loguru import logger

from tauros.data.models import (
    Balance,
    Coin,
    Market,
    MarketOrders,
    NewOrder,
    Order,
    TransferRequest,
    Webhook,
)

from .auth import Credentials, NonceProvider
from .errors import BusinessError, TaurosError, TransportError
from .request import DEFAULT_TIMEOUT, RequestAssembler, RequestSpec
from .response import classify_failure, normalize

if TYPE_CHECKING:
    import sys
    from types import TracebackType

    from tauros.config import Config

WEBHOOKS_PATH = "webhooks/webhooks"
WEBHOOK_LIMIT = 5


class TaurosClient:
    """Async client for the Tauros REST API.

    Credentials are optional; without them only public endpoints work.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        base_url: str = "https://api.tauros.io",
        timeout: float = DEFAULT_TIMEOUT,
        nonce_provider: NonceProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._assembler = RequestAssembler(credentials, nonce_provider)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> Self:
        """Build a client from environment configuration."""
        return cls(
            credentials=config.credentials(),
            base_url=config.tauros_base_url,
            timeout=config.request_timeout,
            **kwargs,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> Self:
        await self._get_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: sys.exc_info  # noqa: PYI036
        | tuple[type[BaseException], BaseException, TracebackType]
        | None,
    ) -> None:
        await self.close()

    async def request(self, spec: RequestSpec) -> Any:
        """Execute one API call and return its normalized payload."""
        request = self._assembler.build(spec, self.base_url, self.timeout)
        client = await self._get_client()
        try:
            response = await client.send(request)
        except httpx.TimeoutException as e:
            logger.error("Tauros API request timed out: {} {}", spec.method, spec.path)
            msg = f"Request timed out: {e}"
            raise TransportError(msg) from e
        except httpx.HTTPError as e:
            logger.error("Tauros API request failed: {}", e)
            raise TransportError(str(e)) from e

        try:
            return normalize(spec.version, spec.path, response.content, response.status_code)
        except TaurosError as e:
            e.response = response
            raise

    async def _call(
        self,
        version: int,
        method: str,
        path: str,
        *,
        auth: bool = False,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        content = json.dumps(body).encode("utf-8") if body is not None else b""
        return await self.request(
            RequestSpec(
                version=version,
                method=method,
                path=path,
                auth=auth,
                body=content,
                params=params,
            )
        )

    # --- Webhooks ---

    async def _webhook_call(self, method: str, path: str, **kwargs: Any) -> Any:
        """Webhook endpoints report failures in-band as ``{"detail": ...}``."""
        data = await self._call(2, method, path, auth=True, **kwargs)
        if isinstance(data, dict) and data.get("detail"):
            raise classify_failure(str(data["detail"]))
        return data

    async def get_webhooks(self) -> list[Webhook]:
        """List the registered webhooks."""
        data = await self._webhook_call("GET", WEBHOOKS_PATH)
        return [Webhook.from_api(w) for w in data.get("results") or []]

    async def create_webhook(self, webhook: Webhook) -> int:
        """Register a webhook and return its id."""
        data = await self._webhook_call("POST", WEBHOOKS_PATH, body=webhook.to_api())
        if data == ["Limit reached"]:
            raise BusinessError(f"Limit of webhooks reached ({WEBHOOK_LIMIT})")
        webhook_id = int(data["id"])
        logger.info("Created webhook {} {} -> {}", webhook_id, webhook.name, webhook.endpoint)
        return webhook_id

    async def delete_webhook(self, webhook_id: int) -> None:
        await self._webhook_call("DELETE", f"{WEBHOOKS_PATH}/{webhook_id}")

    async def delete_webhooks(self) -> None:
        """Delete every registered webhook."""
        for webhook in await self.get_webhooks():
            await self.delete_webhook(webhook.id)

    # --- Public (unsigned) endpoints ---

    async def get_coins(self) -> list[Coin]:
        """Get crypto and fiat coins handled by the exchange."""
        data = await self._call(2, "GET", "coins")
        # the server spells the crypto key "cryto"
        crypto = data.get("cryto") or data.get("crypto") or []
        return [Coin.from_api(c) for c in crypto + (data.get("fiat") or [])]

    async def get_markets(self) -> list[Market]:
        data = await self._call(2, "GET", "trading/markets")
        return [Market.from_api(m) for m in data]

    async def get_market_orders(self, market: str) -> MarketOrders:
        """Get the order book of one market, e.g. ``BTC-MXN``."""
        data = await self._call(
            1, "GET", "trading/orders", params={"market": market.lower()}
        )
        return MarketOrders.from_api(data)

    async def login(self, email: str, password: str) -> str:
        """Sign in with account credentials and return the JWT token."""
        data = await self._call(
            2, "POST", "auth/signin", body={"email": email, "password": password}
        )
        return data["token"]

    # --- Private (signed) endpoints ---

    async def get_balances(self) -> list[Balance]:
        data = await self._call(1, "GET", "data/listbalances", auth=True)
        return [Balance.from_api(w) for w in data.get("wallets") or []]

    async def get_deposit_address(self, coin: str) -> str:
        data = await self._call(
            1, "GET", "data/getdepositaddress", auth=True, params={"coin": coin}
        )
        return data["address"]

    async def place_order(self, new_order: NewOrder) -> Order:
        """Place an order.

        Args:
            new_order: Market, side, amount and, for limit orders, price.
        """
        body = new_order.to_api()
        logger.info("Placing order: {}", body)
        data = await self._call(1, "POST", "trading/placeorder", auth=True, body=body)
        order = Order.from_api(data)
        logger.info("Order placed: {}", order.id)
        return order

    async def get_open_orders(self) -> list[Order]:
        data = await self._call(1, "GET", "trading/myopenorders", auth=True)
        return [Order.from_api(o) for o in data or []]

    async def close_order(self, order_id: int) -> None:
        await self._call(1, "POST", "trading/closeorder", auth=True, body={"id": order_id})
        logger.info("Closed order {}", order_id)

    async def close_all_orders(self) -> None:
        """Close every open order, stopping at the first failure."""
        for order in await self.get_open_orders():
            await self.close_order(order.order_id)

    async def transfer(self, transfer: TransferRequest) -> None:
        """Send funds directly to another Tauros account."""
        await self._call(
            2, "POST", "wallets/inner-transfer", auth=True, body=transfer.to_api()
        )
        logger.info("Transferred {} {} to {}", transfer.amount, transfer.coin, transfer.recipient)
