"""Typed views of the exchange's JSON payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


def _decimal(value: Any) -> Decimal:
    if value in (None, ""):
        return Decimal(0)
    return Decimal(str(value))


@dataclass(slots=True, frozen=True)
class Coin:
    """A coin the exchange handles (crypto or fiat)."""

    coin: str
    min_withdrawal: Decimal
    fee_withdrawal: Decimal
    country: str = ""
    confirmations_required: int = 0

    @classmethod
    def from_api(cls, raw: dict) -> Coin:
        return cls(
            coin=raw["coin"],
            min_withdrawal=_decimal(raw.get("min_withdraw")),
            fee_withdrawal=_decimal(raw.get("fee_withdraw")),
            country=raw.get("country") or "",
            confirmations_required=int(raw.get("confirmations_required") or 0),
        )


@dataclass(slots=True, frozen=True)
class Market:
    """Trading limits of a market such as ``BTC-MXN``."""

    name: str
    min_amount: Decimal
    max_amount: Decimal
    min_value: Decimal
    max_value: Decimal
    min_price: Decimal
    max_price: Decimal
    is_open: bool

    @classmethod
    def from_api(cls, raw: dict) -> Market:
        return cls(
            name=raw["name"],
            min_amount=_decimal(raw.get("min_amount")),
            max_amount=_decimal(raw.get("max_amount")),
            min_value=_decimal(raw.get("min_value")),
            max_value=_decimal(raw.get("max_value")),
            min_price=_decimal(raw.get("min_price")),
            max_price=_decimal(raw.get("max_price")),
            is_open=bool(raw.get("is_open")),
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class Order:
    """An order as returned by place-order, open-orders and the order book.

    ``id`` is set by place-order, ``order_id`` by the open-orders listing.
    """

    id: int = 0
    order_id: int = 0
    market: str = ""
    side: str = ""
    amount: Decimal = Decimal(0)
    initial_amount: Decimal = Decimal(0)
    filled: Decimal = Decimal(0)
    value: Decimal = Decimal(0)
    initial_value: Decimal = Decimal(0)
    price: Decimal = Decimal(0)
    fee_decimal: Decimal = Decimal(0)
    created_at: str = ""

    @classmethod
    def from_api(cls, raw: dict) -> Order:
        return cls(
            id=int(raw.get("id") or 0),
            order_id=int(raw.get("order_id") or 0),
            market=raw.get("market") or "",
            side=raw.get("side") or "",
            amount=_decimal(raw.get("amount")),
            initial_amount=_decimal(raw.get("initial_amount")),
            filled=_decimal(raw.get("filled")),
            value=_decimal(raw.get("value")),
            initial_value=_decimal(raw.get("initial_value")),
            price=_decimal(raw.get("price")),
            fee_decimal=_decimal(raw.get("fee_decimal")),
            created_at=raw.get("created_at") or "",
        )


@dataclass(slots=True, frozen=True)
class MarketOrders:
    """Order book snapshot of one market."""

    market: str
    asks: list[Order] = field(default_factory=list)
    bids: list[Order] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: dict) -> MarketOrders:
        return cls(
            market=raw.get("market") or "",
            asks=[Order.from_api(o) for o in raw.get("asks") or []],
            bids=[Order.from_api(o) for o in raw.get("bids") or []],
        )


@dataclass(slots=True, frozen=True)
class Balance:
    """Wallet balances of one coin."""

    coin: str
    coin_name: str
    address: str
    available: Decimal
    pending: Decimal
    frozen: Decimal
    in_orders: Decimal

    @classmethod
    def from_api(cls, raw: dict) -> Balance:
        balances = raw.get("balances") or {}
        return cls(
            coin=raw["coin"],
            coin_name=raw.get("coin_name") or "",
            address=raw.get("address") or "",
            available=_decimal(balances.get("available")),
            pending=_decimal(balances.get("pending")),
            frozen=_decimal(balances.get("frozen")),
            in_orders=_decimal(balances.get("in_orders")),
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class Webhook:
    """A notification subscription."""

    name: str
    endpoint: str
    id: int = 0
    notify_deposit: bool = False
    notify_withdrawal: bool = False
    notify_order_placed: bool = False
    notify_order_filled: bool = False
    notify_trade: bool = False
    authorization_header: str = ""
    authorization_content: str = ""
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_api(cls, raw: dict) -> Webhook:
        return cls(
            id=int(raw.get("id") or 0),
            name=raw.get("name") or "",
            endpoint=raw.get("endpoint") or "",
            notify_deposit=bool(raw.get("notify_deposit")),
            notify_withdrawal=bool(raw.get("notify_withdrawal")),
            notify_order_placed=bool(raw.get("notify_order_place")),
            notify_order_filled=bool(raw.get("notify_order_filled")),
            notify_trade=bool(raw.get("notify_trade")),
            authorization_header=raw.get("authorization_header") or "",
            authorization_content=raw.get("authorization_content") or "",
            is_active=bool(raw.get("is_active")),
            created_at=raw.get("created_at") or "",
            updated_at=raw.get("updated_at") or "",
        )

    def to_api(self) -> dict[str, Any]:
        """Request body for webhook creation. Server-assigned fields are left out."""
        return {
            "name": self.name,
            "endpoint": self.endpoint,
            "notify_deposit": self.notify_deposit,
            "notify_withdrawal": self.notify_withdrawal,
            "notify_order_place": self.notify_order_placed,
            "notify_order_filled": self.notify_order_filled,
            "notify_trade": self.notify_trade,
            "authorization_header": self.authorization_header,
            "authorization_content": self.authorization_content,
            "is_active": self.is_active,
        }


@dataclass(slots=True, frozen=True, kw_only=True)
class NewOrder:
    """Parameters of an order to place."""

    market: str
    side: str
    amount: Decimal
    price: Decimal | None = None
    type: str = "limit"
    is_amount_value: bool = False

    def to_api(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "market": self.market,
            "side": self.side,
            "amount": str(self.amount),
            "type": self.type,
        }
        if self.price is not None:
            body["price"] = str(self.price)
        if self.is_amount_value:
            body["is_amount_value"] = True
        return body


@dataclass(slots=True, frozen=True, kw_only=True)
class TransferRequest:
    """Direct transfer of funds to another exchange account."""

    recipient: str
    coin: str
    amount: Decimal
    nip: str

    def to_api(self) -> dict[str, Any]:
        return {
            "nip": self.nip,
            "coin": self.coin,
            "recipient": self.recipient,
            "amount": float(self.amount),
        }


@dataclass(slots=True, frozen=True)
class WebhookNotification:
    """Body the exchange POSTs to a registered webhook endpoint.

    ``object`` is left as a dict since its fields depend on ``type``
    (deposit, withdrawal, order placed/filled, trade).
    """

    title: str
    description: str
    type: str
    date: str
    object: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict) -> WebhookNotification:
        return cls(
            title=raw.get("title") or "",
            description=raw.get("description") or "",
            type=raw.get("type") or "",
            date=raw.get("date") or "",
            object=raw.get("object") or {},
        )
