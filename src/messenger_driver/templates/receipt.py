"""Receipt template for order confirmations."""

from __future__ import annotations

from typing import Any

from messenger_driver.templates.base import Template
from messenger_driver.templates.objects import Address, Adjustment, Element, Summary


class ReceiptTemplate(Template):
    """Order receipt.

    Required fields are set at construction; optional fields are filled in
    with setters before ``transform``. Unset optional fields serialize as
    ``None`` rather than being omitted.
    """

    def __init__(
        self,
        order_number: str,
        recipient_name: str,
        currency: str,
        payment_method: str,
        summary: Summary,
    ) -> None:
        self._order_number = order_number
        self._recipient_name = recipient_name
        self._currency = currency
        self._payment_method = payment_method
        self._summary = summary
        self._merchant_name: str | None = None
        self._timestamp: str | None = None
        self._order_url: str | None = None
        self._elements: list[Element] | None = None
        self._address: Address | None = None
        self._adjustments: list[Adjustment] | None = None

    @classmethod
    def create(
        cls,
        order_number: str,
        recipient_name: str,
        currency: str,
        payment_method: str,
        summary: Summary,
    ) -> ReceiptTemplate:
        return cls(order_number, recipient_name, currency, payment_method, summary)

    def transform(self) -> dict[str, Any]:
        return {
            "attachment": {
                "type": "template",
                "payload": {
                    "template_type": "receipt",
                    "recipient_name": self._recipient_name,
                    "merchant_name": self._merchant_name,
                    "order_number": self._order_number,
                    "currency": self._currency,
                    "payment_method": self._payment_method,
                    "timestamp": self._timestamp,
                    "order_url": self._order_url,
                    "elements": (
                        [e.to_dict() for e in self._elements]
                        if self._elements is not None else None
                    ),
                    "address": self._address.to_dict() if self._address else None,
                    "summary": self._summary.to_dict(),
                    "adjustments": (
                        [a.to_dict() for a in self._adjustments]
                        if self._adjustments is not None else None
                    ),
                },
            },
        }

    @property
    def order_number(self) -> str:
        return self._order_number

    @property
    def recipient_name(self) -> str:
        return self._recipient_name

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def payment_method(self) -> str:
        return self._payment_method

    @property
    def summary(self) -> Summary:
        return self._summary

    @property
    def merchant_name(self) -> str | None:
        return self._merchant_name

    def set_merchant_name(self, merchant_name: str) -> None:
        self._merchant_name = merchant_name

    @property
    def timestamp(self) -> str | None:
        return self._timestamp

    def set_timestamp(self, timestamp: str) -> None:
        self._timestamp = timestamp

    @property
    def order_url(self) -> str | None:
        return self._order_url

    def set_order_url(self, order_url: str) -> None:
        self._order_url = order_url

    @property
    def elements(self) -> list[Element] | None:
        return list(self._elements) if self._elements is not None else None

    def add_element(self, element: Element) -> None:
        if self._elements is None:
            self._elements = []
        self._elements.append(element)

    @property
    def address(self) -> Address | None:
        return self._address

    def set_address(self, address: Address) -> None:
        self._address = address

    @property
    def adjustments(self) -> list[Adjustment] | None:
        return list(self._adjustments) if self._adjustments is not None else None

    def add_adjustment(self, adjustment: Adjustment) -> None:
        if self._adjustments is None:
            self._adjustments = []
        self._adjustments.append(adjustment)
