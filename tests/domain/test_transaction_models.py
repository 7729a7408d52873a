"""Tests for transaction models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from mandictl.domain.transactions import Transaction, TransactionStatus

NOW = datetime(2024, 1, 15, tzinfo=UTC)


def _txn(**overrides: object) -> Transaction:
    fields: dict[str, object] = {
        "id": "TXN-1",
        "buyer_id": "B1",
        "seller_id": "S1",
        "commodity": "tomato",
        "quantity": 50,
        "agreed_price": 20,
        "created_at": NOW,
    }
    fields.update(overrides)
    return Transaction(**fields)  # type: ignore[arg-type]


class TestTransaction:
    def test_defaults_to_pending(self) -> None:
        assert _txn().status == TransactionStatus.PENDING

    def test_total_amount(self) -> None:
        assert _txn().total_amount == 1000

    def test_involves(self) -> None:
        t = _txn()
        assert t.involves("B1")
        assert t.involves("S1")
        assert not t.involves("X")

    @pytest.mark.parametrize("field", ["quantity", "agreed_price"])
    def test_positive_amounts(self, field: str) -> None:
        with pytest.raises(ValidationError):
            _txn(**{field: 0})

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, rating: int) -> None:
        with pytest.raises(ValidationError):
            _txn(buyer_rating=rating)
