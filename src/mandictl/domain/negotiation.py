"""Negotiation models and the offer-evaluation rules.

The rules compare an offer to a reference market price:

    diff% = (offer - reference) / reference * 100

- diff% > high            -> counter at reference * 1.05 (polite)
- diff% < -low            -> first offer: reject at reference * 0.95 (polite)
                             repeated:    counter at reference * 0.95 (firm)
- |diff%| <= fair         -> prior offers: accept (polite)
                             first offer:  counter at offer * 0.98 (polite)
- otherwise               -> counter at reference (polite)

INVARIANT: every path yields a well-formed suggestion; a suggested price,
when present, is strictly positive.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import BaseModel, Field, model_validator

from mandictl.domain.types import SuggestionType, Tone

GENERIC_ADVICE = "Consider the quality and quantity before deciding."


class NegotiationThresholds(BaseModel):
    """Percentage bands used to classify an offer."""

    model_config = {"frozen": True}

    high_pct: float = 15.0
    low_pct: float = 15.0
    fair_pct: float = 5.0
    stall_tolerance: float = 0.02


class NegotiationContext(BaseModel):
    """Everything the advisor needs to evaluate one offer.

    Attributes:
        commodity: Commodity id or free-text name; used to look up a
            reference price when none is supplied.
        reference_price: Market price to compare against, if known.
        current_offer: The offer under evaluation.
        previous_offers: Earlier offers, oldest first.
        buyer_language: Language code of the user receiving advice.
        counterpart_language: Language code of the other party.
    """

    model_config = {"frozen": True, "allow_inf_nan": False}

    commodity: str = ""
    reference_price: float | None = Field(default=None, gt=0)
    current_offer: float
    previous_offers: tuple[float, ...] = ()
    buyer_language: str = "en"
    counterpart_language: str = "en"


class NegotiationSuggestion(BaseModel):
    """Typed advice for the vendor."""

    model_config = {"frozen": True}

    type: SuggestionType
    message: str
    suggested_price: int | None = None
    rationale: str = ""
    tone: Tone = Tone.NEUTRAL

    @model_validator(mode="after")
    def _check_price(self) -> NegotiationSuggestion:
        if self.suggested_price is not None and self.suggested_price <= 0:
            msg = f"suggested_price must be positive, got {self.suggested_price}"
            raise ValueError(msg)
        return self


def round_price(value: float) -> int:
    """Round half up to a whole currency unit.

    Examples:
        >>> round_price(22.5)
        23
        >>> round_price(15.2)
        15
    """
    return math.floor(value + 0.5)


def format_amount(value: float) -> str:
    """Render an amount with the rupee sign, dropping a zero fraction."""
    if float(value).is_integer():
        return f"₹{int(value)}"
    return f"₹{value:.2f}"


def info_suggestion(rationale: str, message: str = GENERIC_ADVICE) -> NegotiationSuggestion:
    return NegotiationSuggestion(
        type=SuggestionType.INFO,
        message=message,
        rationale=rationale,
        tone=Tone.NEUTRAL,
    )


def difference_pct(offer: float, reference_price: float) -> float:
    return (offer - reference_price) / reference_price * 100


def evaluate_offer(
    offer: float,
    reference_price: float,
    previous_offers: Sequence[float] = (),
    *,
    thresholds: NegotiationThresholds | None = None,
) -> NegotiationSuggestion:
    """Classify *offer* against *reference_price* and build a suggestion."""
    if not (math.isfinite(offer) and math.isfinite(reference_price)) or reference_price <= 0:
        return info_suggestion("Offer or market price is not a usable number")
    bands = thresholds or NegotiationThresholds()
    diff = difference_pct(offer, reference_price)
    first = len(previous_offers) == 0
    offer_txt = format_amount(offer)
    market_txt = format_amount(round_price(reference_price))

    if diff > bands.high_pct:
        price = round_price(reference_price * 1.05)
        kind, tone = SuggestionType.COUNTER, Tone.POLITE
        message = f"This offer is above market rate. You can politely counter with ₹{price}."
        rationale = f"Offer ({offer_txt}) is higher than market price ({market_txt})"
    elif diff < -bands.low_pct:
        price = round_price(reference_price * 0.95)
        if first:
            kind, tone = SuggestionType.REJECT, Tone.POLITE
            message = f"This offer is too low. Politely suggest ₹{price} instead."
        else:
            kind, tone = SuggestionType.COUNTER, Tone.FIRM
            message = f"Still below market. You can counter with ₹{price}."
        rationale = f"Offer ({offer_txt}) is below market price ({market_txt})"
    elif abs(diff) <= bands.fair_pct:
        if not first:
            return NegotiationSuggestion(
                type=SuggestionType.ACCEPT,
                message="This is a fair price. You can accept this offer.",
                rationale=f"Offer ({offer_txt}) is close to market price ({market_txt})",
                tone=Tone.POLITE,
            )
        price = round_price(offer * 0.98)
        kind, tone = SuggestionType.COUNTER, Tone.POLITE
        message = f"Good offer! You can accept or try ₹{price}."
        rationale = f"Offer ({offer_txt}) is fair, close to market price ({market_txt})"
    else:
        price = round_price(reference_price)
        kind, tone = SuggestionType.COUNTER, Tone.POLITE
        if diff > 0:
            message = f"You can politely counter with ₹{price}."
            rationale = f"Offer ({offer_txt}) is slightly above market ({market_txt})"
        else:
            message = f"Counter with ₹{price} to meet market rate."
            rationale = f"Offer ({offer_txt}) is slightly below market ({market_txt})"

    if price <= 0:
        return info_suggestion(f"Counter price for offer ({offer_txt}) rounds to zero")
    return NegotiationSuggestion(
        type=kind,
        message=message,
        suggested_price=price,
        rationale=rationale,
        tone=tone,
    )


def is_stalled(offers: Sequence[float], *, tolerance: float = 0.02) -> bool:
    """True when the last three offers all sit within *tolerance* of their mean."""
    if len(offers) < 3:
        return False
    recent = list(offers)[-3:]
    mean = sum(recent) / len(recent)
    if mean == 0:
        return False
    return all(abs((o - mean) / mean) < tolerance for o in recent)


def suggest_compromise(your_last_offer: float, their_last_offer: float) -> NegotiationSuggestion:
    """Meet in the middle of two offers."""
    middle = (your_last_offer + their_last_offer) / 2
    if not math.isfinite(middle):
        return info_suggestion("Offers are not usable numbers")
    midpoint = round_price(middle)
    if midpoint <= 0:
        return info_suggestion("Midpoint of the offers is not a positive price")
    return NegotiationSuggestion(
        type=SuggestionType.COUNTER,
        message=f"Meet in the middle at ₹{midpoint}?",
        suggested_price=midpoint,
        rationale="Negotiation seems stalled, suggesting compromise",
        tone=Tone.POLITE,
    )
