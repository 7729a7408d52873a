"""Commodity records and the static mandi price catalog.

INVARIANT: Records are immutable. The catalog is built once at import
time and never mutated; every consumer receives the same frozen objects.
Iteration order is significant: the resolver breaks ties by it.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from pydantic import BaseModel, Field, model_validator

from mandictl.domain.types import Category, Language, Trend, Unit


class CommodityRecord(BaseModel):
    """A tradeable good with its reference price range."""

    model_config = {"frozen": True}

    id: str
    name: str
    localized: dict[Language, str] = Field(default_factory=dict)
    aliases: tuple[str, ...] = ()
    price_min: float = Field(gt=0)
    price_max: float = Field(gt=0)
    unit: Unit
    market: str
    trend: Trend = Trend.STABLE
    category: Category
    change_percent: float = 0.0
    icon: str = ""

    @model_validator(mode="after")
    def _check_range(self) -> CommodityRecord:
        if self.price_min > self.price_max:
            msg = f"price_min ({self.price_min}) exceeds price_max ({self.price_max})"
            raise ValueError(msg)
        return self

    @property
    def average_price(self) -> float:
        return (self.price_min + self.price_max) / 2

    @property
    def search_terms(self) -> tuple[str, ...]:
        """Canonical name, localized names, then aliases."""
        return (self.name, *self.localized.values(), *self.aliases)

    def localized_name(self, language: Language) -> str:
        return self.localized.get(language, self.name)


class Catalog:
    """Read-only, ordered collection of commodity records."""

    def __init__(self, records: Sequence[CommodityRecord]) -> None:
        ids = [r.id for r in records]
        if len(ids) != len(set(ids)):
            msg = "Duplicate commodity ids in catalog"
            raise ValueError(msg)
        self._records: tuple[CommodityRecord, ...] = tuple(records)
        self._by_id = {r.id: r for r in self._records}

    def __iter__(self) -> Iterator[CommodityRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, commodity_id: str) -> CommodityRecord | None:
        return self._by_id.get(commodity_id)

    def by_category(self, category: Category) -> list[CommodityRecord]:
        return [r for r in self._records if r.category == category]

    def related(self, commodity_id: str, *, limit: int = 3) -> list[CommodityRecord]:
        """Other records in the same category, in catalog order."""
        record = self.get(commodity_id)
        if record is None:
            return []
        same = [r for r in self._records if r.id != commodity_id and r.category == record.category]
        return same[:limit]


# ---------------------------------------------------------------------------
# Static data
# ---------------------------------------------------------------------------

_RECORDS: list[CommodityRecord] = [
    CommodityRecord(
        id="tomato",
        name="Tomato",
        localized={Language.HI: "टमाटर", Language.TA: "தக்காளி"},
        aliases=("tomato", "tamatar", "टमाटर"),
        price_min=18,
        price_max=22,
        unit=Unit.KG,
        market="Delhi Azadpur Mandi",
        trend=Trend.RISING,
        category=Category.VEGETABLE,
        change_percent=5.0,
        icon="🍅",
    ),
    CommodityRecord(
        id="onion",
        name="Onion",
        localized={Language.HI: "प्याज", Language.TA: "வெங்காயம்"},
        aliases=("onion", "pyaz", "प्याज", "onions", "kanda"),
        price_min=14,
        price_max=18,
        unit=Unit.KG,
        market="Mumbai Vashi Mandi",
        trend=Trend.STABLE,
        category=Category.VEGETABLE,
        icon="🧅",
    ),
    CommodityRecord(
        id="wheat",
        name="Wheat",
        localized={Language.HI: "गेहूं", Language.TA: "கோதுமை"},
        aliases=("wheat", "gehun", "गेहूं", "gehu"),
        price_min=2100,
        price_max=2250,
        unit=Unit.QUINTAL,
        market="Punjab Khanna Mandi",
        trend=Trend.RISING,
        category=Category.GRAIN,
        change_percent=3.5,
        icon="🌾",
    ),
    CommodityRecord(
        id="potato",
        name="Potato",
        localized={Language.HI: "आलू", Language.TA: "உருளைக்கிழங்கு"},
        aliases=("potato", "aloo", "आलू", "potatoes", "alu"),
        price_min=12,
        price_max=16,
        unit=Unit.KG,
        market="Uttar Pradesh Agra Mandi",
        trend=Trend.FALLING,
        category=Category.VEGETABLE,
        change_percent=-2.0,
        icon="🥔",
    ),
    CommodityRecord(
        id="rice",
        name="Rice",
        localized={Language.HI: "चावल", Language.TA: "அரிசி"},
        aliases=("rice", "chawal", "चावल", "dhan"),
        price_min=2800,
        price_max=3200,
        unit=Unit.QUINTAL,
        market="Haryana Karnal Mandi",
        trend=Trend.STABLE,
        category=Category.GRAIN,
        change_percent=0.5,
        icon="🍚",
    ),
    CommodityRecord(
        id="cotton",
        name="Cotton",
        localized={Language.HI: "कपास", Language.TA: "பருத்தி"},
        aliases=("cotton", "kapas", "कपास", "rui"),
        price_min=5800,
        price_max=6200,
        unit=Unit.QUINTAL,
        market="Gujarat Rajkot Mandi",
        trend=Trend.RISING,
        category=Category.CASH_CROP,
        change_percent=4.0,
        icon="🌱",
    ),
    CommodityRecord(
        id="sugarcane",
        name="Sugarcane",
        localized={Language.HI: "गन्ना", Language.TA: "கரும்பு"},
        aliases=("sugarcane", "ganna", "गन्ना", "ikku"),
        price_min=280,
        price_max=320,
        unit=Unit.QUINTAL,
        market="Maharashtra Kolhapur Mandi",
        trend=Trend.STABLE,
        category=Category.CASH_CROP,
        change_percent=1.0,
        icon="🎋",
    ),
    CommodityRecord(
        id="pulses",
        name="Pulses (Tur Dal)",
        localized={Language.HI: "दाल (तूर)", Language.TA: "பருப்பு"},
        aliases=("pulses", "dal", "दाल", "tur", "arhar", "toor"),
        price_min=8500,
        price_max=9200,
        unit=Unit.QUINTAL,
        market="Madhya Pradesh Indore Mandi",
        trend=Trend.FALLING,
        category=Category.PULSE,
        change_percent=-1.5,
        icon="🫘",
    ),
    CommodityRecord(
        id="chilli",
        name="Green Chilli",
        localized={Language.HI: "हरी मिर्च", Language.TA: "பச்சை மிளகாய்"},
        aliases=("chilli", "mirch", "मिर्च", "chili", "pepper", "hari mirch"),
        price_min=25,
        price_max=35,
        unit=Unit.KG,
        market="Andhra Pradesh Guntur Mandi",
        trend=Trend.RISING,
        category=Category.VEGETABLE,
        change_percent=8.0,
        icon="🌶️",
    ),
    CommodityRecord(
        id="cabbage",
        name="Cabbage",
        localized={Language.HI: "पत्तागोभी", Language.TA: "முட்டைகோஸ்"},
        aliases=("cabbage", "patta gobhi", "पत्तागोभी", "bandh gobi"),
        price_min=8,
        price_max=12,
        unit=Unit.KG,
        market="Karnataka Bangalore Mandi",
        trend=Trend.STABLE,
        category=Category.VEGETABLE,
        icon="🥬",
    ),
    CommodityRecord(
        id="maize",
        name="Maize",
        localized={Language.HI: "मक्का"},
        aliases=("maize", "makka", "मक्का", "corn", "bhutta"),
        price_min=1800,
        price_max=2000,
        unit=Unit.QUINTAL,
        market="Punjab Ludhiana Mandi",
        trend=Trend.RISING,
        category=Category.GRAIN,
        icon="🌽",
    ),
    CommodityRecord(
        id="groundnut",
        name="Groundnut",
        localized={Language.HI: "मूंगफली"},
        aliases=("groundnut", "moongfali", "मूंगफली", "peanut"),
        price_min=5000,
        price_max=5500,
        unit=Unit.QUINTAL,
        market="Gujarat Junagadh Mandi",
        trend=Trend.STABLE,
        category=Category.CASH_CROP,
        icon="🥜",
    ),
    CommodityRecord(
        id="turmeric",
        name="Turmeric",
        localized={Language.HI: "हल्दी"},
        aliases=("turmeric", "haldi", "हल्दी"),
        price_min=7000,
        price_max=8000,
        unit=Unit.QUINTAL,
        market="Telangana Nizamabad Mandi",
        trend=Trend.RISING,
        category=Category.SPICE,
        icon="🟡",
    ),
    CommodityRecord(
        id="mango",
        name="Mango",
        localized={Language.HI: "आम"},
        aliases=("mango", "aam", "आम", "mangoes"),
        price_min=40,
        price_max=60,
        unit=Unit.KG,
        market="Uttar Pradesh Lucknow Mandi",
        trend=Trend.RISING,
        category=Category.FRUIT,
        icon="🥭",
    ),
    CommodityRecord(
        id="banana",
        name="Banana",
        localized={Language.HI: "केला"},
        aliases=("banana", "kela", "केला", "bananas"),
        price_min=20,
        price_max=30,
        unit=Unit.DOZEN,
        market="Tamil Nadu Trichy Mandi",
        trend=Trend.STABLE,
        category=Category.FRUIT,
        icon="🍌",
    ),
    CommodityRecord(
        id="coconut",
        name="Coconut",
        localized={Language.HI: "नारियल"},
        aliases=("coconut", "nariyal", "नारियल"),
        price_min=25,
        price_max=35,
        unit=Unit.PIECE,
        market="Tamil Nadu Coimbatore Mandi",
        trend=Trend.RISING,
        category=Category.FRUIT,
        icon="🥥",
    ),
]

CATALOG = Catalog(_RECORDS)
