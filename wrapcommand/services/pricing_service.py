from typing import Callable, Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict

from wrapcommand.core.logger import get_logger

logger = get_logger(__name__)


class ProductRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    price_per_sqft: float
    product_id: Optional[int] = None


class QuickQuote(BaseModel):
    model_config = ConfigDict(frozen=True)

    material_cost: float
    price_per_sqft: float
    product_name: str
    product_key: str


class PriceTable(BaseModel):
    """Per-square-foot material rates. Wholesale: no labor line, no markup."""

    model_config = ConfigDict(frozen=True)

    rates: Dict[str, ProductRate]
    default_key: str = "avery_printed"

    def rate(self, key: str) -> ProductRate:
        return self.rates.get(key) or self.rates[self.default_key]


def default_price_table() -> PriceTable:
    rates = [
        ProductRate(key="avery_printed", name="Avery MPI 1105 with DOL 1460Z Lamination", price_per_sqft=5.27),
        ProductRate(key="3m_printed", name="3M IJ180Cv3 with 8518 Lamination", price_per_sqft=5.27),
        ProductRate(key="avery_contour", name="Avery Cut Contour Vinyl", price_per_sqft=6.32, product_id=108),
        ProductRate(key="3m_contour", name="3M Cut Contour Vinyl", price_per_sqft=6.92, product_id=19420),
        ProductRate(key="window_perf", name="Window Perf 50/50", price_per_sqft=5.95, product_id=80),
    ]
    return PriceTable(rates={r.key: r for r in rates})


# Keyword rules in priority order: (predicate over lowercased product type, rate key)
PRODUCT_RULES: Tuple[Tuple[Callable[[str], bool], str], ...] = (
    (lambda p: "contour" in p and "3m" in p, "3m_contour"),
    (lambda p: "contour" in p, "avery_contour"),
    (lambda p: "3m" in p, "3m_printed"),
    (lambda p: "window" in p or "perf" in p, "window_perf"),
)


def select_rate(product_type: Optional[str], table: PriceTable) -> ProductRate:
    product = (product_type or "").lower()
    for matches, key in PRODUCT_RULES:
        if matches(product):
            return table.rate(key)
    return table.rate(table.default_key)


def calculate_quick_quote(
    sqft: float,
    product_type: Optional[str],
    table: PriceTable,
    price_override: Optional[float] = None,
    name_override: Optional[str] = None,
) -> QuickQuote:
    """
    Material cost for a vehicle area and product.

    A positive price_override (per sqft) replaces the table rate, which is how
    callers quote a specific catalog product.
    """
    rate = select_rate(product_type, table)
    price_per_sqft = rate.price_per_sqft
    product_name = rate.name
    if price_override is not None and price_override > 0:
        price_per_sqft = price_override
        product_name = name_override or rate.name
    elif name_override:
        product_name = name_override

    material_cost = round(sqft * price_per_sqft, 2)
    return QuickQuote(
        material_cost=material_cost,
        price_per_sqft=price_per_sqft,
        product_name=product_name,
        product_key=rate.key,
    )


# Shown in the quote email only. Not applied to any total.
VOLUME_DISCOUNT_TIERS = (
    {"label": "1-9 vehicles", "discount": "Standard pricing"},
    {"label": "10-24 vehicles", "discount": "5% off"},
    {"label": "25-49 vehicles", "discount": "10% off"},
    {"label": "50+ vehicles", "discount": "Custom fleet quote"},
)


def apply_volume_discount(material_cost: float, vehicle_count: int = 1) -> float:
    # TODO: apply VOLUME_DISCOUNT_TIERS once sales confirms whether the email tiers are binding
    if vehicle_count >= 10:
        logger.info(f"Volume tier reached ({vehicle_count} vehicles) but discounts are display-only")
    return material_cost
