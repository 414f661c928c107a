"""
Customer-facing quote email.

The body is a single Jinja2 template. Each quote shows one of two upsell
offers, picked deterministically from the quote id so a resend shows the
same offer. Customer-supplied fields are HTML-escaped.
"""
import zlib
from typing import Dict, Optional

from jinja2 import Template

from wrapcommand.services.pricing_service import VOLUME_DISCOUNT_TIERS

UPSELL_OFFERS = (
    {
        "title": "Need window coverage?",
        "body": "Window Perf is available at $5.95 / sq ft.",
        "link": "https://weprintwraps.com/product/perforated-window-vinyl/",
    },
    {
        "title": "Need logos or decals to match?",
        "body": "Cut Contour graphics start at $6.32 / sq ft.",
        "link": "https://weprintwraps.com/product/avery-cut-contour-vehicle-wrap/",
    },
)

DEFAULT_CART_URL = "https://weprintwraps.com/our-products/"

QUOTE_EMAIL_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <style>
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #1f2937; }
        .container { max-width: 600px; margin: 0 auto; padding: 20px; }
        .header { background-color: #111827; color: white; padding: 20px; text-align: center; }
        .total { font-size: 32px; color: #e6007e; font-weight: bold; }
        .detail-row { padding: 6px 0; border-bottom: 1px solid #eee; }
        .upsell { background-color: #fef3c7; padding: 12px; margin: 20px 0; }
        .footer { font-size: 12px; color: #6b7280; margin-top: 30px; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>Your Wrap Quote{% if quote_number %} #{{ quote_number }}{% endif %}</h1>
        </div>

        <p>Hi {{ customer_name | default('there', true) }},</p>
        <p>Thanks for reaching out. Here is your printed wrap material quote:</p>

        <div class="detail-row">Vehicle: <strong>{{ vehicle }}</strong></div>
        <div class="detail-row">Product: <strong>{{ product_name }}</strong></div>
        <div class="detail-row">Coverage: <strong>{{ '%.0f' | format(sqft) }} sq ft</strong></div>
        <div class="detail-row">Rate: <strong>${{ '%.2f' | format(price_per_sqft) }} / sq ft</strong></div>

        <p class="total">${{ '{:,.2f}'.format(total) }}</p>
        <p>Material only. Ships printed and laminated, ready to install.</p>
        {% if needs_review %}
        <p><em>Our team will confirm the exact coverage for your vehicle before production.</em></p>
        {% endif %}

        <p><a href="{{ cart_url }}">Order online</a></p>

        <div class="upsell">
            <strong>{{ upsell.title }}</strong><br>
            {{ upsell.body }}<br>
            <a href="{{ upsell.link }}">Learn more</a>
        </div>

        <h3>Volume discounts available</h3>
        <ul>
        {% for tier in tiers %}
            <li>{{ tier.label }}: {{ tier.discount }}</li>
        {% endfor %}
        </ul>

        <div class="footer">
            WePrintWraps | hello@weprintwraps.com
        </div>
    </div>
</body>
</html>
"""


def pick_upsell(quote_id: Optional[str]) -> Dict[str, str]:
    return UPSELL_OFFERS[zlib.crc32((quote_id or "").encode("utf-8")) % len(UPSELL_OFFERS)]


def vehicle_label(year: Optional[int], make: Optional[str], model: Optional[str]) -> str:
    return " ".join(str(part) for part in (year, make, model) if part) or "Your Vehicle"


def quote_email_subject(quote_number: str, vehicle: str) -> str:
    return f"Your Wrap Quote {quote_number} - {vehicle}"


def render_quote_email(
    quote_id: Optional[str],
    quote_number: str,
    customer_name: Optional[str],
    vehicle: str,
    product_name: str,
    sqft: float,
    price_per_sqft: float,
    total: float,
    needs_review: bool = False,
    cart_url: Optional[str] = None,
) -> str:
    return Template(QUOTE_EMAIL_TEMPLATE, autoescape=True).render(
        quote_number=quote_number,
        customer_name=customer_name,
        vehicle=vehicle,
        product_name=product_name,
        sqft=sqft,
        price_per_sqft=price_per_sqft,
        total=total,
        needs_review=needs_review,
        cart_url=cart_url or DEFAULT_CART_URL,
        upsell=pick_upsell(quote_id),
        tiers=VOLUME_DISCOUNT_TIERS,
    )
