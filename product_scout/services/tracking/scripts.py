"""Page-interrogation scripts evaluated inside the rendered page.

Every script returns plain JSON-compatible data; interpretation happens in
the extractors. Bump SCRIPT_VERSION whenever a script's output shape changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from .models import Retailer

SCRIPT_VERSION = "4"

PRICE_ELEMENTS_JS = r"""
(selectors) => {
    const pattern = /\$\s?[0-9][0-9,]*(\.[0-9]{0,2})?/;
    const exactPattern = /^\$\s?[0-9][0-9,]*(\.[0-9]{0,2})?$/;
    const seen = new Set();
    const out = [];
    selectors.forEach((entry, rank) => {
        document.querySelectorAll(entry.selector).forEach(el => {
            if (seen.has(el)) return;
            const text = (el.textContent || '').trim();
            if (!text || text.length > 200 || !pattern.test(text)) return;
            if (entry.exact && !exactPattern.test(text)) return;
            seen.add(el);
            const rect = el.getBoundingClientRect();
            out.push({
                text: text,
                fontSize: window.getComputedStyle(el).fontSize,
                top: rect.top,
                left: rect.left,
                height: el.offsetHeight,
                rank: rank,
            });
        });
    });
    return out;
}
"""

STATUS_TEXTS_JS = r"""
(config) => {
    const texts = [];
    const excluded = config.excludeWithin
        ? Array.from(document.querySelectorAll(config.excludeWithin))
        : [];
    const skip = el => excluded.some(box => box.contains(el));
    const rendered = el => el.offsetHeight > 0 || el.getClientRects().length > 0;
    const read = el => (el.textContent || '').trim().replace(/\s+/g, ' ');

    document.querySelectorAll(config.buttonSelector).forEach(btn => {
        if (skip(btn) || !rendered(btn)) return;
        const text = read(btn);
        if (text) texts.push('Button: ' + text);
    });
    for (const [prefix, selector] of config.sections) {
        document.querySelectorAll(selector).forEach(el => {
            if (skip(el) || !rendered(el)) return;
            const text = read(el);
            if (text.length > 2) texts.push(prefix + ': ' + text);
        });
    }
    for (const rule of (config.guarded || [])) {
        const open = Array.from(document.querySelectorAll(rule.unlessSelector)).some(cell => {
            const text = (cell.textContent || '').toLowerCase();
            if (rule.unlessNegative.some(marker => text.includes(marker))) return false;
            return rule.unlessText.some(marker => text.includes(marker));
        });
        if (open) continue;
        document.querySelectorAll(rule.selector).forEach(el => {
            const text = read(el);
            if (text) texts.push(rule.prefix + ': ' + text);
        });
    }
    return texts;
}
"""

BUTTONS_JS = r"""
(selector) => Array.from(document.querySelectorAll(selector)).map(el => {
    const rect = el.getBoundingClientRect();
    return {
        text: (el.textContent || '').trim().replace(/\s+/g, ' '),
        ariaLabel: el.getAttribute('aria-label') || '',
        dataTest: el.getAttribute('data-test') || el.getAttribute('data-qa') || '',
        disabled: !!el.disabled,
        ariaDisabled: el.getAttribute('aria-disabled') || '',
        className: typeof el.className === 'string' ? el.className : '',
        width: rect.width,
        height: rect.height,
    };
})
"""

CHANNEL_REGIONS_JS = r"""
(regions) => {
    const out = {};
    for (const [name, selector] of Object.entries(regions)) {
        const el = document.querySelector(selector);
        out[name] = el ? (el.textContent || '').trim() : null;
    }
    return out;
}
"""

PAGE_META_JS = r"""
(titleSelector) => {
    const title = document.querySelector(titleSelector);
    return {
        title: title ? (title.textContent || '').trim() : null,
        readyState: document.readyState,
        viewportHeight: window.innerHeight,
        url: window.location.href,
    };
}
"""

MARKUP_JS = "() => document.documentElement.outerHTML"

_GENERIC_STATUS_SECTIONS: Tuple[Tuple[str, str], ...] = (
    (
        "Status",
        '[class*="availability"], [class*="fulfillment"], [class*="message"], [class*="status"]',
    ),
    ("OpenBox", '[class*="condition"], [class*="open-box"]'),
    (
        "Error",
        '[class*="error"], [class*="unavailable"], [class*="sold-out"], '
        '[class*="out-of-stock"], [class*="OutOfStock"]',
    ),
)


@dataclass(frozen=True)
class PriceSelector:
    """One price selector; ``exact`` keeps only elements whose whole text is a price."""

    selector: str
    exact: bool = False


@dataclass(frozen=True)
class PageScripts:
    """Selectors a retailer feeds into the shared scripts.

    Price selectors are tried in order; earlier ones win over later ones when
    policies rank candidates.
    """

    price_selectors: Tuple[PriceSelector, ...] = (
        PriceSelector('[class*="price"]'),
        PriceSelector('[data-testid*="price"]'),
        PriceSelector("span"),
    )
    button_selector: str = "button"
    status_sections: Tuple[Tuple[str, str], ...] = _GENERIC_STATUS_SECTIONS
    status_exclude_within: str = ""
    guarded_status: Tuple[Mapping[str, Any], ...] = ()
    channel_regions: Mapping[str, str] = field(default_factory=dict)
    title_selector: str = "h1"

    def price_config(self) -> List[Dict[str, Any]]:
        return [{"selector": s.selector, "exact": s.exact} for s in self.price_selectors]

    def status_config(self) -> Dict[str, Any]:
        return {
            "buttonSelector": self.button_selector,
            "sections": [list(section) for section in self.status_sections],
            "excludeWithin": self.status_exclude_within,
            "guarded": [dict(rule) for rule in self.guarded_status],
        }

    def evaluation_plan(self) -> List[Tuple[str, str, Any]]:
        """Ordered (name, script, argument) steps run against the page."""
        plan: List[Tuple[str, str, Any]] = [
            ("prices", PRICE_ELEMENTS_JS, self.price_config()),
            ("status_texts", STATUS_TEXTS_JS, self.status_config()),
            ("buttons", BUTTONS_JS, self.button_selector),
        ]
        if self.channel_regions:
            plan.append(("channels", CHANNEL_REGIONS_JS, dict(self.channel_regions)))
        plan.append(("meta", PAGE_META_JS, self.title_selector))
        plan.append(("markup", MARKUP_JS, None))
        return plan


RETAILER_SCRIPTS: Dict[Retailer, PageScripts] = {
    Retailer.BESTBUY: PageScripts(),
    Retailer.TARGET: PageScripts(
        price_selectors=(
            PriceSelector('[data-test="product-price"]'),
            PriceSelector("span", exact=True),
        ),
        status_sections=(
            ("Error", '[data-test*="errorMessage"], [class*="sold-out"]'),
        ),
        status_exclude_within='[data-test^="fulfillment-cell"]',
        guarded_status=(
            {
                "prefix": "OutOfStock",
                "selector": '[data-test="outOfStockMessage"]',
                "unlessSelector": '[data-test^="fulfillment-cell"]',
                "unlessText": ["arrives", "get it", "ready", "available"],
                "unlessNegative": ["not available"],
            },
        ),
        channel_regions={
            "shipping": '[data-test="fulfillment-cell-shipping"]',
            "pickup": '[data-test="fulfillment-cell-pickup"]',
            "delivery": '[data-test="fulfillment-cell-delivery"]',
        },
        title_selector='h1[data-test="product-title"], h1[itemprop="name"], h1',
    ),
    Retailer.CANON: PageScripts(
        price_selectors=(
            PriceSelector('[class*="price"][class*="current"]'),
            PriceSelector('[data-qa="product-price"]'),
            PriceSelector('[class*="product-price"], [class*="ProductPrice"]'),
            PriceSelector('span[class*="price"]'),
            PriceSelector("span, div, p", exact=True),
        ),
        title_selector='h1[class*="product"], h1[class*="Product"], [data-qa="product-title"], h1',
    ),
    Retailer.RICOH: PageScripts(
        price_selectors=(
            PriceSelector(".product__price, .product-single__price"),
            PriceSelector(".price__regular, .price-item--regular"),
            PriceSelector('[class*="product-price"], [data-product-price]'),
            PriceSelector(".price"),
            PriceSelector('span[class*="price"]:not([class*="compare"])'),
        ),
        button_selector='button, a[class*="btn"], a[role="button"]',
        title_selector='h1[class*="product"], .product__title, .product-single__title, h1',
    ),
}


def scripts_for(retailer: Retailer) -> PageScripts:
    return RETAILER_SCRIPTS.get(retailer, PageScripts())
