"""Test the per-retailer script configuration."""

from product_scout.services.tracking.models import Retailer
from product_scout.services.tracking.scripts import (
    MARKUP_JS,
    PRICE_ELEMENTS_JS,
    RETAILER_SCRIPTS,
    PageScripts,
    scripts_for,
)


def test_target_prefers_product_price_over_bare_spans():
    config = scripts_for(Retailer.TARGET).price_config()

    assert config == [
        {"selector": '[data-test="product-price"]', "exact": False},
        {"selector": "span", "exact": True},
    ]


def test_canon_generic_fallback_is_last_and_exact():
    config = scripts_for(Retailer.CANON).price_config()

    assert config[0]["selector"] == '[class*="price"][class*="current"]'
    assert config[-1] == {"selector": "span, div, p", "exact": True}
    assert not any(entry["exact"] for entry in config[:-1])


def test_price_step_receives_ordered_selectors():
    scripts = RETAILER_SCRIPTS[Retailer.RICOH]

    name, script, arg = scripts.evaluation_plan()[0]

    assert (name, script) == ("prices", PRICE_ELEMENTS_JS)
    assert arg == scripts.price_config()
    assert arg[0]["selector"] == ".product__price, .product-single__price"


def test_unknown_retailer_gets_generic_scripts():
    plan = scripts_for(Retailer.UNSUPPORTED).evaluation_plan()

    assert scripts_for(Retailer.UNSUPPORTED) == PageScripts()
    assert [step[0] for step in plan] == ["prices", "status_texts", "buttons", "meta", "markup"]
    assert plan[-1] == ("markup", MARKUP_JS, None)
