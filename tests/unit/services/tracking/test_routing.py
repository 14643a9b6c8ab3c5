import pytest

from product_scout.services.tracking.models import Retailer
from product_scout.services.tracking.routing import (
    RetailerRouter,
    extract_name,
    is_condition_variant,
    is_valid_url,
    normalize_url,
    stated_condition,
    supported_retailers,
)


@pytest.mark.parametrize(
    "url, retailer, confidence",
    [
        ("https://www.bestbuy.com/site/canon-eos-r5/6418235.p", Retailer.BESTBUY, 1.0),
        ("https://www.bestbuy.ca/en-ca/product/canon-eos-r5/15081364", Retailer.BESTBUY, 0.9),
        ("https://www.target.com/p/canon-eos-r50/-/A-88149498", Retailer.TARGET, 1.0),
        ("https://www.target.ca/p/x", Retailer.TARGET, 0.9),
        ("https://usa.canon.com/shop/p/eos-r6-mark-ii", Retailer.CANON, 1.0),
        ("https://www.canon.co.uk/cameras/eos-r8/", Retailer.CANON, 0.95),
        ("https://us.ricoh-imaging.com/product/gr-iiix/", Retailer.RICOH, 1.0),
        ("https://www.ricoh-imaging.co.jp/english/products/gr-3x/", Retailer.RICOH, 0.95),
        ("  HTTPS://WWW.BESTBUY.COM/site/x  ", Retailer.BESTBUY, 1.0),
    ],
)
def test_classify_known_retailers(url, retailer, confidence):
    result = RetailerRouter().classify(url)

    assert result.retailer is retailer
    assert result.confidence == confidence
    assert retailer.display_name in result.reason


def test_classify_unknown_site():
    result = RetailerRouter().classify("https://www.amazon.com/dp/B0BXM8K2P7")

    assert result.retailer is Retailer.UNSUPPORTED
    assert result.confidence == 1.0
    assert result.reason == "Website not recognized or supported"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.bestbuy.com/site/x", True),
        ("http://localhost:8000/p", True),
        ("not a url", False),
        ("bestbuy.com/site/x", False),
        ("https://", False),
        ("", False),
    ],
)
def test_is_valid_url(url, expected):
    assert is_valid_url(url) is expected


def test_normalize_url_adds_scheme():
    assert normalize_url("  bestbuy.com/site/x ") == "https://bestbuy.com/site/x"
    assert normalize_url("http://target.com/p") == "http://target.com/p"


def test_condition_variants():
    open_box = "https://www.bestbuy.com/product/canon-eos-r5/J3F5/openbox?condition=Good"

    assert is_condition_variant(open_box)
    assert not is_condition_variant("https://www.bestbuy.com/site/canon-eos-r5/6418235.p")
    assert stated_condition(open_box) == "good"
    assert stated_condition("https://x/openbox", 'href="?condition=fair"') == "fair"
    assert stated_condition("https://x/openbox") is None
    assert stated_condition("https://x/openbox", "<p>Excellent condition guaranteed</p>") is None


def test_extract_name_from_slug():
    url = (
        "https://www.bestbuy.com/site/"
        "canon-eos-r5-mirrorless-camera-body-only-black/6418235.p?skuId=6418235"
    )

    assert extract_name(url) == "Canon Eos R5 Mirrorless Camera Body"


def test_extract_name_fallbacks():
    assert extract_name("https://www.target.com/p/A-88149498") == "Target Product"
    assert extract_name("https://example.org/x") == "Product"


def test_supported_retailers():
    assert supported_retailers() == [
        Retailer.BESTBUY,
        Retailer.TARGET,
        Retailer.CANON,
        Retailer.RICOH,
    ]
