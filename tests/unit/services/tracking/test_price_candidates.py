"""Test price candidate extraction."""

from decimal import Decimal

from product_scout.services.tracking.extractors.price_candidates import PriceCandidateExtractor
from product_scout.services.tracking.models import PageSnapshot, PriceBand


def _element(text, top=300, height=30, font="24px", left=10):
    return {"text": text, "fontSize": font, "top": top, "left": left, "height": height}


class TestPriceCandidateExtractor:
    """Test cases for PriceCandidateExtractor."""

    def setup_method(self) -> None:
        self.extractor = PriceCandidateExtractor()
        self.band = PriceBand(Decimal("200"), Decimal("50000"))

    def test_savings_and_was_prices_are_excluded(self) -> None:
        snapshot = PageSnapshot(
            price_elements=[
                _element("$799.99"),
                _element("Save $200"),
                _element("Was $999.99"),
            ]
        )

        candidates = self.extractor.extract(snapshot)

        assert [c.numeric_value for c in candidates] == [Decimal("799.99")]

    def test_out_of_band_values_are_dropped(self) -> None:
        snapshot = PageSnapshot(
            price_elements=[_element("$5,000,000"), _element("$799.99"), _element("$19.99")]
        )

        candidates = self.extractor.extract(snapshot, self.band)

        assert [c.numeric_value for c in candidates] == [Decimal("799.99")]

    def test_candidate_geometry_and_visibility(self) -> None:
        snapshot = PageSnapshot(
            price_elements=[
                _element("$1,299.99", top=250, font="32px", left=800),
                _element("$1,199.99", top=2400),
                _element("$1,099.99", height=0),
            ],
            viewport_height=1080,
        )

        main, below_fold, hidden = self.extractor.extract(snapshot, self.band)

        assert main.visible is True
        assert main.font_size_px == 32.0
        assert main.dom_left == 800.0
        assert main.raw_text == "$1,299.99"
        assert below_fold.visible is False
        assert hidden.visible is False

    def test_malformed_entries_are_skipped(self) -> None:
        snapshot = PageSnapshot(
            price_elements=[
                "not a dict",
                {"text": 12},
                {"text": "no price here"},
                {"text": "$450.00"},
            ]
        )

        candidates = self.extractor.extract(snapshot)

        assert len(candidates) == 1
        assert candidates[0].numeric_value == Decimal("450.00")
        assert candidates[0].visible is False

    def test_selector_rank_is_carried(self) -> None:
        snapshot = PageSnapshot(
            price_elements=[
                {**_element("$2,499.00"), "rank": 0},
                {**_element("$2,199.00"), "rank": "3"},
                {**_element("$1,999.00"), "rank": -1},
                _element("$1,899.00"),
            ]
        )

        candidates = self.extractor.extract(snapshot)

        assert [c.selector_rank for c in candidates] == [0, 3, 0, 0]
