"""Read stock signals from buttons, status regions and fulfillment cells."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Sequence, Tuple

from ..models import AvailabilitySignals, PageSnapshot
from ..utils import as_float, normalize_label

logger = logging.getLogger("tracking.extractors.availability")

DEFAULT_PRIMARY_ACTIONS: FrozenSet[str] = frozenset({"add to cart"})
DEFAULT_UNAVAILABLE_LABELS: FrozenSet[str] = frozenset(
    {
        "sold out",
        "unavailable",
        "currently unavailable",
        "out of stock",
        "coming soon",
    }
)


@dataclass(frozen=True)
class ChannelRule:
    """How to read one fulfillment channel's status region."""

    name: str
    label: str
    positive_markers: Tuple[str, ...] = ("arrives", "ready", "available", "get it")
    negative_markers: Tuple[str, ...] = ("not available",)
    control_ids: Tuple[str, ...] = ()
    # Status-text prefixes that close the channel's fallback controls.
    suppressed_by: Tuple[str, ...] = ()

    def is_available(
        self,
        region_text: str | None,
        visible_controls: Sequence[str] = (),
        status_texts: Sequence[str] = (),
    ) -> bool:
        lowered = (region_text or "").lower()
        if any(marker in lowered for marker in self.negative_markers):
            return False
        if any(marker in lowered for marker in self.positive_markers):
            return True
        if any(text.startswith(self.suppressed_by) for text in status_texts):
            return False
        return any(control in visible_controls for control in self.control_ids)


@dataclass(frozen=True)
class SignalVocabulary:
    """Retailer-supplied words the extractor matches labels against."""

    primary_actions: FrozenSet[str] = DEFAULT_PRIMARY_ACTIONS
    unavailable_labels: FrozenSet[str] = DEFAULT_UNAVAILABLE_LABELS
    channels: Tuple[ChannelRule, ...] = ()


class AvailabilitySignalExtractor:
    """Interpret the button, status-text and channel parts of a snapshot."""

    def __init__(self, vocabulary: SignalVocabulary | None = None) -> None:
        self.vocabulary = vocabulary or SignalVocabulary()

    def extract(self, snapshot: PageSnapshot) -> AvailabilitySignals:
        has_primary = False
        has_unavailable = False
        action_label = ""
        visible_controls: List[str] = []

        for button in snapshot.buttons:
            if not isinstance(button, dict):
                continue
            labels = self._labels(button)
            rendered = self._has_size(button)
            disabled = self._is_disabled(button)

            if rendered and not disabled:
                test_id = button.get("dataTest")
                if isinstance(test_id, str) and test_id:
                    visible_controls.append(test_id)
                visible_controls.extend(labels)

            if any(label in self.vocabulary.primary_actions for label in labels):
                if rendered and not disabled:
                    has_primary = True
                    action_label = self._display_text(button)
                    continue

            if any(self._is_unavailable_label(label) for label in labels):
                has_unavailable = True
                if not has_primary:
                    action_label = self._display_text(button)

        raw_status_texts = tuple(
            text for text in snapshot.status_texts if isinstance(text, str) and text.strip()
        )
        channels = {
            rule.name: rule.is_available(
                snapshot.channel_regions.get(rule.name), visible_controls, raw_status_texts
            )
            for rule in self.vocabulary.channels
        }

        logger.debug(
            "Signals: primary=%s unavailable=%s channels=%s texts=%d",
            has_primary,
            has_unavailable,
            channels,
            len(raw_status_texts),
        )
        return AvailabilitySignals(
            has_enabled_primary_action=has_primary,
            has_explicit_unavailable_text=has_unavailable,
            action_label=action_label,
            fulfillment_channels=channels,
            raw_status_texts=raw_status_texts,
            visible_controls=tuple(dict.fromkeys(visible_controls)),
        )

    def _is_unavailable_label(self, label: str) -> bool:
        if label not in self.vocabulary.unavailable_labels:
            return False
        return "pickup" not in label and "$" not in label

    @staticmethod
    def _labels(button: Dict[str, Any]) -> List[str]:
        labels = []
        for key in ("text", "ariaLabel"):
            label = normalize_label(button.get(key))
            if label and label not in labels:
                labels.append(label)
        return labels

    @staticmethod
    def _display_text(button: Dict[str, Any]) -> str:
        text = button.get("text") or button.get("ariaLabel") or ""
        return text.strip() if isinstance(text, str) else ""

    @staticmethod
    def _has_size(button: Dict[str, Any]) -> bool:
        return as_float(button.get("width")) > 0 and as_float(button.get("height")) > 0

    @staticmethod
    def _is_disabled(button: Dict[str, Any]) -> bool:
        if button.get("disabled") is True:
            return True
        if str(button.get("ariaDisabled", "")).lower() == "true":
            return True
        class_name = button.get("className")
        if isinstance(class_name, str):
            return "disabled" in class_name.lower().split()
        return False
