"""Per-retailer decision policies."""

from typing import Dict

from ..models import Retailer
from .base import DEALBREAKER_PHRASES, RetailerPolicy, find_dealbreaker
from .bestbuy import BestBuyPolicy
from .canon import CanonPolicy
from .generic import UnsupportedPolicy
from .ricoh import RicohPolicy
from .target import TargetPolicy

POLICIES: Dict[Retailer, RetailerPolicy] = {
    Retailer.BESTBUY: BestBuyPolicy(),
    Retailer.TARGET: TargetPolicy(),
    Retailer.CANON: CanonPolicy(),
    Retailer.RICOH: RicohPolicy(),
    Retailer.UNSUPPORTED: UnsupportedPolicy(),
}


def policy_for(retailer: Retailer) -> RetailerPolicy:
    """Return the stateless policy registered for a retailer."""
    return POLICIES[retailer]


__all__ = [
    "DEALBREAKER_PHRASES",
    "POLICIES",
    "BestBuyPolicy",
    "CanonPolicy",
    "RetailerPolicy",
    "RicohPolicy",
    "TargetPolicy",
    "UnsupportedPolicy",
    "find_dealbreaker",
    "policy_for",
]
