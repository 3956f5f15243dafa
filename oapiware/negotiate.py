"""Content negotiation on the Accept and Accept-Encoding headers."""

from __future__ import annotations

from typing import Any, Iterable

from .header import parse_accept

__all__ = [
    "negotiate_content_encoding",
    "negotiate_content_type",
    "normalize_offer",
    "normalize_offers",
]


def negotiate_content_encoding(headers: Any, offers: Iterable[str]) -> str:
    """Return the best offered encoding for the request's Accept-Encoding.

    With equal weights the earlier offer wins; "" means nothing is acceptable.
    """
    best_offer = "identity"
    best_q = -1.0
    specs = parse_accept(headers, "Accept-Encoding")
    for offer in offers:
        for spec in specs:
            if spec.q > best_q and spec.value in ("*", offer):
                best_q = spec.q
                best_offer = offer
    if best_q == 0:
        return ""
    return best_offer


def negotiate_content_type(headers: Any, offers: Iterable[str], default_offer: str) -> str:
    """Return the best offered content type for the request's Accept header.

    Among equal weights the more specific match wins (``text/*`` beats
    ``*/*``), then the earlier offer. Without an Accept header the first
    offer is returned; if nothing matches, ``default_offer``.
    """
    best_offer = default_offer
    best_q = -1.0
    best_wild = 3
    specs = parse_accept(headers, "Accept")
    for raw_offer in offers:
        if not specs:
            return raw_offer
        offer = normalize_offer(raw_offer)
        for spec in specs:
            if spec.q == 0.0 or spec.q < best_q:
                continue
            if spec.value == "*/*":
                if spec.q > best_q or best_wild > 2:
                    best_q, best_wild, best_offer = spec.q, 2, raw_offer
            elif spec.value.endswith("/*"):
                if offer.startswith(spec.value[:-1]) and (spec.q > best_q or best_wild > 1):
                    best_q, best_wild, best_offer = spec.q, 1, raw_offer
            elif spec.value == offer and (spec.q > best_q or best_wild > 0):
                best_q, best_wild, best_offer = spec.q, 0, raw_offer
    return best_offer


def normalize_offers(orig: Iterable[str]) -> list[str]:
    """Strip media type parameters from every offer."""
    return [normalize_offer(o) for o in orig]


def normalize_offer(orig: str) -> str:
    """Strip media type parameters, keeping what comes before the first ``;``."""
    return orig.split(";", 1)[0]