"""Helpers for the car image gallery.

The main picture lives in ``Car.image_url``; extra pictures are stored as a
JSON encoded list in ``Car.image_urls``. Older rows may hold a bare URL
instead of JSON, which is treated as a single image.
"""

from __future__ import annotations

import json
from typing import Any, Iterable


def parse_image_urls(value: Any) -> list:
    """Stored or submitted image URLs as a list.

    A decoded JSON list comes back exactly as stored; blanks are dropped
    only when writing or building the gallery.
    """
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if not isinstance(value, str):
        return []

    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        return [value]

    if isinstance(decoded, list):
        return decoded
    if isinstance(decoded, str) and decoded:
        return [decoded]
    return []


def serialize_image_urls(urls: Iterable[str]) -> str:
    urls = [str(url) for url in urls if url]
    return json.dumps(urls) if urls else ""


def get_all_car_images(car) -> list[str]:
    """Main image first, then the extra images without duplicates."""
    images: list[str] = []
    main = getattr(car, "image_url", "") or ""
    if main:
        images.append(main)
    for url in parse_image_urls(getattr(car, "image_urls", None)):
        if url and url not in images:
            images.append(url)
    return images
