from __future__ import annotations

import pytest

from photostudio.core.errors import UnknownTemplateError
from photostudio.core.templates import DEFAULT_CATALOG


def test_catalog_lists_the_same_templates_in_display_order() -> None:
    first = DEFAULT_CATALOG.list()
    second = DEFAULT_CATALOG.list()

    assert first == second
    assert [template.id for template in first] == [
        "product-showcase",
        "social-media-ad",
        "seasonal-sale",
        "luxury-look",
        "brand-colors",
        "testimonial-bg",
        "email-banner",
        "holiday-campaign",
    ]


def test_select_returns_the_registered_instruction() -> None:
    assert DEFAULT_CATALOG.select("luxury-look") == (
        "Enhance this image to give it a luxurious, high-end feel. Use deep, rich "
        "colors and elegant lighting effects."
    )
    assert DEFAULT_CATALOG.get("brand-colors").name == "Brand Colors"


def test_select_rejects_unknown_ids() -> None:
    with pytest.raises(UnknownTemplateError, match="no-such-template"):
        DEFAULT_CATALOG.select("no-such-template")
