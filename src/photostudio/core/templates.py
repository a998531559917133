"""Prompt presets offered alongside free-text instructions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from photostudio.core.errors import UnknownTemplateError


class PromptTemplate(BaseModel):
    """A named, reusable edit instruction."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    prompt: str


class TemplateCatalog:
    """Fixed, ordered set of prompt templates."""

    def __init__(self, templates: tuple[PromptTemplate, ...]) -> None:
        self._templates = tuple(templates)
        self._by_id = {template.id: template for template in self._templates}

    def list(self) -> tuple[PromptTemplate, ...]:
        return self._templates

    def ids(self) -> list[str]:
        return [template.id for template in self._templates]

    def get(self, template_id: str) -> PromptTemplate:
        template = self._by_id.get(template_id)
        if template is None:
            raise UnknownTemplateError(template_id)
        return template

    def select(self, template_id: str) -> str:
        """Return the instruction text registered for ``template_id``."""
        return self.get(template_id).prompt


PROMPT_TEMPLATES: tuple[PromptTemplate, ...] = (
    PromptTemplate(
        id="product-showcase",
        name="Product Showcase",
        prompt=(
            "Place this product on a clean, modern studio background with soft, "
            "professional lighting to make it stand out."
        ),
    ),
    PromptTemplate(
        id="social-media-ad",
        name="Social Media Ad",
        prompt=(
            "Make this image more eye-catching for a social media advertisement. "
            "Increase color vibrancy, contrast, and add a sense of dynamic energy."
        ),
    ),
    PromptTemplate(
        id="seasonal-sale",
        name="Seasonal Sale",
        prompt=(
            "Infuse this image with a seasonal theme (e.g., summer sunshine, autumn "
            "leaves, or winter snow) for a promotional sale campaign."
        ),
    ),
    PromptTemplate(
        id="luxury-look",
        name="Luxury Vibe",
        prompt=(
            "Enhance this image to give it a luxurious, high-end feel. Use deep, rich "
            "colors and elegant lighting effects."
        ),
    ),
    PromptTemplate(
        id="brand-colors",
        name="Brand Colors",
        prompt=(
            "Subtly incorporate our brand's primary color into the background or "
            "ambient lighting of this image."
        ),
    ),
    PromptTemplate(
        id="testimonial-bg",
        name="Testimonial BG",
        prompt=(
            "Turn this image into a great background for a customer testimonial. "
            "Make it inspirational and slightly out of focus to draw attention to "
            "text that will be overlaid."
        ),
    ),
    PromptTemplate(
        id="email-banner",
        name="Email Banner",
        prompt=(
            "Adapt this image into a professional banner for an email newsletter. "
            "Give it a clean, polished look with excellent contrast."
        ),
    ),
    PromptTemplate(
        id="holiday-campaign",
        name="Holiday Campaign",
        prompt=(
            "Give this image a festive, holiday atmosphere using elements like warm "
            "lighting, sparkles, or subtle seasonal decorations."
        ),
    ),
)

DEFAULT_CATALOG = TemplateCatalog(PROMPT_TEMPLATES)
