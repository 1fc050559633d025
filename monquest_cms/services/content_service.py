"""Content service — one JSON document per landing page section."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from monquest_cms.core.config import settings
from monquest_cms.core.exceptions import ResourceNotFoundError, ValidationError
from monquest_cms.models.content import Content, ContentType
from monquest_cms.services.cache_service import cache_service

logger = logging.getLogger("monquest.content")

ITEM_COLORS = ("primary", "secondary", "accent")
DEFAULT_ITEM_COLOR = "primary"
PUBLIC_CONTENT_CACHE_KEY = "public:content"

# Section types whose item lists carry a color
COLORED_SECTIONS = (
    ContentType.FEATURES,
    ContentType.HOW_IT_WORKS,
    ContentType.ROADMAP,
    ContentType.FAQ,
)


def parse_type(raw: str) -> ContentType:
    try:
        return ContentType.from_slug(raw)
    except ValueError:
        raise ResourceNotFoundError(f"Unknown content type '{raw}'")


def _item_lists(data: Dict[str, Any]):
    for key, value in data.items():
        if isinstance(value, list) and value and all(isinstance(v, dict) for v in value):
            yield key, value


def normalize_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate item colors and rewrite item ``order`` as 0..n-1.

    Items are sorted by their current integer ``order``; a missing or null
    order keeps list position.
    """
    result = dict(data)
    for key, items in _item_lists(data):
        for item in items:
            color = item.get("color")
            if color is not None and color not in ITEM_COLORS:
                raise ValidationError(
                    f"Invalid color '{color}' in {key}; expected one of {', '.join(ITEM_COLORS)}"
                )
            order = item.get("order")
            if order is not None and (isinstance(order, bool) or not isinstance(order, int)):
                raise ValidationError(f"Invalid order {order!r} in {key}; expected an integer")
        ranked = sorted(
            enumerate(items),
            key=lambda pair: (pair[1]["order"] if pair[1].get("order") is not None else pair[0], pair[0]),
        )
        result[key] = [dict(item, order=i) for i, (_, item) in enumerate(ranked)]
    return result


class ContentService:
    """Reads and upserts landing page sections."""

    @staticmethod
    def list_content(db: Session) -> List[Content]:
        return db.query(Content).order_by(Content.updated_at.desc()).all()

    @staticmethod
    def get_content(db: Session, content_type: ContentType) -> Content:
        content = db.query(Content).filter(Content.type == content_type).first()
        if not content:
            raise ResourceNotFoundError("Content not found")
        return content

    @staticmethod
    def upsert_content(db: Session, content_type: ContentType, data: Optional[Dict[str, Any]]) -> Content:
        """Replace the document for ``content_type``, creating it if needed."""
        if not data:
            raise ValidationError("Content data is required")
        payload = normalize_payload(data)

        content = db.query(Content).filter(Content.type == content_type).first()
        if content:
            content.data = payload
        else:
            content = Content(type=content_type, data=payload)
            db.add(content)
        db.commit()
        db.refresh(content)

        cache_service.delete(PUBLIC_CONTENT_CACHE_KEY)
        return content

    @staticmethod
    def public_content(db: Session) -> Dict[str, Any]:
        """All sections for the landing page, cached in Redis."""
        cached = cache_service.get_json(PUBLIC_CONTENT_CACHE_KEY)
        if cached is not None:
            return cached

        rows = {c.type: c.data for c in db.query(Content).all()}
        data = {
            "hero": rows.get(ContentType.HERO),
            "features": rows.get(ContentType.FEATURES),
            "howItWorks": rows.get(ContentType.HOW_IT_WORKS),
            "roadmap": rows.get(ContentType.ROADMAP),
            "faq": rows.get(ContentType.FAQ),
        }
        cache_service.set_json(
            PUBLIC_CONTENT_CACHE_KEY, data, settings.PUBLIC_CONTENT_TTL_SECONDS,
        )
        return data

    @staticmethod
    def apply_default_colors(db: Session, color: str = DEFAULT_ITEM_COLOR) -> Dict[str, int]:
        """Give every colorless item in colored sections ``color``.

        Returns the number of items changed per section type.
        """
        if color not in ITEM_COLORS:
            raise ValidationError(f"Invalid color '{color}'")

        changed: Dict[str, int] = {}
        for content in db.query(Content).filter(Content.type.in_(COLORED_SECTIONS)).all():
            data = dict(content.data or {})
            count = 0
            for key, items in _item_lists(data):
                fixed = []
                for item in items:
                    if not item.get("color"):
                        item = dict(item, color=color)
                        count += 1
                    fixed.append(item)
                data[key] = fixed
            if count:
                content.data = data
                changed[content.type.value] = count
        db.commit()
        if changed:
            cache_service.delete(PUBLIC_CONTENT_CACHE_KEY)
            logger.info("Applied default color %s: %s", color, changed)
        return changed


content_service = ContentService()
