from __future__ import annotations
import logging
import os
import re
import uuid

from dotenv import load_dotenv
from slugify import slugify

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(message)s"
)
logger = logging.getLogger("donare-catalog")


def clean_text(s: str | None) -> str:
    if not s:
        return ""
    s = re.sub(r"\s+", " ", s).strip()
    return s


def is_blank(s: str | None) -> bool:
    return not s or not str(s).strip()


def new_variant_id(color: str) -> str:
    # variant-<slug>-<token>; only needs to be unique inside one draft session
    slug = slugify(color or "") or "cor"
    return f"variant-{slug}-{uuid.uuid4().hex[:10]}"


def parse_price(raw) -> float:
    """Price fields accept free text; anything unparseable counts as 0."""
    if raw is None:
        return 0.0
    try:
        value = float(str(raw).strip().replace(",", "."))
    except Exception:
        return 0.0
    if value != value or value < 0:  # NaN
        return 0.0
    return value
