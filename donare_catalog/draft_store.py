from __future__ import annotations

import copy
from dataclasses import fields, replace
from typing import Callable, Dict, Iterable, List, Optional

from .colors import is_valid_hex
from .completion import validate_for_publish
from .models import DRAFT, PUBLISHED, STATUSES, ProductDraft, Variant
from .sku import generate_sku
from .utils import clean_text, is_blank, logger, new_variant_id, parse_price

Listener = Callable[[ProductDraft], None]

_VARIANT_FIELDS = {f.name for f in fields(Variant)} - {"id"}
_PRICE_FIELDS = ("retail", "wholesale")


def _color_fields(color) -> tuple[str, str]:
    if isinstance(color, dict):
        return color.get("name") or color.get("color") or "", color.get("hex") or ""
    if isinstance(color, (tuple, list)):
        return color[0], color[1]
    return color.name, color.hex


def _color_key(color: str | None) -> str:
    return clean_text(color).upper()


def _unique_variants(variants: Iterable[Variant]) -> List[Variant]:
    # ids and colors are unique inside a draft; later repeats are dropped
    out: List[Variant] = []
    ids, colors = set(), set()
    for v in variants:
        if v.id in ids or _color_key(v.color) in colors:
            logger.debug(f"dropping repeated variant {v.id} ({v.color})")
            continue
        ids.add(v.id)
        colors.add(_color_key(v.color))
        out.append(v)
    return out


class ProductDraftStore:
    """The product being authored.

    Every operation swaps in a new ProductDraft snapshot, so a reader holding
    `store.draft` never sees a half-applied change. Operations never raise;
    an operation that cannot apply (unknown id, duplicate color, bad hex)
    leaves the current snapshot in place.
    """

    def __init__(self, draft: Optional[ProductDraft] = None):
        self._draft = copy.deepcopy(draft) if draft is not None else ProductDraft()
        self._listeners: List[Listener] = []

    @property
    def draft(self) -> ProductDraft:
        return self._draft

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, draft: ProductDraft) -> None:
        self._draft = draft
        for listener in list(self._listeners):
            try:
                listener(draft)
            except Exception:
                logger.exception("draft listener failed")

    def _set(self, **changes) -> None:
        if all(getattr(self._draft, k) == v for k, v in changes.items()):
            return
        self._commit(replace(self._draft, **changes))

    def _replace_variant(self, variant_id: str, fn: Callable[[Variant], Variant]) -> bool:
        found = False
        out: List[Variant] = []
        for v in self._draft.variants:
            if v.id == variant_id:
                found = True
                out.append(fn(v))
            else:
                out.append(v)
        if found:
            self._set(variants=out)
        else:
            logger.debug(f"variant {variant_id} not in draft, ignoring")
        return found

    # -- lifecycle

    def reset(self) -> None:
        self._commit(ProductDraft())

    def load(self, draft: ProductDraft) -> None:
        self._commit(copy.deepcopy(draft))

    # -- base fields

    def set_base_name(self, base_name: str) -> None:
        self._set(base_name=base_name or "")

    def set_category_id(self, category_id: str) -> None:
        self._set(category_id=category_id or "")

    def set_material(self, material: str) -> None:
        self._set(material=material or "")

    def set_dimensions(self, dimensions: str) -> None:
        self._set(dimensions=dimensions or "")

    def set_description(self, description: str) -> None:
        self._set(description=description or "")

    def set_status(self, status: str) -> None:
        if status not in STATUSES:
            logger.debug(f"unknown status {status!r}, ignoring")
            return
        self._set(status=status)

    def set_seo_title(self, seo_title: Optional[str]) -> None:
        self._set(seo_title=seo_title)

    def set_seo_description(self, seo_description: Optional[str]) -> None:
        self._set(seo_description=seo_description)

    def set_keywords(self, keywords: Optional[Iterable[str]]) -> None:
        self._set(keywords=list(keywords) if keywords is not None else None)

    def add_keyword(self, keyword: str) -> None:
        word = clean_text(keyword)
        current = self._draft.keywords or []
        if word and word not in current:
            self.set_keywords([*current, word])

    def remove_keyword(self, keyword: str) -> None:
        current = self._draft.keywords or []
        if keyword in current:
            self.set_keywords([k for k in current if k != keyword])

    # -- variants

    def set_variants(self, variants: Iterable[Variant]) -> None:
        self._set(variants=_unique_variants(variants))

    def add_variant(self, variant: Variant) -> None:
        if self._draft.variant(variant.id) is not None or self._has_color(variant.color):
            logger.debug(f"variant {variant.id} ({variant.color}) already in draft, ignoring")
            return
        self._set(variants=[*self._draft.variants, variant])

    def _has_color(self, color: str) -> bool:
        key = _color_key(color)
        return any(_color_key(v.color) == key for v in self._draft.variants)

    def update_variant(self, variant_id: str, **changes) -> None:
        accepted = {k: v for k, v in changes.items() if k in _VARIANT_FIELDS}
        if not accepted:
            return
        self._replace_variant(variant_id, lambda v: replace(v, **accepted))

    def remove_variant(self, variant_id: str) -> None:
        if self._draft.variant(variant_id) is None:
            return
        self._set(variants=[v for v in self._draft.variants if v.id != variant_id])

    def move_variant(self, variant_id: str, new_index: int) -> None:
        variants = list(self._draft.variants)
        current = self._draft.variant(variant_id)
        if current is None:
            return
        variants.remove(current)
        new_index = max(0, min(int(new_index), len(variants)))
        variants.insert(new_index, current)
        self.set_variants(variants)

    def add_color(self, name: str, hex_value: str) -> Optional[Variant]:
        """New variant for a palette color. Duplicate color or bad hex: no-op, returns None."""
        name = clean_text(name)
        if not name or not is_valid_hex(hex_value):
            logger.debug(f"rejected color {name!r} {hex_value!r}")
            return None
        if self._has_color(name):
            logger.debug(f"color {name} already has a variant")
            return None
        variant = Variant(id=new_variant_id(name), color=name, hex=hex_value, sku="")
        self.add_variant(variant)
        return variant

    def choose_colors(self, colors: Iterable) -> None:
        """Color modal result: keeps re-chosen variants (with their images), adds new ones, drops the rest."""
        chosen: List[tuple[str, str]] = []
        seen = set()
        for c in colors:
            name, hex_value = _color_fields(c)
            name = clean_text(name)
            if name and _color_key(name) not in seen and is_valid_hex(hex_value):
                seen.add(_color_key(name))
                chosen.append((name, hex_value))

        kept = [v for v in self._draft.variants if _color_key(v.color) in seen]
        kept_colors = {_color_key(v.color) for v in kept}
        new = [
            Variant(id=new_variant_id(name), color=name, hex=hex_value, sku="")
            for name, hex_value in chosen
            if _color_key(name) not in kept_colors
        ]
        self.set_variants([*kept, *new])

    def set_variant_price(self, variant_id: str, field_name: str, raw) -> None:
        if field_name not in _PRICE_FIELDS:
            return
        self.update_variant(variant_id, **{field_name: parse_price(raw)})

    # -- images

    def add_image_to_variant(self, variant_id: str, url: str) -> None:
        variant = self._draft.variant(variant_id)
        if variant is None or not url or url in variant.images:
            return
        self._replace_variant(variant_id, lambda v: replace(v, images=[*v.images, url]))

    def remove_image_from_variant(self, variant_id: str, url: str) -> None:
        variant = self._draft.variant(variant_id)
        if variant is None or url not in variant.images:
            return
        self._replace_variant(variant_id, lambda v: replace(v, images=[i for i in v.images if i != url]))

    def set_cover_image(self, variant_id: str, url: str) -> None:
        variant = self._draft.variant(variant_id)
        if variant is None or url not in variant.images or variant.images[0] == url:
            return
        self._replace_variant(
            variant_id, lambda v: replace(v, images=[url, *[i for i in v.images if i != url]])
        )

    def variant_holding(self, url: str) -> Optional[Variant]:
        for v in self._draft.variants:
            if url in v.images:
                return v
        return None

    # -- derived fills

    def fill_skus(self) -> int:
        draft = self._draft
        updated = 0
        out: List[Variant] = []
        for v in draft.variants:
            sku = "" if v.sku else generate_sku(draft.base_name, v.color)
            if sku:
                out.append(replace(v, sku=sku))
                updated += 1
            else:
                out.append(v)
        if updated:
            self._set(variants=out)
        return updated

    def apply_variant_suggestions(self, suggestions: Iterable[Dict]) -> int:
        """Merges per-color suggestions (sku, seo_title, seo_description, keywords); only differing fields change."""
        by_color = {s.get("color"): s for s in suggestions if s.get("color")}
        updated = 0
        out: List[Variant] = []
        for v in self._draft.variants:
            s = by_color.get(v.color)
            changes = {}
            if s:
                for key in ("sku", "seo_title", "seo_description", "keywords"):
                    if key in s and getattr(v, key) != s[key]:
                        changes[key] = list(s[key]) if key == "keywords" and s[key] is not None else s[key]
            if changes:
                out.append(replace(v, **changes))
                updated += 1
            else:
                out.append(v)
        if updated:
            self._set(variants=out)
        return updated

    def fill_default_seo(self, brand: str = "Donare Home", material_hint: str = "couro vegano") -> None:
        draft = self._draft
        if is_blank(draft.base_name) or not draft.variants:
            return
        first_color = draft.variants[0].color
        if not first_color:
            return
        material = clean_text(draft.material) or material_hint

        changes = {}
        if not draft.seo_title:
            changes["seo_title"] = f"{draft.base_name} em {material.title()} – {brand}"
        if not draft.seo_description:
            changes["seo_description"] = (
                f"{draft.base_name} em {material.lower()}, cor {first_color}. "
                "Sofisticação e praticidade para sua mesa posta."
            )
        if not draft.keywords:
            changes["keywords"] = [draft.base_name, brand, first_color, material.lower(), "mesa posta"]
        if changes:
            self._set(**changes)

    # -- status

    def save_draft(self) -> None:
        self.set_status(DRAFT)

    def publish(self) -> List[str]:
        """Validates and marks the draft published. Returns the validation messages (empty on success)."""
        errors = validate_for_publish(self._draft)
        if errors:
            logger.info(f"publish blocked for {self._draft.base_name!r}: {len(errors)} problem(s)")
            return errors
        self.set_status(PUBLISHED)
        logger.info(f"draft {self._draft.base_name!r} published with {len(self._draft.variants)} variant(s)")
        return []
