from __future__ import annotations

from collections import OrderedDict
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .colors import PREDEFINED_COLORS
from .models import GroupedCatalogEntry, ProductRecord
from .utils import is_blank, logger

UNCATEGORIZED = "sem_categoria"
PRICE_ON_REQUEST = "Sob consulta"

# longest first, so "ROSA BEBÊ" is stripped before "ROSA"
_COLOR_SUFFIXES = sorted((c.name.upper() for c in PREDEFINED_COLORS), key=lambda n: (-len(n), n))


def _as_record(r) -> ProductRecord:
    return r if isinstance(r, ProductRecord) else ProductRecord.from_dict(r)


def _min_price(records: Iterable[ProductRecord]) -> Optional[float]:
    prices = [r.price for r in records if r.price is not None]
    return min(prices) if prices else None


def reconcile(records: Iterable) -> List[GroupedCatalogEntry]:
    """Collapses records sharing a base product name into one entry.

    A group sits where its first member appeared; cover image and description
    come from that first member, price is the lowest known one. Records with
    no base name come through on their own with is_grouped=False. Source
    records are carried as given, in `variants` and in `record`.
    """
    slots: List[Tuple[str, object]] = []
    groups: Dict[str, List[Tuple[ProductRecord, Any]]] = {}

    for raw in records:
        r = _as_record(raw)
        key = "" if is_blank(r.base_product_name) else str(r.base_product_name).strip()
        if not key:
            slots.append(("single", (r, raw)))
            continue
        if key not in groups:
            groups[key] = []
            slots.append(("group", key))
        groups[key].append((r, raw))

    out: List[GroupedCatalogEntry] = []
    for kind, value in slots:
        if kind == "single":
            r, raw = value
            out.append(GroupedCatalogEntry(
                id=r.id,
                name=r.name,
                variants=[],
                price=r.price,
                main_image=r.main_image,
                description=r.description,
                category_id=r.category_id,
                is_grouped=False,
                record=raw,
            ))
            continue
        members = groups[value]
        first = members[0][0]
        out.append(GroupedCatalogEntry(
            id=value,
            name=value,
            variants=[raw for _, raw in members],
            price=_min_price(r for r, _ in members),
            main_image=first.main_image,
            description=first.description,
            category_id=first.category_id,
            is_grouped=True,
        ))
    return out


def display_price(price: Optional[float]) -> str:
    if price is None:
        return PRICE_ON_REQUEST
    return f"R$ {price:.2f}"


class CatalogFeed:
    """Pushes a freshly reconciled catalog to subscribers on every source update."""

    def __init__(self):
        self._subscribers: List[Callable[[List[GroupedCatalogEntry]], None]] = []
        self.latest: List[GroupedCatalogEntry] = []

    def subscribe(self, on_update: Callable[[List[GroupedCatalogEntry]], None]) -> Callable[[], None]:
        self._subscribers.append(on_update)

        def unsubscribe() -> None:
            if on_update in self._subscribers:
                self._subscribers.remove(on_update)

        return unsubscribe

    def push(self, records: Iterable) -> List[GroupedCatalogEntry]:
        entries = reconcile(records)
        self.latest = entries
        for cb in list(self._subscribers):
            try:
                cb(entries)
            except Exception:
                logger.exception("catalog subscriber failed")
        return entries


def derive_base_product_name(name: str | None) -> Optional[str]:
    """'Porta Copo Love VERMELHO' -> 'Porta Copo Love'; None when no known color ends the name."""
    if not name or not isinstance(name, str):
        return None
    trimmed = name.strip()
    upper = trimmed.upper()
    for color in _COLOR_SUFFIXES:
        suffix = f" {color}"
        if upper.endswith(suffix):
            base = trimmed[: len(trimmed) - len(suffix)].strip()
            if base:
                return base
    return None


def backfill_base_names(records: Iterable) -> List[Tuple[str, str]]:
    updates: List[Tuple[str, str]] = []
    for raw in records:
        r = _as_record(raw)
        derived = derive_base_product_name(r.name)
        if derived and derived != r.base_product_name:
            updates.append((r.id, derived))
    logger.info(f"base name backfill: {len(updates)} record(s) to update")
    return updates


def group_by_category(records: Iterable) -> "OrderedDict[str, List[ProductRecord]]":
    grouped: "OrderedDict[str, List[ProductRecord]]" = OrderedDict()
    for raw in records:
        r = _as_record(raw)
        grouped.setdefault(r.category_id or UNCATEGORIZED, []).append(r)
    return grouped


def move_product(records: Iterable, product_id: str, dest_category_id: str, dest_index: int) -> List[ProductRecord]:
    """Drag and drop in the admin list. Returns new records; display_order is renumbered in touched categories."""
    items = [_as_record(r) for r in records]
    moving = next((r for r in items if r.id == product_id), None)
    if moving is None:
        return items

    source_category = moving.category_id or UNCATEGORIZED
    dest_category = dest_category_id or UNCATEGORIZED
    grouped = group_by_category(r for r in items if r.id != product_id)

    target = grouped.setdefault(dest_category, [])
    moved = replace(moving, category_id=None if dest_category == UNCATEGORIZED else dest_category)
    target.insert(max(0, min(int(dest_index), len(target))), moved)

    touched = {source_category, dest_category}
    out: List[ProductRecord] = []
    for category, members in grouped.items():
        for i, r in enumerate(members):
            out.append(replace(r, display_order=i) if category in touched else r)
    return out
