from __future__ import annotations

from typing import List

import pandas as pd

from .catalog import derive_base_product_name
from .colors import find_predefined
from .models import DRAFT, PUBLISHED, ProductDraft, ProductRecord, Variant

HEADERS = [
    "SKU",
    "Nome",
    "Nome Base",
    "Categoria",
    "Cor",
    "HEX",
    "Preço Varejo",
    "Preço Atacado",
    "Imagem Principal",
    "Galeria",
    "Material",
    "Dimensões",
    "Descrição",
    "Título SEO",
    "Descrição SEO",
    "Palavras-chave",
    "Status",
]


def draft_to_records(draft: ProductDraft) -> List[ProductRecord]:
    """One persisted record per color, all sharing the draft's base name."""
    records: List[ProductRecord] = []
    for v in draft.variants:
        records.append(ProductRecord(
            id=v.id,
            name=f"{draft.base_name} {v.color.upper()}".strip(),
            base_product_name=draft.base_name or None,
            category_id=draft.category_id or None,
            price=v.retail,
            main_image=v.cover_image or "",
            description=draft.description,
            images=list(v.images),
            extra={
                "color": v.color,
                "hex": v.hex,
                "sku": v.sku or "",
                "wholesale_price": v.wholesale,
                "material": draft.material,
                "dimensions": draft.dimensions,
                "seoTitle": v.seo_title or draft.seo_title or "",
                "seoDescription": v.seo_description or draft.seo_description or "",
                "keywords": list(v.keywords or draft.keywords or []),
                "status": draft.status,
            },
        ))
    return records


def _color_of(record: ProductRecord, base_name: str) -> str:
    if record.extra.get("color"):
        return str(record.extra["color"])
    name = record.name.strip()
    if base_name and name.upper().startswith(base_name.upper()):
        return name[len(base_name):].strip()
    return name


def records_to_draft(records: List[ProductRecord]) -> ProductDraft:
    """Edit flow: rebuilds a draft from the persisted records of one product."""
    if not records:
        return ProductDraft()
    first = records[0]
    base_name = first.base_product_name or derive_base_product_name(first.name) or first.name

    variants: List[Variant] = []
    for r in records:
        color = _color_of(r, base_name)
        predefined = find_predefined(color)
        images: List[str] = []
        for url in [r.main_image, *r.images]:
            if url and url not in images:
                images.append(url)
        variants.append(Variant(
            id=r.id,
            color=color,
            hex=r.extra.get("hex") or (predefined.hex if predefined else ""),
            images=images,
            retail=r.price or 0.0,
            wholesale=float(r.extra.get("wholesale_price") or 0.0),
            sku=r.extra.get("sku") or None,
        ))

    status = PUBLISHED if first.extra.get("status") == PUBLISHED else DRAFT
    return ProductDraft(
        base_name=base_name,
        category_id=first.category_id or "",
        material=first.extra.get("material") or "",
        dimensions=first.extra.get("dimensions") or "",
        description=first.description,
        variants=variants,
        seo_title=first.extra.get("seoTitle") or None,
        seo_description=first.extra.get("seoDescription") or None,
        keywords=list(first.extra.get("keywords") or []) or None,
        status=status,
    )


def to_catalog_dataframe(records: List[ProductRecord]) -> pd.DataFrame:
    rows: List[dict] = []
    for r in records:
        row = {h: "" for h in HEADERS}
        row["SKU"] = r.extra.get("sku", "")
        row["Nome"] = r.name
        row["Nome Base"] = r.base_product_name or ""
        row["Categoria"] = r.category_id or ""
        row["Cor"] = r.extra.get("color", "")
        row["HEX"] = r.extra.get("hex", "")
        row["Preço Varejo"] = round(r.price, 2) if r.price is not None else ""
        row["Preço Atacado"] = r.extra.get("wholesale_price", "")
        row["Imagem Principal"] = r.main_image
        row["Galeria"] = "\n".join([i for i in r.images if i])
        row["Material"] = r.extra.get("material", "")
        row["Dimensões"] = r.extra.get("dimensions", "")
        row["Descrição"] = r.description
        row["Título SEO"] = r.extra.get("seoTitle", "")
        row["Descrição SEO"] = r.extra.get("seoDescription", "")
        row["Palavras-chave"] = ", ".join(r.extra.get("keywords") or [])
        row["Status"] = r.extra.get("status", "")
        rows.append(row)

    return pd.DataFrame(rows, columns=HEADERS)


def save_xlsx(df: pd.DataFrame, path) -> None:
    """`path` may be a filename or a binary buffer."""
    df.to_excel(path, index=False)
