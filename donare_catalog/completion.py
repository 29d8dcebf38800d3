from __future__ import annotations

from typing import List

from .colors import is_valid_hex
from .models import ChecklistItem, ProductDraft
from .utils import is_blank


def evaluate(draft: ProductDraft) -> List[ChecklistItem]:
    """Progress checklist shown next to the form. Informational only; publish() validates on its own."""
    variants = draft.variants
    return [
        ChecklistItem("Nome Base Adicionado", not is_blank(draft.base_name)),
        ChecklistItem("Categoria Selecionada", bool(draft.category_id)),
        ChecklistItem("Pelo Menos Uma Variante Criada", len(variants) > 0),
        ChecklistItem(
            "Todas as Variantes Possuem Imagens",
            len(variants) > 0 and all(len(v.images) > 0 for v in variants),
        ),
        ChecklistItem("Título SEO Adicionado", not is_blank(draft.seo_title)),
        ChecklistItem("Descrição SEO Adicionada", not is_blank(draft.seo_description)),
    ]


def all_complete(items: List[ChecklistItem]) -> bool:
    return all(item.completed for item in items)


def validate_for_publish(draft: ProductDraft) -> List[str]:
    errors: List[str] = []
    if is_blank(draft.base_name):
        errors.append("Nome Base é obrigatório.")
    if not draft.category_id:
        errors.append("Categoria é obrigatória.")
    if not draft.variants:
        errors.append("Pelo menos uma variante é obrigatória.")
    else:
        for v in draft.variants:
            if not v.images:
                errors.append(f'Variante "{v.color}" precisa de pelo menos uma imagem.')
            if not is_valid_hex(v.hex):
                errors.append(f'Variante "{v.color}" tem código HEX inválido ({v.hex or "vazio"}).')
    if is_blank(draft.seo_title):
        errors.append("Título SEO é obrigatório para publicação.")
    if is_blank(draft.seo_description):
        errors.append("Descrição SEO é obrigatória para publicação.")
    return errors
