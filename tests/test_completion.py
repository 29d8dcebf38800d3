from conftest import make_variant
from donare_catalog.completion import all_complete, evaluate, validate_for_publish
from donare_catalog.models import ProductDraft


def _complete_draft():
    return ProductDraft(
        base_name="Porta Copo Love",
        category_id="cat-1",
        variants=[make_variant("v1", "VERMELHO", "#FF0000", images=["a.jpg"])],
        seo_title="Porta Copo Love",
        seo_description="Em couro vegano.",
    )


def test_empty_draft_has_nothing_completed():
    items = evaluate(ProductDraft())
    assert len(items) == 6
    assert not any(i.completed for i in items)
    assert not all_complete(items)


def test_complete_draft():
    items = evaluate(_complete_draft())
    assert all_complete(items)
    assert validate_for_publish(_complete_draft()) == []


def test_variant_without_image_blocks_the_images_item():
    draft = _complete_draft()
    draft.variants.append(make_variant("v2", "CACAU", "#5E2C04"))
    by_label = {i.label: i.completed for i in evaluate(draft)}
    assert by_label["Pelo Menos Uma Variante Criada"] is True
    assert by_label["Todas as Variantes Possuem Imagens"] is False


def test_images_item_needs_at_least_one_variant():
    by_label = {i.label: i.completed for i in evaluate(ProductDraft(base_name="X"))}
    assert by_label["Todas as Variantes Possuem Imagens"] is False
    assert by_label["Nome Base Adicionado"] is True


def test_whitespace_only_text_counts_as_missing():
    draft = _complete_draft()
    draft.base_name = "   "
    draft.seo_title = " "
    by_label = {i.label: i.completed for i in evaluate(draft)}
    assert by_label["Nome Base Adicionado"] is False
    assert by_label["Título SEO Adicionado"] is False


def test_validate_flags_bad_hex():
    draft = _complete_draft()
    draft.variants[0].hex = "red"
    errors = validate_for_publish(draft)
    assert errors == ['Variante "VERMELHO" tem código HEX inválido (red).']


def test_validate_lists_every_problem():
    errors = validate_for_publish(ProductDraft())
    assert errors == [
        "Nome Base é obrigatório.",
        "Categoria é obrigatória.",
        "Pelo menos uma variante é obrigatória.",
        "Título SEO é obrigatório para publicação.",
        "Descrição SEO é obrigatória para publicação.",
    ]
