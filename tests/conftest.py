import pytest

from donare_catalog.draft_store import ProductDraftStore
from donare_catalog.models import ProductDraft, Variant


def make_variant(id, color, hex="#000000", images=None, **kw):
    return Variant(id=id, color=color, hex=hex, images=list(images or []), **kw)


@pytest.fixture
def red_blue_store():
    draft = ProductDraft(
        base_name="PORTA COPO REDONDO",
        variants=[
            make_variant("v-red", "Vermelho", "#FF0000"),
            make_variant("v-blue", "Azul", "#0000FF"),
        ],
    )
    return ProductDraftStore(draft)
