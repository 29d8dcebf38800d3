import io

import pandas as pd

from conftest import make_variant
from donare_catalog.export import HEADERS, draft_to_records, records_to_draft, save_xlsx, to_catalog_dataframe
from donare_catalog.models import PUBLISHED, ProductDraft, ProductRecord


def _draft():
    return ProductDraft(
        base_name="Porta Copo Love",
        category_id="cat-1",
        material="Couro vegano",
        dimensions="L: 10cm, A: 10cm, P: 0.5cm",
        description="Jogo com 4 peças.",
        variants=[
            make_variant("v1", "Vermelho", "#FF0000", images=["r1.jpg", "r2.jpg"], retail=89.9, sku="2007-10-UN"),
            make_variant("v2", "Cacau", "#5E2C04", images=["c1.jpg"], retail=79.9, wholesale=40),
        ],
        seo_title="Porta Copo Love",
        seo_description="Porta copo em couro vegano.",
        keywords=["porta copo"],
        status=PUBLISHED,
    )


def test_one_record_per_variant():
    records = draft_to_records(_draft())
    assert [r.name for r in records] == ["Porta Copo Love VERMELHO", "Porta Copo Love CACAU"]
    assert {r.base_product_name for r in records} == {"Porta Copo Love"}
    first = records[0]
    assert first.main_image == "r1.jpg"
    assert first.price == 89.9
    assert first.extra["sku"] == "2007-10-UN"
    assert first.extra["seoTitle"] == "Porta Copo Love"


def test_variant_seo_overrides_draft_seo():
    draft = _draft()
    draft.variants[1].seo_title = "Porta Copo Love Cacau"
    records = draft_to_records(draft)
    assert records[1].extra["seoTitle"] == "Porta Copo Love Cacau"
    assert records[0].extra["seoTitle"] == "Porta Copo Love"


def test_records_rebuild_the_draft():
    draft = _draft()
    rebuilt = records_to_draft(draft_to_records(draft))
    assert rebuilt.base_name == draft.base_name
    assert rebuilt.category_id == draft.category_id
    assert rebuilt.dimensions == draft.dimensions
    assert rebuilt.status == PUBLISHED
    assert [(v.id, v.color, v.hex, v.images) for v in rebuilt.variants] == [
        ("v1", "Vermelho", "#FF0000", ["r1.jpg", "r2.jpg"]),
        ("v2", "Cacau", "#5E2C04", ["c1.jpg"]),
    ]
    assert rebuilt.variants[1].wholesale == 40


def test_legacy_records_fall_back_to_name_and_palette():
    records = [
        ProductRecord(id="9", name="Jarra Love CACAU", price=120.0, main_image="j.jpg"),
    ]
    draft = records_to_draft(records)
    assert draft.base_name == "Jarra Love"
    assert draft.variants[0].color == "CACAU"
    assert draft.variants[0].hex == "#5E2C04"
    assert draft.variants[0].images == ["j.jpg"]


def test_records_to_draft_empty():
    assert records_to_draft([]) == ProductDraft()


def test_dataframe_columns_and_rows():
    df = to_catalog_dataframe(draft_to_records(_draft()))
    assert list(df.columns) == HEADERS
    assert len(df) == 2
    assert df.loc[0, "SKU"] == "2007-10-UN"
    assert df.loc[0, "Galeria"] == "r1.jpg\nr2.jpg"
    assert df.loc[1, "Palavras-chave"] == "porta copo"


def test_save_xlsx(tmp_path):
    out = tmp_path / "produto.xlsx"
    df = to_catalog_dataframe(draft_to_records(_draft()))
    save_xlsx(df, str(out))
    back = pd.read_excel(out)
    assert list(back.columns) == HEADERS
    assert back["Nome"].tolist() == ["Porta Copo Love VERMELHO", "Porta Copo Love CACAU"]


def test_save_xlsx_to_buffer():
    buf = io.BytesIO()
    save_xlsx(to_catalog_dataframe(draft_to_records(_draft())), buf)
    buf.seek(0)
    assert pd.read_excel(buf)["SKU"].tolist()[0] == "2007-10-UN"
