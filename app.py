import io
from functools import partial

import streamlit as st

from donare_catalog.assignment import ImageAssignmentPipeline
from donare_catalog.colors import PREDEFINED_COLORS, dominant_color_from_url
from donare_catalog.completion import all_complete, evaluate
from donare_catalog.config import get_setting, load_config
from donare_catalog.dimensions import UNITS, format_dimensions, parse_dimensions
from donare_catalog.draft_store import ProductDraftStore
from donare_catalog.export import draft_to_records, save_xlsx, to_catalog_dataframe
from donare_catalog.sku import generate_sku, product_exists
from donare_catalog.uploads import upload_files
from donare_catalog.utils import parse_price

st.set_page_config(page_title="Donare - Novo Produto", layout="wide")

# One store and one pipeline per browser session
if "cfg" not in st.session_state:
    st.session_state["cfg"] = load_config()
if "store" not in st.session_state:
    st.session_state["store"] = ProductDraftStore()
if "pipeline" not in st.session_state:
    st.session_state["pipeline"] = ImageAssignmentPipeline(
        st.session_state["store"],
        analyzer=partial(
            dominant_color_from_url,
            timeout=int(get_setting(st.session_state["cfg"], "images.fetch_timeout", 20)),
            palette_size=int(get_setting(st.session_state["cfg"], "images.palette_size", 5)),
        ),
        threshold=float(get_setting(st.session_state["cfg"], "images.color_distance_threshold", 75)),
    )

cfg = st.session_state["cfg"]
store: ProductDraftStore = st.session_state["store"]
pipeline: ImageAssignmentPipeline = st.session_state["pipeline"]
draft = store.draft

# =====================
# Progress (sidebar)
# =====================
with st.sidebar:
    st.header("Lista de Progresso")
    items = evaluate(draft)
    for item in items:
        st.write(("✅ " if item.completed else "❌ ") + item.label)
    if all_complete(items):
        st.success("Pronto para publicar.")
    st.divider()
    if st.button("Descartar rascunho"):
        store.reset()
        st.session_state["pipeline"] = ImageAssignmentPipeline(store, analyzer=pipeline.analyzer, threshold=pipeline.threshold)
        st.rerun()

st.title("Novo produto")

st.subheader("1) Informações do produto")
base_name = st.text_input("Nome base", value=draft.base_name)
if base_name != draft.base_name:
    store.set_base_name(base_name)
    if base_name and not product_exists(base_name):
        st.warning("Produto não encontrado na tabela de SKUs; o SKU terá de ser informado manualmente.")

category_id = st.text_input("Categoria (id)", value=draft.category_id)
if category_id != draft.category_id:
    store.set_category_id(category_id)

material = st.text_input("Material", value=draft.material)
if material != draft.material:
    store.set_material(material)

dims = parse_dimensions(draft.dimensions)
c1, c2, c3, c4 = st.columns(4)
width = c1.text_input("Largura", value=dims.width or "")
height = c2.text_input("Altura", value=dims.height or "")
depth = c3.text_input("Profundidade", value=dims.depth or "")
unit = c4.selectbox("Unidade", UNITS, index=UNITS.index(dims.unit) if dims.unit in UNITS else 0)
dim_text = format_dimensions(width, height, depth, unit)
if dim_text and dim_text != draft.dimensions:
    store.set_dimensions(dim_text)

description = st.text_area("Descrição", value=draft.description)
if description != draft.description:
    store.set_description(description)

st.subheader("2) Cores")
chosen = st.multiselect(
    "Cores do produto",
    [c.name for c in PREDEFINED_COLORS],
    default=[v.color for v in store.draft.variants if v.color in {c.name for c in PREDEFINED_COLORS}],
)
if st.button("Aplicar cores"):
    store.choose_colors([c for c in PREDEFINED_COLORS if c.name in chosen])
    store.fill_skus()
    st.rerun()

for v in store.draft.variants:
    with st.expander(f"{v.color} ({v.hex}) - SKU: {v.sku or generate_sku(store.draft.base_name, v.color) or '-'}"):
        p1, p2 = st.columns(2)
        retail = p1.text_input("Preço varejo", value=str(v.retail), key=f"retail-{v.id}")
        wholesale = p2.text_input("Preço atacado", value=str(v.wholesale), key=f"wholesale-{v.id}")
        if parse_price(retail) != v.retail:
            store.set_variant_price(v.id, "retail", retail)
        if parse_price(wholesale) != v.wholesale:
            store.set_variant_price(v.id, "wholesale", wholesale)
        if v.images:
            st.image(v.images, width=120)
        if st.button("Remover variante", key=f"rm-{v.id}"):
            store.remove_variant(v.id)
            st.rerun()

st.subheader("3) Imagens")
files = st.file_uploader("Imagens (JPG, PNG, WEBP, GIF)", accept_multiple_files=True)
if files and st.button("Enviar e atribuir", type="primary"):
    with st.spinner("Enviando e analisando imagens..."):
        uploaded, failed = upload_files(
            [(f.name, f.getvalue()) for f in files],
            get_setting(cfg, "uploads.endpoint"),
            timeout=int(get_setting(cfg, "uploads.timeout", 60)),
        )
        report = pipeline.process_batch_sync(uploaded, failed)
    st.success(
        f"{report.auto_assigned} imagem(ns) auto-atribuídas por nome. "
        f"{report.suggested} sugestão(ões) de cor. {report.unassigned} imagem(ns) permanecem não atribuídas."
    )
    for n in report.notices:
        st.caption(n)

for img in pipeline.unassigned:
    cols = st.columns([1, 3, 1, 1])
    if img.url:
        cols[0].image(img.url, width=80)
    label = img.original_name
    if img.error:
        label += f" - erro: {img.error}"
    elif img.suggested_variant_color:
        label += f" - sugestão: {img.suggested_variant_color} ({img.dominant_color})"
    cols[1].write(label)
    if img.suggested_variant_id and cols[2].button("Aceitar", key=f"ok-{img.id}"):
        ok, msg = pipeline.accept_suggestion(img.id)
        (st.success if ok else st.info)(msg)
        st.rerun()
    if cols[3].button("Descartar", key=f"del-{img.id}"):
        pipeline.remove_unassigned(img.id)
        st.rerun()

st.subheader("4) SEO")
if st.button("Preencher SEO padrão"):
    store.fill_default_seo(
        brand=get_setting(cfg, "seo.brand", "Donare Home"),
        material_hint=get_setting(cfg, "seo.material_hint", "couro vegano"),
    )
    st.rerun()
seo_title = st.text_input("Título SEO", value=store.draft.seo_title or "")
if seo_title != (store.draft.seo_title or ""):
    store.set_seo_title(seo_title)
seo_description = st.text_area("Descrição SEO", value=store.draft.seo_description or "")
if seo_description != (store.draft.seo_description or ""):
    store.set_seo_description(seo_description)
keywords = st.text_input("Palavras-chave (separadas por vírgula)", value=", ".join(store.draft.keywords or []))
keyword_list = [k.strip() for k in keywords.split(",") if k.strip()]
if keyword_list != (store.draft.keywords or []):
    store.set_keywords(keyword_list)

st.subheader("5) Publicar")
colA, colB = st.columns([1, 1])
with colA:
    if st.button("Salvar rascunho"):
        store.save_draft()
        st.success("Rascunho salvo.")
with colB:
    if st.button("Publicar", type="primary"):
        errors = store.publish()
        if errors:
            st.error("\n".join(f"- {e}" for e in errors))
        else:
            st.success("Produto publicado.")

records = draft_to_records(store.draft)
if records:
    df = to_catalog_dataframe(records)
    st.dataframe(df, use_container_width=True)
    buf = io.BytesIO()
    save_xlsx(df, buf)
    st.download_button("Baixar XLSX", buf.getvalue(), file_name="produto.xlsx")
