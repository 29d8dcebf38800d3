from donare_catalog.catalog import (
    PRICE_ON_REQUEST,
    UNCATEGORIZED,
    CatalogFeed,
    backfill_base_names,
    derive_base_product_name,
    display_price,
    group_by_category,
    move_product,
    reconcile,
)
from donare_catalog.models import ProductRecord

LOVE = [
    {"id": 1, "baseProductName": "Porta Copo Love", "price": 30},
    {"id": 2, "baseProductName": "Porta Copo Love", "price": 25},
    {"id": 3, "baseProductName": None, "price": 10},
]


def test_records_sharing_a_base_name_collapse():
    entries = reconcile(LOVE)
    assert len(entries) == 2

    group, single = entries
    assert group.id == group.name == "Porta Copo Love"
    assert [r["id"] for r in group.variants] == [1, 2]
    assert group.price == 25
    assert group.is_grouped is True

    assert single.id == 3
    assert single.price == 10
    assert single.is_grouped is False
    assert single.record is LOVE[2]


def test_empty_input():
    assert reconcile([]) == []


def test_group_sits_where_its_first_member_was():
    records = [
        {"id": "a", "baseProductName": None},
        {"id": "b", "baseProductName": "Jarra"},
        {"id": "c", "baseProductName": None},
        {"id": "d", "baseProductName": "Jarra"},
    ]
    assert [e.id for e in reconcile(records)] == ["a", "Jarra", "c"]


def test_cover_and_description_come_from_first_member():
    records = [
        {"id": "1", "baseProductName": "Jarra", "main_image": "first.jpg", "description": "primeira", "price": 90},
        {"id": "2", "baseProductName": "Jarra", "main_image": "second.jpg", "description": "segunda", "price": 50},
    ]
    (entry,) = reconcile(records)
    assert entry.main_image == "first.jpg"
    assert entry.description == "primeira"
    assert entry.price == 50


def test_price_unknown_when_every_member_lacks_one():
    records = [
        {"id": "1", "baseProductName": "Jarra", "price": None},
        {"id": "2", "baseProductName": "Jarra", "price": "n/a"},
    ]
    (entry,) = reconcile(records)
    assert entry.price is None
    assert display_price(entry.price) == PRICE_ON_REQUEST


def test_blank_base_name_passes_through():
    entries = reconcile([{"id": "1", "baseProductName": "   "}, {"id": "2", "baseProductName": ""}])
    assert [e.is_grouped for e in entries] == [False, False]


def test_reconcile_is_repeatable():
    assert reconcile(LOVE) == reconcile(LOVE)


def test_accepts_records_and_snake_case_dicts():
    records = [
        ProductRecord(id="1", base_product_name="Jarra", price=40.0),
        {"id": "2", "base_product_name": "Jarra", "price": "35.5"},
    ]
    (entry,) = reconcile(records)
    assert entry.price == 35.5


def test_display_price():
    assert display_price(30) == "R$ 30.00"
    assert display_price(25.5) == "R$ 25.50"


def test_feed_delivers_to_subscribers_until_they_leave():
    feed = CatalogFeed()
    seen = []
    unsubscribe = feed.subscribe(lambda entries: seen.append(len(entries)))
    feed.push(LOVE)
    unsubscribe()
    feed.push(LOVE[:1])
    assert seen == [2]
    assert len(feed.latest) == 1


def test_feed_keeps_delivering_after_a_subscriber_fails():
    feed = CatalogFeed()

    def bad(entries):
        raise RuntimeError("boom")

    seen = []
    feed.subscribe(bad)
    feed.subscribe(lambda entries: seen.append([e.id for e in entries]))
    feed.push(LOVE)
    assert seen == [["Porta Copo Love", "3"]]


def test_derive_base_product_name():
    assert derive_base_product_name("Porta Copo Love VERMELHO") == "Porta Copo Love"
    assert derive_base_product_name("Porta Copo Love Rosa Bebê") == "Porta Copo Love"
    assert derive_base_product_name("Porta Copo Love OFF WHITE") == "Porta Copo Love"
    assert derive_base_product_name("Porta Copo Love") is None
    assert derive_base_product_name("VERMELHO") is None
    assert derive_base_product_name(None) is None


def test_backfill_only_reports_changes():
    records = [
        {"id": "1", "name": "Jarra CACAU", "baseProductName": None},
        {"id": "2", "name": "Jarra PALHA", "baseProductName": "Jarra"},
        {"id": "3", "name": "Sousplat"},
    ]
    assert backfill_base_names(records) == [("1", "Jarra")]


def test_group_by_category_keeps_first_seen_order():
    records = [
        {"id": "1", "categoryId": "mesa"},
        {"id": "2"},
        {"id": "3", "categoryId": "mesa"},
    ]
    grouped = group_by_category(records)
    assert list(grouped) == ["mesa", UNCATEGORIZED]
    assert [r.id for r in grouped["mesa"]] == ["1", "3"]


def test_move_product_between_categories():
    records = [
        {"id": "1", "categoryId": "mesa", "display_order": 0},
        {"id": "2", "categoryId": "mesa", "display_order": 1},
        {"id": "3", "categoryId": "bar", "display_order": 0},
    ]
    moved = move_product(records, "2", "bar", 0)
    by_id = {r.id: r for r in moved}
    assert by_id["2"].category_id == "bar"
    assert (by_id["2"].display_order, by_id["3"].display_order) == (0, 1)
    assert by_id["1"].display_order == 0


def test_move_product_to_uncategorized_and_unknown_id():
    records = [{"id": "1", "categoryId": "mesa"}, {"id": "2", "categoryId": "mesa"}]
    moved = move_product(records, "1", UNCATEGORIZED, 5)
    by_id = {r.id: r for r in moved}
    assert by_id["1"].category_id is None
    assert by_id["2"].display_order == 0

    untouched = move_product(records, "nope", "bar", 0)
    assert [r.id for r in untouched] == ["1", "2"]


def test_pass_through_records_are_left_as_given():
    raw = {"id": 7, "baseProductName": None, "category": "bar", "gallery": ["g.jpg"], "price": "12"}
    snapshot = dict(raw)
    (entry,) = reconcile([raw])
    assert entry.record is raw
    assert raw == snapshot
    assert entry.id == 7
    assert entry.is_grouped is False


def test_group_members_are_the_source_objects():
    records = [ProductRecord(id=1, base_product_name="Jarra"), ProductRecord(id=2, base_product_name="Jarra")]
    (entry,) = reconcile(records)
    assert entry.variants[0] is records[0]
    assert entry.variants[1] is records[1]
