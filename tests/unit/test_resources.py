from __future__ import annotations

import pytest

from listings.resources import RESOURCES, Resource, get_resource, quote_ident, schema_statements

HOTEL_FIELDS = ("name", "location", "pricePerNight", "amenities", "facebookLink", "telegramLink")


def test_registry_has_the_five_categories_in_order() -> None:
    assert [r.name for r in RESOURCES] == ["jobs", "hotels", "restaurants", "travel", "identity"]
    assert [r.label for r in RESOURCES] == ["Job", "Hotel", "Restaurant", "Travel", "Identity"]


def test_every_category_ends_with_contact_links() -> None:
    for resource in RESOURCES:
        assert resource.fields[-2:] == ("facebookLink", "telegramLink")


def test_field_sets_match_public_contract() -> None:
    assert get_resource("jobs").fields == (
        "name",
        "pinkCard",
        "speakThai",
        "paymentMethod",
        "dailySalary",
        "monthlySalary",
        "accommodation",
        "facebookLink",
        "telegramLink",
    )
    assert get_resource("hotels").fields == HOTEL_FIELDS
    assert get_resource("restaurants").fields[:4] == ("name", "cuisineType", "location", "priceRange")
    assert get_resource("travel").fields[:4] == ("destination", "travelType", "duration", "price")
    assert get_resource("identity").fields[:4] == ("name", "documentType", "location", "price")


def test_get_resource_unknown_name() -> None:
    with pytest.raises(KeyError, match="Unknown resource: cars"):
        get_resource("cars")


def test_create_table_sql_is_idempotent_ddl_with_quoted_text_columns() -> None:
    sql = get_resource("hotels").create_table_sql()

    assert sql.startswith('CREATE TABLE IF NOT EXISTS "hotels" (')
    assert "id SERIAL PRIMARY KEY" in sql
    for field in HOTEL_FIELDS:
        assert f'"{field}" TEXT' in sql


def test_insert_sql_placeholders_follow_field_order() -> None:
    sql = get_resource("hotels").insert_sql()

    assert sql == (
        'INSERT INTO "hotels" ("name", "location", "pricePerNight", "amenities", '
        '"facebookLink", "telegramLink") VALUES ($1, $2, $3, $4, $5, $6) RETURNING id'
    )


def test_select_and_delete_sql() -> None:
    travel = get_resource("travel")

    assert travel.select_all_sql().startswith('SELECT id, "destination", "travelType"')
    assert travel.select_all_sql().endswith('FROM "travel"')
    assert "ORDER BY" not in travel.select_all_sql()
    assert travel.delete_by_id_sql() == 'DELETE FROM "travel" WHERE id = $1 RETURNING id'


def test_bind_orders_values_and_fills_missing_with_none() -> None:
    hotels = get_resource("hotels")

    args = hotels.bind({"amenities": "pool", "name": "Sea View", "unexpected": "dropped"})

    assert args == ("Sea View", None, None, "pool", None, None)


def test_bind_accepts_no_payload() -> None:
    assert get_resource("travel").bind(None) == (None,) * 6


def test_bind_stores_scalars_as_text() -> None:
    jobs = get_resource("jobs")

    args = jobs.bind({"dailySalary": 500, "pinkCard": True, "monthlySalary": 12000.5, "name": None})

    assert args[jobs.fields.index("dailySalary")] == "500"
    assert args[jobs.fields.index("pinkCard")] == "true"
    assert args[jobs.fields.index("monthlySalary")] == "12000.5"
    assert args[jobs.fields.index("name")] is None


def test_bind_stores_lists_and_objects_as_json() -> None:
    hotels = get_resource("hotels")

    args = hotels.bind({"amenities": ["pool", True, None], "location": {"city": "Phuket", "zip": 83000}})

    assert args[hotels.fields.index("amenities")] == '["pool", true, null]'
    assert args[hotels.fields.index("location")] == '{"city": "Phuket", "zip": 83000}'


def test_quote_ident_escapes_embedded_quotes() -> None:
    assert quote_ident('we"ird') == '"we""ird"'


def test_schema_statements_cover_custom_resources() -> None:
    extra = Resource(name="markets", label="Market", fields=("name", "facebookLink"))

    statements = schema_statements((extra,))

    assert statements == [extra.create_table_sql()]
    assert len(schema_statements()) == len(RESOURCES)
