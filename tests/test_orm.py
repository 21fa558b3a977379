"""Tests for the table-scoped query builder and row object."""

import pytest

from ormwrap.core.exceptions import (
    ColumnNotFoundError,
    ConnectionNotConfiguredError,
    PrimaryKeyMissingError,
    TableNotFoundError,
)
from ormwrap.query.orm import ORM


def test_find_one_by_id(db):
    row = ORM.for_table("user").find_one(1)
    assert isinstance(row, ORM)
    assert row.get("name") == "Alice"
    assert row.id() == 1
    assert not row.is_new()


def test_find_one_missing_returns_none(db):
    assert ORM.for_table("user").find_one(999) is None


def test_find_one_returns_plain_rows_for_subclasses(db):
    class CustomQuery(ORM):
        pass

    row = CustomQuery.for_table("user").find_one(1)
    assert type(row) is ORM


def test_find_many_with_conditions_and_ordering(db):
    rows = ORM.for_table("user").where_equal("active", 1).order_by_desc("id").find_many()
    assert [r.get("name") for r in rows] == ["Carol", "Alice"]


def test_limit_and_offset(db):
    rows = ORM.for_table("user").order_by_asc("id").limit(1).offset(1).find_many()
    assert [r.id() for r in rows] == [2]


def test_comparison_conditions(db):
    q = ORM.for_table("user")
    assert [r.id() for r in q.where_gt("id", 1).where_lte("id", 3).order_by_asc("id").find_many()] == [2, 3]
    assert [r.id() for r in ORM.for_table("user").where_lt("id", 2).find_many()] == [1]
    assert [r.id() for r in ORM.for_table("user").where_gte("id", 3).find_many()] == [3]
    assert ORM.for_table("user").where_not_equal("name", "Bob").count() == 2


def test_in_like_and_null_conditions(db):
    assert ORM.for_table("user").where_in("id", [1, 3]).count() == 2
    assert ORM.for_table("user").where_not_in("id", [1, 3]).count() == 1
    assert ORM.for_table("user").where_like("name", "%o%").count() == 2
    assert ORM.for_table("user").where_not_like("name", "A%").count() == 2
    assert ORM.for_table("user").where_null("email").find_one().get("name") == "Bob"
    assert ORM.for_table("user").where_not_null("email").count() == 2


def test_where_raw(db):
    rows = ORM.for_table("user").where_raw("name = :name OR id = :id", {"name": "Bob", "id": 3}).find_many()
    assert sorted(r.id() for r in rows) == [2, 3]


def test_select_and_find_dicts(db):
    dicts = ORM.for_table("user").select("id", "name").order_by_asc("id").find_dicts()
    assert dicts[0] == {"id": 1, "name": "Alice"}
    assert len(dicts) == 3


def test_distinct(db):
    dicts = ORM.for_table("user").select("active").distinct().find_dicts()
    assert sorted(d["active"] for d in dicts) == [0, 1]


def test_count_ignores_paging(db):
    q = ORM.for_table("user").where_equal("active", 1).limit(1).offset(5)
    assert q.count() == 2


def test_unknown_column_raises(db):
    with pytest.raises(ColumnNotFoundError):
        ORM.for_table("user").where_equal("nope", 1)


def test_unknown_table_raises(db):
    with pytest.raises(TableNotFoundError):
        ORM.for_table("missing_table").find_many()


def test_unknown_connection_raises(db):
    with pytest.raises(ConnectionNotConfiguredError):
        ORM.for_table("user", "reporting")


def test_create_and_save_inserts_row(db):
    row = ORM.for_table("user").create({"name": "Dave", "email": "dave@example.com"})
    assert row.is_new()
    assert row.is_dirty("name")
    assert row.save() is True
    assert not row.is_new()
    assert not row.is_dirty("name")
    assert row.id() == 4
    stored = ORM.for_table("user").find_one(4)
    assert stored.get("email") == "dave@example.com"
    assert stored.get("active") == 1


def test_create_without_data(db):
    row = ORM.for_table("user").create()
    assert row.is_new()
    assert row.as_dict() == {}


def test_save_updates_only_dirty_fields(db):
    row = ORM.for_table("user").find_one(2)
    row.set("email", "bob@example.com")
    assert row.is_dirty("email")
    assert not row.is_dirty("name")
    row.save()
    assert ORM.for_table("user").find_one(2).get("email") == "bob@example.com"


def test_set_accepts_mapping(db):
    row = ORM.for_table("user").find_one(1)
    row.set({"name": "Alicia", "active": 0})
    row.save()
    stored = ORM.for_table("user").find_one(1)
    assert stored.as_dict("name", "active") == {"name": "Alicia", "active": 0}


def test_save_without_changes_is_a_noop(db):
    row = ORM.for_table("user").find_one(1)
    assert row.save() is True


def test_update_without_primary_key_raises(db):
    row = ORM.for_table("user").select("name").find_one()
    row.set("name", "Nobody")
    with pytest.raises(PrimaryKeyMissingError):
        row.save()


def test_delete(db):
    row = ORM.for_table("post").find_one(2)
    assert row.delete() is True
    assert ORM.for_table("post").find_one(2) is None


def test_delete_many(db):
    deleted = ORM.for_table("post").where_equal("user_id", 1).delete_many()
    assert deleted == 2
    assert ORM.for_table("post").count() == 1


def test_use_id_column(db):
    row = ORM.for_table("tag").use_id_column("tag_id").find_one(10)
    assert row.get("label") == "python"
    assert row.id() == 10
    row.set("label", "py")
    row.save()
    assert ORM.for_table("tag").where_equal("tag_id", 10).find_one().get("label") == "py"


def test_explicit_database_handle(db):
    row = ORM.for_table("user", db).find_one(3)
    assert row.database is db
    assert row.get("name") == "Carol"


def test_where_is_an_alias_for_where_equal(db):
    rows = ORM.for_table("user").where("name", "Bob").find_many()
    assert [r.id() for r in rows] == [2]


def test_where_id_is(db):
    row = ORM.for_table("user").where_id_is(3).find_one()
    assert row.get("name") == "Carol"
    assert ORM.for_table("tag").use_id_column("tag_id").where_id_is(10).count() == 1
