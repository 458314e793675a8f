"""Tests for the schema records."""

import pytest

from erdplace.schema.abstraction import Bounds, Relationship, Schema, Table



class TestSchemaFromDict:
    """Tests for Schema.from_dict."""

    def test_parses_tables_and_relationships(self, two_table_schema):
        schema = Schema.from_dict(two_table_schema)

        assert schema.table_names == ["A", "B"]
        assert len(schema.get_table("A").columns) == 3
        assert schema.relationships[0].from_table == "A"
        assert schema.relationships[0].to_table == "B"

    def test_none_is_empty(self):
        schema = Schema.from_dict(None)
        assert schema.tables == []
        assert schema.relationships == []

    def test_missing_keys(self):
        assert Schema.from_dict({}).tables == []

    def test_duplicate_names(self, make_table):
        with pytest.raises(ValueError, match="Duplicate"):
            Schema.from_dict({"tables": [make_table("A"), make_table("A")]})

    def test_table_without_name(self):
        with pytest.raises(ValueError, match="no name"):
            Schema.from_dict({"tables": [{"columns": []}]})

    def test_tables_not_a_list(self):
        with pytest.raises(ValueError):
            Schema.from_dict({"tables": {"A": {}}})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            Schema.from_dict(["A"])

    def test_coerce_keeps_schema(self, shop):
        assert Schema.coerce(shop) is shop

    def test_valid_relationships_drop_dangling(self, dangling_schema):
        schema = Schema.from_dict(dangling_schema)
        assert schema.valid_relationships() == []
        assert len(schema.relationships) == 2

    def test_relationship_records_pass_through(self, shop_schema):
        schema = Schema.from_dict(shop_schema)
        assert schema.relationship_records() == shop_schema["relationships"]

    def test_relationship_records_for_built_schema(self):
        schema = Schema(tables=[Table("A"), Table("B")],
                        relationships=[Relationship("A", "B", "b_id", "id")])
        assert schema.relationship_records() == [
            {"from": {"table": "A", "column": "b_id"}, "to": {"table": "B", "column": "id"}}
        ]


class TestRelationship:
    """Tests for relationship normalization."""

    def test_nested_form(self, make_relationship):
        rel = Relationship.from_dict(make_relationship("a", "b", "b_id", "id"))
        assert (rel.from_table, rel.to_table) == ("a", "b")
        assert (rel.from_column, rel.to_column) == ("b_id", "id")

    def test_flat_form(self):
        rel = Relationship.from_dict({"fromTable": "a", "toTable": "b"})
        assert (rel.from_table, rel.to_table) == ("a", "b")

    def test_source_target_form(self):
        rel = Relationship.from_dict({"sourceTable": "a", "targetTable": "b",
                                      "sourceColumn": "x"})
        assert (rel.from_table, rel.to_table, rel.from_column) == ("a", "b", "x")

    def test_unusable_record(self):
        rel = Relationship.from_dict("a->b")
        assert rel.from_table is None
        assert not rel.connects_known({"a", "b"})

    def test_non_string_endpoints_are_unresolvable(self):
        """A list or number in place of a table name never reaches the graph."""
        rel = Relationship.from_dict({"from": {"table": ["a"], "column": 1},
                                      "to": {"table": "b"}})
        assert rel.from_table is None
        assert rel.from_column is None
        assert rel.to_table == "b"
        assert not rel.connects_known({"a", "b"})

        rel = Relationship.from_dict({"fromTable": 7, "toTable": {"name": "b"}})
        assert (rel.from_table, rel.to_table) == (None, None)

    def test_self_loop(self):
        assert Relationship("a", "a").is_self_loop
        assert not Relationship("a", "b").is_self_loop
        assert not Relationship(None, None).is_self_loop


class TestTableAndBounds:
    """Tests for Table and Bounds records."""

    def test_table_keeps_extra_fields(self):
        table = Table.from_dict({"name": "t", "columns": [], "comment": "lookup"})
        assert table.to_dict()["comment"] == "lookup"

    def test_table_to_dict_without_fields(self):
        assert Table("t").to_dict() == {"name": "t", "columns": []}

    def test_bounds_default(self):
        assert Bounds.from_value(None) == Bounds(1200.0, 800.0)

    def test_bounds_from_dict(self):
        assert Bounds.from_value({"width": 800, "height": 600}) == Bounds(800.0, 600.0)
        assert Bounds.from_value({"width": 900}) == Bounds(900.0, 800.0)

    def test_bounds_copy(self):
        original = Bounds(10, 20)
        copy = Bounds.from_value(original)
        assert copy == original
        assert copy is not original

    def test_bounds_invalid(self):
        with pytest.raises(ValueError):
            Bounds.from_value("big")

    def test_bounds_non_numeric_fields(self):
        with pytest.raises(ValueError, match="numeric"):
            Bounds.from_value({"width": None})
        with pytest.raises(ValueError, match="numeric"):
            Bounds.from_value({"width": 800, "height": "tall"})
