"""Tests for recursive record traversal."""

from content_scanner.walker import MAX_DEPTH, MatchAccumulator, walk_record


def nest(value, levels, container="dict"):
    """Wrap value in `levels` dicts (or lists) so it sits at depth `levels`."""
    for _ in range(levels):
        value = {"k": value} if container == "dict" else [value]
    return value


class TestPaths:
    """Test path construction."""

    def test_nested_object_and_array_path(self):
        record = {
            "fields": {
                "hero": {
                    "items": [{"title": "x"}, {"title": "y"}, {"title": "Acme rocks"}],
                }
            }
        }
        matches = walk_record(record, "acme")
        assert list(matches) == ["fields.hero.items[2].title"]
        assert matches["fields.hero.items[2].title"].value == "Acme rocks"

    def test_bare_scalar_uses_root(self):
        matches = walk_record("Acme", "acme")
        assert list(matches) == ["root"]

    def test_top_level_array_index(self):
        matches = walk_record(["nope", "Acme"], "acme")
        assert list(matches) == ["[1]"]

    def test_identical_content_gets_distinct_paths(self):
        matches = walk_record({"a": "Acme", "b": "Acme"}, "acme")
        assert list(matches) == ["a", "b"]

    def test_equal_but_distinct_objects_are_both_visited(self):
        record = {"a": {"t": "Acme"}, "b": {"t": "Acme"}}
        matches = walk_record(record, "acme")
        assert set(matches) == {"a.t", "b.t"}

    def test_key_containing_dot_does_not_collide_with_nested_path(self):
        matches = walk_record({"a.b": "Acme one", "a": {"b": "Acme two"}}, "acme")
        assert list(matches) == ['["a.b"]', "a.b"]
        assert matches['["a.b"]'].value == "Acme one"
        assert matches["a.b"].value == "Acme two"

    def test_keys_with_brackets_or_empty_are_quoted(self):
        record = {"items": {"x[0]": "Acme", "": "Acme"}, "list": ["Acme"]}
        matches = walk_record(record, "acme")
        assert list(matches) == ['items["x[0]"]', 'items[""]', "list[0]"]


class TestLeaves:
    """Test leaf handling."""

    def test_none_values_are_ignored(self):
        matches = walk_record({"a": None, "b": "Acme"}, "acme")
        assert list(matches) == ["b"]

    def test_number_leaf(self):
        matches = walk_record({"price": 1999}, "99")
        assert matches["price"].value == "1999"
        assert matches["price"].count == 1

    def test_boolean_leaf(self):
        matches = walk_record({"published": True}, "true")
        assert matches["published"].value == "true"

    def test_accumulator_counts_and_positions(self):
        matches = walk_record({"body": "acme, Acme, ACME"}, "Acme")
        acc = matches["body"]
        assert isinstance(acc, MatchAccumulator)
        assert acc.count == 3
        assert acc.positions == [0, 6, 12]

    def test_query_space_matches_entity_space(self):
        matches = walk_record({"body": "Hello&nbsp;world"}, "hello world")
        assert matches["body"].value == "Hello world"

    def test_query_dash_matches_unicode_dash(self):
        matches = walk_record({"years": "2019–2020"}, "2019-2020")
        assert "years" in matches

    def test_blank_target_matches_nothing(self):
        assert walk_record({"a": "x y"}, "   ") == {}

    def test_excluded_positions(self):
        record = {"a": "data-x", "b": "data-y"}
        matches = walk_record(record, "data-", excluded_positions={"a": {0}})
        assert list(matches) == ["b"]


class TestGuards:
    """Test depth and cycle protection."""

    def test_leaf_at_max_depth_is_reported(self):
        matches = walk_record(nest("Acme", MAX_DEPTH), "acme")
        assert len(matches) == 1

    def test_leaf_below_max_depth_is_not_reported(self):
        assert walk_record(nest("Acme", MAX_DEPTH + 1), "acme") == {}

    def test_array_nesting_counts_towards_depth(self):
        assert len(walk_record(nest("Acme", MAX_DEPTH, "list"), "acme")) == 1
        assert walk_record(nest("Acme", MAX_DEPTH + 1, "list"), "acme") == {}

    def test_direct_object_self_reference(self):
        record = {"name": "Acme"}
        record["self"] = record
        matches = walk_record(record, "acme")
        assert list(matches) == ["name"]

    def test_array_self_containment(self):
        items = []
        items.append(items)
        items.append("Acme")
        matches = walk_record({"items": items}, "acme")
        # The list recurses into itself until the depth guard stops it
        assert "items[1]" in matches
        assert "items[0][1]" in matches
        assert len(matches) == MAX_DEPTH - 1

    def test_mutual_object_cycle(self):
        a = {"name": "Acme A"}
        b = {"name": "Acme B", "peer": a}
        a["peer"] = b
        matches = walk_record(a, "acme")
        assert set(matches) == {"name", "peer.name"}
