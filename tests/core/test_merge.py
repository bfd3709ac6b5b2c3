"""Tests for the filter merge engine."""

import copy

from querybuilder.core.expression import ExpressionKind, kind_of
from querybuilder.core.merge import merge_filters, merge_many


class TestKindOf:
    """Test classification of filter values."""

    def test_literals(self):
        """Scalars, None and sequences are literals."""
        assert kind_of(5) is ExpressionKind.LITERAL
        assert kind_of("text") is ExpressionKind.LITERAL
        assert kind_of(None) is ExpressionKind.LITERAL
        assert kind_of([1, 2]) is ExpressionKind.LITERAL
        assert kind_of(({"a": 1},)) is ExpressionKind.LITERAL

    def test_operator_mappings(self):
        """Mappings of comparator keys only are operators."""
        assert kind_of({"$gt": 1, "$lt": 5}) is ExpressionKind.OPERATOR
        assert kind_of({"$in": [1, 2]}) is ExpressionKind.OPERATOR

    def test_documents(self):
        """Any other mapping, combinators included, is a document."""
        assert kind_of({"$and": []}) is ExpressionKind.DOCUMENT
        assert kind_of({"$or": []}) is ExpressionKind.DOCUMENT
        assert kind_of({"age": 5}) is ExpressionKind.DOCUMENT
        assert kind_of({"$or": [], "age": 5}) is ExpressionKind.DOCUMENT
        assert kind_of({"$gt": 1, "age": 5}) is ExpressionKind.DOCUMENT
        assert kind_of({}) is ExpressionKind.DOCUMENT

    def test_kinds_are_closed(self):
        """Only the three kinds the merge engine dispatches on exist."""
        assert {kind.value for kind in ExpressionKind} == {"literal", "operator", "document"}


class TestMergeFilters:
    """Test merging of two filter values."""

    def test_merge_with_itself_is_identity(self):
        """Merging a filter with itself returns it once."""
        a = {"age": {"$gt": 18}, "$or": [{"x": 1}, {"y": 2}]}
        assert merge_filters(a, copy.deepcopy(a)) == [a]

    def test_disjoint_keys_are_combined(self):
        """Different keys end up in one filter."""
        assert merge_filters({"a": 1}, {"b": 2}) == [{"a": 1, "b": 2}]

    def test_equal_keys_kept_once(self):
        """Keys with equal values are kept once."""
        assert merge_filters({"a": 1, "b": 2}, {"a": 1, "c": 3}) == [
            {"a": 1, "b": 2, "c": 3}
        ]

    def test_conflicting_literals_produce_residue(self):
        """Two literals on one key leave a residue."""
        assert merge_filters({"city": "Pune"}, {"city": "Delhi"}) == [
            {"city": "Pune"},
            {"city": "Delhi"},
        ]

    def test_operators_on_same_field_are_combined(self):
        """Different operators on one field share a predicate."""
        result = merge_filters({"age": {"$gt": 18}}, {"age": {"$lt": 65}})
        assert result == [{"age": {"$gt": 18, "$lt": 65}}]

    def test_same_operator_with_different_values(self):
        """The same operator with another value goes to the residue."""
        result = merge_filters({"age": {"$gt": 18}}, {"age": {"$gt": 21}, "x": 1})
        assert result == [{"age": {"$gt": 18}, "x": 1}, {"age": {"$gt": 21}}]

    def test_literal_and_operator_on_same_field(self):
        """The mapping side is kept in the merged filter."""
        result = merge_filters({"age": 30}, {"age": {"$gt": 18}})
        assert result == [{"age": {"$gt": 18}}, {"age": 30}]

    def test_in_lists_are_unioned(self):
        """Two $in lists on one field are unioned."""
        result = merge_filters(
            {"tags": {"$in": ["a", "b"]}},
            {"tags": {"$in": ["b", "c"]}},
        )
        assert result == [{"tags": {"$in": ["a", "b", "c"]}}]

    def test_in_union_keeps_other_operators(self):
        """$in union leaves the other operators merged."""
        result = merge_filters(
            {"tags": {"$in": ["a"], "$ne": "x"}},
            {"tags": {"$in": ["b"], "$exists": True}},
        )
        assert result == [{"tags": {"$in": ["a", "b"], "$ne": "x", "$exists": True}}]

    def test_inputs_are_not_mutated(self):
        """Both operands are left untouched."""
        j1 = {"tags": {"$in": ["a"]}, "age": {"$gt": 1}}
        j2 = {"tags": {"$in": ["b"]}, "age": {"$lt": 9}}
        j1_before = copy.deepcopy(j1)
        j2_before = copy.deepcopy(j2)
        merge_filters(j1, j2)
        assert j1 == j1_before
        assert j2 == j2_before

    def test_non_mappings(self):
        """Non-mappings are returned as they are, mappings first."""
        assert merge_filters(1, 2) == [1, 2]
        assert merge_filters({"a": 1}, 5) == [{"a": 1}, 5]
        assert merge_filters(5, {"a": 1}) == [{"a": 1}, 5]
        assert merge_filters([1], [1]) == [[1]]

    def test_different_lists_are_literals(self):
        """Two different lists on one key are kept apart, never merged item-wise."""
        result = merge_filters({"$or": [{"a": 1}]}, {"$or": [{"b": 2}]})
        assert result == [{"$or": [{"a": 1}]}, {"$or": [{"b": 2}]}]


class TestMergeMany:
    """Test merging of any number of filters."""

    def test_empty_and_single(self):
        """Empty and single inputs are returned as new lists."""
        assert merge_many([]) == []
        assert merge_many([{"a": 1}]) == [{"a": 1}]

    def test_all_mergeable(self):
        """Mergeable filters collapse into one."""
        result = merge_many([{"a": 1}, {"b": {"$gt": 2}}, {"b": {"$lt": 9}}])
        assert result == [{"a": 1, "b": {"$gt": 2, "$lt": 9}}]

    def test_irreconcilable_values_become_residues(self):
        """Each irreconcilable value becomes its own residue."""
        result = merge_many([{"a": 1}, {"a": 2}, {"a": 3}])
        assert result == [{"a": 1}, {"a": 2}, {"a": 3}]

    def test_residues_are_merged_again(self):
        """Residues are merged among themselves."""
        result = merge_many([{"a": 1, "b": 1}, {"a": 2}, {"a": 2, "c": 3}])
        assert result == [{"a": 1, "b": 1, "c": 3}, {"a": 2}]

    def test_in_lists_across_many(self):
        """$in lists are unioned across many filters."""
        result = merge_many(
            [
                {"t": {"$in": [1, 2]}},
                {"t": {"$in": [2, 3]}},
                {"t": {"$in": [4, 1]}},
            ]
        )
        assert result == [{"t": {"$in": [1, 2, 3, 4]}}]
