"""
Unit tests for element collection checks
"""

import pytest

from kanvas.elements.models import parse_elements
from kanvas.elements.validation import (
    descendant_ids,
    find_problems,
    index_elements,
    is_descendant,
    validate_collection,
)
from kanvas.exceptions import ElementCollectionError


def tree(*items):
    return parse_elements(list(items))


class TestDescendants:
    """Test cases for subtree collection"""

    def setup_method(self):
        """Set up test fixtures"""
        self.elements = tree(
            {"id": "root", "type": "container", "children": ["mid", "leaf"]},
            {"id": "mid", "type": "container", "parentId": "root", "children": ["deep"]},
            {"id": "deep", "type": "text", "parentId": "mid"},
            {"id": "leaf", "type": "image", "parentId": "root"},
            {"id": "other", "type": "text"},
        )
        self.index = index_elements(self.elements)

    def test_collects_whole_subtree(self):
        """Test every nested element is found, root first"""
        found = descendant_ids(self.index, "root")

        assert found[0] == "root"
        assert sorted(found) == ["deep", "leaf", "mid", "root"]

    def test_leaf_has_only_itself(self):
        assert descendant_ids(self.index, "deep") == ["deep"]

    def test_missing_root(self):
        assert descendant_ids(self.index, "ghost") == []

    def test_parent_id_links_count(self):
        """Test an element pointing at a container is part of its subtree"""
        elements = tree(
            {"id": "c", "type": "container", "children": []},
            {"id": "orphan", "type": "text", "parentId": "c"},
        )

        assert descendant_ids(index_elements(elements), "c") == ["c", "orphan"]

    def test_cycle_terminates(self):
        """Test a malformed cycle does not loop forever"""
        elements = tree(
            {"id": "a", "type": "container", "parentId": "b", "children": ["b"]},
            {"id": "b", "type": "container", "parentId": "a", "children": ["a"]},
        )

        assert sorted(descendant_ids(index_elements(elements), "a")) == ["a", "b"]

    def test_deep_nesting(self):
        """Test depth does not hit the recursion limit"""
        depth = 3000
        items = []
        for i in range(depth):
            item = {"id": f"n{i}", "type": "container", "children": [f"n{i + 1}"] if i + 1 < depth else []}
            if i:
                item["parentId"] = f"n{i - 1}"
            items.append(item)

        found = descendant_ids(index_elements(tree(*items)), "n0")

        assert len(found) == depth

    def test_is_descendant(self):
        assert is_descendant(self.index, "root", "deep")
        assert not is_descendant(self.index, "mid", "leaf")


class TestFindProblems:
    """Test cases for parent/children consistency"""

    def test_consistent_tree(self):
        elements = tree(
            {"id": "c", "type": "container", "children": ["t"]},
            {"id": "t", "type": "text", "parentId": "c"},
        )

        assert find_problems(elements) == []
        validate_collection(elements)

    @pytest.mark.parametrize("items,fragment", [
        (
            [{"id": "a", "type": "text"}, {"id": "a", "type": "image"}],
            "duplicate element id 'a'",
        ),
        (
            [{"id": "c", "type": "container", "children": ["ghost"]}],
            "lists missing child 'ghost'",
        ),
        (
            [{"id": "c", "type": "container", "children": ["t"]}, {"id": "t", "type": "text"}],
            "but has parentId 'None'",
        ),
        (
            [{"id": "t", "type": "text", "parentId": "ghost"}],
            "references missing parent 'ghost'",
        ),
        (
            [{"id": "p", "type": "text"}, {"id": "t", "type": "text", "parentId": "p"}],
            "non-container parent 'p'",
        ),
        (
            [{"id": "c", "type": "container"}, {"id": "t", "type": "text", "parentId": "c"}],
            "is not listed in its parent 'c'",
        ),
        (
            [
                {"id": "c1", "type": "container", "children": ["t"]},
                {"id": "c2", "type": "container", "children": ["t"]},
                {"id": "t", "type": "text", "parentId": "c1"},
            ],
            "is listed by containers 'c1' and 'c2'",
        ),
        (
            [
                {"id": "a", "type": "container", "parentId": "b", "children": ["b"]},
                {"id": "b", "type": "container", "parentId": "a", "children": ["a"]},
            ],
            "is its own ancestor",
        ),
    ])
    def test_detects_problem(self, items, fragment):
        """Test each broken invariant is reported"""
        problems = find_problems(tree(*items))

        assert any(fragment in p for p in problems), problems

    def test_validate_raises_with_all_problems(self):
        elements = tree(
            {"id": "c", "type": "container", "children": ["ghost"]},
            {"id": "t", "type": "text", "parentId": "nowhere"},
        )

        with pytest.raises(ElementCollectionError) as exc_info:
            validate_collection(elements)

        assert len(exc_info.value.problems) == 2
