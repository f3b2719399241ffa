import pytest
from sigsync.tree import NodeKind, SyntaxTree


def _parameter(tree):
    """x: Int as a hand-built VALUE_PARAMETER."""
    name = tree.new_leaf(NodeKind.IDENTIFIER, 'x')
    colon = tree.new_leaf(NodeKind.PUNCTUATION, ':')
    space = tree.new_leaf(NodeKind.WHITESPACE, ' ')
    type_ref = tree.new_leaf(NodeKind.TYPE_REFERENCE, 'Int')
    root = tree.new_composite(NodeKind.VALUE_PARAMETER, [name, colon, space, type_ref])
    return root, name, colon, space, type_ref


class TestConstruction:
    def test_new_leaf_returns_sequential_ids(self, tree):
        first = tree.new_leaf(NodeKind.IDENTIFIER, 'a')
        second = tree.new_leaf(NodeKind.IDENTIFIER, 'b')
        assert second == first + 1
        assert len(tree) == 2

    def test_new_composite_adopts_children(self, tree):
        root, name, colon, space, type_ref = _parameter(tree)
        assert tree.children(root) == [name, colon, space, type_ref]
        assert all(tree.parent(child) == root for child in (name, colon, space, type_ref))
        assert tree.parent(root) is None

    def test_new_leaf_rejects_composite_kind(self, tree):
        with pytest.raises(RuntimeError) as exc_info:
            tree.new_leaf(NodeKind.FUNCTION, 'fun')
        assert "not a leaf kind" in str(exc_info.value)

    def test_new_composite_rejects_leaf_kind(self, tree):
        with pytest.raises(RuntimeError):
            tree.new_composite(NodeKind.IDENTIFIER)

    def test_unknown_id_raises_index_error(self, tree):
        with pytest.raises(IndexError):
            tree.kind(42)


class TestQueries:
    def test_text_concatenates_leaves_in_order(self, tree):
        root, *_ = _parameter(tree)
        assert tree.text(root) == 'x: Int'

    def test_children_returns_a_copy(self, tree):
        root, *_ = _parameter(tree)
        tree.children(root).clear()
        assert len(tree.children(root)) == 4

    def test_find_child_matches_any_of_the_kinds(self, tree):
        root, name, colon, space, type_ref = _parameter(tree)
        assert tree.find_child(root, NodeKind.TYPE_REFERENCE) == type_ref
        assert tree.find_child(root, NodeKind.VAL_VAR, NodeKind.IDENTIFIER) == name
        assert tree.find_child(root, NodeKind.VAL_VAR) is None

    def test_siblings(self, tree):
        root, name, colon, space, type_ref = _parameter(tree)
        assert tree.next_sibling(name) == colon
        assert tree.prev_sibling(colon) == name
        assert tree.prev_sibling(name) is None
        assert tree.next_sibling(type_ref) is None
        assert tree.next_sibling(root) is None

    def test_leaf_text_of_composite_raises(self, tree):
        root, *_ = _parameter(tree)
        with pytest.raises(RuntimeError):
            tree.leaf_text(root)

    def test_dump_lists_every_node(self, tree):
        root, *_ = _parameter(tree)
        dump = tree.dump(root)
        assert dump.splitlines()[0] == f"value_parameter#{root}"
        assert "type_reference" in dump and "'Int'" in dump


class TestEdits:
    def test_replace_swaps_slot_and_detaches_old(self, tree):
        root, name, colon, space, type_ref = _parameter(tree)
        new_type = tree.new_leaf(NodeKind.TYPE_REFERENCE, 'Long')

        tree.replace(type_ref, new_type)

        assert tree.text(root) == 'x: Long'
        assert tree.parent(type_ref) is None
        assert tree.parent(new_type) == root
        # Untouched ids keep pointing at the same nodes
        assert tree.leaf_text(name) == 'x'
        assert tree.leaf_text(type_ref) == 'Int'

    def test_replace_with_itself_is_noop(self, tree):
        root, name, *_ = _parameter(tree)
        tree.replace(name, name)
        assert tree.text(root) == 'x: Int'

    def test_replace_with_attached_node_raises(self, tree):
        root, name, colon, *_ = _parameter(tree)
        with pytest.raises(RuntimeError) as exc_info:
            tree.replace(name, colon)
        assert "already attached" in str(exc_info.value)

    def test_delete_detaches_node(self, tree):
        root, name, colon, space, type_ref = _parameter(tree)
        tree.delete(space)
        assert tree.text(root) == 'x:Int'
        assert tree.parent(space) is None

    def test_delete_detached_node_raises(self, tree):
        orphan = tree.new_leaf(NodeKind.WHITESPACE, ' ')
        with pytest.raises(RuntimeError):
            tree.delete(orphan)

    def test_delete_range_removes_inclusive_span(self, tree):
        root, name, colon, space, type_ref = _parameter(tree)
        tree.delete_range(colon, type_ref)
        assert tree.text(root) == 'x'
        assert tree.children(root) == [name]

    def test_delete_range_requires_order(self, tree):
        root, name, colon, space, type_ref = _parameter(tree)
        with pytest.raises(RuntimeError):
            tree.delete_range(type_ref, name)
        assert tree.text(root) == 'x: Int'

    def test_add_before_and_after(self, tree):
        root, name, colon, space, type_ref = _parameter(tree)
        keyword = tree.new_leaf(NodeKind.VAL_VAR, 'val')
        gap = tree.new_leaf(NodeKind.WHITESPACE, ' ')
        nullable = tree.new_leaf(NodeKind.PUNCTUATION, '?')

        tree.add_before(keyword, name)
        tree.add_after(gap, keyword)
        tree.add_after(nullable, type_ref)

        assert tree.text(root) == 'val x: Int?'
        assert tree.index_in_parent(name) == 2

    def test_add_first_and_last(self, tree):
        root, *_ = _parameter(tree)
        tree.add_first(root, tree.new_leaf(NodeKind.WHITESPACE, '  '))
        tree.add_last(root, tree.new_leaf(NodeKind.DEFAULT_VALUE, ' = 1'))
        assert tree.text(root) == '  x: Int = 1'

    def test_cannot_insert_into_leaf(self, tree):
        leaf = tree.new_leaf(NodeKind.IDENTIFIER, 'a')
        with pytest.raises(RuntimeError):
            tree.add_last(leaf, tree.new_leaf(NodeKind.IDENTIFIER, 'b'))

    def test_cannot_insert_node_into_its_own_subtree(self, tree):
        root, *_ = _parameter(tree)
        outer = tree.new_composite(NodeKind.VALUE_PARAMETER_LIST, [root])
        tree.delete(root)
        inner = tree.new_composite(NodeKind.MODIFIER_LIST)
        tree.add_last(root, inner)
        with pytest.raises(RuntimeError) as exc_info:
            tree.add_last(inner, root)
        assert "own subtree" in str(exc_info.value)
        assert tree.children(outer) == []
