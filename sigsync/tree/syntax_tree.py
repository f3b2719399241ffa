"""
Index-based syntax tree arena.

Nodes live in a flat list and are addressed by stable integer ids. Parent and
child links are stored as ids, so structural edits only splice the child array
of the affected parent. Ids of every other node stay valid across edits, and
removed nodes remain in the arena as detached fragments.
"""

from typing import Iterable, Iterator, List, Optional

from .node_kind import NodeKind
from .. import logger


class Node:
    """A single arena slot: a leaf with text or a composite with child ids."""

    __slots__ = ('kind', 'text', 'children', 'parent')

    def __init__(self, kind: NodeKind, text: Optional[str] = None):
        self.kind = kind
        self.text = text
        self.children: List[int] = []
        self.parent: Optional[int] = None


class SyntaxTree:
    """
    Mutable arena holding one or more syntax trees.

    Fragments built for insertion are allocated in the same arena as the tree
    they are spliced into, so an edit never copies nodes between arenas.
    """

    def __init__(self):
        self._nodes: List[Node] = []

    def __len__(self) -> int:
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def new_leaf(self, kind: NodeKind, text: str) -> int:
        logger.assert_true(kind.is_leaf, f"{kind.value} is not a leaf kind")
        self._nodes.append(Node(kind, text))
        return len(self._nodes) - 1

    def new_composite(self, kind: NodeKind, children: Iterable[int] = ()) -> int:
        logger.assert_true(not kind.is_leaf, f"{kind.value} is not a composite kind")
        self._nodes.append(Node(kind))
        node_id = len(self._nodes) - 1
        for child in children:
            self.add_last(node_id, child)
        return node_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _node(self, node_id: int) -> Node:
        if node_id < 0 or node_id >= len(self._nodes):
            raise IndexError(f"No node with id {node_id}")
        return self._nodes[node_id]

    def kind(self, node_id: int) -> NodeKind:
        return self._node(node_id).kind

    def leaf_text(self, node_id: int) -> str:
        node = self._node(node_id)
        logger.assert_true(node.text is not None, f"Node {node_id} ({node.kind.value}) is not a leaf")
        return node.text

    def parent(self, node_id: int) -> Optional[int]:
        return self._node(node_id).parent

    def children(self, node_id: int) -> List[int]:
        return list(self._node(node_id).children)

    def first_child(self, node_id: int) -> Optional[int]:
        children = self._node(node_id).children
        return children[0] if children else None

    def find_child(self, node_id: int, *kinds: NodeKind) -> Optional[int]:
        for child in self._node(node_id).children:
            if self._nodes[child].kind in kinds:
                return child
        return None

    def find_children(self, node_id: int, kind: NodeKind) -> List[int]:
        return [c for c in self._node(node_id).children if self._nodes[c].kind == kind]

    def index_in_parent(self, node_id: int) -> int:
        parent = self._node(node_id).parent
        logger.assert_true(parent is not None, f"Node {node_id} is detached")
        return self._nodes[parent].children.index(node_id)

    def next_sibling(self, node_id: int) -> Optional[int]:
        parent = self._node(node_id).parent
        if parent is None:
            return None
        siblings = self._nodes[parent].children
        index = siblings.index(node_id)
        return siblings[index + 1] if index + 1 < len(siblings) else None

    def prev_sibling(self, node_id: int) -> Optional[int]:
        parent = self._node(node_id).parent
        if parent is None:
            return None
        siblings = self._nodes[parent].children
        index = siblings.index(node_id)
        return siblings[index - 1] if index > 0 else None

    def iter_leaves(self, node_id: int) -> Iterator[int]:
        stack = [node_id]
        while stack:
            current = stack.pop()
            node = self._nodes[current]
            if node.text is not None:
                yield current
            else:
                stack.extend(reversed(node.children))

    def text(self, node_id: int) -> str:
        """Print the subtree rooted at node_id."""
        return ''.join(self._nodes[leaf].text for leaf in self.iter_leaves(node_id))

    def dump(self, node_id: int, indent: int = 0) -> str:
        """Readable outline of a subtree, for logs and test failures."""
        node = self._node(node_id)
        pad = '  ' * indent
        if node.text is not None:
            return f"{pad}{node.kind.value}#{node_id} {node.text!r}"
        lines = [f"{pad}{node.kind.value}#{node_id}"]
        lines.extend(self.dump(child, indent + 1) for child in node.children)
        return '\n'.join(lines)

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------

    def _check_insertable(self, parent: int, new: int):
        new_node = self._node(new)
        logger.assert_true(new_node.parent is None,
                           f"Node {new} is already attached to {new_node.parent}")
        logger.assert_true(self._node(parent).text is None,
                           f"Cannot insert into leaf node {parent}")
        ancestor: Optional[int] = parent
        while ancestor is not None:
            logger.assert_true(ancestor != new, f"Node {new} cannot be inserted into its own subtree")
            ancestor = self._nodes[ancestor].parent

    def _insert_at(self, parent: int, index: int, new: int):
        self._check_insertable(parent, new)
        self._nodes[parent].children.insert(index, new)
        self._nodes[new].parent = parent
        logger.debug(f"Inserted {self._nodes[new].kind.value}#{new} into "
                     f"{self._nodes[parent].kind.value}#{parent} at {index}")

    def add_first(self, parent: int, new: int):
        self._insert_at(parent, 0, new)

    def add_last(self, parent: int, new: int):
        self._insert_at(parent, len(self._node(parent).children), new)

    def add_before(self, new: int, anchor: int):
        parent = self._node(anchor).parent
        logger.assert_true(parent is not None, f"Anchor {anchor} is detached")
        self._insert_at(parent, self.index_in_parent(anchor), new)

    def add_after(self, new: int, anchor: int):
        parent = self._node(anchor).parent
        logger.assert_true(parent is not None, f"Anchor {anchor} is detached")
        self._insert_at(parent, self.index_in_parent(anchor) + 1, new)

    def replace(self, old: int, new: int):
        """Put new in the slot old occupies; old becomes a detached fragment."""
        if old == new:
            return
        parent = self._node(old).parent
        logger.assert_true(parent is not None, f"Cannot replace detached node {old}")
        self._check_insertable(parent, new)
        siblings = self._nodes[parent].children
        siblings[siblings.index(old)] = new
        self._nodes[new].parent = parent
        self._nodes[old].parent = None
        logger.debug(f"Replaced {self._nodes[old].kind.value}#{old} with "
                     f"{self._nodes[new].kind.value}#{new} {self.text(new)!r}")

    def delete(self, node_id: int):
        parent = self._node(node_id).parent
        logger.assert_true(parent is not None, f"Cannot delete detached node {node_id}")
        self._nodes[parent].children.remove(node_id)
        self._nodes[node_id].parent = None
        logger.debug(f"Deleted {self._nodes[node_id].kind.value}#{node_id} {self.text(node_id)!r}")

    def delete_range(self, first: int, last: int):
        """Delete the siblings from first through last, inclusive."""
        parent = self._node(first).parent
        logger.assert_true(parent is not None and parent == self._node(last).parent,
                           f"Nodes {first} and {last} are not siblings")
        siblings = self._nodes[parent].children
        start = siblings.index(first)
        end = siblings.index(last)
        logger.assert_true(start <= end, f"Node {first} does not precede {last}")
        for node_id in siblings[start:end + 1]:
            self._nodes[node_id].parent = None
        del siblings[start:end + 1]
        logger.debug(f"Deleted {end - start + 1} node(s) from {self._nodes[parent].kind.value}#{parent}")
