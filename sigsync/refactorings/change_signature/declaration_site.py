"""
DeclarationSite - typed view over a function or primary-constructor declaration.
"""

from enum import Enum
from typing import List, Optional, Tuple

from ...tree.node_kind import NodeKind
from ...tree.syntax_tree import SyntaxTree
from ... import logger


class SiteKind(Enum):
    FUNCTION = "function"
    CONSTRUCTOR = "constructor"


class _Variant:
    """Per-kind layout of a declaration node."""

    def __init__(self, node_kind: NodeKind, has_return_type: bool,
                 modifier_list_kind: NodeKind, anchor_kinds: Tuple[NodeKind, ...]):
        self.node_kind = node_kind
        self.has_return_type = has_return_type
        self.modifier_list_kind = modifier_list_kind
        self.anchor_kinds = anchor_kinds


# Anchor kinds are in preference order. A function's type parameters precede
# its name, so only the name can anchor a function's parameter list.
_VARIANTS = {
    SiteKind.FUNCTION: _Variant(
        node_kind=NodeKind.FUNCTION,
        has_return_type=True,
        modifier_list_kind=NodeKind.MODIFIER_LIST,
        anchor_kinds=(NodeKind.IDENTIFIER,),
    ),
    SiteKind.CONSTRUCTOR: _Variant(
        node_kind=NodeKind.CLASS,
        has_return_type=False,
        modifier_list_kind=NodeKind.PRIMARY_CONSTRUCTOR_MODIFIER_LIST,
        anchor_kinds=(NodeKind.TYPE_PARAMETER_LIST, NodeKind.IDENTIFIER),
    ),
}


class DeclarationSite:
    """
    One declaration being resynchronized with a change descriptor.

    Attributes:
        kind: FUNCTION for a function declaration, CONSTRUCTOR for the primary
              constructor of a class declaration
        tree: Arena the declaration lives in; every edit goes through it
        node: Id of the FUNCTION or CLASS node
        is_local: True for declarations inside a function body
        is_inherited: True when the site overrides the declaration the change
                      was requested on
    """

    def __init__(self, kind: SiteKind, tree: SyntaxTree, node: int,
                 is_local: bool = False, is_inherited: bool = False):
        if not isinstance(kind, SiteKind):
            raise TypeError(f"kind must be SiteKind enum, got {type(kind)}")
        variant = _VARIANTS[kind]
        actual = tree.kind(node)
        if actual != variant.node_kind:
            raise ValueError(f"{kind.value} site needs a {variant.node_kind.value} node, got {actual.value}")

        self.kind = kind
        self.tree = tree
        self.node = node
        self.is_local = is_local
        self.is_inherited = is_inherited
        self._variant = variant

        logger.assert_true(len(tree.find_children(node, NodeKind.VALUE_PARAMETER_LIST)) <= 1,
                           f"Declaration {node} has more than one parameter list")

    @classmethod
    def for_declaration(cls, tree: SyntaxTree, node: int,
                        is_local: bool = False, is_inherited: bool = False) -> 'DeclarationSite':
        """Pick the site kind from the declaration node's kind."""
        for kind, variant in _VARIANTS.items():
            if variant.node_kind == tree.kind(node):
                return cls(kind, tree, node, is_local, is_inherited)
        raise ValueError(f"Node {node} ({tree.kind(node).value}) is not a function or class declaration")

    def name_identifier(self) -> Optional[int]:
        return self.tree.find_child(self.node, NodeKind.IDENTIFIER)

    def name(self) -> Optional[str]:
        identifier = self.name_identifier()
        return self.tree.leaf_text(identifier) if identifier is not None else None

    def type_reference(self) -> Optional[int]:
        if not self._variant.has_return_type:
            return None
        return self.tree.find_child(self.node, NodeKind.TYPE_REFERENCE)

    def type_parameter_list(self) -> Optional[int]:
        return self.tree.find_child(self.node, NodeKind.TYPE_PARAMETER_LIST)

    def parameter_list(self) -> Optional[int]:
        return self.tree.find_child(self.node, NodeKind.VALUE_PARAMETER_LIST)

    def parameters(self) -> List[int]:
        parameter_list = self.parameter_list()
        if parameter_list is None:
            return []
        return self.tree.find_children(parameter_list, NodeKind.VALUE_PARAMETER)

    def parameter_names(self) -> List[Optional[str]]:
        names = []
        for parameter in self.parameters():
            identifier = self.tree.find_child(parameter, NodeKind.IDENTIFIER)
            names.append(self.tree.leaf_text(identifier) if identifier is not None else None)
        return names

    def modifier_list(self) -> Optional[int]:
        return self.tree.find_child(self.node, self._variant.modifier_list_kind)

    def constructor_keyword(self) -> Optional[int]:
        if self.kind != SiteKind.CONSTRUCTOR:
            return None
        for keyword in self.tree.find_children(self.node, NodeKind.KEYWORD):
            if self.tree.leaf_text(keyword) == 'constructor':
                return keyword
        return None

    def insertion_anchors(self) -> List[int]:
        """Existing nodes a new parameter list may follow, most preferred first."""
        anchors = []
        for anchor_kind in self._variant.anchor_kinds:
            anchor = self.tree.find_child(self.node, anchor_kind)
            if anchor is not None:
                anchors.append(anchor)
        return anchors

    def text(self) -> str:
        return self.tree.text(self.node)

    def describe(self) -> str:
        flags = [flag for flag, on in (('local', self.is_local), ('inherited', self.is_inherited)) if on]
        suffix = f" [{', '.join(flags)}]" if flags else ''
        return f"{self.kind.value} {self.name() or '<anonymous>'}#{self.node}{suffix}"

    def __repr__(self) -> str:
        return f"DeclarationSite({self.describe()})"
