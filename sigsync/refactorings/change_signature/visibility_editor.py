"""
VisibilityEditor - sets the visibility modifier of a declaration site.
"""

from typing import TYPE_CHECKING

from .declaration_site import SiteKind
from .visibility import Visibility, VISIBILITY_KEYWORDS
from ...tree.fragment_factory import FragmentFactory
from ...tree.node_kind import NodeKind
from ...tree.syntax_tree import SyntaxTree
from ... import logger

if TYPE_CHECKING:
    from .declaration_site import DeclarationSite


class VisibilityEditor:
    """
    Adds or replaces the visibility keyword of a function, or of a class's
    primary constructor. Other modifiers and annotations keep their order.
    """

    def __init__(self, tree: SyntaxTree, factory: FragmentFactory):
        self.tree = tree
        self.factory = factory

    def apply(self, site: 'DeclarationSite', visibility: Visibility):
        logger.assert_true(not site.is_local, f"Local declaration {site.describe()} has no visibility")

        modifier_list = site.modifier_list()
        if modifier_list is not None:
            self._set_in_list(modifier_list, visibility.keyword)
        elif site.kind == SiteKind.FUNCTION:
            self._add_function_modifier_list(site, visibility.keyword)
        else:
            self._add_constructor_modifier_list(site, visibility.keyword)

    def _set_in_list(self, modifier_list: int, keyword: str):
        existing = [child for child in self.tree.find_children(modifier_list, NodeKind.MODIFIER)
                    if self.tree.leaf_text(child) in VISIBILITY_KEYWORDS]

        if existing:
            first, duplicates = existing[0], existing[1:]
            if self.tree.leaf_text(first) != keyword:
                self.tree.replace(first, self.factory.create_modifier(keyword))
            for duplicate in duplicates:
                self._delete_with_leading_space(duplicate)
            return

        new_modifier = self.factory.create_modifier(keyword)
        first_modifier = self.tree.find_child(modifier_list, NodeKind.MODIFIER)
        if first_modifier is not None:
            # After annotations, ahead of the other modifiers
            self.tree.add_before(new_modifier, first_modifier)
            self.tree.add_after(self.factory.create_whitespace(), new_modifier)
        else:
            self.tree.add_last(modifier_list, self.factory.create_whitespace())
            self.tree.add_last(modifier_list, new_modifier)

    def _delete_with_leading_space(self, modifier: int):
        previous = self.tree.prev_sibling(modifier)
        if previous is not None and self.tree.kind(previous) == NodeKind.WHITESPACE:
            self.tree.delete_range(previous, modifier)
        else:
            self.tree.delete(modifier)

    def _add_function_modifier_list(self, site: 'DeclarationSite', keyword: str):
        modifier_list = self.factory.create_modifier_list([keyword])
        anchor = self.tree.first_child(site.node)
        if self.tree.kind(anchor) == NodeKind.WHITESPACE:
            # Leading indentation stays in front
            anchor = self.tree.next_sibling(anchor)
        self.tree.add_before(modifier_list, anchor)
        self.tree.add_after(self.factory.create_whitespace(), modifier_list)

    def _add_constructor_modifier_list(self, site: 'DeclarationSite', keyword: str):
        modifier_list = self.factory.create_modifier_list(
            [keyword], kind=NodeKind.PRIMARY_CONSTRUCTOR_MODIFIER_LIST)

        constructor_keyword = site.constructor_keyword()
        if constructor_keyword is not None:
            self.tree.add_before(modifier_list, constructor_keyword)
            self.tree.add_after(self.factory.create_whitespace(), modifier_list)
            return

        parameter_list = site.parameter_list()
        if parameter_list is not None:
            previous = self.tree.prev_sibling(parameter_list)
            if previous is None or self.tree.kind(previous) != NodeKind.WHITESPACE:
                self.tree.add_before(self.factory.create_whitespace(), parameter_list)
            self.tree.add_before(modifier_list, parameter_list)
            self.tree.add_before(self.factory.create_whitespace(), parameter_list)
            self.tree.add_before(self.factory.create_keyword('constructor'), parameter_list)
            return

        # No parameter list yet: 'constructor' needs an empty one
        anchors = site.insertion_anchors()
        logger.assert_true(bool(anchors), f"No anchor for a constructor modifier on {site.describe()}")
        fragments = [
            self.factory.create_whitespace(),
            modifier_list,
            self.factory.create_whitespace(),
            self.factory.create_keyword('constructor'),
            self.factory.create_parameter_list('()'),
        ]
        previous = anchors[0]
        for fragment in fragments:
            self.tree.add_after(fragment, previous)
            previous = fragment
