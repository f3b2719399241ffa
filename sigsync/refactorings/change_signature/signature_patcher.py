"""
SignaturePatcher - resynchronizes one declaration with a change descriptor.
"""

from typing import List, Optional

from .change_descriptor import ChangeDescriptor
from .declaration_site import DeclarationSite, SiteKind
from .parameter_editor import ParameterEditor, PreparedParameter
from .parameter_serializer import ParameterListSerializer
from .visibility_editor import VisibilityEditor
from ...config import SigSyncConfig
from ...result import PatchResult
from ...tree.fragment_factory import FragmentFactory
from ...tree.node_kind import NodeKind
from ...tree.syntax_tree import SyntaxTree
from ... import logger


class _PreparedEdits:
    """Detached fragments built before the first edit touches the tree."""

    def __init__(self):
        self.name_identifier: Optional[int] = None
        self.return_type: Optional[int] = None
        self.clear_return_type = False
        self.parameter_list: Optional[int] = None
        self.parameters: List[PreparedParameter] = []


class SignaturePatcher:
    """
    Applies a ChangeDescriptor to one DeclarationSite.

    Edits run in a fixed order: rename, return type, parameters, visibility.
    Each step touches a disjoint part of the declaration and leaves the rest
    of the tree as it was. Everything that can fail (anchor lookup, fragment
    parsing, the positional parameter precondition) is settled before the
    first edit, so a failed call leaves the tree untouched.

    Usage:
        patcher = SignaturePatcher(tree)
        result = patcher.apply(site, descriptor)
    """

    def __init__(self, tree: SyntaxTree,
                 factory: Optional[FragmentFactory] = None,
                 serializer: Optional[ParameterListSerializer] = None,
                 implicit_return_type: Optional[str] = None):
        self.tree = tree
        self.factory = factory or FragmentFactory(tree)
        self.serializer = serializer or ParameterListSerializer()
        if implicit_return_type is None:
            implicit_return_type = SigSyncConfig().implicit_return_type
        self.implicit_return_type = implicit_return_type
        self.parameter_editor = ParameterEditor(tree, self.factory)
        self.visibility_editor = VisibilityEditor(tree, self.factory)

    def apply(self, site: DeclarationSite, descriptor: ChangeDescriptor) -> PatchResult:
        logger.assert_true(site.tree is self.tree, f"{site.describe()} belongs to a different tree")
        logger.info(f"Resynchronizing {site.describe()}")

        missing_anchor = self._find_missing_anchor(site, descriptor)
        if missing_anchor:
            logger.warning(f"Cannot patch {site.describe()}: {missing_anchor}")
            return PatchResult.anchor_not_found(missing_anchor)

        prepared = self._prepare(site, descriptor)
        steps: List[str] = []

        if prepared.name_identifier is not None:
            self._rename(site, prepared.name_identifier)
            steps.append('name')

        if prepared.return_type is not None or prepared.clear_return_type:
            self._change_return_type(site, prepared.return_type)
            steps.append('return_type')

        if descriptor.parameter_set_or_order_changed:
            self._replace_parameter_list(site, prepared.parameter_list)
            steps.append('parameter_list')
        elif descriptor.ordered_parameters:
            for parameter, parameter_descriptor, parameter_fragments in zip(
                    site.parameters(), descriptor.ordered_parameters, prepared.parameters):
                self.parameter_editor.edit(parameter, parameter_descriptor, parameter_fragments)
            steps.append('parameters')

        if descriptor.visibility_changed:
            if site.is_local:
                logger.debug(f"Skipping visibility change on local {site.describe()}")
            else:
                self.visibility_editor.apply(site, descriptor.new_visibility)
                steps.append('visibility')

        result = PatchResult.success(steps)
        logger.info(f"{site.describe()}: {result.message}")
        return result

    # ------------------------------------------------------------------
    # Checks and preparation
    # ------------------------------------------------------------------

    def _find_missing_anchor(self, site: DeclarationSite, descriptor: ChangeDescriptor) -> Optional[str]:
        if site.insertion_anchors():
            return None

        if descriptor.parameter_set_or_order_changed and site.parameter_list() is None:
            return f"no parameter list and no insertion anchor on {site.describe()}"

        if (site.kind == SiteKind.CONSTRUCTOR and descriptor.visibility_changed and not site.is_local
                and site.modifier_list() is None and site.constructor_keyword() is None
                and site.parameter_list() is None):
            return f"no place for a constructor modifier on {site.describe()}"

        if (site.kind == SiteKind.FUNCTION and descriptor.return_type_changed
                and not self._is_implicit(descriptor.new_return_type_text)
                and site.type_reference() is None and site.parameter_list() is None):
            return f"no place for a return type on {site.describe()}"

        return None

    def _prepare(self, site: DeclarationSite, descriptor: ChangeDescriptor) -> _PreparedEdits:
        prepared = _PreparedEdits()

        # A class name is not part of its constructor's signature
        if descriptor.name_changed and site.kind == SiteKind.FUNCTION and site.name_identifier() is not None:
            prepared.name_identifier = self.factory.create_identifier(descriptor.new_name)

        if descriptor.return_type_changed and site.kind == SiteKind.FUNCTION:
            if self._is_implicit(descriptor.new_return_type_text):
                prepared.clear_return_type = True
            else:
                prepared.return_type = self.factory.create_type(descriptor.new_return_type_text)

        if descriptor.parameter_set_or_order_changed:
            parameters_text = descriptor.new_parameters_signature
            if parameters_text is None:
                parameters_text = self.serializer.render(descriptor, site)
            prepared.parameter_list = self.factory.create_parameter_list(parameters_text)
        elif descriptor.ordered_parameters:
            existing_count = len(site.parameters())
            logger.assert_true(
                existing_count == len(descriptor.ordered_parameters),
                f"{site.describe()} declares {existing_count} parameter(s) but the descriptor "
                f"lists {len(descriptor.ordered_parameters)}")
            prepared.parameters = [
                self.parameter_editor.prepare(parameter, parameter_descriptor, site)
                for parameter, parameter_descriptor in zip(site.parameters(), descriptor.ordered_parameters)
            ]

        return prepared

    def _is_implicit(self, return_type_text: Optional[str]) -> bool:
        return return_type_text is not None and return_type_text.strip() == self.implicit_return_type

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def _rename(self, site: DeclarationSite, new_identifier: int):
        self.tree.replace(site.name_identifier(), new_identifier)

    def _change_return_type(self, site: DeclarationSite, new_type: Optional[int]):
        """Clear the return type and, unless new_type is None, set it again in one step."""
        existing = site.type_reference()

        if existing is not None and new_type is not None:
            self.tree.replace(existing, new_type)
            return

        if existing is not None:
            colon = self.tree.prev_sibling(existing)
            while self.tree.kind(colon) == NodeKind.WHITESPACE:
                colon = self.tree.prev_sibling(colon)
            start = colon
            previous = self.tree.prev_sibling(colon)
            if previous is not None and self.tree.kind(previous) == NodeKind.WHITESPACE:
                start = previous
            self.tree.delete_range(start, existing)
            return

        if new_type is not None:
            anchor = site.parameter_list()
            if anchor is None:
                anchor = site.insertion_anchors()[-1]
            colon = self.factory.create_colon()
            space = self.factory.create_whitespace()
            self.tree.add_after(colon, anchor)
            self.tree.add_after(space, colon)
            self.tree.add_after(new_type, space)

    def _replace_parameter_list(self, site: DeclarationSite, new_list: int):
        existing = site.parameter_list()
        if existing is not None:
            self.tree.replace(existing, new_list)
            return

        anchor = site.insertion_anchors()[0]
        self.tree.add_after(new_list, anchor)
        logger.debug(f"Inserted parameter list after {self.tree.kind(anchor).value}#{anchor}")
