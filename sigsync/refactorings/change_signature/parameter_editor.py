"""
ParameterEditor - brings one existing parameter in line with its descriptor.
"""

from typing import Optional, TYPE_CHECKING

from .visibility import ValVar
from ...tree.fragment_factory import FragmentFactory
from ...tree.node_kind import NodeKind
from ...tree.syntax_tree import SyntaxTree
from ... import logger

if TYPE_CHECKING:
    from .change_descriptor import ParameterDescriptor
    from .declaration_site import DeclarationSite
    from .name_resolution import NameResolution


class PreparedParameter:
    """Detached fragments for one parameter, built before any edit."""

    def __init__(self, name_identifier: Optional[int] = None, type_reference: Optional[int] = None):
        self.name_identifier = name_identifier
        self.type_reference = type_reference


class ParameterEditor:
    """
    Edits a VALUE_PARAMETER node in place.

    Only the val/var keyword, the type reference and the name identifier are
    touched. Annotations, parameter modifiers, default values and whitespace
    outside the edited fragments are left as they are.

    prepare() builds every fragment that can fail to parse; edit() only
    splices. apply() does both for a single parameter.

    name_resolution, when given, replaces the strategy carried by each
    parameter descriptor.
    """

    def __init__(self, tree: SyntaxTree, factory: FragmentFactory,
                 name_resolution: Optional['NameResolution'] = None):
        self.tree = tree
        self.factory = factory
        self.name_resolution = name_resolution

    def apply(self, parameter: int, descriptor: 'ParameterDescriptor', site: 'DeclarationSite'):
        self.edit(parameter, descriptor, self.prepare(parameter, descriptor, site))

    def prepare(self, parameter: int, descriptor: 'ParameterDescriptor',
                site: 'DeclarationSite') -> PreparedParameter:
        logger.assert_true(self.tree.kind(parameter) == NodeKind.VALUE_PARAMETER,
                           f"Node {parameter} is not a value parameter")
        prepared = PreparedParameter()

        if descriptor.type_changed:
            prepared.type_reference = self.factory.create_type(descriptor.type_text)

        identifier = self.tree.find_child(parameter, NodeKind.IDENTIFIER)
        if identifier is not None:
            new_name = self._resolve_name(descriptor, site, self.tree.leaf_text(identifier))
            prepared.name_identifier = self.factory.create_identifier(new_name)
        return prepared

    def edit(self, parameter: int, descriptor: 'ParameterDescriptor', prepared: PreparedParameter):
        self._change_val_var(parameter, descriptor.val_var)
        if prepared.type_reference is not None:
            self._change_type(parameter, prepared.type_reference)
        if prepared.name_identifier is not None:
            identifier = self.tree.find_child(parameter, NodeKind.IDENTIFIER)
            self.tree.replace(identifier, prepared.name_identifier)

    def _resolve_name(self, descriptor: 'ParameterDescriptor', site: 'DeclarationSite', current_name: str) -> str:
        if self.name_resolution is not None:
            return self.name_resolution(site.is_inherited, current_name, descriptor)
        return descriptor.resolved_name(site.is_inherited, current_name)

    def _change_val_var(self, parameter: int, target: ValVar):
        existing = self.tree.find_child(parameter, NodeKind.VAL_VAR)

        if existing is None:
            if target == ValVar.NONE:
                return
            first_child = self.tree.first_child(parameter)
            self.tree.add_before(self.factory.create_val_or_var(target.keyword), first_child)
            self.tree.add_before(self.factory.create_whitespace(), first_child)
            logger.debug(f"Added '{target.keyword}' to parameter {parameter}")
            return

        current = ValVar.from_keyword(self.tree.leaf_text(existing))
        if target == current:
            return

        if target == ValVar.NONE:
            following = self.tree.next_sibling(existing)
            if following is not None and self.tree.kind(following) == NodeKind.WHITESPACE:
                self.tree.delete_range(existing, following)
            else:
                self.tree.delete(existing)
            logger.debug(f"Removed '{current.keyword}' from parameter {parameter}")
        else:
            self.tree.replace(existing, self.factory.create_val_or_var(target.keyword))

    def _change_type(self, parameter: int, new_type: int):
        existing = self.tree.find_child(parameter, NodeKind.TYPE_REFERENCE)
        if existing is not None:
            self.tree.replace(existing, new_type)
            return

        # Untyped parameter: the type goes right after the name
        identifier = self.tree.find_child(parameter, NodeKind.IDENTIFIER)
        logger.assert_true(identifier is not None, f"Parameter {parameter} has neither name nor type")
        colon = self.factory.create_colon()
        space = self.factory.create_whitespace()
        self.tree.add_after(colon, identifier)
        self.tree.add_after(space, colon)
        self.tree.add_after(new_type, space)
