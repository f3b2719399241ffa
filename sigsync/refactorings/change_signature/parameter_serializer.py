"""
ParameterListSerializer - renders a new parameter list from change descriptors.
"""

from typing import List, Optional, TYPE_CHECKING

from .visibility import ValVar

if TYPE_CHECKING:
    from .change_descriptor import ChangeDescriptor, ParameterDescriptor
    from .declaration_site import DeclarationSite


class ParameterListSerializer:
    """Renders the full parameter list text for a changed parameter set or order."""

    def render(self, descriptor: 'ChangeDescriptor', site: 'DeclarationSite') -> str:
        current_names = site.parameter_names()
        rendered = [self.render_parameter(parameter, site, current_names)
                    for parameter in descriptor.ordered_parameters]
        return '(' + ', '.join(rendered) + ')'

    @staticmethod
    def render_parameter(parameter: 'ParameterDescriptor', site: 'DeclarationSite',
                         current_names: List[Optional[str]]) -> str:
        current_name = None
        if parameter.old_index is not None and 0 <= parameter.old_index < len(current_names):
            current_name = current_names[parameter.old_index]

        result = ''
        if parameter.val_var != ValVar.NONE:
            result += f"{parameter.val_var.keyword} "
        result += f"{parameter.resolved_name(site.is_inherited, current_name)}: {parameter.type_text}"

        # Overrides may not redeclare default values
        if parameter.default_value_text and not site.is_inherited:
            result += f" = {parameter.default_value_text}"
        return result
