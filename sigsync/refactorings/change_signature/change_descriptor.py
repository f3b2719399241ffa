"""
Immutable descriptions of a signature change.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple

from .name_resolution import NameResolution, follow_base_rename, strategy_from_id, strategy_id
from .visibility import ValVar, Visibility


@dataclass(frozen=True)
class ParameterDescriptor:
    """
    Target shape of one parameter.

    old_name and old_index locate the parameter in the declaration before the
    change; both are None for a parameter that is being added.
    """
    name: str
    type_text: str
    type_changed: bool = False
    val_var: ValVar = ValVar.NONE
    old_name: Optional[str] = None
    old_index: Optional[int] = None
    default_value_text: Optional[str] = None
    name_resolution: NameResolution = field(default=follow_base_rename, compare=False)

    def __post_init__(self):
        if not isinstance(self.val_var, ValVar):
            raise TypeError(f"val_var must be ValVar enum, got {type(self.val_var)}")
        if not self.name:
            raise ValueError("Parameter name is required")

    @property
    def is_new(self) -> bool:
        return self.old_index is None

    def resolved_name(self, is_inherited: bool, current_name: Optional[str]) -> str:
        return self.name_resolution(is_inherited, current_name, self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParameterDescriptor':
        kwargs = {
            'name': data['name'],
            'type_text': data['type'],
            'type_changed': bool(data.get('type_changed', False)),
            'val_var': ValVar.from_keyword(data.get('val_var')),
            'old_name': data.get('old_name'),
            'old_index': data.get('old_index'),
            'default_value_text': data.get('default_value'),
        }
        if 'name_resolution' in data:
            kwargs['name_resolution'] = strategy_from_id(data['name_resolution'])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': self.type_text,
            'type_changed': self.type_changed,
            'val_var': self.val_var.value,
            'old_name': self.old_name,
            'old_index': self.old_index,
            'default_value': self.default_value_text,
            'name_resolution': strategy_id(self.name_resolution),
        }


@dataclass(frozen=True)
class ChangeDescriptor:
    """
    Everything that changed about one signature.

    When parameter_set_or_order_changed is False, ordered_parameters
    corresponds positionally to the parameters already declared at the site.
    When it is True, new_parameters_signature (if given) is the full new
    parameter list text; otherwise the text is rendered from
    ordered_parameters.

    Descriptors are immutable. The fluent helpers return modified copies:

        descriptor = ChangeDescriptor().rename("bar").set_return_type("Long")
    """
    name_changed: bool = False
    new_name: Optional[str] = None
    return_type_changed: bool = False
    new_return_type_text: Optional[str] = None
    parameter_set_or_order_changed: bool = False
    ordered_parameters: Tuple[ParameterDescriptor, ...] = ()
    visibility_changed: bool = False
    new_visibility: Optional[Visibility] = None
    new_parameters_signature: Optional[str] = None

    def __post_init__(self):
        # Accept any sequence but store a tuple so the descriptor stays hashable
        object.__setattr__(self, 'ordered_parameters', tuple(self.ordered_parameters))

        if self.name_changed and not self.new_name:
            raise ValueError("new_name is required when name_changed is set")
        if self.return_type_changed and self.new_return_type_text is None:
            raise ValueError("new_return_type_text is required when return_type_changed is set")
        if self.visibility_changed and not isinstance(self.new_visibility, Visibility):
            raise ValueError("new_visibility must be a Visibility when visibility_changed is set")

    def rename(self, new_name: str) -> 'ChangeDescriptor':
        return replace(self, name_changed=True, new_name=new_name)

    def set_return_type(self, return_type_text: str) -> 'ChangeDescriptor':
        return replace(self, return_type_changed=True, new_return_type_text=return_type_text)

    def set_parameters(self, parameters: Sequence[ParameterDescriptor],
                       set_or_order_changed: bool = False,
                       signature: Optional[str] = None) -> 'ChangeDescriptor':
        return replace(self, ordered_parameters=tuple(parameters),
                       parameter_set_or_order_changed=set_or_order_changed,
                       new_parameters_signature=signature)

    def set_visibility(self, visibility: Visibility) -> 'ChangeDescriptor':
        return replace(self, visibility_changed=True, new_visibility=visibility)

    def has_changes(self) -> bool:
        return (self.name_changed or
                self.return_type_changed or
                self.parameter_set_or_order_changed or
                self.visibility_changed or
                any(p.type_changed for p in self.ordered_parameters))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChangeDescriptor':
        """Build a descriptor from its JSON form; absent keys mean 'unchanged'."""
        parameters = data.get('parameters')
        visibility = data.get('new_visibility')
        return cls(
            name_changed='new_name' in data,
            new_name=data.get('new_name'),
            return_type_changed='new_return_type' in data,
            new_return_type_text=data.get('new_return_type'),
            parameter_set_or_order_changed=bool(data.get('parameter_set_or_order_changed', False)),
            ordered_parameters=tuple(ParameterDescriptor.from_dict(p) for p in parameters or []),
            visibility_changed=visibility is not None,
            new_visibility=Visibility.from_id(visibility) if visibility is not None else None,
            new_parameters_signature=data.get('new_parameters_signature'),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'parameter_set_or_order_changed': self.parameter_set_or_order_changed,
            'parameters': [p.to_dict() for p in self.ordered_parameters],
        }
        if self.name_changed:
            result['new_name'] = self.new_name
        if self.return_type_changed:
            result['new_return_type'] = self.new_return_type_text
        if self.visibility_changed:
            result['new_visibility'] = self.new_visibility.value
        if self.new_parameters_signature is not None:
            result['new_parameters_signature'] = self.new_parameters_signature
        return result
