"""
Parameter name resolution strategies.

A strategy decides which name a parameter gets at one declaration site. It is
called as strategy(is_inherited, current_name, parameter) where current_name
is the name the parameter has at that site today (None for a parameter that
does not exist there yet).
"""

from typing import Callable, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .change_descriptor import ParameterDescriptor


NameResolution = Callable[[bool, Optional[str], 'ParameterDescriptor'], str]


def follow_base_rename(is_inherited: bool, current_name: Optional[str],
                       parameter: 'ParameterDescriptor') -> str:
    """
    Rename overrides only where they still use the base declaration's name.

    An override that already gave the parameter its own name keeps it.
    """
    if not is_inherited or current_name is None or parameter.old_name is None:
        return parameter.name
    if current_name == parameter.old_name:
        return parameter.name
    return current_name


def always_new_name(is_inherited: bool, current_name: Optional[str],
                    parameter: 'ParameterDescriptor') -> str:
    return parameter.name


_STRATEGY_REGISTRY: Dict[str, NameResolution] = {
    'follow_base_rename': follow_base_rename,
    'always_new_name': always_new_name,
}


def strategy_from_id(strategy_id: str) -> NameResolution:
    if strategy_id not in _STRATEGY_REGISTRY:
        raise ValueError(f"Unsupported name resolution strategy: {strategy_id}")
    return _STRATEGY_REGISTRY[strategy_id]


def strategy_id(strategy: NameResolution) -> str:
    for sid, registered in _STRATEGY_REGISTRY.items():
        if registered is strategy:
            return sid
    return getattr(strategy, '__name__', repr(strategy))
