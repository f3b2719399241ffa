"""
Node kind enumeration for declaration syntax trees.
"""

from enum import Enum


class NodeKind(Enum):
    """Type-safe enumeration of syntax node kinds."""
    # Composite nodes
    FUNCTION = "function"
    CLASS = "class"
    MODIFIER_LIST = "modifier_list"
    PRIMARY_CONSTRUCTOR_MODIFIER_LIST = "primary_constructor_modifier_list"
    VALUE_PARAMETER_LIST = "value_parameter_list"
    VALUE_PARAMETER = "value_parameter"

    # Leaf nodes
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    MODIFIER = "modifier"
    VAL_VAR = "val_var"
    TYPE_PARAMETER_LIST = "type_parameter_list"
    RECEIVER_TYPE = "receiver_type"
    TYPE_REFERENCE = "type_reference"
    DEFAULT_VALUE = "default_value"
    ANNOTATION = "annotation"
    PUNCTUATION = "punctuation"
    WHITESPACE = "whitespace"
    BODY = "body"

    @property
    def is_leaf(self) -> bool:
        return self not in _COMPOSITE_KINDS


_COMPOSITE_KINDS = frozenset({
    NodeKind.FUNCTION,
    NodeKind.CLASS,
    NodeKind.MODIFIER_LIST,
    NodeKind.PRIMARY_CONSTRUCTOR_MODIFIER_LIST,
    NodeKind.VALUE_PARAMETER_LIST,
    NodeKind.VALUE_PARAMETER,
})
