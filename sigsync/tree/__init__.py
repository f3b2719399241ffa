from .node_kind import NodeKind
from .syntax_tree import SyntaxTree
from .declaration_parser import DeclarationParser, SyntaxParseError
from .fragment_factory import FragmentFactory

__all__ = [
    'NodeKind',
    'SyntaxTree',
    'DeclarationParser',
    'SyntaxParseError',
    'FragmentFactory',
]
