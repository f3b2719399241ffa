"""
FragmentFactory - builds detached, freshly parsed syntax fragments.
"""

from typing import Iterable

from .declaration_parser import DeclarationParser, SyntaxParseError, IDENTIFIER_RE, MODIFIER_KEYWORDS, \
    VAL_VAR_KEYWORDS, HARD_KEYWORDS
from .node_kind import NodeKind
from .syntax_tree import SyntaxTree


class FragmentFactory:
    """
    Node-construction capability used by the signature editors.

    Every fragment is allocated in the given tree's arena but left detached,
    ready to be spliced in with one of the tree's edit primitives.
    """

    def __init__(self, tree: SyntaxTree):
        self.tree = tree
        self._parser = DeclarationParser(tree)

    def create_identifier(self, name: str) -> int:
        if not name or not IDENTIFIER_RE.fullmatch(name):
            raise SyntaxParseError(f"Invalid identifier: {name!r}")
        # 'constructor' is soft, but a class header reads it as the constructor keyword
        if name in HARD_KEYWORDS or name == 'constructor':
            raise SyntaxParseError(f"Keyword {name!r} must be backtick-quoted to be used as a name")
        return self.tree.new_leaf(NodeKind.IDENTIFIER, name)

    def create_type(self, type_text: str) -> int:
        return self._parser.parse_type(type_text)

    def create_parameter_list(self, parameters_text: str) -> int:
        return self._parser.parse_parameter_list(parameters_text)

    def create_modifier(self, keyword: str) -> int:
        if keyword not in MODIFIER_KEYWORDS:
            raise SyntaxParseError(f"Unknown modifier keyword: {keyword!r}")
        return self.tree.new_leaf(NodeKind.MODIFIER, keyword)

    def create_modifier_list(self, keywords: Iterable[str],
                             kind: NodeKind = NodeKind.MODIFIER_LIST) -> int:
        children = []
        for keyword in keywords:
            if children:
                children.append(self.create_whitespace())
            children.append(self.create_modifier(keyword))
        if not children:
            raise SyntaxParseError("A modifier list needs at least one modifier")
        return self.tree.new_composite(kind, children)

    def create_val_or_var(self, keyword: str) -> int:
        if keyword not in VAL_VAR_KEYWORDS:
            raise SyntaxParseError(f"Expected 'val' or 'var', got {keyword!r}")
        return self.tree.new_leaf(NodeKind.VAL_VAR, keyword)

    def create_keyword(self, keyword: str) -> int:
        return self.tree.new_leaf(NodeKind.KEYWORD, keyword)

    def create_colon(self) -> int:
        return self.tree.new_leaf(NodeKind.PUNCTUATION, ':')

    def create_whitespace(self, text: str = ' ') -> int:
        if not text or not text.isspace():
            raise SyntaxParseError(f"Whitespace fragment must be blank, got {text!r}")
        return self.tree.new_leaf(NodeKind.WHITESPACE, text)
