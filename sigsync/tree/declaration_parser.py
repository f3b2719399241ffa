"""
Parser for Kotlin-style declaration headers.

Turns a function or class header into nodes of a SyntaxTree. The parse is
lossless: every character of the input, whitespace included, ends up in some
leaf, so printing the root reproduces the input exactly. Only the header
structure the signature patcher edits is broken down; bodies, default values
and type expressions are kept as opaque leaves.
"""

import re
from typing import List, Optional, Set

from .node_kind import NodeKind
from .syntax_tree import SyntaxTree


class SyntaxParseError(ValueError):
    """Raised when text cannot be parsed into the requested fragment."""


MODIFIER_KEYWORDS: Set[str] = {
    'public', 'protected', 'private', 'internal',
    'open', 'final', 'abstract', 'sealed', 'override',
    'data', 'enum', 'annotation', 'inner', 'value',
    'inline', 'noinline', 'crossinline', 'vararg',
    'suspend', 'operator', 'infix', 'tailrec', 'external',
    'expect', 'actual', 'const', 'lateinit',
}

VAL_VAR_KEYWORDS: Set[str] = {'val', 'var'}

# Reserved words that can only be names when backtick-quoted
HARD_KEYWORDS: Set[str] = {
    'as', 'break', 'class', 'continue', 'do', 'else', 'false', 'for', 'fun',
    'if', 'in', 'interface', 'is', 'null', 'object', 'package', 'return',
    'super', 'this', 'throw', 'true', 'try', 'typealias', 'typeof', 'val',
    'var', 'when', 'while',
}

_TOKEN_RE = re.compile(r"""
    (?P<ws>\s+)
  | (?P<string>"(?:[^"\\\n]|\\.)*")
  | (?P<char>'(?:[^'\\\n]|\\.)+')
  | (?P<ident>`[^`\n]+`|[A-Za-z_][A-Za-z0-9_]*)
  | (?P<number>\d[\w.]*)
  | (?P<arrow>->)
  | (?P<punct>\S)
""", re.VERBOSE)

IDENTIFIER_RE = re.compile(r'^(?:[A-Za-z_][A-Za-z0-9_]*|`[^`\n]+`)$')


class Token:
    def __init__(self, kind: str, text: str):
        self.kind = kind
        self.text = text

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.text!r})"


def tokenize(text: str) -> List[Token]:
    tokens = []
    for match in _TOKEN_RE.finditer(text):
        tokens.append(Token(match.lastgroup, match.group()))
    return tokens


class _TokenStream:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def peek_text(self) -> Optional[str]:
        token = self.peek()
        return token.text if token else None

    def peek_past_ws(self) -> Optional[Token]:
        offset = 0
        while True:
            token = self.peek(offset)
            if token is None or token.kind != 'ws':
                return token
            offset += 1

    def next(self) -> Token:
        if self.at_end():
            raise SyntaxParseError("Unexpected end of input")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def expect(self, text: str) -> Token:
        token = self.next()
        if token.text != text:
            raise SyntaxParseError(f"Expected '{text}', found '{token.text}'")
        return token

    def rest_text(self) -> str:
        text = ''.join(t.text for t in self.tokens[self.pos:])
        self.pos = len(self.tokens)
        return text


class DeclarationParser:
    """
    Builds detached declaration fragments inside a SyntaxTree.

    Usage:
        tree = SyntaxTree()
        root = DeclarationParser(tree).parse_declaration("fun foo(x: Int): Int")
    """

    def __init__(self, tree: SyntaxTree):
        self.tree = tree

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def parse_declaration(self, text: str) -> int:
        stream = _TokenStream(tokenize(text))
        children: List[int] = []

        self._take_whitespace(stream, children)
        modifier_list = self._parse_modifier_list(stream, NodeKind.MODIFIER_LIST, MODIFIER_KEYWORDS)
        if modifier_list is not None:
            children.append(modifier_list)
            self._take_whitespace(stream, children)

        keyword = stream.peek_text()
        if keyword == 'fun':
            return self._parse_function(stream, children)
        if keyword == 'class':
            return self._parse_class(stream, children)
        raise SyntaxParseError(f"Expected 'fun' or 'class' declaration, found {keyword!r}")

    def parse_parameter_list(self, text: str) -> int:
        stream = _TokenStream(tokenize(text.strip()))
        parameter_list = self._parse_value_parameter_list(stream)
        if not stream.at_end():
            raise SyntaxParseError(f"Unexpected text after parameter list: {stream.rest_text()!r}")
        return parameter_list

    def parse_type(self, text: str) -> int:
        stripped = text.strip()
        tokens = tokenize(stripped)
        if not tokens:
            raise SyntaxParseError("Type text is empty")

        depth = 0
        for token in tokens:
            if token.text in ('(', '[', '<'):
                depth += 1
            elif token.text in (')', ']', '>'):
                depth -= 1
            elif depth == 0 and token.text in (',', '=', ';', '{', '}'):
                raise SyntaxParseError(f"Unexpected '{token.text}' in type {stripped!r}")
            if depth < 0:
                raise SyntaxParseError(f"Unbalanced brackets in type {stripped!r}")
        if depth != 0:
            raise SyntaxParseError(f"Unbalanced brackets in type {stripped!r}")

        return self.tree.new_leaf(NodeKind.TYPE_REFERENCE, stripped)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _parse_function(self, stream: _TokenStream, children: List[int]) -> int:
        children.append(self._leaf(NodeKind.KEYWORD, stream.next().text))
        self._take_whitespace(stream, children)

        if stream.peek_text() == '<':
            children.append(self._parse_type_parameter_list(stream))
            self._take_whitespace(stream, children)

        # Receiver and name: everything up to the opening parenthesis
        head: List[Token] = []
        depth = 0
        while not stream.at_end() and (depth or stream.peek_text() != '('):
            token = stream.peek()
            if token.kind == 'ws' and depth == 0:
                break
            if token.text in ('<', '('):
                depth += 1
            elif token.text in ('>', ')'):
                depth -= 1
            head.append(stream.next())
        if head:
            if head[-1].kind != 'ident' or head[-1].text in HARD_KEYWORDS:
                raise SyntaxParseError(f"Expected function name, found '{head[-1].text}'")
            if len(head) > 1:
                receiver = ''.join(t.text for t in head[:-1])
                if not receiver.endswith('.'):
                    raise SyntaxParseError(f"Malformed receiver type {receiver!r}")
                children.append(self._leaf(NodeKind.RECEIVER_TYPE, receiver))
            children.append(self._leaf(NodeKind.IDENTIFIER, head[-1].text))
            self._take_whitespace(stream, children)

        if stream.peek_text() == '(':
            children.append(self._parse_value_parameter_list(stream))

        self._parse_return_type(stream, children)
        self._take_rest(stream, children)
        return self.tree.new_composite(NodeKind.FUNCTION, children)

    def _parse_return_type(self, stream: _TokenStream, children: List[int]):
        after = stream.peek_past_ws()
        if after is None or after.text != ':':
            return
        self._take_whitespace(stream, children)
        children.append(self._leaf(NodeKind.PUNCTUATION, stream.next().text))
        self._take_whitespace(stream, children)
        type_tokens = self._collect_until(stream, stop={'{', '=', 'where'}, track_angles=True)
        if not type_tokens:
            raise SyntaxParseError("Missing return type after ':'")
        children.append(self._leaf(NodeKind.TYPE_REFERENCE, ''.join(t.text for t in type_tokens)))

    def _parse_class(self, stream: _TokenStream, children: List[int]) -> int:
        children.append(self._leaf(NodeKind.KEYWORD, stream.next().text))

        name = stream.peek_past_ws()
        if name is not None and name.kind == 'ident' and name.text not in MODIFIER_KEYWORDS \
                and name.text != 'constructor':
            self._take_whitespace(stream, children)
            children.append(self._leaf(NodeKind.IDENTIFIER, stream.next().text))

        if stream.peek_text() == '<':
            children.append(self._parse_type_parameter_list(stream))

        self._parse_primary_constructor(stream, children)
        self._take_rest(stream, children)
        return self.tree.new_composite(NodeKind.CLASS, children)

    def _parse_primary_constructor(self, stream: _TokenStream, children: List[int]):
        start = stream.pos
        pending: List[int] = []

        self._take_whitespace(stream, pending)
        modifier_list = self._parse_modifier_list(
            stream, NodeKind.PRIMARY_CONSTRUCTOR_MODIFIER_LIST, MODIFIER_KEYWORDS)
        if modifier_list is not None:
            pending.append(modifier_list)
            self._take_whitespace(stream, pending)

        if stream.peek_text() == 'constructor':
            pending.append(self._leaf(NodeKind.KEYWORD, stream.next().text))
            self._take_whitespace(stream, pending)
        elif modifier_list is not None or stream.peek_text() != '(':
            # Not a primary constructor; leave the tokens for the body
            stream.pos = start
            return

        if stream.peek_text() == '(':
            pending.append(self._parse_value_parameter_list(stream))
        elif pending and self.tree.kind(pending[-1]) == NodeKind.WHITESPACE:
            # Whitespace after a bare 'constructor' keyword belongs to the body
            stream.pos -= 1
            pending.pop()
        children.extend(pending)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def _parse_value_parameter_list(self, stream: _TokenStream) -> int:
        children = [self._leaf(NodeKind.PUNCTUATION, stream.expect('(').text)]
        self._take_whitespace(stream, children)

        while stream.peek_text() != ')':
            if stream.at_end():
                raise SyntaxParseError("Unterminated parameter list")
            children.append(self._parse_value_parameter(stream))
            self._take_whitespace(stream, children)
            if stream.peek_text() == ',':
                children.append(self._leaf(NodeKind.PUNCTUATION, stream.next().text))
                self._take_whitespace(stream, children)
            elif stream.peek_text() != ')':
                found = stream.peek_text()
                raise SyntaxParseError(f"Expected ',' or ')' in parameter list, found {found!r}")

        children.append(self._leaf(NodeKind.PUNCTUATION, stream.next().text))
        return self.tree.new_composite(NodeKind.VALUE_PARAMETER_LIST, children)

    def _parse_value_parameter(self, stream: _TokenStream) -> int:
        children: List[int] = []

        modifier_list = self._parse_modifier_list(stream, NodeKind.MODIFIER_LIST, MODIFIER_KEYWORDS)
        if modifier_list is not None:
            children.append(modifier_list)
            self._take_whitespace(stream, children)

        token = stream.peek()
        if token is not None and token.text in VAL_VAR_KEYWORDS:
            children.append(self._leaf(NodeKind.VAL_VAR, stream.next().text))
            self._take_whitespace(stream, children)

        token = stream.peek()
        if token is None or token.kind != 'ident' or token.text in HARD_KEYWORDS:
            found = token.text if token else 'end of input'
            raise SyntaxParseError(f"Expected parameter name, found {found!r}")
        children.append(self._leaf(NodeKind.IDENTIFIER, stream.next().text))

        after = stream.peek_past_ws()
        if after is not None and after.text == ':':
            self._take_whitespace(stream, children)
            children.append(self._leaf(NodeKind.PUNCTUATION, stream.next().text))
            self._take_whitespace(stream, children)
            type_tokens = self._collect_until(stream, stop={',', ')', '=', ':'}, track_angles=True)
            if not type_tokens:
                raise SyntaxParseError("Missing parameter type after ':'")
            children.append(self._leaf(NodeKind.TYPE_REFERENCE, ''.join(t.text for t in type_tokens)))

        after = stream.peek_past_ws()
        if after is not None and after.text == '=':
            self._take_whitespace(stream, children)
            children.append(self._leaf(NodeKind.PUNCTUATION, stream.next().text))
            self._take_whitespace(stream, children)
            value_tokens = self._collect_until(stream, stop={',', ')'}, track_angles=False)
            if not value_tokens:
                raise SyntaxParseError("Missing default value after '='")
            children.append(self._leaf(NodeKind.DEFAULT_VALUE, ''.join(t.text for t in value_tokens)))

        return self.tree.new_composite(NodeKind.VALUE_PARAMETER, children)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _leaf(self, kind: NodeKind, text: str) -> int:
        return self.tree.new_leaf(kind, text)

    def _take_whitespace(self, stream: _TokenStream, children: List[int]):
        token = stream.peek()
        if token is not None and token.kind == 'ws':
            children.append(self._leaf(NodeKind.WHITESPACE, stream.next().text))

    def _take_rest(self, stream: _TokenStream, children: List[int]):
        self._take_whitespace(stream, children)
        if not stream.at_end():
            children.append(self._leaf(NodeKind.BODY, stream.rest_text()))

    def _parse_modifier_list(self, stream: _TokenStream, kind: NodeKind, keywords: Set[str]) -> Optional[int]:
        items: List[int] = []
        while True:
            start = stream.pos
            pending: List[int] = []
            if items:
                self._take_whitespace(stream, pending)

            token = stream.peek()
            if token is not None and token.kind == 'ident' and token.text in keywords \
                    and self._is_modifier_position(stream):
                pending.append(self._leaf(NodeKind.MODIFIER, stream.next().text))
            elif token is not None and token.text == '@':
                pending.append(self._parse_annotation(stream))
            else:
                stream.pos = start
                break
            items.extend(pending)

        if not items:
            return None
        return self.tree.new_composite(kind, items)

    @staticmethod
    def _is_modifier_position(stream: _TokenStream) -> bool:
        # 'value' or 'data' used as a parameter name is followed by ':' or ','
        offset = 1
        while True:
            token = stream.peek(offset)
            if token is None:
                return True
            if token.kind != 'ws':
                return token.text not in (':', ',', ')', '=', '(', '.', '<')
            offset += 1

    def _parse_annotation(self, stream: _TokenStream) -> int:
        parts = [stream.expect('@').text]
        while stream.peek() is not None and (stream.peek().kind == 'ident' or stream.peek_text() in ('.', ':')):
            parts.append(stream.next().text)
        if len(parts) == 1:
            raise SyntaxParseError("Expected annotation name after '@'")
        if stream.peek_text() == '(':
            parts.extend(t.text for t in self._collect_balanced(stream, '(', ')'))
        return self._leaf(NodeKind.ANNOTATION, ''.join(parts))

    def _parse_type_parameter_list(self, stream: _TokenStream) -> int:
        tokens = self._collect_balanced(stream, '<', '>')
        return self._leaf(NodeKind.TYPE_PARAMETER_LIST, ''.join(t.text for t in tokens))

    @staticmethod
    def _collect_balanced(stream: _TokenStream, opening: str, closing: str) -> List[Token]:
        tokens = [stream.expect(opening)]
        depth = 1
        while depth:
            if stream.at_end():
                raise SyntaxParseError(f"Missing '{closing}'")
            token = stream.next()
            if token.text == opening:
                depth += 1
            elif token.text == closing:
                depth -= 1
            tokens.append(token)
        return tokens

    @staticmethod
    def _collect_until(stream: _TokenStream, stop: Set[str], track_angles: bool) -> List[Token]:
        """Collect tokens up to a depth-0 stop token, leaving trailing whitespace unconsumed."""
        openers = {'(', '[', '{'} | ({'<'} if track_angles else set())
        closers = {')', ']', '}'} | ({'>'} if track_angles else set())
        tokens: List[Token] = []
        depth = 0
        while not stream.at_end():
            token = stream.peek()
            if depth == 0 and token.text in stop:
                break
            if token.text in openers:
                depth += 1
            elif token.text in closers:
                if depth == 0:
                    break
                depth -= 1
            tokens.append(stream.next())

        while tokens and tokens[-1].kind == 'ws':
            tokens.pop()
            stream.pos -= 1
        return tokens
