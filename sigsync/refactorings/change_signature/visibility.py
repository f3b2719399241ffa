"""
Visibility and val/var kinds used by change descriptors.
"""

from enum import Enum


class Visibility(Enum):
    """Declared visibility; the value is the modifier keyword."""
    PUBLIC = "public"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PRIVATE = "private"

    @property
    def keyword(self) -> str:
        return self.value

    @classmethod
    def from_id(cls, visibility_id: str) -> 'Visibility':
        for visibility in cls:
            if visibility.value == visibility_id.lower() or visibility.name == visibility_id.upper():
                return visibility
        raise ValueError(f"Unsupported visibility: {visibility_id}")


VISIBILITY_KEYWORDS = frozenset(v.keyword for v in Visibility)


class ValVar(Enum):
    """Property-declaring keyword on a constructor parameter."""
    NONE = "none"
    VAL = "val"
    VAR = "var"

    @property
    def keyword(self) -> str:
        if self == ValVar.NONE:
            raise ValueError("ValVar.NONE has no keyword")
        return self.value

    @classmethod
    def from_keyword(cls, keyword) -> 'ValVar':
        if keyword is None:
            return cls.NONE
        for kind in cls:
            if kind.value == keyword.lower() or kind.name == keyword.upper():
                return kind
        raise ValueError(f"Unsupported val/var kind: {keyword}")
