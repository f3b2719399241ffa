import pytest

from sigsync.config import SigSyncConfig
from sigsync.refactorings.change_signature import DeclarationSite
from sigsync.tree import SyntaxTree, DeclarationParser


@pytest.fixture
def tree():
    return SyntaxTree()


@pytest.fixture
def parse_site(tree):
    """Parse a declaration header and wrap it in a DeclarationSite."""
    def _parse(source: str, is_local: bool = False, is_inherited: bool = False) -> DeclarationSite:
        root = DeclarationParser(tree).parse_declaration(source)
        return DeclarationSite.for_declaration(tree, root, is_local=is_local, is_inherited=is_inherited)
    return _parse


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point SigSyncConfig at a sigsync.json inside tmp_path."""
    config_path = tmp_path / "sigsync.json"
    monkeypatch.setattr(SigSyncConfig, 'get_config_path', staticmethod(lambda: config_path))
    SigSyncConfig.reset()
    yield config_path
    SigSyncConfig.reset()
