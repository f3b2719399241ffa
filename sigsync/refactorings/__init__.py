"""
Refactorings package - in-place edits of declaration syntax trees.
"""

from .change_signature import SignaturePatcher, ChangeDescriptor, ParameterDescriptor, DeclarationSite

__all__ = [
    'SignaturePatcher',
    'ChangeDescriptor',
    'ParameterDescriptor',
    'DeclarationSite',
]
