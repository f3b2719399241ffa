from .visibility import Visibility, ValVar
from .name_resolution import NameResolution, follow_base_rename, always_new_name
from .change_descriptor import ChangeDescriptor, ParameterDescriptor
from .declaration_site import DeclarationSite, SiteKind
from .parameter_serializer import ParameterListSerializer
from .parameter_editor import ParameterEditor, PreparedParameter
from .visibility_editor import VisibilityEditor
from .signature_patcher import SignaturePatcher

__all__ = [
    'Visibility',
    'ValVar',
    'NameResolution',
    'follow_base_rename',
    'always_new_name',
    'ChangeDescriptor',
    'ParameterDescriptor',
    'DeclarationSite',
    'SiteKind',
    'ParameterListSerializer',
    'ParameterEditor',
    'PreparedParameter',
    'VisibilityEditor',
    'SignaturePatcher',
]
