from .block import BlockInstance
from .config_object import ConfigObject
from .content import Content, ContentStatus
from .content_type import ContentType
from .managed_file import FileStatus, ManagedFile
from .taxonomy import TaxonomyTerm
from .user import User

__all__ = [
    "BlockInstance",
    "ConfigObject",
    "Content",
    "ContentStatus",
    "ContentType",
    "FileStatus",
    "ManagedFile",
    "TaxonomyTerm",
    "User",
]
