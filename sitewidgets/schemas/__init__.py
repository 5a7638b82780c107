from .blocks import BlockCreate, BlockRender, BlockResponse, EditSessionOpen, RowsSubmission, SaveSubmission, WorkingCopyResponse
from .curated import CuratedContentResponse, CuratedItem
from .files import ManagedFileResponse, PromotedAsset
from .insights import ContentItem, SearchMeta, SearchQuery, SearchResultEnvelope, ThemeRef
from .settings import SuiteSettingsResponse, SuiteSettingsUpdate

# Define the public API of this module
__all__ = [
    "BlockCreate",
    "BlockRender",
    "BlockResponse",
    "ContentItem",
    "CuratedContentResponse",
    "CuratedItem",
    "EditSessionOpen",
    "ManagedFileResponse",
    "PromotedAsset",
    "RowsSubmission",
    "SaveSubmission",
    "SearchMeta",
    "SearchQuery",
    "SearchResultEnvelope",
    "SuiteSettingsResponse",
    "SuiteSettingsUpdate",
    "ThemeRef",
    "WorkingCopyResponse",
]
