"""
Document Service access for relink.

Components:
    - DocumentService: Abstract operations the rename engine depends on
    - DocumentServiceClient: requests-based HTTP implementation
    - Backlink, DiscussionThread, EditPage: Response value types
"""
from .client import DocumentService, DocumentServiceClient, PERMISSION_DENIED_MARKER
from .models import Backlink, DiscussionThread, EditPage

__all__ = [
    "DocumentService",
    "DocumentServiceClient",
    "PERMISSION_DENIED_MARKER",
    "Backlink",
    "DiscussionThread",
    "EditPage",
]
