"""
Google Docs API integration for reading meeting notes.
"""

import asyncio
import logging
from typing import Dict, Any, Optional

from google.oauth2.credentials import Credentials as OAuth2Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..engine.text_analysis import extract_text_from_doc
from .exceptions import ExternalAPIError, IntegrationNotConfiguredError

logger = logging.getLogger(__name__)


class GoogleDocsClient:
    """Client for reading Google Docs with a user's OAuth token."""

    SCOPES = ["https://www.googleapis.com/auth/documents.readonly"]

    def __init__(self, access_token: Optional[str]):
        if not access_token:
            raise IntegrationNotConfiguredError("Google account not connected")
        credentials = OAuth2Credentials(token=access_token, scopes=self.SCOPES)
        self.docs_service = build("docs", "v1", credentials=credentials, cache_discovery=False)

    async def get_document(self, doc_id: str) -> Dict[str, Any]:
        """Fetch the raw document structure."""
        try:
            return await asyncio.to_thread(
                self.docs_service.documents().get(documentId=doc_id).execute
            )
        except HttpError as e:
            logger.error(f"HTTP error reading document {doc_id}: {e}")
            raise ExternalAPIError(f"Cannot read Google Doc {doc_id}: {e}", status_code=e.resp.status)

    async def get_document_text(self, doc_id: str) -> str:
        """
        Fetch a document and flatten it to plain text.

        Args:
            doc_id: Document ID

        Returns:
            Concatenated paragraph text ("" for an empty document)
        """
        document = await self.get_document(doc_id)
        text = extract_text_from_doc(document)
        logger.info(f"Read Google Doc {doc_id}: {len(text)} chars")
        return text
