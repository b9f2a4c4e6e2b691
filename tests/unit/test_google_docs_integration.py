"""
Unit tests for Google Docs integration.
"""
import pytest
from unittest.mock import MagicMock, patch

from googleapiclient.errors import HttpError

from focusflow.integrations.google_docs import GoogleDocsClient
from focusflow.integrations.exceptions import ExternalAPIError, IntegrationNotConfiguredError

DOCUMENT = {
    "body": {
        "content": [
            {"paragraph": {"elements": [{"textRun": {"content": "Action item: ship the beta\n"}}]}},
            {"sectionBreak": {}},
            {"paragraph": {"elements": [
                {"textRun": {"content": "Important: "}},
                {"textRun": {"content": "budget approved\n"}},
            ]}},
        ]
    }
}


@pytest.fixture
def mock_build():
    with patch("focusflow.integrations.google_docs.build") as mock:
        yield mock


class TestGoogleDocsClient:

    def test_requires_token(self, mock_build):
        with pytest.raises(IntegrationNotConfiguredError):
            GoogleDocsClient("")

    @pytest.mark.asyncio
    async def test_get_document_text(self, mock_build):
        documents = mock_build.return_value.documents.return_value
        documents.get.return_value.execute.return_value = DOCUMENT
        client = GoogleDocsClient("ya29.token")

        text = await client.get_document_text("doc-1")

        documents.get.assert_called_once_with(documentId="doc-1")
        assert text == "Action item: ship the beta\nImportant: budget approved\n"

    @pytest.mark.asyncio
    async def test_empty_document(self, mock_build):
        mock_build.return_value.documents.return_value.get.return_value.execute.return_value = {}
        client = GoogleDocsClient("ya29.token")

        assert await client.get_document_text("doc-1") == ""

    @pytest.mark.asyncio
    async def test_http_error(self, mock_build):
        mock_response = MagicMock()
        mock_response.status = 404
        mock_build.return_value.documents.return_value.get.return_value.execute.side_effect = (
            HttpError(mock_response, b'Not found')
        )
        client = GoogleDocsClient("ya29.token")

        with pytest.raises(ExternalAPIError) as exc_info:
            await client.get_document("missing")

        assert exc_info.value.status_code == 404
