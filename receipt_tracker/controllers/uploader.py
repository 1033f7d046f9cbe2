"""Document upload page."""

from __future__ import annotations

from ..api import ApiClient
from ..models import UploadResult
from .base import PAGE_ERRORS, LoadState, PageController, _describe

DOC_TYPES = ("receipt", "letter", "other")


class UploaderController(PageController):
    """idle → uploading → success | error.

    The result of a successful upload stays on screen until a new file is
    picked or the form is submitted again.
    """

    def __init__(self, api: ApiClient) -> None:
        super().__init__(api)
        self.file: bytes | None = None
        self.filename: str = ""
        self.doc_type: str = "receipt"
        self.custom_doc_type: str = ""
        self.result: UploadResult | None = None

    @property
    def uploading(self) -> bool:
        return self.loading

    @property
    def final_doc_type(self) -> str:
        if self.doc_type == "other":
            return self.custom_doc_type.strip()
        return self.doc_type.strip()

    def select_file(self, content: bytes | None, filename: str = "") -> None:
        self.file = content or None
        self.filename = filename
        self.state = LoadState.IDLE
        self.error = None
        self.result = None

    def set_doc_type(self, doc_type: str, custom: str = "") -> None:
        self.doc_type = doc_type
        self.custom_doc_type = custom

    async def submit(self) -> bool:
        """Validate and upload. Returns True on success."""
        if self.uploading:
            return False
        if not self.file:
            self._fail_local("Please select a file to upload.")
            return False
        doc_type = self.final_doc_type
        if not doc_type:
            self._fail_local("Please specify a document type.")
            return False

        self.state = LoadState.LOADING
        self.error = None
        self.result = None
        try:
            self.result = await self._api.upload_document(
                self.file, doc_type, filename=self.filename or None
            )
        except PAGE_ERRORS as e:
            self.state = LoadState.ERROR
            self.error = _describe(e) or "An unknown error occurred."
            return False
        self.state = LoadState.SUCCESS
        return True
