from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from patterns.observer import Toast, destructive

MB = 1024 * 1024


@dataclass
class UploadCandidate:
    # What the request handed us before anything touches the store
    title: Any = ''
    content: Any = ''
    filename: Optional[str] = None
    mimetype: Optional[str] = None
    size: int = 0

    @property
    def has_file(self) -> bool:
        return self.filename is not None


class InputHandler(ABC):
    # Base class for one check; returns a toast describing the first failure

    def __init__(self, next_handler: Optional["InputHandler"] = None) -> None:
        # Points to the next checker in the chain
        self._next = next_handler

    def set_next(self, next_handler: "InputHandler") -> "InputHandler":
        self._next = next_handler
        return next_handler

    def handle(self, candidate: UploadCandidate) -> Optional[Toast]:
        failure = self._check(candidate)
        if failure is not None:
            return failure
        if self._next:
            return self._next.handle(candidate)
        return None

    @abstractmethod
    def _check(self, candidate: UploadCandidate) -> Optional[Toast]:
        ...


class TitleRequiredHandler(InputHandler):
    def __init__(self, description: str, next_handler: Optional[InputHandler] = None) -> None:
        super().__init__(next_handler)
        self.description = description

    def _check(self, candidate: UploadCandidate) -> Optional[Toast]:
        title = candidate.title
        if not isinstance(title, str) or not title.strip():
            return destructive("Title required", self.description)
        return None


class FileRequiredHandler(InputHandler):
    def __init__(self, label: str, description: str, next_handler: Optional[InputHandler] = None) -> None:
        super().__init__(next_handler)
        self.label = label
        self.description = description

    def _check(self, candidate: UploadCandidate) -> Optional[Toast]:
        if not candidate.has_file or candidate.size <= 0:
            return destructive(f"{self.label} required", self.description)
        return None


class MaxSizeHandler(InputHandler):
    def __init__(self, max_mb: float, description: Optional[str] = None,
                 next_handler: Optional[InputHandler] = None) -> None:
        super().__init__(next_handler)
        self.max_mb = max_mb
        self.description = description or f"Maximum file size is {max_mb:g}MB"

    def _check(self, candidate: UploadCandidate) -> Optional[Toast]:
        # Absent files are the FileRequiredHandler's business
        if candidate.has_file and candidate.size > self.max_mb * MB:
            return destructive("File too large", self.description)
        return None


class FileTypeHandler(InputHandler):
    def __init__(self, accept: str, next_handler: Optional[InputHandler] = None) -> None:
        super().__init__(next_handler)
        self.accept = accept

    def accepts(self, mimetype: Optional[str]) -> bool:
        mimetype = (mimetype or '').lower()
        accept = self.accept.lower()
        if accept.endswith('/*'):
            return mimetype.startswith(accept[:-1])
        return mimetype == accept

    def _check(self, candidate: UploadCandidate) -> Optional[Toast]:
        if candidate.has_file and not self.accepts(candidate.mimetype):
            kind = self.accept.split('/')[0]
            return destructive("Invalid file type", f"Please upload a {kind} file")
        return None


class TextContentHandler(InputHandler):
    def _check(self, candidate: UploadCandidate) -> Optional[Toast]:
        if candidate.content is not None and not isinstance(candidate.content, str):
            return destructive("Invalid content", "Note content must be text")
        return None


def build_note_chain(editing: bool = False) -> InputHandler:
    if editing:
        first = TitleRequiredHandler("Note title cannot be empty")
    else:
        first = TitleRequiredHandler("Please provide a title for your note")
    first.set_next(TextContentHandler())
    return first


def build_image_chain(max_upload_mb: float = 5) -> InputHandler:
    # upload widget checks (size, type) -> dialog checks (title, file)
    first = MaxSizeHandler(max_upload_mb)
    nxt = first.set_next(FileTypeHandler("image/*"))
    nxt = nxt.set_next(TitleRequiredHandler("Please provide a title for your image"))
    nxt.set_next(FileRequiredHandler("Image", "Please upload an image file"))
    return first


def build_pdf_chain(max_upload_mb: float = 5, max_pdf_mb: float = 4) -> InputHandler:
    first = MaxSizeHandler(max_upload_mb)
    nxt = first.set_next(FileTypeHandler("application/pdf"))
    nxt = nxt.set_next(TitleRequiredHandler("Please provide a title for your PDF"))
    nxt = nxt.set_next(FileRequiredHandler("PDF", "Please upload a PDF file"))
    nxt.set_next(MaxSizeHandler(max_pdf_mb, f"Please upload a file smaller than {max_pdf_mb:g}MB"))
    return first


def validate(chain: InputHandler, candidate: UploadCandidate) -> Optional[Toast]:
    return chain.handle(candidate)
