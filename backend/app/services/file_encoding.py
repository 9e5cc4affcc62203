"""
Upload validation and data-URL encoding for profile photos and resumes.

Two limits apply: the raw file must be at most max_upload_bytes (5 MB), and
when files are kept inline the encoded data URL must be at most
max_encoded_chars (900,000 characters).
"""
import base64
from dataclasses import dataclass

from backend.app.core.config import PHOTO_MIME_TYPES, RESUME_MIME_TYPES, settings
from backend.app.core.errors import FileRejected, ValidationFailed

PHOTO = "photo"
RESUME = "resume"
DOCUMENT = "document"

_ALLOWED = {
    PHOTO: (PHOTO_MIME_TYPES, "Only JPG, JPEG, PNG allowed"),
    RESUME: (RESUME_MIME_TYPES, "Only PDF, DOC, DOCX allowed for resume"),
    DOCUMENT: (RESUME_MIME_TYPES, "Only PDF, DOC, DOCX allowed for document"),
}
_LABELS = {PHOTO: "Photo", RESUME: "Resume", DOCUMENT: "Document"}


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class DownloadedFile:
    filename: str
    content_type: str
    data: bytes


def validate_upload(kind: str, upload: UploadedFile) -> None:
    """Raw size and MIME checks. Raises FileRejected."""
    if kind not in _ALLOWED:
        raise ValidationFailed(f"Unknown file kind: {kind}")
    if upload.size > settings.max_upload_bytes:
        mb = settings.max_upload_bytes // (1024 * 1024)
        raise FileRejected(f"{_LABELS[kind]} must be less than {mb}MB", upload.filename)
    allowed, message = _ALLOWED[kind]
    if (upload.content_type or "").lower() not in allowed:
        raise FileRejected(message, upload.filename)


def encode_data_url(upload: UploadedFile, max_chars: int | None = None) -> str:
    """
    Encode bytes as data:<mime>;base64,<payload>.
    When max_chars is given, reject encodings longer than that.
    """
    payload = base64.b64encode(upload.data).decode("ascii")
    data_url = f"data:{upload.content_type};base64,{payload}"
    if max_chars is not None and len(data_url) > max_chars:
        raise FileRejected(
            f'File "{upload.filename}" is too large. Please upload a smaller file.',
            upload.filename,
        )
    return data_url


def decode_data_url(value: str) -> bytes:
    """Decode a data URL (or a bare base64 string) back to raw bytes."""
    if not value:
        raise ValidationFailed("No file data")
    _, sep, payload = value.partition(",")
    encoded = payload if sep and value.startswith("data:") else value
    try:
        return base64.b64decode(encoded, validate=False)
    except (ValueError, TypeError) as e:
        raise ValidationFailed("File data is not valid base64") from e


def data_url_mime(value: str, default: str = "application/octet-stream") -> str:
    """MIME type declared by a data URL, or default."""
    if not value or not value.startswith("data:"):
        return default
    header = value[5:].split(",", 1)[0]
    mime = header.split(";", 1)[0]
    return mime or default


def is_data_url(value: str | None) -> bool:
    return bool(value) and value.startswith("data:")
