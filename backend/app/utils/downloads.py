"""
Download responses for stored files.

Header values go out as latin-1, so user-supplied file names are sent the
way FileResponse sends them: a plain filename="..." when the name is safe,
otherwise an ASCII fallback plus a filename*=utf-8''<percent-encoded> form.
"""
from pathlib import PurePath
from urllib.parse import quote

from fastapi.responses import Response


def _ascii(value: str) -> str:
    return value.encode("ascii", "ignore").decode("ascii").replace('"', "").replace("\\", "")


def _ascii_fallback(filename: str) -> str:
    path = PurePath(filename)
    stem = _ascii(path.stem).strip(" .")
    return f"{stem or 'download'}{_ascii(path.suffix)}"


def content_disposition(filename: str, disposition: str = "attachment") -> str:
    quoted = quote(filename)
    if quoted == filename:
        return f'{disposition}; filename="{filename}"'
    return f"{disposition}; filename=\"{_ascii_fallback(filename)}\"; filename*=utf-8''{quoted}"


def file_download(data: bytes, filename: str, media_type: str) -> Response:
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": content_disposition(filename)},
    )
