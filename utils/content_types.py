"""
MIME-type mapping for object keys
"""
import mimetypes

from models.storage_model import DEFAULT_CONTENT_TYPE

DEFAULT_EXTENSION = ".bin"

OBJECT_MIMETYPES = {
    # Documents
    ".pdf": "application/pdf",
    ".txt": "text/plain; charset=utf-8",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",

    # Archives
    ".zip": "application/zip",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    ".7z": "application/x-7z-compressed",

    # Images
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",

    # Audio
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".flac": "audio/flac",
    ".aac": "audio/aac",
    ".ogg": "audio/ogg",

    # Video
    ".mp4": "video/mp4",
    ".mkv": "video/x-matroska",
    ".mov": "video/quicktime",
    ".webm": "video/webm",

    # Markup / data
    ".json": "application/json",
    ".xml": "text/xml; charset=utf-8",
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".csv": "text/csv",

    ".bin": DEFAULT_CONTENT_TYPE,
}


def resolve_extension(object_name: str) -> str:
    """
    Extension of the key's last path element, dot included.

    Keys without one (or ending in a bare dot) resolve to `.bin`.
    """
    base = object_name.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    if dot < 0 or dot == len(base) - 1:
        return DEFAULT_EXTENSION
    return base[dot:]


def get_mimetype_for_extension(ext: str) -> str:
    ext = ext.lower()
    if ext in OBJECT_MIMETYPES:
        return OBJECT_MIMETYPES[ext]
    guessed, _ = mimetypes.guess_type(f"object{ext}", strict=False)
    return guessed or DEFAULT_CONTENT_TYPE


def get_mimetype_for_file(filename: str) -> str:
    """MIME type inferred from a key or filename"""
    return get_mimetype_for_extension(resolve_extension(filename))
