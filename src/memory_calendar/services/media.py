"""Media classification and bucket URL helpers."""

from datetime import datetime
from urllib.parse import quote, unquote, urlparse

from memory_calendar.domain.media import MediaClassification, MediaType

WEB_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".gif", ".svg"})
WEB_VIDEO_EXTENSIONS = frozenset({".mp4", ".webm"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".webm", ".avi", ".mkv", ".wmv"})
MEDIA_EXTENSIONS = (
    WEB_IMAGE_EXTENSIONS
    | {".heic", ".heif"}
    | {".tiff", ".tif", ".bmp"}
    | {".raw", ".cr2", ".nef", ".arw", ".dng"}
    | VIDEO_EXTENSIONS
)


def extension(key: str) -> str:
    """Return the lowercase extension of a key, including the dot."""
    index = key.rfind(".")
    return key[index:].lower() if index >= 0 else ""


def is_media(key: str) -> bool:
    """Return True for any recognised image or video key."""
    return extension(key) in MEDIA_EXTENSIONS


def is_web_media(key: str) -> bool:
    """Return True for media a browser can display natively."""
    ext = extension(key)
    return ext in WEB_IMAGE_EXTENSIONS or ext in WEB_VIDEO_EXTENSIONS


def classify_media(key: str) -> MediaClassification:
    """Classify a key as image or video and flag web support."""
    ext = extension(key)
    if ext in VIDEO_EXTENSIONS:
        return MediaClassification(
            media_type=MediaType.VIDEO, web_displayable=ext in WEB_VIDEO_EXTENSIONS
        )
    return MediaClassification(
        media_type=MediaType.IMAGE, web_displayable=ext in WEB_IMAGE_EXTENSIONS
    )


def object_url(bucket: str, region: str, key: str) -> str:
    """Build the public URL of an object, encoding each path segment."""
    encoded_path = "/".join(quote(segment, safe="!*'()") for segment in key.split("/"))
    return f"https://{bucket}.s3.{region}.amazonaws.com/{encoded_path}"


def key_from_url(url: str) -> str | None:
    """Recover the object key from a public object URL."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return unquote(parsed.path.lstrip("/"))


def format_day(moment: datetime) -> str:
    """Format a timestamp as a local calendar day."""
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime("%Y-%m-%d")
