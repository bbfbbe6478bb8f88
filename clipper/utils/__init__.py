from .filename import attachment_filename, sanitize_title, url_fallback_name
from .filesize import format_file_size

__all__ = ["attachment_filename", "format_file_size", "sanitize_title", "url_fallback_name"]
