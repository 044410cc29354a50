"""Input validation for uploads and URLs, plus display formatting helpers.

Every ``validate_*`` function returns ``None`` on success and raises
``ValidationError`` (title + actionable description) on failure.
"""

from __future__ import annotations

import re
import urllib.parse

from docchat.errors import ValidationError

MAX_FILE_NAME_LENGTH = 255
MAX_URL_LENGTH = 2048
_ALLOWED_SCHEMES = {"http", "https"}

# Host literals that point at internal networks. Resolved addresses are
# checked again by the default scraper.
_PRIVATE_HOST_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^127\."),
    re.compile(r"^10\."),
    re.compile(r"^172\.(1[6-9]|2\d|3[0-1])\."),
    re.compile(r"^192\.168\."),
    re.compile(r"^169\.254\."),
    re.compile(r"^0\."),
    re.compile(r"^224\."),
    re.compile(r"^255\."),
    re.compile(r"^::1$"),
    re.compile(r"localhost", re.IGNORECASE),
)


# ------------------------------------------------------------------
# Files
# ------------------------------------------------------------------


def validate_file_name(name: str) -> None:
    if not name.strip():
        raise ValidationError("Invalid file name", "File name is empty.")
    if ".." in name or "/" in name or "\\" in name:
        raise ValidationError(
            "Invalid file name",
            "File name contains invalid characters. Please rename the file.",
        )
    if "\0" in name:
        raise ValidationError("Invalid file name", "File name contains null bytes.")
    if len(name) > MAX_FILE_NAME_LENGTH:
        raise ValidationError(
            "File name too long",
            f"File name must be less than {MAX_FILE_NAME_LENGTH} characters.",
        )


def validate_file_size(name: str, size: int, max_size: int) -> None:
    if size > max_size:
        raise ValidationError(
            f"File size exceeds {format_file_size(max_size)} limit",
            f'File "{name}" is {format_file_size(size)}. Please upload a smaller file.',
        )


def validate_file_content(name: str, content: str, max_length: int) -> None:
    """Reject extracted text that is blank or longer than *max_length* characters."""
    if len(content) > max_length:
        raise ValidationError(
            "File content too large",
            f'"{name}" contains {len(content):,} characters. Maximum is {max_length:,}.',
        )
    if not content.strip():
        raise ValidationError(
            "File is empty",
            f'"{name}" appears to be empty or contains only whitespace.',
        )


# ------------------------------------------------------------------
# URLs
# ------------------------------------------------------------------


def validate_url(url: str) -> None:
    """Syntactic URL checks: length, scheme, internal host literals."""
    if len(url) > MAX_URL_LENGTH:
        raise ValidationError(
            "URL too long", f"URL must be less than {MAX_URL_LENGTH} characters."
        )

    try:
        parsed = urllib.parse.urlparse(url.strip())
        hostname = (parsed.hostname or "").lower()
    except ValueError as exc:
        raise ValidationError(
            "Invalid URL format", "Please enter a valid URL (e.g., https://example.com)"
        ) from exc

    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_SCHEMES:
        raise ValidationError(
            "Unsupported protocol",
            f"Only HTTP and HTTPS URLs are supported. Found: {scheme or '(none)'}",
        )

    if not hostname:
        raise ValidationError(
            "Invalid URL format", "Please enter a valid URL (e.g., https://example.com)"
        )

    if any(p.search(hostname) for p in _PRIVATE_HOST_PATTERNS):
        raise ValidationError(
            "Private IP address not allowed",
            "Cannot scrape internal/private IP addresses for security reasons.",
        )

    if ".." in hostname or hostname.startswith(".") or hostname.endswith("."):
        raise ValidationError("Invalid hostname", "Hostname contains suspicious patterns.")


# ------------------------------------------------------------------
# Display helpers
# ------------------------------------------------------------------


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


def format_content_length(length: int) -> str:
    if length < 1000:
        return f"{length} characters"
    if length < 1_000_000:
        return f"{length / 1000:.1f}K characters"
    return f"{length / 1_000_000:.1f}M characters"
