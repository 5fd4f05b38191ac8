"""
Meeting URL validation.

Only URLs from the meeting platforms the bot can join are forwarded to
the provider:
- Zoom (zoom.us, zoomgov.com)
- Google Meet (meet.google.com)
- Microsoft Teams (teams.microsoft.com, teams.live.com)
"""

from typing import ClassVar
from urllib.parse import urlparse

from meeting_recorder.errors import InvalidMeetingUrlError


class UrlValidator:
    """Validator for meeting URLs against a platform whitelist."""

    ALLOWED_DOMAINS: ClassVar[list[str]] = [
        # Zoom
        "zoom.us",
        "zoomgov.com",
        # Google Meet
        "meet.google.com",
        # Microsoft Teams
        "teams.microsoft.com",
        "teams.live.com",
    ]

    @staticmethod
    def validate_meeting_url(url: str) -> tuple[bool, str]:
        """
        Validate that a meeting URL is from an allowed platform.

        Args:
            url: The meeting URL to validate

        Returns:
            Tuple of (is_valid, error_message)

        Examples:
            >>> UrlValidator.validate_meeting_url("https://zoom.us/j/123")
            (True, '')
        """
        if not url or not url.strip():
            return False, "meeting_url is required"

        parsed = urlparse(url.strip())

        if parsed.scheme not in ("http", "https"):
            return False, "Meeting URL must use http or https"

        domain = (parsed.hostname or "").lower()
        is_allowed = any(
            domain == allowed or domain.endswith("." + allowed)
            for allowed in UrlValidator.ALLOWED_DOMAINS
        )

        if not is_allowed:
            allowed_str = ", ".join(UrlValidator.ALLOWED_DOMAINS)
            return False, f"Meeting URL domain not supported. Allowed: {allowed_str}"

        return True, ""

    @classmethod
    def require_meeting_url(cls, url: str) -> str:
        """Return the stripped URL, or raise InvalidMeetingUrlError."""
        is_valid, error = cls.validate_meeting_url(url)
        if not is_valid:
            raise InvalidMeetingUrlError(error)
        return url.strip()
