"""Image URL checks for the public object storage host."""
from urllib.parse import urlparse

PUBLIC_OBJECT_PREFIX = "/storage/v1/object/public/"


def is_displayable_image_url(url: str, image_hostname: str = "") -> bool:
    """
    True when the URL can be rendered as a location image.

    Requires https. With an image host configured the host must match and the
    path must be a public storage object; without one any https URL passes.
    """
    if not url:
        return False
    parsed = urlparse(url)
    if parsed.scheme != "https" or not parsed.hostname:
        return False
    if not image_hostname:
        return True
    return parsed.hostname == image_hostname.lower() and parsed.path.startswith(PUBLIC_OBJECT_PREFIX)

