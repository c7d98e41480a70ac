"""Unit tests: image URL checks."""
import pytest

from utils.images import is_displayable_image_url

pytestmark = pytest.mark.unit

HOST = "abc.supabase.co"


def test_public_storage_object_is_displayable():
    url = "https://abc.supabase.co/storage/v1/object/public/fotos/plaza.jpg"
    assert is_displayable_image_url(url, HOST)
    assert is_displayable_image_url(url.replace(HOST, HOST.upper()), HOST)


@pytest.mark.parametrize(
    "url",
    [
        "",
        "http://abc.supabase.co/storage/v1/object/public/fotos/a.jpg",
        "https://evil.example.com/storage/v1/object/public/fotos/a.jpg",
        "https://abc.supabase.co/storage/v1/object/sign/fotos/a.jpg",
        "not a url",
    ],
)
def test_rejected_urls(url):
    assert not is_displayable_image_url(url, HOST)


def test_any_https_host_without_configured_host():
    assert is_displayable_image_url("https://cdn.example.com/a.png")
    assert not is_displayable_image_url("ftp://cdn.example.com/a.png")
