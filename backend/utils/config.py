"""Configuration from environment."""
import os


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag; accepts 1/true/yes/on (case-insensitive)."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str = "") -> list[str]:
    """Read a comma-separated list, dropping blanks."""
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


PORT = int(os.environ.get("PORT", "8001"))

# When TESTING=true, use test DB URL so tests never touch production.
if os.environ.get("TESTING") == "true":
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./catalog.db",
    )

# Collection holding the location documents.
LOCATIONS_COLLECTION = os.environ.get("LOCATIONS_COLLECTION", "locations")

# Admin flow: when REQUIRE_AUTH is off every operation is open (public variant).
REQUIRE_AUTH = _env_flag("REQUIRE_AUTH", True)
PUBLIC_READ = _env_flag("PUBLIC_READ", True)
ADMIN_EMAILS = _env_list("ADMIN_EMAIL")

IDENTITY_TOKEN_SECRET = os.environ.get("IDENTITY_TOKEN_SECRET", "change-me")
IDENTITY_TOKEN_ALGORITHM = os.environ.get("IDENTITY_TOKEN_ALGORITHM", "HS256")

# Public object storage host for location images (empty: any https host).
IMAGE_HOSTNAME = os.environ.get("IMAGE_HOSTNAME", os.environ.get("SUPABASE_HOSTNAME", ""))

CORS_ORIGINS = _env_list("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
