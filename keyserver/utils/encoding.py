import secrets

# Uppercase alphanumerics; url paths carry the lowercased form
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
LICENSE_KEY_LENGTH = 16
SESSION_TOKEN_BYTES = 32

DAILY_PATH_PREFIX = "key"
PREMIUM_PATH_PREFIX = "premium"
ADMIN_PATH_PREFIX = "vip"


def generate_license_key(length: int = LICENSE_KEY_LENGTH) -> str:
    """Generate a cryptographically secure random alphanumeric license key."""
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def build_url_path(prefix: str, license_key: str) -> str:
    """Routable slug embedding the key, e.g. ``key/ab12cd34ef56gh78``."""
    return f"{prefix}/{license_key.lower()}"


def normalize_url_path(url_path: str) -> str:
    return url_path.strip().strip("/").lower()


def generate_session_token() -> str:
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def mask_token(token: str) -> str:
    """Shorten a bearer token for log lines."""
    if len(token) <= 8:
        return "***"
    return f"{token[:6]}..."
