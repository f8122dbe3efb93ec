"""Root conftest — shared test configuration."""

import os

# Never verify tokens with a real secret or touch a real database
os.environ.setdefault(
    "AUTH_JWT_SECRET", "test-secret-for-signing-identity-tokens-0123456789",
)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "s3cret-admin-pass")
os.environ.setdefault("LOG_FORMAT", "text")
