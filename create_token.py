"""Print a long-lived bearer token for the configured account."""
from user_directory_api.app.core.config import settings
from user_directory_api.app.core.security import create_access_token

# 365 days, in seconds
token = create_access_token(
    {"sub": settings.auth_username},
    secret_key=settings.secret_key,
    expires_delta=365 * 24 * 60 * 60,
)
print(token)
