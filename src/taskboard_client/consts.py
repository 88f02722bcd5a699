"""High-value constants for the taskboard client package."""

# Package metadata
PACKAGE_VERSION = "1.0.0"
CLIENT_NAME = "taskboard-client"
USER_AGENT = f"{CLIENT_NAME}/{PACKAGE_VERSION}"

# External API contract consts
TOKEN_URL_PATH = "/api/token/"
REFRESH_URL_PATH = "/api/token/refresh/"

# Credential store keys
ACCESS_TOKEN_KEY = "token"
REFRESH_TOKEN_KEY = "refreshToken"

# Business logic consts
UNAUTHORIZED_STATUS = 401
BEARER_SCHEME = "Bearer"
