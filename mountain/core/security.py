from fastapi import HTTPException
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer

TOKEN_REQUIRED = "Authorization Bearer token is required"

bearer_scheme = HTTPBearer(auto_error=False)


def extract_bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    """Extract the GitHub token carried as a Bearer credential.

    Raises:
        HTTPException: If credentials are missing, malformed, or empty.
    """

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail=TOKEN_REQUIRED)

    token = credentials.credentials.strip()
    if not token:
        raise HTTPException(status_code=401, detail=TOKEN_REQUIRED)
    return token


def github_token(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
) -> str:
    """Dependency resolving the caller's GitHub token."""

    return extract_bearer_token(credentials)
