"""Default provider collaborators: the httpx OAuth client and user loader."""

from gatehouse.oauth.client import HTTPOAuthClient, OAuthClient
from gatehouse.oauth.user import UserLoader, fetch_user, load_user

__all__ = ["HTTPOAuthClient", "OAuthClient", "UserLoader", "fetch_user", "load_user"]
