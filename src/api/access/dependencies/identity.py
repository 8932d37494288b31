"""Identity provider admin client dependency."""

from functools import lru_cache

from access.infrastructure.identity_provider import HttpIdentityProvider
from access.ports.identity import IIdentityProvider
from infrastructure.settings import get_oidc_settings


@lru_cache
def get_identity_provider() -> IIdentityProvider:
    """Get the cached identity provider client.

    Cached so the admin access token is reused across requests.
    """
    settings = get_oidc_settings()
    return HttpIdentityProvider(
        issuer_url=settings.issuer_url,
        admin_api_url=settings.admin_api_url,
        client_id=settings.client_id,
        client_secret=settings.client_secret.get_secret_value(),
        role_attribute=settings.role_claim.rsplit(".", 1)[-1],
    )
