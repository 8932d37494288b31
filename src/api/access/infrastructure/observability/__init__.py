"""Domain-Oriented Observability for access infrastructure."""

from access.infrastructure.observability.cookie_store_probe import (
    CookieStoreProbe,
    DefaultCookieStoreProbe,
)
from access.infrastructure.observability.identity_provider_probe import (
    DefaultIdentityProviderProbe,
    IdentityProviderProbe,
)
from access.infrastructure.observability.repository_probe import (
    AccessGrantRepositoryProbe,
    DefaultAccessGrantRepositoryProbe,
    DefaultPrincipalRepositoryProbe,
    DefaultTenantRepositoryProbe,
    PrincipalRepositoryProbe,
    TenantRepositoryProbe,
)

__all__ = [
    "AccessGrantRepositoryProbe",
    "CookieStoreProbe",
    "DefaultAccessGrantRepositoryProbe",
    "DefaultCookieStoreProbe",
    "DefaultIdentityProviderProbe",
    "DefaultPrincipalRepositoryProbe",
    "DefaultTenantRepositoryProbe",
    "IdentityProviderProbe",
    "PrincipalRepositoryProbe",
    "TenantRepositoryProbe",
]
