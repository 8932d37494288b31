"""Domain-Oriented Observability for access application services."""

from access.application.observability.access_grant_service_probe import (
    AccessGrantServiceProbe,
    DefaultAccessGrantServiceProbe,
)
from access.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from access.application.observability.impersonation_probe import (
    DefaultImpersonationProbe,
    ImpersonationProbe,
)
from access.application.observability.principal_service_probe import (
    DefaultPrincipalServiceProbe,
    PrincipalServiceProbe,
)
from access.application.observability.tenant_context_probe import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from access.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from access.application.observability.webhook_probe import (
    DefaultWebhookProbe,
    WebhookProbe,
)

__all__ = [
    "AccessGrantServiceProbe",
    "AuthenticationProbe",
    "DefaultAccessGrantServiceProbe",
    "DefaultAuthenticationProbe",
    "DefaultImpersonationProbe",
    "DefaultPrincipalServiceProbe",
    "DefaultTenantContextProbe",
    "DefaultTenantServiceProbe",
    "DefaultWebhookProbe",
    "ImpersonationProbe",
    "PrincipalServiceProbe",
    "TenantContextProbe",
    "TenantServiceProbe",
    "WebhookProbe",
]
