"""Signed-cookie implementations of the per-browser state ports.

Values are signed with itsdangerous so the browser can carry them but
not forge them. Signatures are time-stamped; a value older than the
configured maximum age is treated as absent.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from starlette.responses import Response

from access.domain.aggregates import Principal
from access.domain.impersonation import ImpersonationSnapshot
from access.domain.value_objects import PrincipalRole
from access.infrastructure.observability import (
    CookieStoreProbe,
    DefaultCookieStoreProbe,
)
from access.ports.session_state import (
    IActiveTenantPreferenceStore,
    IImpersonationStore,
)
from infrastructure.settings import SessionSettings

_ACTIVE_TENANT_SALT = "portal.active-tenant"
_IMPERSONATION_SALT = "portal.impersonation"
_IMPERSONATION_ACTIVE_TENANT_SALT = "portal.impersonation.active-tenant"


class SignedCookie:
    """One signed cookie read from a request and written to a response.

    Args:
        name: Cookie name
        salt: Serializer salt, distinct per cookie so values cannot be swapped
        settings: Session settings (secret key, secure flag)
        cookies: Cookies of the incoming request
        response: Outgoing response receiving Set-Cookie headers
        max_age: Signature lifetime in seconds
        persistent: Send Max-Age to the browser; otherwise a session cookie
        probe: Optional domain probe for observability

    Raises:
        ValueError: If no signing key is configured
    """

    def __init__(
        self,
        name: str,
        salt: str,
        settings: SessionSettings,
        cookies: Mapping[str, str],
        response: Response,
        max_age: int,
        persistent: bool,
        probe: CookieStoreProbe | None = None,
    ) -> None:
        if not settings.signing_configured:
            raise ValueError("Cookie signing key is not configured")
        self._name = name
        self._serializer = URLSafeTimedSerializer(
            settings.secret_key.get_secret_value(), salt=salt
        )
        self._secure = settings.secure_cookies
        self._cookies = cookies
        self._response = response
        self._max_age = max_age
        self._persistent = persistent
        self._probe = probe or DefaultCookieStoreProbe()
        # Value written during this request, if any. None means "cleared".
        self._written: tuple[Any] | None = None

    def load(self) -> Any | None:
        if self._written is not None:
            return self._written[0]

        raw = self._cookies.get(self._name)
        if not raw:
            return None
        try:
            return self._serializer.loads(raw, max_age=self._max_age)
        except SignatureExpired:
            self._probe.cookie_rejected(self._name, "expired")
        except BadSignature:
            self._probe.cookie_rejected(self._name, "bad_signature")
        return None

    def dump(self, value: Any) -> None:
        self._written = (value,)
        self._response.set_cookie(
            key=self._name,
            value=self._serializer.dumps(value),
            max_age=self._max_age if self._persistent else None,
            httponly=True,
            secure=self._secure,
            samesite="lax",
            path="/",
        )

    def delete(self) -> None:
        self._written = (None,)
        self._response.delete_cookie(
            key=self._name,
            path="/",
            httponly=True,
            secure=self._secure,
            samesite="lax",
        )


class CookieActiveTenantPreferenceStore(IActiveTenantPreferenceStore):
    """Active-tenant preference of one principal, kept in a signed cookie.

    The cookie records whose preference it is. A value saved for another
    principal (a different login on the same browser) reads as absent and
    is overwritten on the next write.

    An administrator's own preference lives in a persistent cookie. While
    impersonating, the target's selection goes to a separate session
    cookie so the administrator's choice survives the impersonation.
    """

    def __init__(
        self,
        settings: SessionSettings,
        cookies: Mapping[str, str],
        response: Response,
        owner_id: str,
        impersonating: bool = False,
        probe: CookieStoreProbe | None = None,
    ) -> None:
        self._owner_id = owner_id
        self._probe = probe or DefaultCookieStoreProbe()
        if impersonating:
            self._cookie = SignedCookie(
                name=settings.impersonation_active_tenant_cookie,
                salt=_IMPERSONATION_ACTIVE_TENANT_SALT,
                settings=settings,
                cookies=cookies,
                response=response,
                max_age=settings.impersonation_max_age_seconds,
                persistent=False,
                probe=self._probe,
            )
        else:
            self._cookie = SignedCookie(
                name=settings.active_tenant_cookie,
                salt=_ACTIVE_TENANT_SALT,
                settings=settings,
                cookies=cookies,
                response=response,
                max_age=settings.active_tenant_max_age_seconds,
                persistent=True,
                probe=self._probe,
            )

    def read(self) -> str | None:
        value = self._cookie.load()
        if value is None:
            return None
        if (
            not isinstance(value, dict)
            or not isinstance(value.get("principal_id"), str)
            or not isinstance(value.get("tenant_id"), str)
            or not value["tenant_id"]
        ):
            self._probe.cookie_rejected("active_tenant", "malformed")
            return None
        if value["principal_id"] != self._owner_id:
            return None
        return value["tenant_id"]

    def write(self, tenant_id: str) -> None:
        self._cookie.dump({"principal_id": self._owner_id, "tenant_id": tenant_id})

    def clear(self) -> None:
        self._cookie.delete()


class CookieImpersonationStore(IImpersonationStore):
    """Impersonation snapshot kept in a signed session cookie.

    The browser drops the cookie when it closes; the signature additionally
    expires after the configured impersonation lifetime.
    """

    def __init__(
        self,
        settings: SessionSettings,
        cookies: Mapping[str, str],
        response: Response,
        probe: CookieStoreProbe | None = None,
    ) -> None:
        self._probe = probe or DefaultCookieStoreProbe()
        self._cookie = SignedCookie(
            name=settings.impersonation_cookie,
            salt=_IMPERSONATION_SALT,
            settings=settings,
            cookies=cookies,
            response=response,
            max_age=settings.impersonation_max_age_seconds,
            persistent=False,
            probe=self._probe,
        )

    def load(self) -> ImpersonationSnapshot | None:
        payload = self._cookie.load()
        if payload is None:
            return None
        try:
            return _snapshot_from_payload(payload)
        except (AttributeError, KeyError, TypeError, ValueError):
            self._probe.cookie_rejected("impersonation", "malformed")
            return None

    def save(self, snapshot: ImpersonationSnapshot) -> None:
        self._cookie.dump(_snapshot_to_payload(snapshot))

    def clear(self) -> None:
        self._cookie.delete()


def _snapshot_to_payload(snapshot: ImpersonationSnapshot) -> dict[str, str]:
    return {
        "impersonator_id": snapshot.impersonator_id,
        "id": snapshot.target.id,
        "email": snapshot.target.email,
        "name": snapshot.target.name,
        "role": snapshot.target.role.value,
        "started_at": snapshot.started_at.isoformat(),
    }


def _snapshot_from_payload(payload: dict[str, str]) -> ImpersonationSnapshot:
    return ImpersonationSnapshot(
        impersonator_id=payload["impersonator_id"],
        target=Principal(
            id=payload["id"],
            email=payload.get("email", ""),
            name=payload.get("name", ""),
            role=PrincipalRole(payload["role"]),
        ),
        started_at=datetime.fromisoformat(payload["started_at"]),
    )
