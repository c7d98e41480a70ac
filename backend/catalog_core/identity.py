"""Identity provider: verifies signed identity tokens and notifies subscribers on change."""
import logging
import typing as t
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from catalog_core.errors import SignInError

LOG = logging.getLogger(__name__)

IdentityListener = t.Callable[[t.Optional["Identity"]], None]


@dataclass(frozen=True)
class Identity:
    """A signed-in user as asserted by the identity token."""

    email: str
    email_verified: bool = True
    subject: str = ""
    expires_at: t.Optional[datetime] = None

    def is_expired(self, now: t.Optional[datetime] = None) -> bool:
        """True once the token expiry has passed."""
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at


class IdentityProvider(t.Protocol):
    """What the controller and the transport need from an identity source."""

    @property
    def current(self) -> t.Optional[Identity]: ...

    def sign_in(self, credential: str) -> Identity: ...

    def sign_out(self) -> None: ...

    def on_identity_change(self, callback: IdentityListener) -> t.Callable[[], None]: ...


def issue_identity_token(
    email: str,
    secret: str,
    *,
    algorithm: str = "HS256",
    email_verified: bool = True,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed identity token (used by the login tooling and tests).

    Args:
        email (str): Address asserted by the token.
        secret (str): Signing secret shared with the provider.
        algorithm (str): JWT signing algorithm.
        email_verified (bool): Whether the address is verified.
        expires_delta (timedelta | None): Lifetime; defaults to one hour.

    Returns:
        str: The encoded JWT.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    claims: t.Dict[str, t.Any] = {
        "sub": email,
        "email": email,
        "email_verified": email_verified,
        "exp": expire,
    }
    return str(jwt.encode(claims, secret, algorithm=algorithm))


class TokenIdentityProvider:
    """
    Holds the current identity of this admin console.

    sign_in verifies a JWT (signature, expiry, verified email claim); listeners
    are notified on every change and once immediately on subscribe.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._current: t.Optional[Identity] = None
        self._listeners: list[IdentityListener] = []

    @property
    def current(self) -> t.Optional[Identity]:
        return self._current

    def verify(self, credential: str) -> Identity:
        """Decode and check a token without signing in.

        Raises:
            SignInError: bad signature, expired token, or no verified email.
        """
        try:
            payload: t.Dict[str, t.Any] = jwt.decode(
                credential, self._secret, algorithms=[self._algorithm]
            )
        except JWTError as e:
            raise SignInError(f"invalid identity token: {e}") from e
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise SignInError("identity token has no email")
        if payload.get("email_verified") is not True:
            raise SignInError("email address is not verified")
        exp = payload.get("exp")
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc) if isinstance(exp, (int, float)) else None
        return Identity(
            email=email,
            email_verified=True,
            subject=str(payload.get("sub") or email),
            expires_at=expires_at,
        )

    def sign_in(self, credential: str) -> Identity:
        identity = self.verify(credential)
        LOG.info("Signed in as %s", identity.email)
        self._set(identity)
        return identity

    def sign_out(self) -> None:
        if self._current is not None:
            LOG.info("Signed out %s", self._current.email)
        self._set(None)

    def on_identity_change(self, callback: IdentityListener) -> t.Callable[[], None]:
        self._listeners.append(callback)
        callback(self._current)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set(self, identity: t.Optional[Identity]) -> None:
        self._current = identity
        for listener in list(self._listeners):
            listener(identity)
