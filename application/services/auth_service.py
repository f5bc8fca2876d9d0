import hmac
import logging
from collections.abc import Iterable

from domain.exceptions.auth import AuthenticationError, AuthorizationError
from domain.models.auth import IssuedToken, UserCredential
from infrastructure.security.jwt_handler import JWTHandler

logger = logging.getLogger(__name__)


class AuthService:
	def __init__(self, credentials: Iterable[UserCredential], jwt_handler: JWTHandler):
		self._credentials = {c.username.lower(): c for c in credentials}
		self.jwt_handler = jwt_handler

	def sign_in(self, username: str, password: str) -> IssuedToken:
		credential = self._credentials.get((username or '').lower())
		if credential is None or not hmac.compare_digest(credential.password.encode(), (password or '').encode()):
			logger.warning(f'Failed sign-in attempt for {username!r}')
			raise AuthenticationError('Invalid username or password')

		token, expires_at = self.jwt_handler.create_access_token(credential.username, list(credential.roles))
		logger.info(f'Issued token for {credential.username}')
		return IssuedToken(access_token=token, expires_at=expires_at, roles=list(credential.roles))

	def authenticate(self, token: str) -> dict:
		if not token:
			raise AuthenticationError('Missing bearer token')
		return self.jwt_handler.decode_access_token(token)

	@staticmethod
	def authorize(claims: dict, allowed_roles: Iterable[str]) -> None:
		allowed = set(allowed_roles)
		if not allowed.intersection(claims.get('roles') or []):
			raise AuthorizationError(f"User {claims.get('sub')} lacks a required role: {', '.join(sorted(allowed))}")
