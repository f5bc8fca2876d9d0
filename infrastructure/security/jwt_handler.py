"""
JWT access token creation and validation.

Tokens are stateless: nothing is persisted, a token stays valid until its
`exp` claim passes. Claims carried:
- sub: username
- roles: list of role names
- iss / aud: configured issuer and audience
- exp / iat: expiry and issue timestamps
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from domain.exceptions.auth import AuthenticationError


class JWTHandler:
	def __init__(
		self,
		secret_key: str,
		algorithm: str = 'HS256',
		expire_minutes: int = 60,
		issuer: str | None = None,
		audience: str | None = None,
	):
		self.secret_key = secret_key
		self.algorithm = algorithm
		self.expire_minutes = expire_minutes
		self.issuer = issuer
		self.audience = audience

	def create_access_token(self, subject: str, roles: list[str]) -> tuple[str, datetime]:
		now = datetime.now(timezone.utc)
		expires_at = now + timedelta(minutes=self.expire_minutes)

		payload: dict[str, Any] = {
			'sub': subject,
			'roles': roles,
			'iat': now,
			'exp': expires_at,
		}
		if self.issuer:
			payload['iss'] = self.issuer
		if self.audience:
			payload['aud'] = self.audience

		token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
		return token, expires_at

	def decode_access_token(self, token: str) -> dict[str, Any]:
		"""
		Validate signature, expiry, issuer and audience.

		Raises:
			AuthenticationError: if the token is expired, malformed or forged
		"""
		try:
			return jwt.decode(
				token,
				self.secret_key,
				algorithms=[self.algorithm],
				audience=self.audience,
				issuer=self.issuer,
			)
		except ExpiredSignatureError as e:
			raise AuthenticationError('Access token has expired') from e
		except JWTError as e:
			raise AuthenticationError(f'Invalid token: {e}') from e
