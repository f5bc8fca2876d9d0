class AuthenticationError(Exception):
	pass


class AuthorizationError(Exception):
	pass
