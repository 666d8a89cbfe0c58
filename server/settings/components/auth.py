"""Bearer token settings."""

from server.settings.components import config

# Signing key defaults to Django's SECRET_KEY
JWT_SECRET_KEY = config('JWT_SECRET_KEY', default='')
JWT_ALGORITHM = config('JWT_ALGORITHM', default='HS256')

# Tokens are valid for a fixed window from signup/login, no refresh
JWT_EXPIRATION_DAYS = config('JWT_EXPIRATION_DAYS', cast=int, default=7)
