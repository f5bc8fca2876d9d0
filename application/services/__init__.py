from .auth_service import AuthService
from .currency_service import CurrencyService

__all__ = ['AuthService', 'CurrencyService']
