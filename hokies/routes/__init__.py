from .auth import auth_bp
from .admin import admin_bp
from .storefront import storefront_bp


__all__ = [
    'auth_bp',
    'admin_bp',
    'storefront_bp',
]
