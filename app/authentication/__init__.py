"""
Authentication application.

Owns the platform account (User) and its role vocabulary. Token issuance is
handled by djangorestframework-simplejwt; role-specific display data lives in
the profiles app.

Usage:
    from authentication.models import User, UserRole
"""
