"""
Route decorators for authentication and authorization.
Provides role-based access control for API routes.
"""

from functools import wraps
from flask_login import login_required, current_user

from utils.api_response import api_error
from utils.messages import MESSAGES


def role_required(*roles: str):
    """
    Decorator to require one of the given roles for a route.
    Must be applied after @login_required.

    Usage:
        @bp.route('/users')
        @login_required
        @role_required('admin')
        def list_users():
            ...

    Args:
        roles: Role names allowed to access the route (e.g., 'admin', 'employee')

    Returns:
        Decorator function
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if current_user.role not in roles:
                return api_error(MESSAGES['permission_denied'], status=403, kind='forbidden')

            return func(*args, **kwargs)
        return wrapper
    return decorator


# Staff roles allowed to operate the admin panel
STAFF_ROLES = ('admin', 'employee')

# Re-export login_required for convenience
__all__ = ['login_required', 'role_required', 'STAFF_ROLES']
