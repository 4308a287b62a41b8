"""Users app package.

Accounts for office staff (admin, manager, employee) and customers,
plus JWT authentication. ``users.User`` is the project's
AUTH_USER_MODEL.
"""
