"""Users app package.

Defines the custom user model that doubles as the guest identity record,
keyed by case-insensitive email, with a role tag separating guests from
staff and sales agents. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
