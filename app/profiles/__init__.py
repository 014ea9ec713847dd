"""
Profiles application.

Role-specific profile tables (the canonical source of display names and
avatars) and player follows.
"""
