"""
Schools application.

School tenants and their subscription payment records. The notification
engine reads these to phrase payment notifications and to find subscriptions
about to expire.
"""
