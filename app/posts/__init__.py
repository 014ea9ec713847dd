"""
Posts application.

Player posts with likes and comments. Post creation, likes and comments
trigger notifications through notifications.dispatch.
"""
