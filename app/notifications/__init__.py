"""
Notifications app: fan-out and delivery engine.

This app provides:
- Notification model with a database-enforced deduplication key
- RecipientResolver for follower/role/explicit recipient sets
- IdentityResolver for actor names and avatars across profile tables
- NotificationDispatcher and notify_* producer functions (fire-and-forget
  through Celery)
- NotificationService for idempotent writes and the feed read path
- REST API for the feed, unread count and read state

Usage:
    from notifications.dispatch import notify_post_commented

    comment = PostComment.objects.create(user=user, post=post, content=text)
    notify_post_commented(comment.id)
"""
