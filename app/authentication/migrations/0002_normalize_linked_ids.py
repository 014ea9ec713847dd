"""
Rewrite stored profile links in canonical UUID form.

Accounts imported from the legacy admin tables carry linked ids in mixed
forms (uppercase, 32-char hex). Recipient queries match linked ids by exact
string, so every UUID-shaped value is stored lowercase and hyphenated.
"""

import uuid

from django.db import migrations


def normalize_linked_ids(apps, schema_editor):
    User = apps.get_model("authentication", "User")

    for user in User.objects.exclude(linked_id="").only("id", "linked_id").iterator():
        text = user.linked_id.strip()
        try:
            canonical = str(uuid.UUID(text))
        except ValueError:
            canonical = text
        if canonical != user.linked_id:
            User.objects.filter(pk=user.pk).update(linked_id=canonical)


class Migration(migrations.Migration):
    dependencies = [
        ("authentication", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(normalize_linked_ids, migrations.RunPython.noop),
    ]
