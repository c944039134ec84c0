import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Chat",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("kind", models.CharField(choices=[("direct", "Direct"), ("group", "Group"), ("global", "Global Room")], db_index=True, help_text="Kind of chat (direct, group or global)", max_length=10)),
                ("name", models.CharField(blank=True, default="", help_text="Display name (empty for direct chats)", max_length=100)),
                ("description", models.TextField(blank=True, default="", help_text="Room description")),
                ("category", models.CharField(blank=True, default="", help_text="Room category (global rooms)", max_length=50)),
                ("image_url", models.URLField(blank=True, default="", help_text="Opaque room image URL from the media store", max_length=500)),
                ("visibility", models.CharField(choices=[("public", "Public"), ("private", "Private")], default="private", help_text="Whether the chat is public or private", max_length=10)),
                ("member_cap", models.PositiveIntegerField(default=1000, help_text="Maximum number of participants")),
                ("last_message_at", models.DateTimeField(blank=True, help_text="Timestamp of most recent message", null=True)),
                ("created_by", models.ForeignKey(blank=True, help_text="User who created this chat (null for system-created)", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_chats", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "chat_chat",
                "ordering": ["-updated_at", "-id"],
                "indexes": [models.Index(fields=["kind", "updated_at"], name="chat_kind_updated_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("kind", "global"), _negated=True) | models.Q(("visibility", "public")), name="chat_global_is_public"),
                    models.CheckConstraint(condition=models.Q(("kind", "direct"), _negated=True) | models.Q(("member_cap", 2)), name="chat_direct_cap_two"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DirectChatPair",
            fields=[
                ("chat", models.OneToOneField(help_text="The direct chat this pair represents", on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name="direct_pair", serialize=False, to="chat.chat")),
                ("user_higher", models.ForeignKey(help_text="User with higher id in this pair", on_delete=django.db.models.deletion.CASCADE, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("user_lower", models.ForeignKey(help_text="User with lower id in this pair", on_delete=django.db.models.deletion.CASCADE, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "chat_direct_chat_pair",
                "constraints": [
                    models.UniqueConstraint(fields=("user_lower", "user_higher"), name="unique_direct_chat_pair"),
                    models.CheckConstraint(condition=models.Q(("user_lower_id__lt", models.F("user_higher_id"))), name="direct_pair_user_lower_less_than_higher"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text="Server-assigned timestamp that orders the chat log")),
                ("content", models.TextField(blank=True, help_text="Message text (absent for pure-media messages)", null=True)),
                ("message_type", models.CharField(choices=[("text", "Text"), ("image", "Image"), ("file", "File"), ("voice_note", "Voice Note"), ("video_note", "Video Note"), ("video_call", "Video Call"), ("audio_call", "Audio Call")], default="text", help_text="Type of message payload", max_length=20)),
                ("media_url", models.URLField(blank=True, default="", help_text="Opaque media URL", max_length=500)),
                ("media_filename", models.CharField(blank=True, default="", help_text="Original file name", max_length=255)),
                ("media_duration", models.PositiveIntegerField(blank=True, help_text="Duration in seconds (voice/video notes and calls)", null=True)),
                ("media_thumbnail_url", models.URLField(blank=True, default="", help_text="Opaque thumbnail URL", max_length=500)),
                ("edited_at", models.DateTimeField(blank=True, help_text="When the content was last edited", null=True)),
                ("chat", models.ForeignKey(help_text="The chat this message belongs to", on_delete=django.db.models.deletion.CASCADE, related_name="messages", to="chat.chat")),
                ("reply_to", models.ForeignKey(blank=True, db_constraint=False, help_text="Message this replies to (may point at a deleted message)", null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to="chat.message")),
                ("sender", models.ForeignKey(blank=True, help_text="Author (null when the author's account was deleted)", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="chat_messages", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["chat", "created_at", "id"], name="chat_msg_chat_created_idx"),
                    models.Index(fields=["sender"], name="chat_msg_sender_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("chat", models.ForeignKey(help_text="The chat", on_delete=django.db.models.deletion.CASCADE, related_name="participants", to="chat.chat")),
                ("user", models.ForeignKey(help_text="The participating user", on_delete=django.db.models.deletion.CASCADE, related_name="chat_participations", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "chat_participant",
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["user", "chat"], name="chat_participant_user_idx")],
                "constraints": [models.UniqueConstraint(fields=("chat", "user"), name="unique_chat_participant")],
            },
        ),
        migrations.CreateModel(
            name="ReadCursor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("last_read_at", models.DateTimeField(help_text="Messages created at or before this instant are read")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="When the cursor last moved")),
                ("chat", models.ForeignKey(help_text="The chat", on_delete=django.db.models.deletion.CASCADE, related_name="read_cursors", to="chat.chat")),
                ("user", models.ForeignKey(help_text="The reader", on_delete=django.db.models.deletion.CASCADE, related_name="read_cursors", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "chat_read_cursor",
                "constraints": [models.UniqueConstraint(fields=("chat", "user"), name="unique_chat_read_cursor")],
            },
        ),
    ]
