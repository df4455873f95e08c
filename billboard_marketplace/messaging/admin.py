from django.contrib import admin

from .models import Conversation
from .models import Message


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    raw_id_fields = ["sender", "recipient"]


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ["id", "billboard", "created_at", "updated_at"]
    filter_horizontal = ["participants"]
    inlines = [MessageInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["id", "conversation", "sender", "recipient", "created_at", "read_at"]
    search_fields = ["content", "sender__username", "recipient__username"]
