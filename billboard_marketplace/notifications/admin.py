from django.contrib import admin

from billboard_marketplace.notifications import models


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "recipient", "title", "notification_type", "is_read"]
    search_fields = ["title", "message", "notification_type"]
    list_filter = ["notification_type", "is_read", "created_at"]


@admin.register(models.PushSubscription)
class PushSubscriptionAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "endpoint", "created_at"]
    search_fields = ["user__username", "endpoint"]
