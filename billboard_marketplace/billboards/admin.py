from django.contrib import admin

from .models import Billboard


@admin.register(Billboard)
class BillboardAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "owner", "city", "status", "base_price", "created_at"]
    list_filter = ["status", "traffic_level", "province"]
    search_fields = ["title", "address", "city", "owner__username", "owner__email"]
    raw_id_fields = ["owner", "approved_by", "rejected_by"]
