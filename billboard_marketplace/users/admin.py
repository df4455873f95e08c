from django.contrib import admin
from django.contrib.auth import admin as auth_admin
from django.utils.translation import gettext_lazy as _

from .models import User


@admin.register(User)
class UserAdmin(auth_admin.UserAdmin):
    fieldsets = (
        *auth_admin.UserAdmin.fieldsets,
        (_("Marketplace"), {"fields": ("name", "role", "suspended", "suspended_at")}),
    )
    list_display = ["username", "email", "name", "role", "suspended", "is_superuser"]
    list_filter = ["role", "suspended", "is_staff"]
    search_fields = ["username", "email", "name"]
