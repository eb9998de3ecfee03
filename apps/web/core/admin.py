"""Admin registrations for core models."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Client, User


class StaffInline(admin.TabularInline):  # type: ignore[type-arg]
    model = User
    fields = ["username", "email", "role", "is_active"]
    readonly_fields = ["username", "email"]
    extra = 0
    can_delete = False
    show_change_link = True


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["name", "slug", "phone", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["name", "slug", "email", "phone"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["created_at", "updated_at"]
    inlines = [StaffInline]


@admin.register(User)
class UserAdmin(BaseUserAdmin):  # type: ignore[type-arg]
    list_display = ["username", "email", "client", "role", "is_active"]
    list_filter = ["role", "is_active", "client"]
    search_fields = ["username", "email", "client__name"]
    fieldsets = (
        *BaseUserAdmin.fieldsets,  # type: ignore[misc]
        ("Restaurant", {"fields": ("client", "role")}),
    )
    add_fieldsets = (
        *BaseUserAdmin.add_fieldsets,
        ("Restaurant", {"fields": ("client", "role")}),
    )


class ClientScopedParentAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """
    Admin whose inlines are client-scoped rows of the parent's client.

    Inline forms do not show the client field; it is copied from the parent.
    """

    def save_formset(self, request, form, formset, change):  # type: ignore[no-untyped-def]
        instances = formset.save(commit=False)
        for obj in formset.deleted_objects:
            obj.delete()
        for instance in instances:
            instance.client = form.instance.client
            instance.save()
        formset.save_m2m()
