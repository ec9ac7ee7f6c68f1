# users/admin.py

"""
USERS ADMIN REGISTRATION

Registers the custom User model so it appears in Django Admin.
Managers get their refund-approval PIN set from here.
"""

from __future__ import annotations

from django import forms
from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()


class UserChangeWithPinForm(forms.ModelForm):
    new_pin = forms.CharField(
        required=False,
        strip=True,
        help_text="Set a new 4-8 digit manager PIN. Leave blank to keep the current one.",
        widget=forms.PasswordInput(render_value=False),
    )

    class Meta:
        model = User
        fields = "__all__"

    def save(self, commit=True):
        user = super().save(commit=False)
        new_pin = self.cleaned_data.get("new_pin")
        if new_pin:
            user.set_pin(new_pin)
        if commit:
            user.save()
        return user


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    form = UserChangeWithPinForm
    ordering = ("email",)
    list_display = ("username", "email", "role", "has_pin", "is_staff", "is_active")
    list_filter = ("role", "is_staff", "is_active", "is_superuser")
    search_fields = ("username", "email", "first_name", "last_name")

    fieldsets = (
        (None, {"fields": ("username", "email", "password")}),
        ("Profile", {"fields": ("first_name", "last_name", "role")}),
        ("Manager PIN", {"fields": ("new_pin",)}),
        (
            "Permissions",
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                )
            },
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "username",
                    "email",
                    "password1",
                    "password2",
                    "role",
                    "is_staff",
                    "is_active",
                ),
            },
        ),
    )

    @admin.display(boolean=True, description="PIN")
    def has_pin(self, obj):
        return obj.has_pin
