# user/admin.py
from django import forms
from django.contrib import admin
from .models import User


class UserAdminForm(forms.ModelForm):
    # Set or change the PIN without ever showing the hash
    pin_change = forms.CharField(
        label="Change PIN",
        required=False,
        widget=forms.PasswordInput(render_value=False),
        help_text="Enter a new PIN to change it. Leave blank to keep current PIN."
    )
    pin_confirm = forms.CharField(
        label="Confirm PIN",
        required=False,
        widget=forms.PasswordInput(render_value=False),
        help_text="Confirm the new PIN."
    )

    class Meta:
        model = User
        exclude = ('pin', 'password')

    def clean(self):
        cleaned_data = super().clean()
        pin_change = cleaned_data.get("pin_change")
        pin_confirm = cleaned_data.get("pin_confirm")

        if pin_change and pin_change != pin_confirm:
            raise forms.ValidationError("PINs do not match.")
        return cleaned_data

    def save(self, commit=True):
        user = super().save(commit=False)
        pin_change = self.cleaned_data.get("pin_change")
        if pin_change:
            user.set_pin(pin_change)
        if commit:
            user.save()
            self.save_m2m()
        return user


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    form = UserAdminForm
    list_display = ('name', 'email', 'role', 'has_pin_set', 'is_staff', 'is_active', 'is_superuser')
    list_filter = ('role', 'is_staff', 'is_active', 'is_superuser')

    fieldsets = (
        (None, {'fields': ('email',)}),
        ('Personal Info', {'fields': ('name',)}),
        ('Role & Status', {'fields': ('role', 'is_active')}),
        ('PIN Management', {'fields': ('pin_change', 'pin_confirm')}),
        ('Permissions', {'fields': ('is_staff', 'is_superuser', 'groups', 'user_permissions')}),
    )
    search_fields = ('email', 'name')
    ordering = ('name',)
    filter_horizontal = ('groups', 'user_permissions',)

    @admin.display(boolean=True, description='PIN Set?')
    def has_pin_set(self, obj):
        return bool(obj.pin)
