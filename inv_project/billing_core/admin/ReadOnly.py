from django.contrib import admin
from django.core.exceptions import PermissionDenied

"""Base admin for ledger rows that only change through services."""
class ReadOnlyAdmin(admin.ModelAdmin):
    list_per_page = 50  # page size (adjust for performance)

    # set True on subclasses that route deletes through a service
    allow_delete = False

    # make every model field readonly
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        if not self.allow_delete:
            return False
        return super().has_delete_permission(request, obj)

    # Allow viewing the change form (read-only) by returning True here.
    # Prevent any saves by overriding save_model.
    def has_change_permission(self, request, obj=None):
        # actual edits are prevented because fields are readonly
        return True

    # Prevent any attempt to save via the admin UI
    def save_model(self, request, obj, form, change):
        raise PermissionDenied("Rows cannot be changed via the admin.")

    # Only keep delete_selected when deletes are allowed
    def get_actions(self, request):
        if not self.allow_delete:
            return {}
        return super().get_actions(request)
