from rest_framework.permissions import BasePermission, SAFE_METHODS

# =====================================================
# Role Permissions
# =====================================================

class IsAdminOrReadOnly(BasePermission):
    """
    Storefront reads (GET, HEAD, OPTIONS) are public; every write requires an ADMIN
    """
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return request.user.is_authenticated and request.user.is_admin
