"""
Custom permissions for role-based access
"""
from rest_framework import permissions


class IsAdmin(permissions.BasePermission):
    """Permission check for admin role"""

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role == 'admin'
        )


class IsStaffMember(permissions.BasePermission):
    """Admin or assistant: anyone working the front desk"""

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role in ('admin', 'assistant')
        )
