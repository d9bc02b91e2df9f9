"""API views for notifications."""

from __future__ import annotations

from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.container import get_services
from .serializers import NotificationSerializer


class NotificationViewSet(viewsets.ViewSet):
    """Viewset to list the desk feed and mark notifications read."""

    lookup_value_regex = "[0-9]+"

    def list(self, request):  # type: ignore
        center = get_services().notifications
        unread_only = request.query_params.get("unread", "").lower() in ("1", "true", "yes")
        notifications = center.list(unread_only=unread_only)
        return Response({
            "unread_count": center.unread_count(),
            "results": NotificationSerializer(notifications, many=True).data,
        })

    @action(detail=True, methods=["post"])
    def mark_read(self, request, pk=None):  # type: ignore
        notification = get_services().notifications.mark_read(int(pk))
        if notification is None:
            return Response({"detail": "Notification not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(NotificationSerializer(notification).data)

    @action(detail=False, methods=["post"])
    def mark_all_read(self, request):  # type: ignore
        count = get_services().notifications.mark_all_read()
        return Response({"marked": count})
