"""API views for the booking domain."""

from __future__ import annotations

import logging

from rest_framework import permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import DomainError

from .domain.entities import BookingStatus
from .permissions import CanViewBooking, actor_from_user
from .serializers import BookingRequestSerializer, BookingSerializer
from .services import get_booking_service

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "invalid_range": status.HTTP_400_BAD_REQUEST,
    "invalid_duration": status.HTTP_400_BAD_REQUEST,
    "self_booking": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "inactive": status.HTTP_409_CONFLICT,
    "conflict": status.HTTP_409_CONFLICT,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "store_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


class BookingViewSet(viewsets.ViewSet):
    """Request, inspect and resolve equipment bookings."""

    permission_classes = [permissions.IsAuthenticated]

    @property
    def service(self):
        return get_booking_service()

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, DomainError):
            return Response(
                {"code": exc.code, "detail": exc.message},
                status=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST),
            )
        return super().handle_exception(exc)

    def list(self, request):  # type: ignore
        """Bookings of the current user, as renter (default) or as owner."""
        role = request.query_params.get("role", "renter")
        if role == "owner":
            bookings = self.service.bookings_for_owner(request.user.pk)
        elif role == "renter":
            bookings = self.service.bookings_for_renter(request.user.pk)
        else:
            return Response(
                {"detail": "role must be 'renter' or 'owner'."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        status_filter = request.query_params.get("status")
        if status_filter:
            bookings = [b for b in bookings if b.status.value == status_filter]
        return Response(BookingSerializer(bookings, many=True).data)

    def create(self, request):  # type: ignore
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = self.service.request_booking_from(
            data["equipment"],
            request.user.pk,
            data["start"],
            data["mode"],
            hours=data["hours"],
            payment_method=data["payment_method"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = self.service.get_booking(self._booking_id(pk))
        self.check_object_permissions(request, booking)
        return Response(BookingSerializer(booking).data)

    def get_permissions(self):  # type: ignore
        if self.action == "retrieve":
            return [permissions.IsAuthenticated(), CanViewBooking()]
        return super().get_permissions()

    @action(detail=True, methods=["post"])
    def accept(self, request, pk=None):  # type: ignore
        return self._transition(request, pk, BookingStatus.ACCEPTED)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        return self._transition(request, pk, BookingStatus.REJECTED)

    @action(detail=False, methods=["get"])
    def active(self, request):  # type: ignore
        """Windows currently blocking the equipment (requested or accepted)."""
        field = serializers.UUIDField()
        raw = request.query_params.get("equipment")
        if not raw:
            return Response({"equipment": ["This parameter is required."]}, status=status.HTTP_400_BAD_REQUEST)
        equipment_id = field.run_validation(raw)
        bookings = self.service.list_active(equipment_id)
        return Response(BookingSerializer(bookings, many=True).data)

    def _transition(self, request, pk, target: BookingStatus):
        actor = actor_from_user(request.user)
        booking = self.service.transition(self._booking_id(pk), actor, target)
        return Response(BookingSerializer(booking).data)

    @staticmethod
    def _booking_id(pk):
        return serializers.UUIDField().run_validation(pk)
