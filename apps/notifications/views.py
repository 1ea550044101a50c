from drf_spectacular.utils import extend_schema
from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.mixins import AdminOnlyMixin
from apps.notifications.dispatcher import dispatcher


class BroadcastSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=500)


@extend_schema(summary="Connected realtime clients.", tags=["realtime"])
class RealtimeStatsView(APIView):
    def get(self, request):
        return Response(dispatcher.stats())


@extend_schema(
    summary="Admin: Send a message to every connected client.",
    request=BroadcastSerializer,
    tags=["realtime"],
)
class BroadcastView(AdminOnlyMixin, APIView):
    def post(self, request):
        serializer = BroadcastSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        delivered = dispatcher.broadcast(serializer.validated_data["message"], sender=request.user.email)
        return Response({"delivered": delivered})
