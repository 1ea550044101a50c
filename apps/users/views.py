from drf_spectacular.utils import extend_schema
from rest_framework import permissions
from rest_framework.generics import RetrieveAPIView
from rest_framework.response import Response

from .serializers import ProfileUpdateSerializer, UserSerializer


@extend_schema(summary="Get my profile", tags=["users"])
class MeView(RetrieveAPIView):
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user

    @extend_schema(
        summary="Update my name or phone",
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
        tags=["users"],
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(serializer.instance).data)
