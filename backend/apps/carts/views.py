from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.common import get_logger

from .accessor import authenticated_user_id, get_cart, persist_cart, reset_cart
from .container import build_cart_store
from .serializers import CartWriteSerializer, LineItemSerializer
from .utils import recalculate_totals

logger = get_logger(__name__).bind(component="carts", layer="view")


class CartReadSerializer(serializers.Serializer):
    items = serializers.DictField(child=LineItemSerializer())
    totalQty = serializers.IntegerField()
    totalCents = serializers.IntegerField()


class CartView(APIView):
    permission_classes = [AllowAny]
    store_factory = staticmethod(build_cart_store)
    log = logger.bind(view="CartView")

    def get_store(self):
        return self.store_factory()

    @extend_schema(
        summary="Get the current cart",
        description=(
            "Returns the stored cart for logged in users, falling back to the "
            "session cart when none is stored."
        ),
        responses={200: CartReadSerializer},
    )
    def get(self, request):
        cart = get_cart(request, self.get_store())
        return Response(cart)

    @extend_schema(
        summary="Replace cart items",
        description="Totals are recomputed from the submitted line items.",
        request=CartWriteSerializer,
        responses={
            200: CartReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request):
        serializer = CartWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = recalculate_totals({"items": serializer.validated_data["items"]})
        persist_cart(request, cart, self.get_store())
        self.log.info(
            "Cart replaced",
            user_id=authenticated_user_id(request),
            items=len(cart["items"]),
            total_cents=cart["totalCents"],
        )
        return Response(cart)

    @extend_schema(
        summary="Empty the cart",
        responses={204: None},
    )
    def delete(self, request):
        reset_cart(request, self.get_store())
        self.log.info("Cart cleared", user_id=authenticated_user_id(request))
        return Response(status=status.HTTP_204_NO_CONTENT)
