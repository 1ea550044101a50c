from django.db import models


class UserRole(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    RESTAURANT = "restaurant", "Restaurant"
    DELIVERY = "delivery", "Delivery partner"
    ADMIN = "admin", "Administrator"


class OrderStatus(models.TextChoices):
    PLACED = "placed", "Placed"
    CONFIRMED = "confirmed", "Confirmed"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready for pickup"
    PICKED_UP = "picked-up", "Picked up"
    OUT_FOR_DELIVERY = "out-for-delivery", "Out for delivery"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"

    @classmethod
    def terminal(cls):
        return [cls.DELIVERED, cls.CANCELLED, cls.REFUNDED]

    @classmethod
    def live(cls):
        # Orders the kitchen still has to act on
        return [cls.PLACED, cls.CONFIRMED, cls.PREPARING, cls.READY]

    @classmethod
    def pending(cls):
        return [cls.PLACED, cls.CONFIRMED, cls.PREPARING]


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class PaymentMethod(models.TextChoices):
    RAZORPAY = "razorpay", "Razorpay"
    STRIPE = "stripe", "Stripe"
    COD = "cod", "Cash on delivery"


class PaymentOutcome(models.TextChoices):
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"


class MenuCategory(models.TextChoices):
    STARTERS = "Starters", "Starters"
    MAIN_COURSE = "Main Course", "Main Course"
    RICE_BIRYANI = "Rice & Biryani", "Rice & Biryani"
    BREADS = "Breads", "Breads"
    DESSERTS = "Desserts", "Desserts"
    BEVERAGES = "Beverages", "Beverages"
    SNACKS = "Snacks", "Snacks"
    SALADS = "Salads", "Salads"
    SOUPS = "Soups", "Soups"
    COMBOS = "Combos", "Combos"
    THALI = "Thali", "Thali"


class NotificationEvent(models.TextChoices):
    ORDER_PLACED = "order.placed", "Order placed"
    ORDER_STATUS_CHANGED = "order.status_changed", "Order status changed"
    ORDER_PAYMENT_RESULT = "order.payment_result", "Order payment result"
