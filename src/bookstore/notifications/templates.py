"""Message templates for order notifications, one per channel."""

from bookstore.notifications.notification import NotificationChannel


class OrderConfirmationEmail:
    channel = NotificationChannel.EMAIL.value

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("member_name") or "reader"
        return {
            "subject": f"Your order #{context['order_id']} is confirmed",
            "body": (
                f"Hi {name},\n\n"
                f"Thank you for your order of {', '.join(context['titles'])}.\n\n"
                f"Total: {context['total_price']:.2f}\n"
                f"Claim code: {context['claim_code']}\n\n"
                "Show this claim code at the counter to collect your books."
            ),
        }


class OrderPlacedBroadcast:
    channel = NotificationChannel.BROADCAST.value

    @staticmethod
    def render(context: dict) -> dict:
        titles = context["titles"]
        return {
            "subject": None,
            "body": f"New Order Placed! {len(titles)} books ordered: {', '.join(titles)}",
        }


class OrderPlacedPush:
    channel = NotificationChannel.PUSH.value
    event_name = "OrderPlaced"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "subject": OrderPlacedPush.event_name,
            "body": f"Someone just ordered: {', '.join(context['titles'])}",
        }


ORDER_PLACED_TEMPLATES = (OrderConfirmationEmail, OrderPlacedBroadcast, OrderPlacedPush)
