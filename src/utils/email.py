import os
from decimal import Decimal

import boto3
from aws_lambda_powertools import Logger

from models.common import Booking

logger = Logger()

DEFAULT_SENDER = "noreply@homiestays.com"


class EmailService:
    def __init__(self, sender: str | None = None):
        self.ses = boto3.client("ses")
        # Must be verified in SES
        self.sender = sender or os.environ.get("SENDER_EMAIL", DEFAULT_SENDER)

    def _format_price(self, amount: Decimal) -> str:
        return f"${amount:,.2f}"

    def send_booking_confirmation(self, booking: Booking, recipient: str) -> None:
        """Send booking confirmation email to the guest."""
        subject = f"Booking Confirmed - {booking.property_name}"

        price = booking.price
        lines = [
            (
                f"{price.nights} night{'s' if price.nights != 1 else ''}",
                price.base_price,
            ),
        ]
        if price.discount:
            lines.append(("Weekly discount", -price.discount))
        if price.extras_total:
            lines.append((f"Extras ({', '.join(booking.extras)})", price.extras_total))
        lines.append(("Service fee", price.service_fee))

        body = f"""
Hello,

Your stay at {booking.property_name} ({booking.property_location}) is confirmed.

Booking Reference: {booking.id}

Dates:
- Check-in: {booking.check_in_date.strftime("%B %d, %Y")}
- Check-out: {booking.check_out_date.strftime("%B %d, %Y")}
- Guests: {booking.guests}

Price:
{chr(10).join(f"- {name}: {self._format_price(amount)}" for name, amount in lines)}

Total Price: {self._format_price(booking.total_price)}

You can review this trip at any time from your dashboard.

Best regards,
Homie Stays Team
"""

        try:
            self.ses.send_email(
                Source=self.sender,
                Destination={"ToAddresses": [recipient]},
                Message={
                    "Subject": {"Data": subject},
                    "Body": {"Text": {"Data": body}},
                },
            )
            logger.info(f"Sent booking confirmation email to {recipient}")
        except Exception as e:
            logger.error(f"Failed to send booking confirmation email: {e!s}")
            raise
