class BookingError(Exception):
    """Business-rule failure reported to the caller as HTTP 400."""

    status_code = 400
    message = "Booking request failed"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidCart(BookingError):
    message = "cart must be a non-empty list of demo slots"


class PaymentNotCompleted(BookingError):
    message = "Payment not completed"


class AlreadyRefunded(BookingError):
    message = "Booking already refunded"


class NoPaymentIntent(BookingError):
    message = "No payment intent found for this booking"
