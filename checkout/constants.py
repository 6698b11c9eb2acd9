from dataclasses import dataclass
@dataclass
class Constants:

    SESSION_COOKIE = "checkout_session"
    MAX_SESSIONS = 10000

    # Backend
    CREATE_SUBSCRIPTION_PATH = "/api/create-subscription"

    # Hosted widget (Razorpay Checkout)
    PROVIDER_NAME = "Razorpay"
    SDK_SCRIPT_URL = "https://checkout.razorpay.com/v1/checkout.js"
    WIDGET_DISPLAY_NAME = "PaisaAlert"
    WIDGET_DESCRIPTION = "₹199 Today + ₹199/month Auto-Pay"
    WIDGET_THEME_COLOR = "#4C5FD5"
    WIDGET_PAYMENT_TYPE = "subscription_with_upfront"

    # Order summary
    PRODUCT_NAME = "Smart Business Bookkeeping Sheet"
    PRODUCT_PRICE = "₹199"

    # Post-success navigation
    ORDER_CONFIRM_URL = "https://www.paisaalert.in/orderconfirm"
    REDIRECT_DELAY_MS = 2000

    # Billing date display
    DISPLAY_TIMEZONE = "Asia/Kolkata"
    BILLING_DATE_FALLBACK = "Next month"
