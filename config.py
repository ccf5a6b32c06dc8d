import os

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # Stripe (the only durable store: bookings live in checkout session metadata)
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_TIMEOUT_SECONDS = int(os.getenv("STRIPE_TIMEOUT_SECONDS", "30"))

    # Email (Resend)
    RESEND_API_KEY = os.getenv("RESEND_API_KEY")
    EMAIL_FROM_ADDRESS = os.getenv(
        "EMAIL_FROM_ADDRESS", "Woodlands Market <bookings@woodlandsmarket.com>"
    )

    # Shared secret for /api/admin/*
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

    # Public site, used for checkout success/cancel redirects
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Comma separated list, "*" allows any origin
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False
