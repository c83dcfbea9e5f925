"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach real gateways or a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "rzp_test_secret")
os.environ.setdefault("ORDER_AUTO_COMPLETE_SECONDS", "0")
os.environ.setdefault("ALLOWED_EMAIL_DOMAIN", "kletech.ac.in")
os.environ.setdefault("LOG_FORMAT", "text")
