"""Configuration module for Flask application."""
import os
from decimal import Decimal
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')

    # Pricing: markdown applied inside the near-expiry window
    SALE_DISCOUNT_RATE = Decimal(os.getenv('SALE_DISCOUNT_RATE', '0.15'))
    NEAR_EXPIRY_DAYS = int(os.getenv('NEAR_EXPIRY_DAYS', '3'))

    # Transactions: reject the whole basket when one line fails (false = legacy line-by-line)
    ATOMIC_BASKETS = os.getenv('ATOMIC_BASKETS', 'true').lower() == 'true'

    # Receipts: one receipt-<n>.txt and receipt-<n>.json per sale
    RECEIPTS_DIR = os.getenv('RECEIPTS_DIR', 'receipts')

    # Stock Configuration
    LOW_STOCK_THRESHOLD = int(os.getenv('LOW_STOCK_THRESHOLD', '10'))
