"""
QKart - Centralized Configuration
==================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
import sys
from dotenv import load_dotenv

load_dotenv()


# ==========================================
# 🗄️ Database
# ==========================================
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    DB_USER = os.getenv("DB_USER")
    DB_PASSWORD = os.getenv("DB_PASSWORD")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME")

    if not all([DB_USER, DB_PASSWORD, DB_HOST, DB_NAME]):
        print("[ERROR] Critical: Database config missing in .env (DATABASE_URL or DB_USER, DB_PASSWORD, DB_HOST, DB_NAME)")
        sys.exit(1)

    DATABASE_URL = f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


# ==========================================
# 🔐 Security
# ==========================================
SECRET_KEY = os.getenv("SECRET_KEY")

if not SECRET_KEY:
    print("[ERROR] Critical: Security key missing in .env (SECRET_KEY)")
    sys.exit(1)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))  # 1 day
PASSWORD_HASH_ITERATIONS = 260_000

COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")


# ==========================================
# 🛒 Cart & Checkout
# ==========================================
DEFAULT_PAYMENT_OPTION = os.getenv("DEFAULT_PAYMENT_OPTION", "PAYMENT_OPTION_DEFAULT")
DEFAULT_ADDRESS = os.getenv("DEFAULT_ADDRESS", "ADDRESS_NOT_SET")
DEFAULT_WALLET_MONEY = int(os.getenv("DEFAULT_WALLET_MONEY", "500"))

# false = legacy total (sum of unit costs, quantity ignored)
CHECKOUT_MULTIPLY_QUANTITY = os.getenv("CHECKOUT_MULTIPLY_QUANTITY", "true").lower() == "true"


# ==========================================
# 🔧 App
# ==========================================
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
