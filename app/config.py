from decimal import Decimal
from decouple import config, Csv

DATABASE_URL = config("DATABASE_URL", default="sqlite:///./law_office.db")

# Auth
SECRET_KEY = config("SECRET_KEY", default="change-me-in-production")
ALGORITHM = config("ALGORITHM", default="HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = config("ACCESS_TOKEN_EXPIRE_MINUTES", default=60 * 24, cast=int)

# Public URL used when building share and invite links
APP_URL = config("APP_URL", default="http://localhost:3000")

# Document storage
UPLOAD_DIR = config("UPLOAD_DIR", default="uploads")
MAX_UPLOAD_SIZE_MB = config("MAX_UPLOAD_SIZE_MB", default=50, cast=int)

# Billing
DEFAULT_TAX_RATE = config("DEFAULT_TAX_RATE", default="15.00", cast=Decimal)
# Optional TrueType font for printed invoices, needed for Arabic names
INVOICE_PDF_FONT = config("INVOICE_PDF_FONT", default="")

# AI
OPENAI_API_KEY = config("OPENAI_API_KEY", default="")
OPENAI_MODEL = config("OPENAI_MODEL", default="gpt-4o-mini")

CORS_ORIGINS = config("CORS_ORIGINS", default="http://localhost:3000", cast=Csv())
LOG_LEVEL = config("LOG_LEVEL", default="INFO")
