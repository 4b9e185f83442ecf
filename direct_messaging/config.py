"""Environment-driven configuration for the messaging service."""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

ENV = os.getenv("ENV")
ENV_IS_PROD = ENV == "prod"
COMMIT_HASH = os.getenv("COMMIT_HASH")
if not COMMIT_HASH and ENV_IS_PROD:
    raise ValueError("COMMIT_HASH is required for production environments")

APP_ADDR = os.getenv("HOST", "0.0.0.0")
APP_PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Participant directory (display name, role, avatar of a counterpart)
DIRECTORY_URL = os.getenv("DIRECTORY_URL")
DIRECTORY_API_KEY = os.getenv("DIRECTORY_API_KEY", "")
DIRECTORY_TIMEOUT_SECONDS = float(os.getenv("DIRECTORY_TIMEOUT_SECONDS", "5"))

# Message and attachment limits
# Width of messages.content; changing it needs a migration
MESSAGE_MAX_LENGTH = 4000
ATTACHMENT_MAX_BYTES = int(os.getenv("ATTACHMENT_MAX_BYTES", str(10 * 1024 * 1024)))
MESSAGES_DEFAULT_LIMIT = int(os.getenv("MESSAGES_DEFAULT_LIMIT", "30"))
MESSAGES_MAX_LIMIT = int(os.getenv("MESSAGES_MAX_LIMIT", "50"))

PDF_MEDIA_TYPE = "application/pdf"
DEFAULT_ATTACHMENT_NAME = "attachment.pdf"
