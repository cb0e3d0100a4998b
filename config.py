import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Bot Configuration
BOT_TOKEN = os.getenv("BOT_TOKEN")
if not BOT_TOKEN:
    print("WARNING: BOT_TOKEN is not set in environment variables.")

# Backend Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080").rstrip("/")
WEB_BASE_URL = os.getenv("WEB_BASE_URL", API_BASE_URL).rstrip("/")

# Routes
REGISTER_PATH = "/companies/register"
LOGIN_PATH = "/companies/login"

# Health-check server
PORT = int(os.getenv("PORT", 8080))
