# robust .env loading
import os
from pathlib import Path

from dotenv import load_dotenv

# 1) load from CWD (project root when you run commands there)
load_dotenv(override=False)
# 2) also try repo root even if code runs from src/
repo_root = Path(__file__).resolve().parents[2]
env_path = repo_root / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path, override=True)

# --- Flask / server ---
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
FLASK_ENV = os.getenv("FLASK_ENV", "production")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- Admin API ---
# Unset means the admin endpoints are open (development mode).
API_SECRET_KEY = os.getenv("API_SECRET_KEY")

# --- MongoDB ---
MONGODB_URI = os.getenv("MONGODB_URI")
MONGO_DB = os.getenv("MONGO_DB", "devevents")
MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))

# --- Cloudinary (event images) ---
CLOUDINARY_URL = os.getenv("CLOUDINARY_URL")  # cloudinary://<key>:<secret>@<cloud>
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
CLOUDINARY_API_BASE = os.getenv("CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1")
CLOUDINARY_UPLOAD_FOLDER = os.getenv("CLOUDINARY_UPLOAD_FOLDER", "DevEvent")

# --- Collections ---
EVENTS_COLLECTION = "events"
BOOKINGS_COLLECTION = "bookings"
