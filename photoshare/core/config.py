import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _database_url():
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")
    if os.getenv("DB_NAME"):
        return f"postgresql://{os.getenv('DB_USER')}:{os.getenv('DB_PASS')}@{os.getenv('DB_HOST')}:{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME')}"
    return "sqlite:///./photoshare.db"


DATABASE_URL = _database_url()

# JWT
SECRET_KEY = os.getenv("SECRET_KEY", "supersecretkey")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "30"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Media uploads
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))
UPLOAD_URL_PREFIX = "/uploads"
ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"]
MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5MB

# Feed pagination
FEED_DEFAULT_LIMIT = 10
FEED_MAX_LIMIT = 100

# largest id a signed 64-bit integer column can hold
MAX_ID = 2**63 - 1

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
