import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

# Model Settings
MODEL_PATH = Path(os.getenv("MODEL_PATH", BASE_DIR / "models" / "mltestor-cls.pt"))
DEVICE = os.getenv("DEVICE")  # None -> cuda when available, else cpu
IMAGE_SIZE = int(os.getenv("IMAGE_SIZE", 224))
CONFIDENCE_THRESHOLD = float(os.getenv("CONFIDENCE_THRESHOLD", 0.0))
TOP_K = int(os.getenv("TOP_K", 2))

# Runtime Settings
INFERENCE_WORKERS = int(os.getenv("INFERENCE_WORKERS", 1))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Picker Settings
MAX_UPLOAD_SIZE = 10485760
ALLOWED_EXTENSIONS = ["jpg", "jpeg", "png"]
ALLOWED_FORMATS = ["JPEG", "PNG", "MPO"]
MIN_IMAGE_SIDE = 32
MAX_IMAGE_SIDE = 8192

# Display Strings
APP_TITLE = "MLTestor"
GALLERY_BUTTON_TITLE = "Open Gallery"
ACTION_SHEET_TITLE = "Select Image"
CHOOSE_FROM_GALLERY = "Choose from Gallery"
CANCEL = "Cancel"
RESULT_HEADER = "Classification Result:"
NOTHING_RECOGNIZED = "Nothing recognized."
FAILURE_MARKER = "KO........"
