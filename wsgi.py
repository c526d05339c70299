import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

from docnum import create_app
from docnum.errors import StorageError

try:
    app = create_app(os.getenv("FLASK_ENV") or "development")
except StorageError as e:
    # Without the store there is nothing to serve
    print(f"Fatal: {e.message} ({e.details})", file=sys.stderr)
    sys.exit(1)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 3000)))
