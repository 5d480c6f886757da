# Export for Vercel
import sys
from pathlib import Path

# Add the parent directory to the Python path so we can import from app
sys.path.insert(0, str(Path(__file__).parent.parent))

from app import app  # noqa: E402

# Vercel serves the WSGI app exported as 'app'
__all__ = ["app"]
