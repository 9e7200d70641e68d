from og_preview.configurations.logging_config import setup_logging

setup_logging()

from og_preview.app import app  # noqa: E402,F401
from og_preview.server import run  # noqa: E402

if __name__ == "__main__":
    run()
