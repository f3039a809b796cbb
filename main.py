import uvicorn

from bugboard.core import config
from bugboard.dashboard.server import create_app
from bugboard.utils.logging_config import setup_logging

# Initialize enhanced logging
setup_logging(level=config.LOG_LEVEL, log_dir=config.LOG_DIR)

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host=config.DASHBOARD_HOST, port=config.DASHBOARD_PORT, log_config=None)
