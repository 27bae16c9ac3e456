import logging
import os
import sys

import uvicorn

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def main() -> None:
    from hospitalflow.core.config import get_settings

    settings = get_settings()
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port} ({settings.app_env})")
    # One process: hospital state is held in memory.
    uvicorn.run(
        "hospitalflow.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development and settings.debug,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
