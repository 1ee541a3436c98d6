import logging
import argparse

from core.config_loader import load_config
from main_driver.init_db import init_db


logger = logging.getLogger(__name__)


def serve(config):
    """Run the API server (tables are created/seeded first)."""
    import uvicorn

    init_db()

    logger.info(f"Starting Tulen API on {config.web.host}:{config.web.port}")
    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level=config.logging.level.lower()
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tulen Main Driver")
    parser.add_argument('command', choices=['init-db', 'serve'], default='serve', nargs='?',
                        help='init-db: create tables and seed bubbles/skills; serve (default): run the API')
    args = parser.parse_args(argv)

    config = load_config()
    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    logger.info(f"Main driver starting: {args.command}")

    if args.command == 'init-db':
        init_db()
    else:
        serve(config)


if __name__ == "__main__":
    main()
