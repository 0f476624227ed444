#!/usr/bin/env python3
"""SoftDreams - personalized bedtime stories.

Generates gentle bedtime stories tailored to a child's age, stage and
interests, keeps them in a local library and reminds parents when it is
story time.

Usage:
    python main.py                  # Launch NiceGUI web UI
    python main.py --list-stories   # Print saved stories and exit
"""

import argparse
import logging
import sys
import time

from softdreams.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _load_settings(data_dir: str | None):
    """Load settings, overriding the data directory for this run only.

    Raises:
        ConfigError: If the settings file holds invalid values.
    """
    from softdreams.settings import Settings
    from softdreams.utils.exceptions import ConfigError

    try:
        settings = Settings.load()
    except ValueError as e:
        raise ConfigError(f"Invalid settings file: {e}") from e
    if data_dir:
        settings.data_dir = data_dir
        logger.info("Using data directory: %s", data_dir)
    return settings


def run_web_ui(
    host: str = "127.0.0.1",
    port: int = 8080,
    reload: bool = False,
    data_dir: str | None = None,
    startup_t0: float | None = None,
) -> None:
    """Launch the NiceGUI web interface.

    Args:
        host: Host to bind to.
        port: Port to listen on.
        reload: Enable auto-reload for development.
        data_dir: Optional data directory override.
        startup_t0: Start time from main() for accurate startup timing.
    """
    from softdreams.services import ServiceContainer
    from softdreams.ui import create_app

    logger.info("Starting SoftDreams web UI...")

    t0 = time.perf_counter()
    settings = _load_settings(data_dir)
    logger.info("Settings loaded in %.2fs", time.perf_counter() - t0)

    services = ServiceContainer(settings)
    ServiceContainer.set_shared(services)

    t2 = time.perf_counter()
    app = create_app(services)
    logger.info("App created in %.2fs", time.perf_counter() - t2)

    total_t0 = startup_t0 if startup_t0 is not None else t0
    logger.info("Startup complete in %.2fs, launching server...", time.perf_counter() - total_t0)
    app.run(host=host, port=port, reload=reload)


def list_stories(data_dir: str | None = None) -> int:
    """Print saved stories, newest first.

    Returns:
        Process exit code.
    """
    from softdreams.services import ServiceContainer
    from softdreams.utils.exceptions import AppError

    services = ServiceContainer(_load_settings(data_dir))
    try:
        stories = services.story.load_stories()
    except AppError as e:
        logger.error("Could not read saved stories: %s", e)
        print(f"Error: {e.user_message}")
        return 1

    if not stories:
        print("No saved stories found.")
        logger.info("No saved stories found")
        return 0

    print("Saved Stories:")
    print("-" * 40)
    for i, story in enumerate(sorted(stories, key=lambda s: s.date, reverse=True), 1):
        marker = " *" if story.is_favorite else ""
        print(f"{i}. {story.title}{marker}")
        print(
            f"   {story.date:%Y-%m-%d} | {story.theme} | {story.length.value} | "
            f"{story.reading_time} min | ID: {story.story_id}"
        )
        print()
    logger.info("Listed %d saved stories", len(stories))
    return 0


def main() -> None:
    """Main entry point."""
    t0 = time.perf_counter()
    parser = argparse.ArgumentParser(description="SoftDreams - personalized bedtime stories")
    parser.add_argument(
        "--list-stories",
        action="store_true",
        help="List saved stories and exit",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host for web UI (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port for web UI (default: 8080)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default="default",
        help="Log file path (default: logs/soft_dreams.log, use 'none' to disable)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        metavar="PATH",
        help="Directory for profile and story data (overrides settings)",
    )

    args = parser.parse_args()

    log_file = None if args.log_file.lower() == "none" else args.log_file
    setup_logging(level=args.log_level, log_file=log_file)

    # If no explicit --log-level on CLI, respect the persisted setting
    if not any(arg.startswith("--log-level") for arg in sys.argv):
        from softdreams.settings import Settings
        from softdreams.utils.logging_config import set_log_level

        try:
            settings = Settings.load()
            if settings.log_level != args.log_level:
                set_log_level(settings.log_level)
        except (OSError, ValueError) as e:
            logger.debug("Could not apply persisted log level: %s", e)

    from softdreams.utils.exceptions import ConfigError

    try:
        if args.list_stories:
            sys.exit(list_stories(args.data_dir))
        run_web_ui(
            host=args.host,
            port=args.port,
            reload=args.reload,
            data_dir=args.data_dir,
            startup_t0=t0,
        )
    except ConfigError as e:
        logger.error("%s", e)
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
