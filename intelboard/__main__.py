"""CLI entrypoint: python -m intelboard {package|brief|verify|dossier|feeds}."""

from __future__ import annotations

import asyncio
import logging
import logging.handlers
import os
import sys
from pathlib import Path

from intelboard.config import get_feeds, get_llm_task_config, get_log_dir, load_config
from intelboard.dashboard import Dashboard
from intelboard.models import DataFeed, IntelligencePackage
from intelboard.report import (
    format_briefing,
    format_dossier,
    format_feeds,
    format_package,
    format_verification,
    format_workflow,
)

TASKS = ("package", "verify", "briefing", "dossier")


def setup_logging(config: dict) -> None:
    """Configure logging with console + rotating file output."""
    root = logging.getLogger()
    root.setLevel(logging.INFO)

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    # File handler (rotate at 5MB, keep 3 backups)
    log_dir = Path(get_log_dir(config))
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        str(log_dir / "intelboard.log"), maxBytes=5 * 1024 * 1024, backupCount=3,
    )
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


logger = logging.getLogger("intelboard")


def missing_credentials(config: dict) -> list[str]:
    """Return the tasks whose provider has no API key."""
    return [task for task in TASKS if not get_llm_task_config(config, task)["api_key"]]


async def _load_package(dashboard: Dashboard) -> IntelligencePackage | None:
    package = await dashboard.refresh()
    print(format_workflow(dashboard.state.workflow))
    if package is None:
        print(f"Error: {dashboard.state.error}")
    return package


async def cmd_package(config: dict, args: list[str]) -> int:
    """Generate an intelligence package (feeds from args or config)."""
    dashboard = Dashboard(config)
    if args:
        dashboard.state.feeds = [DataFeed(id=name, name=name) for name in args]
    package = await _load_package(dashboard)
    if package is None:
        return 1
    print(format_package(package))
    return 0


async def cmd_brief(config: dict, args: list[str]) -> int:
    """Generate a package, then a daily briefing from its headlines."""
    dashboard = Dashboard(config)
    if await _load_package(dashboard) is None:
        return 1
    print(format_briefing(await dashboard.generate_briefing()))
    return 0


async def cmd_verify(config: dict, args: list[str]) -> int:
    """Generate a package, then fact-check one article by index."""
    index = int(args[0]) if args else 0
    dashboard = Dashboard(config)
    package = await _load_package(dashboard)
    if package is None:
        return 1
    articles = package.articles
    if not 0 <= index < len(articles):
        print(f"Error: article index {index} out of range (0-{len(articles) - 1})")
        return 1
    article = dashboard.select_article(articles[index].id)
    print(f"Verifying: {article.headline}")
    result = await dashboard.verify_selected()
    if dashboard.state.error:
        print(f"Error: {dashboard.state.error}")
    print(format_verification(result))
    return 0 if dashboard.state.error is None else 1


async def cmd_dossier(config: dict, args: list[str]) -> int:
    """Generate a package, then a dossier for the named entity."""
    if not args:
        print("Usage: python -m intelboard dossier ENTITY")
        return 1
    entity_id = " ".join(args)
    dashboard = Dashboard(config)
    if await _load_package(dashboard) is None:
        return 1
    dossier = await dashboard.select_entity(entity_id)
    if dossier is None:
        print(f"Error: {dashboard.state.dossier_error}")
        return 1
    print(format_dossier(entity_id, dossier))
    return 0


def cmd_feeds(config: dict, args: list[str]) -> int:
    """List configured data feeds."""
    print(format_feeds(get_feeds(config)))
    return 0


COMMANDS = {
    "package": cmd_package,
    "brief": cmd_brief,
    "verify": cmd_verify,
    "dossier": cmd_dossier,
    "feeds": cmd_feeds,
}


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        available = ", ".join(COMMANDS)
        print(f"Usage: python -m intelboard {{{available}}} [args]")
        sys.exit(1)

    command, args = sys.argv[1], sys.argv[2:]
    config = load_config(os.environ.get("CONFIG_PATH", "config.yaml"), required=False)
    setup_logging(config)
    handler = COMMANDS[command]

    if asyncio.iscoroutinefunction(handler):
        missing = missing_credentials(config)
        if missing:
            print(f"Error: no API key configured for: {', '.join(missing)}")
            print("Set GEMINI_API_KEY (or API_KEY) or configure llm.providers in config.yaml")
            sys.exit(1)
        sys.exit(asyncio.run(handler(config, args)))
    sys.exit(handler(config, args))


if __name__ == "__main__":
    main()
