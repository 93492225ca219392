#!/usr/bin/env python3
"""Live check that each configured task provider answers a minimal request.

Run from a machine with internet access and real API keys:

    python scripts/check_providers.py
    python scripts/check_providers.py --task verify
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from intelboard.config import load_config
from intelboard.errors import IntelboardError
from intelboard.llm import get_provider_for_task
from intelboard.llm.base import LLMRequest

TASKS = ("package", "verify", "briefing", "dossier")


async def _check(config: dict, task: str) -> bool:
    request = LLMRequest(
        task=task,
        prompt="Reply with the single word: ready",
        web_search=task == "verify",
        max_tokens=64,
    )
    try:
        provider = get_provider_for_task(config, task)
        response = await provider.generate(request)
    except IntelboardError as exc:
        print(f"  {task:<10} FAILED  {exc}")
        return False
    print(
        f"  {task:<10} ok      {provider.provider_name}/{response.model} "
        f"({response.input_tokens} in, {response.output_tokens} out, "
        f"{len(response.grounding)} sources): {response.text.strip()[:40]!r}"
    )
    return True


async def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--task", choices=TASKS, help="check a single task")
    parser.add_argument("--config", default=os.environ.get("CONFIG_PATH", "config.yaml"))
    args = parser.parse_args()

    config = load_config(args.config, required=False)
    tasks = [args.task] if args.task else list(TASKS)
    results = [await _check(config, task) for task in tasks]
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
