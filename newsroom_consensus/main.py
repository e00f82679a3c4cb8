"""Command line entry point for the consensus engine."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .domain.exceptions import ConsensusEngineError
from .infrastructure.config import EngineConfig
from .infrastructure.content.memory_store import InMemoryContentStore
from .infrastructure.dependencies import ServiceContainer
from .observability import configure_logging

logger = logging.getLogger(__name__)


async def run(ns: argparse.Namespace, config: EngineConfig) -> Dict[str, Any]:
    """Run one subcommand and return its JSON-ready result."""
    store = InMemoryContentStore.from_json(ns.corpus) if getattr(ns, "corpus", None) else None
    container = ServiceContainer(config, content_store=store)
    await container.start()
    try:
        if ns.command == "fact-check":
            result = await container.get_fact_checking_service().check_fact_accuracy(ns.claim, ns.context)
        else:
            result = await container.get_trend_analysis_service().analyze_trends(ns.timeframe, ns.limit)
        return result.to_dict()
    finally:
        await container.shutdown()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(description="Multi-provider AI consensus for newsroom fact checks and trends.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fact_check = subparsers.add_parser("fact-check", help="Fact check a claim across providers")
    fact_check.add_argument("claim", help="Statement to check")
    fact_check.add_argument("--context", default=None, help="Optional surrounding context")

    trends = subparsers.add_parser("trends", help="Analyse trending topics and keywords")
    trends.add_argument(
        "--timeframe",
        choices=["day", "week", "month"],
        default="week",
        help="Window to analyse (default: week)",
    )
    trends.add_argument("--limit", type=int, default=100, help="Maximum articles and comments (default: 100)")
    trends.add_argument(
        "--corpus",
        type=Path,
        default=None,
        help="JSON file with 'articles' and 'comments' lists",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    ns = build_parser().parse_args(argv)

    config = EngineConfig.from_env()
    configure_logging(config.log_level)

    try:
        result = asyncio.run(run(ns, config))
    except (ConsensusEngineError, ValueError) as e:
        logger.error(f"❌ {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
