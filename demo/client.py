"""
Demo Client for the XeroML SDK

Walks through one-shot parsing, a full session lifecycle, session
listing and usage against a running XeroML API.

Usage:
    XEROML_API_KEY=xml_... python -m demo.client [--url http://localhost:8080]
"""

import argparse
import asyncio
import os
import sys
from typing import Optional

import structlog

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from xeroml import (
    IntentGraph,
    SubGoal,
    XeroML,
    XeroMLConfigError,
    XeroMLError,
    XeroMLRateLimitError,
)


# Configure logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
)

logger = structlog.get_logger()


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"

    BG_BLUE = "\033[44m"


STATUS_ICONS = {
    "pending": "○",
    "active": "◐",
    "done": "●",
    "blocked": "✗",
    "abandoned": "–",
    "background": "·",
}


def print_step(title: str):
    print(f"\n{Colors.BOLD}{Colors.BG_BLUE} {title} {Colors.RESET}")


def format_sub_goal(sub_goal: SubGoal, depth: int = 0) -> str:
    """Format a sub-goal and its children as an indented tree."""
    icon = STATUS_ICONS.get(sub_goal.status.value, "•")
    line = (
        f"{'  ' * depth}{icon} {sub_goal.goal} "
        f"{Colors.DIM}[{sub_goal.id} p={sub_goal.priority:g} u={sub_goal.uncertainty:.2f}]{Colors.RESET}"
    )
    lines = [line]
    for child in sub_goal.children:
        lines.append(format_sub_goal(child, depth + 1))
    return "\n".join(lines)


def print_graph(graph: Optional[IntentGraph]):
    """Print an intent graph summary."""
    if graph is None:
        print(f"{Colors.DIM}(no graph yet){Colors.RESET}")
        return

    states = graph.meta.latent_states
    print(f"{Colors.BOLD}Root goal:{Colors.RESET} {graph.root_goal}")
    print(
        f"{Colors.DIM}confidence={graph.meta.confidence:.2f} "
        f"readiness={states.action_readiness.value} "
        f"ambiguity={states.ambiguity_level.value} "
        f"risk={states.risk_sensitivity.value} "
        f"scope={states.intent_scope.value}{Colors.RESET}"
    )
    for sub_goal in graph.sub_goals:
        print(format_sub_goal(sub_goal, depth=1))


async def run_demo(xeroml: XeroML, message: str, follow_up: str):
    """Run each SDK operation once and print the results."""
    print_step("One-shot parse")
    print_graph(await xeroml.parse(message))

    print_step("Session")
    session = await xeroml.create_session()
    print(f"{Colors.GREEN}✓ Created {session.session_id}{Colors.RESET}")

    try:
        print_graph(await session.parse(message))
        await session.update("Sure, let me help with that.", role="assistant")
        print_graph(await session.parse(follow_up))

        drift = await session.check_drift()
        if drift.detected:
            print(
                f"{Colors.YELLOW}Drift ({drift.drift_type}, severity {drift.severity:.2f}): "
                f"{drift.previous_goal} → {drift.current_goal}{Colors.RESET}"
            )
        else:
            print(f"{Colors.GREEN}No drift detected{Colors.RESET}")

        history = await session.get_history()
        print(
            f"{Colors.DIM}{history.turn_count} turns, "
            f"{len(history.drift_events)} drift events{Colors.RESET}"
        )
        for turn in history.graphs:
            print(
                f"  turn {turn.turn_number}: {turn.root_goal} "
                f"{Colors.DIM}({turn.provider}, {turn.latency_ms:.0f} ms, "
                f"{turn.sub_goal_count} sub-goals){Colors.RESET}"
            )
    finally:
        await session.end()
        print(f"{Colors.GREEN}✓ Ended {session.session_id}{Colors.RESET}")

    print_step("Sessions")
    for item in await xeroml.list_sessions(limit=5):
        print(f"  {item.session_id} {item.status} turns={item.turn_count} updated={item.updated_at}")

    print_step("Usage")
    usage = await xeroml.get_usage()
    print(
        f"  tier={usage.tier} credits {usage.credits.used}/{usage.credits.total} "
        f"({usage.credits.remaining} remaining), rate limit {usage.rate_limit}/min"
    )


async def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="XeroML SDK Demo Client")
    parser.add_argument("--url", type=str, default=None, help="API base URL (overrides XEROML_BASE_URL)")
    parser.add_argument("--message", type=str, default="Help me plan a trip to Tokyo")
    parser.add_argument("--follow-up", type=str, default="Actually, can you find me a cheap flight first?")
    args = parser.parse_args()

    try:
        xeroml = XeroML.from_env(base_url=args.url)
    except XeroMLConfigError as e:
        print(f"{Colors.RED}✗ {e}{Colors.RESET}")
        return 2

    logger.info("Running demo", base_url=xeroml.base_url)

    async with xeroml:
        try:
            await run_demo(xeroml, args.message, args.follow_up)
        except XeroMLRateLimitError as e:
            print(f"{Colors.RED}✗ Rate limited, retry in {e.retry_after}s{Colors.RESET}")
            return 1
        except XeroMLError as e:
            print(f"{Colors.RED}✗ {type(e).__name__} [{e.code}] {e.message}{Colors.RESET}")
            if e.request_id:
                print(f"{Colors.DIM}  request_id: {e.request_id}{Colors.RESET}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
