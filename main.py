"""Insight Hub - Company Research Pipeline

Simple CLI for running one research request and printing the stored record.
"""

import argparse
import asyncio
import sys

from insight_hub.agents.orchestrator import InvalidResearchRequestError, ResearchOrchestrator
from insight_hub.services.record_store import InMemoryRecordStore


async def run_research(company: str, domain: str) -> int:
    """Run the pipeline for one company and print the record as JSON."""
    print(f"Company: {company}", file=sys.stderr)
    print(f"Domain:  {domain}", file=sys.stderr)
    print("-" * 50, file=sys.stderr)

    store = InMemoryRecordStore()
    orchestrator = ResearchOrchestrator.from_settings(store)

    try:
        research_id = await orchestrator.run(company, domain)
    except InvalidResearchRequestError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2

    record = await store.get(research_id)
    print(f"[*] Research complete: {research_id}", file=sys.stderr)
    print(record.model_dump_json(by_alias=True, indent=2))
    return 0


def main():
    parser = argparse.ArgumentParser(description="Insight Hub company research")
    parser.add_argument("--company", "-c", required=True, help="Company to research")
    parser.add_argument("--domain", "-d", required=True, help="Consulting project domain")

    args = parser.parse_args()

    sys.exit(asyncio.run(run_research(args.company, args.domain)))


if __name__ == "__main__":
    main()
