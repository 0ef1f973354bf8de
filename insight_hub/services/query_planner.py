from __future__ import annotations

import json
from typing import Protocol

from loguru import logger

from insight_hub.llm_client import TextCompletion
from insight_hub.services.model_output import extract_json_array
from insight_hub.services.prompt_store import render_prompt


class QueryPlanner(Protocol):
    async def generate_queries(self, company_name: str, project_domain: str) -> list[str]: ...


def fallback_queries(company_name: str, project_domain: str) -> list[str]:
    """Canned queries covering the ten research categories."""
    return [
        f"{company_name} company overview mission vision",
        f"{company_name} history founding leadership team",
        f"{company_name} products services offerings",
        f"{company_name} target market customer base",
        f"{company_name} market position competitors analysis",
        f"{company_name} industry trends market share",
        f"{company_name} financial results revenue profit",
        f"{company_name} funding investment valuation",
        f"{company_name} customer demographics segments",
        f"{company_name} notable clients partnerships",
        f"{company_name} marketing strategy campaigns",
        f"{company_name} sales approach channels",
        f"{company_name} online presence social media",
        f"{company_name} reputation reviews feedback",
        f"{company_name} recent news announcements",
        f"{company_name} developments partnerships acquisitions",
        f"{company_name} challenges opportunities growth",
        f"{company_name} {project_domain} consulting opportunities",
        f"{company_name} digital transformation needs",
        f"{company_name} operational efficiency improvements",
    ]


class TemplateQueryPlanner:
    name = "template"

    async def generate_queries(self, company_name: str, project_domain: str) -> list[str]:
        return fallback_queries(company_name, project_domain)


def parse_queries(raw_text: str) -> list[str]:
    """Keep the non-blank strings of the model's JSON array."""
    parsed = extract_json_array(raw_text)
    return [" ".join(item.split()) for item in parsed if isinstance(item, str) and item.strip()]


class LLMQueryPlanner:
    """Ask the model for queries; any failure degrades to the template."""

    name = "llm"

    def __init__(self, completion: TextCompletion):
        self.completion = completion

    async def generate_queries(self, company_name: str, project_domain: str) -> list[str]:
        try:
            text = await self.completion.complete(
                system=render_prompt("query_planner.system_prompt"),
                prompt=render_prompt(
                    "query_planner.user_prompt",
                    company_name=company_name,
                    project_domain=project_domain,
                ),
                caller="query_planner",
            )
            queries = parse_queries(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Query planner returned unparseable output, using template: {e}")
            return fallback_queries(company_name, project_domain)
        except Exception as e:
            logger.error(f"Error generating search queries: {e!r}")
            return fallback_queries(company_name, project_domain)

        if not queries:
            logger.warning("Query planner returned no usable queries, using template")
            return fallback_queries(company_name, project_domain)
        return queries


def build_query_planner(completion: TextCompletion | None) -> QueryPlanner:
    if completion is None:
        return TemplateQueryPlanner()
    return LLMQueryPlanner(completion)
