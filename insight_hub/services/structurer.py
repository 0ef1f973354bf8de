"""Turn fetched documents into the ten-section research record body.

The live structurer sends a bounded context blob to the model and accepts its
answer only if it validates as a ``SectionSet``. Anything else (no key, a
transport error, invalid JSON, a missing section, an empty block) falls back
to ``fallback_sections``, which depends only on its two string inputs.
"""
from __future__ import annotations

import json
from typing import Protocol

from loguru import logger
from pydantic import ValidationError

from insight_hub.llm_client import TextCompletion
from insight_hub.models.documents import FetchedDocument
from insight_hub.models.schemas import SectionSet
from insight_hub.services.model_output import extract_json_object
from insight_hub.services.prompt_store import render_prompt

DOCUMENT_SEPARATOR = "\n\n---\n\n"


class InformationStructurer(Protocol):
    async def structure(
        self,
        company_name: str,
        project_domain: str,
        documents: list[FetchedDocument],
    ) -> SectionSet: ...


def _block(subtitle: str, text: str, url: str, title: str) -> dict:
    return {"subtitle": subtitle, "text": text, "sources": [{"url": url, "title": title}]}


def fallback_sections(company_name: str, project_domain: str) -> SectionSet:
    c, d = company_name, project_domain
    data = {
        "overview": {
            "content": [
                _block(
                    "Company Information",
                    f"{c} is a leading company in its industry with a strong market presence and innovative approach to business. The organization demonstrates commitment to excellence and customer satisfaction.",
                    "https://example.com",
                    "Company Website",
                ),
                _block(
                    "Leadership & Vision",
                    f"{c} is guided by experienced leadership with a clear vision for growth and market expansion in the {d} sector.",
                    "https://example.com/about",
                    "About Page",
                ),
            ]
        },
        "products": {
            "content": [
                _block(
                    "Core Offerings",
                    f"{c} offers a comprehensive range of products and services designed to meet diverse customer needs in the {d} space, with focus on innovation and quality.",
                    "https://example.com/products",
                    "Product Page",
                )
            ]
        },
        "market": {
            "content": [
                _block(
                    "Market Position",
                    f"{c} holds a competitive position in the market with significant opportunities for growth in {d}. The company demonstrates strong market awareness and strategic positioning.",
                    "https://example.com/market",
                    "Market Analysis",
                )
            ]
        },
        "financial": {
            "content": [
                _block(
                    "Financial Overview",
                    f"{c} demonstrates solid financial performance with sustainable growth potential and strong fundamentals supporting future expansion.",
                    "https://example.com/financials",
                    "Financial Reports",
                )
            ]
        },
        "customers": {
            "content": [
                _block(
                    "Customer Base",
                    f"{c} serves a diverse customer base with strong relationships and high loyalty rates, spanning multiple market segments and geographic regions.",
                    "https://example.com/customers",
                    "Customer Information",
                )
            ]
        },
        "marketing": {
            "content": [
                _block(
                    "Marketing Strategy",
                    f"{c} employs a multi-channel marketing approach utilizing digital platforms, traditional media, and strategic partnerships to reach target audiences effectively.",
                    "https://example.com/marketing",
                    "Marketing Materials",
                )
            ]
        },
        "online": {
            "content": [
                _block(
                    "Digital Presence",
                    f"{c} maintains an active and engaging online presence across multiple platforms, with strong social media engagement and positive digital reputation.",
                    "https://example.com/social",
                    "Social Media",
                )
            ]
        },
        "news": {
            "content": [
                _block(
                    "Recent Developments",
                    f"{c} has been involved in several notable developments and strategic announcements recently, demonstrating continued growth and market expansion efforts.",
                    "https://example.com/news",
                    "News Articles",
                )
            ]
        },
        "challenges": {
            "content": [
                _block(
                    "Growth Opportunities",
                    f"{c} faces typical industry challenges but also has significant opportunities for improvement and growth, particularly in areas related to {d}.",
                    "https://example.com/analysis",
                    "Industry Analysis",
                )
            ]
        },
        "valueProposition": {
            "content": [
                _block(
                    "Suggested Value Proposition",
                    f"Based on the research findings, {c} could significantly benefit from {d} consulting to address identified opportunities, optimize operations, and accelerate growth initiatives.",
                    "https://example.com/consulting",
                    "Consulting Opportunities",
                )
            ]
        },
    }
    return SectionSet.model_validate(data)


def build_context(documents: list[FetchedDocument], char_budget: int) -> str:
    text = DOCUMENT_SEPARATOR.join(
        f"URL: {doc.url}\nTitle: {doc.title}\nContent: {doc.content}" for doc in documents
    )
    return text[: max(char_budget, 0)]


class TemplateInformationStructurer:
    name = "template"

    async def structure(
        self,
        company_name: str,
        project_domain: str,
        documents: list[FetchedDocument],
    ) -> SectionSet:
        return fallback_sections(company_name, project_domain)


class LLMInformationStructurer:
    name = "llm"

    def __init__(self, completion: TextCompletion, *, context_char_budget: int = 15000):
        self.completion = completion
        self.context_char_budget = context_char_budget

    async def structure(
        self,
        company_name: str,
        project_domain: str,
        documents: list[FetchedDocument],
    ) -> SectionSet:
        context = build_context(documents, self.context_char_budget)
        try:
            text = await self.completion.complete(
                system=render_prompt("structurer.system_prompt"),
                prompt=render_prompt(
                    "structurer.user_prompt",
                    company_name=company_name,
                    project_domain=project_domain,
                    content=context,
                ),
                caller="structurer",
            )
            return SectionSet.model_validate(extract_json_object(text))
        except json.JSONDecodeError as e:
            logger.warning(f"Structurer returned unparseable output, using template: {e}")
        except ValidationError as e:
            logger.warning(
                f"Structurer output failed schema validation ({e.error_count()} errors), using template"
            )
        except Exception as e:
            logger.error(f"Error extracting information: {e!r}")
        return fallback_sections(company_name, project_domain)


def build_structurer(
    completion: TextCompletion | None,
    *,
    context_char_budget: int = 15000,
) -> InformationStructurer:
    if completion is None:
        return TemplateInformationStructurer()
    return LLMInformationStructurer(completion, context_char_budget=context_char_budget)
