"""Prompt templates for the travel operations."""

from __future__ import annotations

import json
from typing import Any

INSIGHTS_PROMPT = """As a senior cultural anthropologist with 20+ years experience in {destination}, provide:

## Comprehensive Cultural Analysis
- **Historical Context**: Key historical events shaping current culture
- **Social Structures**: Family, community, and societal organization
- **Value Systems**: Core cultural values and belief systems

## Practical Interaction Guide
- **Communication Styles**: Verbal and non-verbal patterns
- **Social Etiquette**: Do's and don'ts in various contexts
- **Business Protocol**: Meeting, negotiation, and workplace norms

## Deep Cultural Insights
- **Subcultural Variations**: Differences across regions/age groups
- **Cultural Paradoxes**: Seeming contradictions in cultural norms
- **Emerging Trends**: How culture is evolving

Format as structured JSON with these top-level keys:
- historical_context
- social_structures
- value_systems
- communication_styles
- social_etiquette
- business_protocol
- subcultural_variations
- cultural_paradoxes
- emerging_trends

Include specific examples for each section.
"""

ITINERARY_PROMPT = """You are a world-class travel designer creating a fully personalized itinerary for:

Destination: {destination}

Traveler Profile:
{profile}

Create a day-by-day itinerary. Start each day with a "## Day N" heading and use
"### " subheadings for:
1. Morning: 2-3 activity options with rationale
2. Afternoon: Cultural immersion experiences
3. Evening: Dining and nightlife recommendations
4. Logistics: Transportation tips, timing estimates
5. Local Secrets: Hidden gems most tourists miss
6. Budget Tips: How to save without sacrificing quality
7. Contingencies: Backup plans for bad weather/etc.

Include estimated costs, time allocations, cultural notes for each activity and
accessibility considerations.
"""

TRANSLATION_PROMPT = """As a professional translator native in both {source_lang} and {target_lang}, translate:

Source Text ({source_lang}):
{text}

Requirements:
- Preserve original tone (formal, casual, etc.)
- Adapt cultural references appropriately
- Maintain domain-specific terminology
- Ensure natural flow in {target_lang}

Provide:
1. The translation
2. Brief notes on key translation challenges
3. Cultural adaptation explanations

Format as:
{{
  "translation": "...",
  "translation_notes": "...",
  "cultural_adaptations": "..."
}}
"""


def build_insights_prompt(destination: str) -> str:
    return INSIGHTS_PROMPT.format(destination=destination)


def build_itinerary_prompt(destination: str, profile: dict[str, Any]) -> str:
    return ITINERARY_PROMPT.format(
        destination=destination,
        profile=json.dumps(profile, indent=2, default=str),
    )


def build_translation_prompt(text: str, source_lang: str, target_lang: str) -> str:
    return TRANSLATION_PROMPT.format(
        text=text, source_lang=source_lang, target_lang=target_lang
    )
