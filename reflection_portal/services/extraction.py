"""Document extraction — school calendar / work plan -> monthly key activities.

Sends the uploaded document to Claude and parses a JSON array of
``{"month": str, "activities": [str, ...]}`` groups. Any failure yields an
empty list: the caller treats it as "nothing extracted", never as fatal.
"""

import base64
import json
import logging

import anthropic

from reflection_portal.config import (
    ACADEMIC_YEAR_START, ANTHROPIC_API_KEY, EXTRACTION_MAX_TOKENS, EXTRACTION_MODEL,
)

logger = logging.getLogger(__name__)

TEXT_MEDIA_TYPES = {"application/json", "application/csv"}
IMAGE_MEDIA_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp"}
PDF_MEDIA_TYPE = "application/pdf"


def is_supported_media_type(media_type: str) -> bool:
    return (
        media_type.startswith("text/")
        or media_type in TEXT_MEDIA_TYPES
        or media_type in IMAGE_MEDIA_TYPES
        or media_type == PDF_MEDIA_TYPE
    )


def build_prompt(year_start: int = ACADEMIC_YEAR_START) -> str:
    return f"""
Analyze the provided document (a school calendar, work schedule, or plan).
Extract the main work activities for each month of the academic year from
March {year_start} to February {year_start + 1}.

Guidelines:
1. Organize by month, in academic order (March, April, ... January, February).
2. Ignore routine/daily tasks. Focus on key events, major reports, and deadlines.
3. Return ONLY a JSON array, no markdown code blocks, no explanation:
   [{{"month": "March", "activities": ["...", "..."]}}, ...]
"""


def build_content(data: bytes, media_type: str) -> list[dict]:
    """Message content blocks for the document followed by the prompt."""
    blocks = []
    if media_type.startswith("text/") or media_type in TEXT_MEDIA_TYPES:
        text = data.decode("utf-8", errors="replace")
        blocks.append({"type": "text", "text": f"DOCUMENT CONTENT:\n{text}"})
    elif media_type == PDF_MEDIA_TYPE:
        blocks.append({
            "type": "document",
            "source": {
                "type": "base64",
                "media_type": PDF_MEDIA_TYPE,
                "data": base64.standard_b64encode(data).decode("ascii"),
            },
        })
    else:
        blocks.append({
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": media_type,
                "data": base64.standard_b64encode(data).decode("ascii"),
            },
        })
    blocks.append({"type": "text", "text": build_prompt()})
    return blocks


def parse_groups(raw: str) -> list[dict]:
    """Parse the model's reply into validated month groups."""
    json_text = raw.strip()

    # Clean up if wrapped in code blocks
    if json_text.startswith("```"):
        json_text = json_text.split("```")[1]
        if json_text.startswith("json"):
            json_text = json_text[4:]
        json_text = json_text.strip()

    data = json.loads(json_text)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of month groups")

    groups = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        month = str(entry.get("month", "")).strip()
        activities = entry.get("activities") or []
        if not month or not isinstance(activities, list):
            continue
        activities = [str(a).strip() for a in activities if str(a).strip()]
        groups.append({"month": month, "activities": activities})
    return groups


def get_client() -> anthropic.Anthropic:
    if not ANTHROPIC_API_KEY:
        raise ValueError("ANTHROPIC_API_KEY environment variable not set")
    return anthropic.Anthropic(api_key=ANTHROPIC_API_KEY)


def extract_activities(data: bytes, media_type: str) -> list[dict]:
    """Extract monthly activity groups from a document. Returns [] on any failure."""
    if not is_supported_media_type(media_type):
        logger.warning("Extraction skipped: unsupported media type %s", media_type)
        return []

    try:
        client = get_client()
        response = client.messages.create(
            model=EXTRACTION_MODEL,
            max_tokens=EXTRACTION_MAX_TOKENS,
            messages=[{"role": "user", "content": build_content(data, media_type)}],
        )
        raw = "".join(block.text for block in response.content if getattr(block, "type", "") == "text")
        if not raw.strip():
            return []
        groups = parse_groups(raw)
    except Exception as e:
        logger.error("Document extraction failed: %s", e)
        return []

    logger.info("Extracted %d month groups (%d activities)",
                len(groups), sum(len(g["activities"]) for g in groups))
    return groups
