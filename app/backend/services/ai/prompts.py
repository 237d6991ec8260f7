"""
Prompt construction for thesis categorization.

The system instruction is identical for every document; only the user
content (the truncated abstract text) varies.
"""

import re

# Handle both package imports and standalone imports
try:
    from ...models import Category
except ImportError:
    from models import Category

MAX_TEXT_CHARS = 6000

CATEGORY_NAMES = ", ".join(category.value for category in Category.taxonomy())

USER_CONTENT_PREFIX = "Here is the document abstract:\n\n"


# =============================================================================
# Classification System Prompt
# =============================================================================

SYSTEM_PROMPT = f"""You are an expert document classifier for university senior projects. Your task is to analyze the provided abstract text from a Thai university thesis and categorize it into ONLY ONE of the following categories: {CATEGORY_NAMES}. 

Guidelines:
- Web-application: Projects involving web applications, websites, web services, APIs, web development
- Mobile-application: Projects involving iOS, Android, mobile applications, mobile development
- Hardware/IoT & Network: Projects involving IoT, embedded systems, robotics, Arduino, sensors, networking, network infrastructure
- Digital Image Processing: Projects involving computer vision, image analysis, image processing, OCR, face recognition, pattern recognition
- Other: Projects that don't fit the above categories

Output ONLY the category name. Do not add any explanation."""


# =============================================================================
# Helper Functions
# =============================================================================


def truncate_text(text: str, limit: int = MAX_TEXT_CHARS) -> str:
    """Keep the first `limit` characters; no word-boundary handling."""
    return text[:limit]


def build_user_content(text: str) -> str:
    """Build the user message from the selected abstract text."""
    return f"{USER_CONTENT_PREFIX}{truncate_text(text)}"


def build_messages(text: str) -> list[dict[str, str]]:
    """
    Build the chat messages for one classification request.

    Args:
        text: Joined text of the selected pages (untruncated).

    Returns:
        System and user messages in chat-completions format.
    """
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_content(text)},
    ]


_WRAPPING_CHARS = "\"'`*. \t\n"


def _mention_pattern(category: Category) -> re.Pattern[str]:
    """Match a category name as a whole term, not inside a longer word."""
    return re.compile(rf"(?<![\w-]){re.escape(category.value)}(?![\w-])", re.IGNORECASE)


_MENTION_PATTERNS = {
    category: _mention_pattern(category)
    for category in Category.taxonomy()
    if category is not Category.OTHER
}


def normalize_category(label: str) -> Category:
    """
    Map a raw model label onto the closed taxonomy.

    Tries an exact case-insensitive match first (ignoring quotes, markdown
    emphasis and a trailing period), then the earliest specific category
    named as a whole term inside the label. Anything else is Other.
    """
    cleaned = label.strip().strip(_WRAPPING_CHARS).casefold()
    for category in Category.taxonomy():
        if cleaned == category.value.casefold():
            return category

    # Other is the fallback, so a stray "other" in a sentence never wins
    mentions = []
    for category, pattern in _MENTION_PATTERNS.items():
        match = pattern.search(label)
        if match:
            mentions.append((match.start(), category))
    if mentions:
        return min(mentions, key=lambda item: item[0])[1]

    return Category.OTHER
