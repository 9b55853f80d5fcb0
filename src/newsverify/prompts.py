"""Prompt builders for the LLM gateway."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .models import NewsArticle

OUTLET_LABELS = {
    "bbc": "BBC",
    "cnn": "CNN",
    "abc": "ABC News",
    "guardian": "Guardian",
}

VIRALITY_SYSTEM_PROMPT = """You are an expert news analyst specializing in viral content prediction.
Analyze the given news headline and content to determine its viral potential.

Evaluate based on:
1. Emotional impact and engagement potential
2. Newsworthiness and timeliness
3. Shareability and discussion-worthiness
4. Credibility indicators
5. Target audience appeal

Respond with a JSON object containing:
- isViralWorthy: boolean (true if high viral potential)
- reason: string (detailed explanation)
- confidence: number (0.0 to 1.0)
- category: string (Politics, Technology, Health, Entertainment, Sports, Business, Science, Other)
- sentiment: string (Positive, Negative, Neutral, Mixed, High Impact)

Be analytical but concise in your reasoning."""


def build_virality_prompt(headline: str, content: str) -> str:
    return (
        f"Headline: {headline}\n\n"
        f"Content: {content}\n\n"
        "Analyze this news article and determine its viral potential."
    )


_VERIFICATION_RULES = """**VERIFICATION RULES - FOLLOW EXACTLY:**

STEP 1: Check if articles were found
- If 0 articles found from a source -> verified=false, similarity=0
- If 1+ articles found -> continue to STEP 2

STEP 2: Check for topical match (do not require exact wording)
Check if the user's content and the found articles share ANY of:
- Same main subject or person
- Same location
- Same type of event
- Same timeframe

If YES to any -> verified=true with similarity 60-95 (higher with more overlap)
If NO to all -> verified=false

News outlets report the same story with different headlines and wording.
Focus on WHAT the story is about, not how it is written.

Respond in JSON format only:
{
  "bbcVerified": boolean, "bbcSimilarity": number (0-100),
  "bbcArticles": [{"title": string, "similarity": number, "url": string}],
  "cnnVerified": boolean, "cnnSimilarity": number (0-100),
  "cnnArticles": [{"title": string, "similarity": number, "url": string}],
  "abcVerified": boolean, "abcSimilarity": number (0-100),
  "abcArticles": [{"title": string, "similarity": number, "url": string}],
  "guardianVerified": boolean, "guardianSimilarity": number (0-100),
  "guardianArticles": [{"title": string, "similarity": number, "url": string}],
  "legitimacyScore": number (0-100),
  "topics": string[],
  "locations": string[],
  "dates": string[],
  "credibilityIndicators": string[],
  "redFlags": string[],
  "overallAssessment": string
}"""


def _format_article(index: int, label: str, article: NewsArticle) -> str:
    published = article.published_at.isoformat() if article.published_at else "N/A"
    return (
        f"Article {index} [{article.source or label}]:\n"
        f"Title: {article.title}\n"
        f"Description: {article.description or 'N/A'}\n"
        f"Content: {article.content or 'N/A'}\n"
        f"Published: {published}\n"
        f"URL: {article.url}\n"
    )


def build_verification_prompt(
    content: str,
    source_url: str | None,
    outlet_articles: Mapping[str, Sequence[NewsArticle]],
) -> str:
    total = sum(len(articles) for articles in outlet_articles.values())
    blocks: list[str] = []
    for key, label in OUTLET_LABELS.items():
        for article in outlet_articles.get(key, ()):
            blocks.append(_format_article(len(blocks) + 1, label, article))
    articles_context = "\n---\n".join(blocks) if blocks else "No matching articles found in the news search."
    counts = "\n".join(
        f"- {label} Articles Found: {len(outlet_articles.get(key, ()))}" for key, label in OUTLET_LABELS.items()
    )
    url_line = f"User's Source URL: {source_url}\n" if source_url else ""
    return (
        "You are a news verification assistant. Compare the user's news content against real "
        "articles from BBC, CNN, ABC News, and The Guardian retrieved from a news search.\n\n"
        f"User's News Content:\n{content}\n\n"
        f"{url_line}\n"
        f"Found Articles ({total} total):\n{counts}\n\n"
        f"{articles_context}\n\n"
        f"{_VERIFICATION_RULES}"
    )
