# FILE: roadmapx/ai/comprehend.py
"""
Amazon Comprehend text analysis: language, sentiment, entities, key phrases.

With DEV_FAKE_COMPREHEND=1 a failed call returns a neutral canned result
instead of raising, so roadmap generation can be exercised without an AWS
account.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from roadmapx.aws import comprehend_client
from roadmapx.config import fake_comprehend_enabled

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

_FAKE_SENTIMENT = {
    "Sentiment": "NEUTRAL",
    "SentimentScore": {"Positive": 0.25, "Negative": 0.25, "Neutral": 0.45, "Mixed": 0.05},
}
_FAKE_LANGUAGES = [{"LanguageCode": "en", "Score": 0.99}]

AWS_ERRORS = (BotoCoreError, ClientError)


def _strip(response: Dict[str, Any]) -> Dict[str, Any]:
    """Drop SDK transport metadata from a response."""
    return {k: v for k, v in response.items() if k != "ResponseMetadata"}


def _resolve_language(text: str, language_code: Optional[str]) -> str:
    if language_code:
        return language_code
    languages = detect_language(text).get("Languages") or []
    return languages[0].get("LanguageCode", DEFAULT_LANGUAGE) if languages else DEFAULT_LANGUAGE


def detect_language(text: str) -> Dict[str, Any]:
    """Detect the dominant language. Returns {"Languages": [...]}."""
    return _strip(comprehend_client().detect_dominant_language(Text=text))


def detect_sentiment(text: str, language_code: Optional[str] = None) -> Dict[str, Any]:
    """Detect sentiment (POSITIVE, NEGATIVE, NEUTRAL, MIXED) with scores."""
    try:
        language_code = _resolve_language(text, language_code)
        return _strip(comprehend_client().detect_sentiment(Text=text, LanguageCode=language_code))
    except AWS_ERRORS:
        if fake_comprehend_enabled():
            logger.warning("[comprehend] detect_sentiment failed, using fake result")
            return dict(_FAKE_SENTIMENT)
        raise


def detect_entities(text: str, language_code: Optional[str] = None) -> Dict[str, Any]:
    """Detect entities (PERSON, ORGANIZATION, LOCATION, OTHER, ...)."""
    try:
        language_code = _resolve_language(text, language_code)
        return _strip(comprehend_client().detect_entities(Text=text, LanguageCode=language_code))
    except AWS_ERRORS:
        if fake_comprehend_enabled():
            logger.warning("[comprehend] detect_entities failed, using fake result")
            return {"Entities": []}
        raise


def detect_key_phrases(text: str, language_code: Optional[str] = None) -> Dict[str, Any]:
    """Detect key noun phrases."""
    try:
        language_code = _resolve_language(text, language_code)
        return _strip(comprehend_client().detect_key_phrases(Text=text, LanguageCode=language_code))
    except AWS_ERRORS:
        if fake_comprehend_enabled():
            logger.warning("[comprehend] detect_key_phrases failed, using fake result")
            return {"KeyPhrases": []}
        raise


def analyze_text(text: str) -> Dict[str, Any]:
    """
    Full analysis of text.

    Detects the language first, then runs sentiment, entity and key-phrase
    detection concurrently with that language.

    Returns:
        {"language": [...], "sentiment": {...}, "entities": [...], "key_phrases": [...]}
    """
    try:
        languages = detect_language(text).get("Languages") or []
        language_code = languages[0].get("LanguageCode", DEFAULT_LANGUAGE) if languages else DEFAULT_LANGUAGE

        with ThreadPoolExecutor(max_workers=3) as pool:
            sentiment_f = pool.submit(detect_sentiment, text, language_code)
            entities_f = pool.submit(detect_entities, text, language_code)
            phrases_f = pool.submit(detect_key_phrases, text, language_code)
            sentiment = sentiment_f.result()
            entities = entities_f.result()
            phrases = phrases_f.result()

        return {
            "language": languages,
            "sentiment": sentiment,
            "entities": entities.get("Entities", []),
            "key_phrases": phrases.get("KeyPhrases", []),
        }
    except AWS_ERRORS as e:
        if fake_comprehend_enabled():
            logger.warning("[comprehend] analyze_text failed (%s), using fake result", e)
            return {
                "language": list(_FAKE_LANGUAGES),
                "sentiment": dict(_FAKE_SENTIMENT),
                "entities": [],
                "key_phrases": [],
            }
        raise


def batch_detect_sentiment(texts: List[str], language_code: str = DEFAULT_LANGUAGE) -> Dict[str, Any]:
    """Sentiment for up to 25 texts in one call. Returns ResultList/ErrorList."""
    return _strip(comprehend_client().batch_detect_sentiment(TextList=texts, LanguageCode=language_code))
