"""Rule-based keyword classifier."""

import logging
import re
import unicodedata

from evidence_ledger.classifier.keywords import (
    CATEGORY_CODES,
    CATEGORY_KEYWORDS,
    CODE_CATEGORIES,
    DOMAIN_OVERRIDES,
    FINANCE_NOISE_DOMAINS,
    HIGH_CREDIBILITY_DOMAINS,
    NEGATIVE_GUARDS,
    NEGATIVE_SIGNALS,
    OFFICIAL_DOMAINS,
    POSITIVE_SIGNALS,
    SEVERITY_SIGNALS,
    SEVERITY_WEIGHTS,
    STOCK_TIP_PATTERN,
    KeywordDictionary,
)
from evidence_ledger.data import (
    Category,
    Classification,
    KeywordCategory,
    Orientation,
    Severity,
)

logger = logging.getLogger(__name__)

NOISE_REASON = "Pure financial/stock analysis"


def normalize_text(text: str) -> str:
    """Lower-case and strip diacritics (NFKD, combining marks removed)."""
    decomposed = unicodedata.normalize("NFKD", (text or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _word_pattern(word: str) -> re.Pattern[str]:
    # "_" and "-" count as boundaries so "union-busting" and "osha_fine" still match.
    boundary = r"(?:\b|_|-)"
    return re.compile(f"{boundary}{re.escape(normalize_text(word))}{boundary}", re.IGNORECASE)


def _terms_pattern(terms: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(t) for t in sorted(terms, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})(?:s|es|d|ed)?\b", re.IGNORECASE)


def source_credibility(domain: str | None) -> float:
    """Credibility factor for a source domain.

    Returns:
        1.0 for government and regulator domains, 0.9 for established outlets,
        0.6 otherwise.
    """
    domain = (domain or "").lower()
    if any(d in domain for d in OFFICIAL_DOMAINS):
        return 1.0
    if any(d in domain for d in HIGH_CREDIBILITY_DOMAINS):
        return 0.9
    return 0.6


class KeywordClassifier:
    """Classify event text against fixed keyword dictionaries.

    Each category accumulates ``phrase_score`` per matched phrase and
    ``word_score`` per whole-word hit. The best positive score becomes the
    primary category; others scoring at least ``secondary_min`` become
    secondaries. Source domains of known regulators override the keyword
    result, and financial commentary from low-signal outlets is flagged as
    noise.

    Args:
        phrase_score: Points per matched phrase.
        word_score: Points per matched word occurrence.
        secondary_min: Minimum score for a secondary category.
        confidence_min: Lower confidence bound.
        confidence_max: Upper confidence bound.
        override_confidence: Confidence floor when a regulator domain overrides.
        guard_penalty: Score added to a category when one of its guards matches.
        secondary_share: Fraction of the primary impact given to secondaries.
        mixed_damping: Fraction of the negative weight used for mixed orientation.
        default_primary: Primary category when nothing scores.
        keywords: Keyword dictionaries (defaults to ``CATEGORY_KEYWORDS``).
    """

    def __init__(
        self,
        *,
        phrase_score: int = 5,
        word_score: int = 2,
        secondary_min: int = 4,
        confidence_min: float = 0.35,
        confidence_max: float = 0.98,
        override_confidence: float = 0.85,
        guard_penalty: int = -10,
        secondary_share: float = 0.4,
        mixed_damping: float = 0.3,
        default_primary: KeywordCategory = KeywordCategory.SOCIAL,
        keywords: dict[KeywordCategory, KeywordDictionary] | None = None,
    ) -> None:
        self._phrase_score = phrase_score
        self._word_score = word_score
        self._secondary_min = secondary_min
        self._confidence_min = confidence_min
        self._confidence_max = confidence_max
        self._override_confidence = override_confidence
        self._guard_penalty = guard_penalty
        self._secondary_share = secondary_share
        self._mixed_damping = mixed_damping
        self._default_primary = default_primary

        keywords = keywords if keywords is not None else CATEGORY_KEYWORDS
        self._phrases = {
            category: [f" {normalize_text(p)} " for p in entry.phrases]
            for category, entry in keywords.items()
        }
        self._words = {
            category: [_word_pattern(w) for w in entry.words]
            for category, entry in keywords.items()
        }
        self._guards = [(f" {normalize_text(g)} ", cat) for g, cat in NEGATIVE_GUARDS.items()]
        self._severity = [(level, _terms_pattern(terms)) for level, terms in SEVERITY_SIGNALS]
        self._negative = _terms_pattern(NEGATIVE_SIGNALS)
        self._positive = _terms_pattern(POSITIVE_SIGNALS)
        self._stock_tip = re.compile(STOCK_TIP_PATTERN, re.IGNORECASE)

    def score(self, text: str) -> dict[KeywordCategory, int]:
        """Raw keyword score per category, guard penalties included."""
        padded = f" {normalize_text(text)} "
        scores: dict[KeywordCategory, int] = {}
        for category, phrases in self._phrases.items():
            total = sum(self._phrase_score for p in phrases if p in padded)
            for pattern in self._words[category]:
                total += len(pattern.findall(padded)) * self._word_score
            scores[category] = total

        # Key order follows the keyword dictionaries; rank() breaks ties on it.
        for guard, category in self._guards:
            if guard in padded:
                scores[category] = scores.get(category, 0) + self._guard_penalty
        return scores

    def rank(
        self, scores: dict[KeywordCategory, int]
    ) -> tuple[KeywordCategory, tuple[KeywordCategory, ...], float]:
        """Resolve primary, secondaries and confidence from raw scores.

        Ties keep dictionary order.
        """
        ranked = sorted(
            ((cat, s) for cat, s in scores.items() if s > 0),
            key=lambda item: item[1],
            reverse=True,
        )
        if not ranked:
            return (self._default_primary, (), self._confidence_min)

        primary, primary_score = ranked[0]
        confidence = primary_score / (max(primary_score, 10) + 4)
        confidence = min(self._confidence_max, max(self._confidence_min, confidence))
        secondary = tuple(cat for cat, s in ranked[1:] if s >= self._secondary_min)
        return (primary, secondary, confidence)

    def severity(self, text: str) -> Severity:
        for level, pattern in self._severity:
            if pattern.search(text):
                return level
        return Severity.MINOR

    def orientation(self, text: str) -> tuple[Orientation, bool, bool]:
        """Return the orientation and whether negative/positive signals were seen."""
        has_negative = self._negative.search(text) is not None
        has_positive = self._positive.search(text) is not None
        if has_negative and not has_positive:
            return (Orientation.NEGATIVE, has_negative, has_positive)
        if has_positive and not has_negative:
            return (Orientation.POSITIVE, has_negative, has_positive)
        return (Orientation.MIXED, has_negative, has_positive)

    def classify(self, text: str, source_domain: str | None = None) -> Classification:
        """Classify a piece of text, optionally informed by its source domain.

        Args:
            text: Title and body text. Empty text yields the default category.
            source_domain: Host the text was published on, e.g. ``"osha.gov"``.

        Returns:
            The full Classification. Never raises on malformed input.
        """
        text = text or ""
        domain = (source_domain or "").lower()
        primary, secondary, confidence = self.rank(self.score(text))

        for domains, category in DOMAIN_OVERRIDES:
            if any(d in domain for d in domains):
                primary = category
                confidence = max(confidence, self._override_confidence)
                secondary = tuple(c for c in secondary if c != category)
                break

        noise_reason = None
        if (
            primary == KeywordCategory.FINANCIAL
            and any(d in domain for d in FINANCE_NOISE_DOMAINS)
            and self._stock_tip.search(text)
        ):
            primary = KeywordCategory.NOISE
        is_noise = primary == KeywordCategory.NOISE
        if is_noise:
            noise_reason = NOISE_REASON

        code = CATEGORY_CODES.get(primary, CATEGORY_CODES[KeywordCategory.SOCIAL])
        category = CODE_CATEGORIES.get(code, Category.SOCIAL)
        severity = self.severity(text)
        credibility = source_credibility(domain)

        if is_noise:
            orientation, magnitude = Orientation.MIXED, 0.0
        else:
            orientation, has_negative, has_positive = self.orientation(text)
            negative_weight, positive_weight = SEVERITY_WEIGHTS[severity]
            if orientation == Orientation.NEGATIVE:
                magnitude = float(negative_weight)
            elif orientation == Orientation.POSITIVE:
                magnitude = float(positive_weight)
            elif has_negative and has_positive:
                magnitude = float(round(negative_weight * self._mixed_damping))
            else:
                magnitude = 0.0
            magnitude = round(magnitude * credibility, 2)

        impacts = {c: 0.0 for c in Category}
        impacts[category] = magnitude
        for secondary_category in secondary:
            bucket = CODE_CATEGORIES.get(CATEGORY_CODES[secondary_category], Category.SOCIAL)
            if bucket != category:
                impacts[bucket] = round(magnitude * self._secondary_share, 2)

        logger.debug(
            "Classified as %s (%s) confidence=%.2f severity=%s orientation=%s",
            primary,
            code,
            confidence,
            severity,
            orientation,
        )
        return Classification(
            primary_category=primary,
            category=category,
            category_code=code,
            secondary_categories=secondary,
            confidence=round(confidence, 4),
            severity=severity,
            orientation=orientation,
            impact_by_category=impacts,
            is_noise=is_noise,
            noise_reason=noise_reason,
            credibility=credibility,
        )
