# /memora/services/intent_service.py

import re
import logging
import unicodedata
from typing import Dict, List, Set

from memora.config import rules
from memora.models.intent import Intent, IntentAction, IntentCategory, KeywordMatch

# Rule-based understanding of free text: normalization, weighted keyword
# matching, verb-based action refinement and entity extraction. All tables
# live in memora.config.rules; this module only applies them.

logger = logging.getLogger(__name__)

_PUNCTUATION_RE = re.compile(r"[^\w\s'-]")
_SPACES_RE = re.compile(r"\s+")


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold_text(text: str) -> str:
    """Lower case without accents; punctuation and length are preserved."""
    return _strip_accents((text or "").lower()).replace("’", "'")


def normalize_text(text: str) -> str:
    """
    Canonical form used for every table lookup: lower case, no diacritics,
    punctuation other than apostrophes and hyphens collapsed to single spaces.
    """
    folded = fold_text(text)
    folded = _PUNCTUATION_RE.sub(" ", folded)
    return _SPACES_RE.sub(" ", folded).strip()


def _word_pattern(words) -> re.Pattern:
    alternatives = "|".join(re.escape(word) for word in sorted(words, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})\b")


# Loaded once at import time
_KEYWORDS = [(normalize_text(phrase), entries) for phrase, entries in rules.INTENT_KEYWORDS.items()]
_VERB_PATTERNS = {verb: _word_pattern(words) for verb, words in rules.ACTION_VERBS.items()}
_VOCABULARIES = {
    name: [(_word_pattern([keyword]), value) for keyword, value in table]
    for name, table in {
        "priority": rules.PRIORITY_VOCABULARY,
        "status": rules.STATUS_VOCABULARY,
        "absenceType": rules.ABSENCE_TYPE_VOCABULARY,
        "meetingType": rules.MEETING_TYPE_VOCABULARY,
        "format": rules.EXPORT_FORMAT_VOCABULARY,
        "theme": rules.THEME_VOCABULARY,
    }.items()
}


def _lookup(vocabulary: str, normalized: str):
    for pattern, value in _VOCABULARIES[vocabulary]:
        if pattern.search(normalized):
            return value
    return None


class IntentService:
    """Classifies one user turn into an Intent. Stateless and total."""

    def normalize(self, text: str) -> str:
        return normalize_text(text)

    def find_keyword_matches(self, normalized: str) -> List[KeywordMatch]:
        matches = []
        for phrase, entries in _KEYWORDS:
            if phrase and phrase in normalized:
                for category, action, weight in entries:
                    matches.append(KeywordMatch(
                        category=IntentCategory(category),
                        action=IntentAction(action),
                        weight=weight,
                        match_length=len(phrase),
                    ))
        # Heaviest first; longer, more specific phrases win ties.
        matches.sort(key=lambda m: (m.weight, m.match_length), reverse=True)
        return matches

    def detect_verbs(self, normalized: str) -> Set[str]:
        return {verb for verb, pattern in _VERB_PATTERNS.items() if pattern.search(normalized)}

    def refine_action(self, top: KeywordMatch, verbs: Set[str]) -> IntentAction:
        for verb, action in rules.ACTION_REFINEMENTS.get(top.category.value, []):
            if verb in verbs:
                return IntentAction(action)
        return top.action

    def extract_entities(self, raw_text: str, normalized: str, category: str, action: str) -> Dict[str, str]:
        entities: Dict[str, str] = {}

        dates = rules.ISO_DATE_RE.findall(raw_text)
        if dates:
            entities["date"] = dates[0]
            if len(dates) > 1:
                entities["endDate"] = dates[1]

        for hours, minutes in rules.TIME_RE.findall(raw_text.lower()):
            if int(hours) < 24 and int(minutes) < 60:
                entities["time"] = f"{int(hours):02d}:{minutes}"
                break

        quoted = rules.QUOTED_RE.search(raw_text)
        if quoted:
            name = next((group for group in quoted.groups() if group), "").strip()
            if name:
                entities["name"] = name

        if category == IntentCategory.SEARCH.value:
            query = self._extract_search_query(raw_text)
            if query:
                entities["query"] = query

        if category == IntentCategory.NAVIGATION.value or action == IntentAction.NAVIGATE_TO.value:
            for pattern in rules.NAVIGATION_PATTERNS:
                match = pattern.search(normalized)
                if match and match.group(1).strip():
                    entities["target"] = match.group(1).strip()
                    break

        if action in (IntentAction.ASSIGN_TASK.value, IntentAction.CREATE_TASK.value):
            match = rules.ASSIGNEE_PATTERN.search(fold_text(raw_text))
            if match:
                entities["assignee"] = raw_text[match.start(1):match.end(1)].strip()
            else:
                match = rules.ASSIGNEE_NAME_PATTERN.search(raw_text)
                if match:
                    entities["assignee"] = match.group(1).strip()

        for key in ("priority", "status"):
            value = _lookup(key, normalized)
            if value:
                entities[key] = value

        scoped = {
            "absenceType": category == IntentCategory.ABSENCE.value,
            "meetingType": category == IntentCategory.MEETING.value,
            "format": category == IntentCategory.EXPORT.value,
            "theme": action == IntentAction.CHANGE_THEME.value,
        }
        for key, applies in scoped.items():
            if applies:
                value = _lookup(key, normalized)
                if value:
                    entities[key] = value

        return entities

    def _extract_search_query(self, raw_text: str) -> str:
        # Matched on folded text, returned with the user's own casing and accents.
        folded = fold_text(raw_text)
        for pattern in rules.SEARCH_PATTERNS:
            match = pattern.search(folded)
            if match:
                source = raw_text if len(folded) == len(raw_text) else folded
                return source[match.start(1):match.end(1)].strip().rstrip("?!. ")
        return ""

    def classify(self, raw_text: str) -> Intent:
        normalized = normalize_text(raw_text)
        if len(normalized) < 2:
            return Intent(confidence=0.0, raw_text=raw_text or "")

        matches = self.find_keyword_matches(normalized)
        if not matches:
            return Intent(confidence=0.1, raw_text=raw_text)

        top = matches[0]
        verbs = self.detect_verbs(normalized)
        action = self.refine_action(top, verbs)

        confidence = top.weight
        if sum(1 for m in matches if m.category == top.category) >= 2:
            confidence = min(1.0, confidence + 0.1)
        if verbs:
            confidence = min(1.0, confidence + 0.05)
        confidence = max(0.0, min(1.0, confidence))

        entities = self.extract_entities(raw_text, normalized, top.category.value, action.value)
        logger.debug(f"Classified input as {top.category.value}/{action.value} ({confidence:.2f})")

        return Intent(
            category=top.category,
            action=action,
            confidence=confidence,
            entities=entities,
            raw_text=raw_text,
        )

    def requires_flow(self, action) -> bool:
        return getattr(action, "value", action) in rules.FLOW_ACTIONS

    def requires_navigation(self, action) -> bool:
        return getattr(action, "value", action) in rules.NAVIGATION_ACTIONS


# Globally accessible instance
intent_service = IntentService()
