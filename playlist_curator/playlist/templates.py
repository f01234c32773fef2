"""
Template rule engine.

Templates are declarative rule lists (genre / artist / folder substring
matches and year comparisons) that each produce one playlist. Rules compose
by logical AND. A rule list is validated as a whole before any filtering:
one malformed rule rejects the list.
"""
from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..errors import TemplateError
from ..models import Rule, Template, Track
from ..string_utils import contains_text, normalize_text

logger = logging.getLogger(__name__)

TEXT_RULE_TYPES = ("genre", "artist", "folder")
RULE_TYPES = TEXT_RULE_TYPES + ("year",)
YEAR_OPERATORS = ("=", "<", ">", "between")

RuleLike = Union[Rule, Mapping[str, Any]]
TemplateLike = Union[Template, Mapping[str, Any]]


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Real):
        # .nan and .inf are valid YAML but not years
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            int(value.strip())
            return True
        except ValueError:
            return False
    return False


def _as_rule(rule: RuleLike) -> Optional[Rule]:
    try:
        return Rule.from_dict(rule)
    except TemplateError:
        return None


def validate_rule(rule: RuleLike) -> bool:
    """
    True when ``rule`` is well formed.

    Text rules need a non-empty string value. Year rules need a known operator
    (a missing one means "=") and a numeric value, or a two-element numeric
    value for "between".
    """
    parsed = _as_rule(rule)
    if parsed is None or parsed.type not in RULE_TYPES:
        return False

    if parsed.type in TEXT_RULE_TYPES:
        return isinstance(parsed.value, str) and bool(parsed.value.strip())

    operator = parsed.operator or "="
    if operator not in YEAR_OPERATORS:
        return False
    if operator == "between":
        value = parsed.value
        return (
            isinstance(value, (tuple, list))
            and len(value) == 2
            and all(_is_number(v) for v in value)
        )
    return _is_number(parsed.value)


def normalize_rule(rule: RuleLike) -> Rule:
    """
    Validate and normalise a rule (year values to int, default operator "=").

    Raises:
        TemplateError: If the rule is malformed
    """
    if not validate_rule(rule):
        raise TemplateError(f"Invalid template rule: {rule!r}")

    parsed = Rule.from_dict(rule)
    if parsed.type in TEXT_RULE_TYPES:
        return Rule(type=parsed.type, value=parsed.value, operator=None)

    operator = parsed.operator or "="
    if operator == "between":
        low, high = (int(float(v)) for v in parsed.value)
        return Rule(type="year", value=(low, high), operator=operator)
    return Rule(type="year", value=int(float(parsed.value)), operator=operator)


def _matches(track: Track, rule: Rule) -> bool:
    if rule.type == "genre":
        return any(contains_text(genre, rule.value) for genre in track.genres)
    if rule.type == "artist":
        return contains_text(track.artist, rule.value)
    if rule.type == "folder":
        return contains_text(track.folder, rule.value)

    year = track.year
    if year is None:
        return False
    if rule.operator == "<":
        return year < rule.value
    if rule.operator == ">":
        return year > rule.value
    if rule.operator == "between":
        low, high = rule.value
        return low <= year <= high
    return year == rule.value


def apply_rules(tracks: Iterable[Track], rules: Sequence[RuleLike]) -> List[Track]:
    """
    Filter ``tracks`` by every rule (logical AND), in order.

    Raises:
        TemplateError: If any rule is malformed; nothing is filtered in that case
    """
    normalized = [normalize_rule(rule) for rule in rules]

    filtered = list(tracks)
    for rule in normalized:
        if not filtered:
            break
        filtered = [track for track in filtered if _matches(track, rule)]
    return filtered


def validate_template(template: TemplateLike) -> bool:
    """True when the template has a name and a non-empty list of valid rules"""
    try:
        parsed = Template.from_dict(template)
    except TemplateError:
        return False
    return bool(parsed.rules) and all(validate_rule(rule) for rule in parsed.rules)


def parse_template(template: TemplateLike) -> Template:
    """
    Parse and fully validate a template.

    Raises:
        TemplateError: If the template or any of its rules is malformed
    """
    parsed = Template.from_dict(template)
    if not parsed.rules:
        raise TemplateError(f"Template '{parsed.name}' has no rules")
    return Template(
        name=parsed.name,
        description=parsed.description,
        rules=[normalize_rule(rule) for rule in parsed.rules],
        advanced=parsed.advanced,
    )


# =============================================================================
# Template catalogue
# =============================================================================

PREDEFINED_TEMPLATES: List[Dict[str, Any]] = [
    {
        "name": "80s Hits",
        "description": "The big tracks of the 1980s",
        "rules": [{"type": "year", "operator": "between", "value": [1980, 1989]}],
    },
    {
        "name": "Electronic Music",
        "description": "Electronic mix (Techno, House, EDM...)",
        "rules": [{"type": "genre", "value": "Electronic"}],
    },
    {
        "name": "Rock & Metal",
        "description": "The best Rock and Metal tracks",
        "rules": [{"type": "genre", "value": "Rock"}],
    },
    {
        "name": "Hip-Hop Classics",
        "description": "Hip-Hop and Rap classics",
        "rules": [{"type": "genre", "value": "Hip-Hop"}],
    },
    {
        "name": "Acoustic Mix",
        "description": "Acoustic and chillout tracks",
        "rules": [{"type": "genre", "value": "Acoustic"}],
    },
    {
        "name": "Workout Mix",
        "description": "High-energy tracks for training",
        "rules": [
            {"type": "genre", "value": "Electronic"},
            {"type": "genre", "value": "Rock"},
        ],
    },
    {
        "name": "Oldies but Goldies",
        "description": "Classics from the 60s and 70s",
        "rules": [{"type": "year", "operator": "between", "value": [1960, 1979]}],
    },
    {
        "name": "Recent Discoveries",
        "description": "Recent releases to discover new music",
        "rules": [{"type": "year", "operator": ">", "value": 2020}],
    },
]

# The advanced hints are descriptive only; no audio analysis backs them
ADVANCED_TEMPLATES: List[Dict[str, Any]] = [
    {
        "name": "Roadtrip Mix",
        "description": "Made for long drives",
        "rules": [{"type": "genre", "value": "Rock"}, {"type": "genre", "value": "Pop"}],
        "advanced": {"tempo": "medium", "energy": "high", "mood": "positive"},
    },
    {
        "name": "Focus & Concentration",
        "description": "Music for work or study",
        "rules": [
            {"type": "genre", "value": "Ambient"},
            {"type": "genre", "value": "Classical"},
            {"type": "genre", "value": "Electronic"},
        ],
        "advanced": {"tempo": "slow", "energy": "low", "mood": "neutral", "instrumental": True},
    },
    {
        "name": "Party Mix",
        "description": "Tracks that get people dancing",
        "rules": [
            {"type": "genre", "value": "Pop"},
            {"type": "genre", "value": "Dance"},
            {"type": "genre", "value": "Electronic"},
        ],
        "advanced": {"tempo": "high", "energy": "high", "mood": "positive", "popularity": "high"},
    },
    {
        "name": "Chill & Relax",
        "description": "Soft music to unwind",
        "rules": [{"type": "genre", "value": "Ambient"}, {"type": "genre", "value": "Chill"}],
        "advanced": {"tempo": "slow", "energy": "low", "mood": "relaxed", "instrumental": True},
    },
    {
        "name": "French Hits",
        "description": "The best of French-language music",
        "rules": [{"type": "folder", "value": "French"}],
        "advanced": {"language": "french"},
    },
]


def get_all_templates() -> List[Template]:
    return [Template.from_dict(t) for t in PREDEFINED_TEMPLATES + ADVANCED_TEMPLATES]


def find_templates_by_genre(genre: str) -> List[Template]:
    """Catalogue templates with a genre rule equal to ``genre`` (case-insensitive)"""
    wanted = normalize_text(genre)
    return [
        template for template in get_all_templates()
        if any(
            rule.type == "genre" and isinstance(rule.value, str) and normalize_text(rule.value) == wanted
            for rule in template.rules
        )
    ]


def _year_rule_within(rule: Rule, start_year: int, end_year: int) -> bool:
    if rule.type != "year" or not validate_rule(rule):
        return False
    rule = normalize_rule(rule)
    if rule.operator == "between":
        return rule.value[0] >= start_year and rule.value[1] <= end_year
    # Open-ended rules count when some year of the period satisfies them
    if rule.operator == ">":
        return rule.value < end_year
    if rule.operator == "<":
        return rule.value > start_year
    return start_year <= rule.value <= end_year


def find_templates_by_period(start_year: int, end_year: int) -> List[Template]:
    """Catalogue templates with a year rule falling inside [start_year, end_year]"""
    return [
        template for template in get_all_templates()
        if any(_year_rule_within(rule, start_year, end_year) for rule in template.rules)
    ]


def create_custom_template(
    name: str,
    description: str,
    rules: Iterable[RuleLike],
    advanced: Optional[Dict[str, Any]] = None,
) -> Template:
    """Build a template from user input, dropping rules that fail validation"""
    accepted: List[Rule] = []
    for rule in rules:
        if validate_rule(rule):
            accepted.append(normalize_rule(rule))
        else:
            logger.warning(f"Dropping invalid rule from template '{name}': {rule!r}")
    return Template(name=name, description=description, rules=accepted, advanced=dict(advanced) if advanced else None)


def combine_templates(templates: Sequence[TemplateLike], name: Optional[str] = None) -> Template:
    """
    Merge templates into one: union of distinct rules, merged advanced hints.

    Raises:
        TemplateError: If ``templates`` is empty
    """
    if not templates:
        raise TemplateError("Templates array is required")

    parsed = [Template.from_dict(t) for t in templates]
    rules: List[Rule] = []
    advanced: Dict[str, Any] = {}
    for template in parsed:
        for rule in template.rules:
            if rule not in rules:
                rules.append(rule)
        if template.advanced:
            advanced.update(template.advanced)

    return Template(
        name=name or f"Hybrid Mix ({len(parsed)} templates)",
        description=f"Combined from {len(parsed)} templates",
        rules=rules,
        advanced=advanced or None,
    )


def _describe_year(rule: Rule) -> str:
    if rule.operator == "between" and isinstance(rule.value, (list, tuple)) and len(rule.value) == 2:
        return f"between {rule.value[0]} and {rule.value[1]}"
    if rule.operator == ">":
        return f"after {rule.value}"
    if rule.operator == "<":
        return f"before {rule.value}"
    return f"{rule.value}"


def describe_template(template: TemplateLike) -> str:
    """Human-readable summary of a template's rules and advanced hints"""
    try:
        parsed = Template.from_dict(template)
    except TemplateError:
        return ""

    parts: List[str] = []
    for rule_type, label in (("genre", "Genres"), ("artist", "Artists"), ("folder", "Folders")):
        values = [str(r.value) for r in parsed.rules if r.type == rule_type]
        if values:
            parts.append(f"{label}: {', '.join(values)}")

    years = [_describe_year(r) for r in parsed.rules if r.type == "year"]
    if years:
        parts.append(f"Years: {', '.join(years)}")

    advanced = parsed.advanced or {}
    hints = []
    for key in ("tempo", "energy", "mood"):
        if advanced.get(key):
            hints.append(f"{key} {advanced[key]}")
    if advanced.get("instrumental"):
        hints.append("instrumental preferred")
    if hints:
        parts.append(f"Settings: {', '.join(hints)}")

    return ". ".join(parts)
