"""
Centralized configuration loading for Razmetka.

Reads ``classifier.json`` (priority list, fallback policy, matchers and
keywords) and turns it into a ready Dispatcher.
"""

import json
import logging
import os
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from . import matchers
from .adapter import ClassifierAdapter
from .conditions import AllOf, AnyOf, Condition, CustomFn, Not, Predicate
from .dispatcher import DEFAULT_LABEL, DEFAULT_THRESHOLD, ClassifierConfig, Dispatcher
from .errors import ConfigurationError, MalformedCondition
from .registry import PredicateRegistry
from .rules import Rule, RuleTable
from .scorers import KeywordScorer
from .tokens import LexiconTagger, TokenSource

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "RAZMETKA_CONFIG_DIR"
STRICT_ENV = "RAZMETKA_STRICT_CONFIG"
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"
CLASSIFIER_CONFIG_FILE = "classifier.json"

CONDITION_KEYS = ("predicate", "custom", "all", "any", "not")


@dataclass
class ClassifierSettings:
    rules: list[Rule] = field(default_factory=list)
    default: Hashable = DEFAULT_LABEL
    threshold: float = DEFAULT_THRESHOLD
    matchers: dict[str, dict[str, Any]] = field(default_factory=dict)
    keywords: dict[str, list[str]] = field(default_factory=dict)


def _resolve_config_dir(config_dir: Optional[str]) -> Path:
    if config_dir:
        return Path(config_dir)
    env_dir = os.getenv(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return DEFAULT_CONFIG_DIR


def _resolve_strict(strict: Optional[bool]) -> bool:
    if strict is not None:
        return strict
    env = os.getenv(STRICT_ENV, "")
    return env.lower() in {"1", "true", "yes", "on"}


def _load_json(path: Path, *, strict: bool) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as exc:
        if strict:
            raise FileNotFoundError(f"Missing config file: {path}") from exc
        logger.warning("%s not found.", path)
        return {}
    except json.JSONDecodeError as exc:
        if strict:
            raise ConfigurationError(f"Malformed config file: {path} ({exc})") from exc
        logger.warning("%s is malformed (%s).", path, exc)
        return {}


def _ensure_dict(payload: Any, *, name: str, strict: bool) -> dict[str, Any]:
    if isinstance(payload, dict):
        return payload
    msg = f"Expected {name} to be an object."
    if strict:
        raise ConfigurationError(msg)
    logger.warning(msg)
    return {}


def parse_condition(node: Any, *, path: str = "when") -> Condition:
    """
    Converts a JSON condition into a condition tree.

    A string is a predicate name; an object has exactly one of the keys
    ``predicate``, ``custom``, ``all``, ``any`` or ``not``.
    """
    if isinstance(node, str):
        if not node.strip():
            raise MalformedCondition("Predicate name must be a non-empty string", path=path)
        return Predicate(node)
    if not isinstance(node, dict):
        raise MalformedCondition(
            f"Expected a string or object, got {type(node).__name__}", path=path
        )

    keys = [k for k in node if k in CONDITION_KEYS]
    if len(keys) != 1 or len(node) != 1:
        expected = ", ".join(CONDITION_KEYS)
        raise MalformedCondition(
            f"Condition object needs exactly one of {expected}; got {sorted(node)}", path=path
        )
    key = keys[0]
    value = node[key]

    if key in ("predicate", "custom"):
        if not isinstance(value, str) or not value.strip():
            raise MalformedCondition(
                f"Predicate name must be a non-empty string, got {value!r}", path=path
            )
        return Predicate(value) if key == "predicate" else CustomFn(value)
    if key == "not":
        return Not(parse_condition(value, path=f"{path}.not"))

    if not isinstance(value, list):
        raise MalformedCondition(f"'{key}' expects a list, got {type(value).__name__}", path=path)
    children = [parse_condition(child, path=f"{path}.{key}[{i}]") for i, child in enumerate(value)]
    return AllOf(children) if key == "all" else AnyOf(children)


def parse_priority(entries: Any) -> list[Rule]:
    if not isinstance(entries, list):
        raise MalformedCondition("'priority' must be a list", path="priority")
    rules = []
    for idx, entry in enumerate(entries):
        path = f"priority[{idx}]"
        if not isinstance(entry, dict) or "label" not in entry or "when" not in entry:
            raise MalformedCondition("Entry needs 'label' and 'when'", path=path)
        rules.append(Rule(entry["label"], parse_condition(entry["when"], path=f"{path}.when")))
    return rules


def load_classifier_settings(
    *, config_dir: Optional[str] = None, strict: Optional[bool] = None
) -> ClassifierSettings:
    strict_flag = _resolve_strict(strict)
    config_path = _resolve_config_dir(config_dir) / CLASSIFIER_CONFIG_FILE
    payload = _load_json(config_path, strict=strict_flag)
    data = _ensure_dict(payload, name=CLASSIFIER_CONFIG_FILE, strict=strict_flag)
    if not data:
        return ClassifierSettings()

    # Condition errors are programmer errors: always fatal, strict or not.
    rules = parse_priority(data.get("priority", []))

    matcher_specs = data.get("matchers", {})
    keywords = data.get("keywords", {})
    for name, section in (("matchers", matcher_specs), ("keywords", keywords)):
        if not isinstance(section, dict):
            raise ConfigurationError(f"Expected {CLASSIFIER_CONFIG_FILE}.{name} to be an object.")
    for label, words in keywords.items():
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            raise ConfigurationError(
                f"Expected {CLASSIFIER_CONFIG_FILE}.keywords.{label} to be a list of strings."
            )

    return ClassifierSettings(
        rules=rules,
        default=data.get("default", DEFAULT_LABEL),
        threshold=data.get("threshold", DEFAULT_THRESHOLD),
        matchers=matcher_specs,
        keywords=keywords,
    )


def build_registry(
    settings: ClassifierSettings, registry: Optional[PredicateRegistry] = None
) -> PredicateRegistry:
    """Registers the settings' declared matchers into ``registry`` (a new one by default)."""
    registry = registry or PredicateRegistry()
    for name, spec in settings.matchers.items():
        registry.register_predicate(name, matchers.from_spec(name, spec))
    return registry


def build_dispatcher(
    settings: ClassifierSettings,
    registry: Optional[PredicateRegistry] = None,
    *,
    classifier: Optional[ClassifierAdapter] = None,
    token_source: Optional[TokenSource] = None,
) -> Dispatcher:
    registry = build_registry(settings, registry)
    if classifier is None and settings.keywords:
        classifier = KeywordScorer(settings.keywords)
    config = ClassifierConfig(
        classifier=classifier, default=settings.default, threshold=settings.threshold
    )
    return Dispatcher(
        RuleTable(settings.rules, registry=registry),
        config,
        registry,
        token_source=token_source,
    )


def load_lexicon(path: str) -> LexiconTagger:
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, Mapping):
        raise ConfigurationError(f"Lexicon {path} must be an object of word -> entry")
    for form, entry in payload.items():
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Lexicon {path}: entry for '{form}' must be an object")
        if not isinstance(entry.get("lemma", ""), str):
            raise ConfigurationError(f"Lexicon {path}: lemma of '{form}' must be a string")
        tags = entry.get("tags", [])
        if not isinstance(tags, (str, list)) or not all(isinstance(t, str) for t in tags):
            raise ConfigurationError(
                f"Lexicon {path}: tags of '{form}' must be a list of strings"
            )
    return LexiconTagger(payload)
