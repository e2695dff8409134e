import argparse
import json
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from .config_loader import build_dispatcher, load_classifier_settings, load_lexicon
from .dispatcher import ClassificationResult
from .errors import AdapterFailure, ConfigurationError, build_error, error_lines
from .logging_config import audit_log, generate_session_id, set_session_id, setup_logging

RAZMETKA_THEME = Theme(
    {
        "grammar": "bold green",
        "classifier": "bold cyan",
        "low": "bold yellow",
        "label": "dim cyan",
        "value": "bold white",
    }
)


def render_result(text: str, result: ClassificationResult, console: Console) -> None:
    table = Table(title="Razmetka", show_header=True, header_style="label")
    table.add_column("Sentence", style="value", overflow="fold")
    table.add_column("Label", style="value")
    table.add_column("Confidence")
    table.add_column("Score", justify="right")

    style = result.confidence.value
    score = "-" if result.score is None else f"{result.score:.2f}"
    table.add_row(text, str(result.label), f"[{style}]{style}[/{style}]", score)
    console.print(table)


def _fail(error: str, exc: Exception, hint: str) -> int:
    payload = build_error(error, details=str(exc), hint=hint)
    for line in error_lines(payload):
        print(line, file=sys.stderr)
    return 2


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Classify a sentence with priority rules and a fallback classifier."
    )
    parser.add_argument("text", help="Sentence to classify")
    parser.add_argument(
        "--config-dir",
        type=str,
        default=None,
        help="Directory holding classifier.json (default: $RAZMETKA_CONFIG_DIR or ./config)",
    )
    parser.add_argument(
        "--strict", action="store_true", help="Fail on missing or malformed config files"
    )
    parser.add_argument("--lexicon", type=str, help="JSON lexicon of word -> {lemma, tags}")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Console log level")
    args = parser.parse_args(argv)

    setup_logging(console_level=args.log_level)
    set_session_id(generate_session_id())

    try:
        settings = load_classifier_settings(
            config_dir=args.config_dir, strict=True if args.strict else None
        )
        token_source = load_lexicon(args.lexicon) if args.lexicon else None
        dispatcher = build_dispatcher(settings, token_source=token_source)
    except (ConfigurationError, FileNotFoundError, json.JSONDecodeError) as exc:
        return _fail(
            "Invalid classifier configuration.",
            exc,
            "Check classifier.json: every 'when' must reference a declared matcher.",
        )

    try:
        result = dispatcher.classify_text(args.text)
    except ConfigurationError as exc:
        return _fail("Rule evaluation failed.", exc, "Register every predicate the rules use.")
    except AdapterFailure as exc:
        return _fail("Fallback classifier failed.", exc, "Wrap the adapter in GracefulAdapter.")

    audit_log(
        "Sentence classified",
        label=result.label,
        confidence=result.confidence.value,
        score=result.score,
    )

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        render_result(args.text, result, Console(theme=RAZMETKA_THEME))
    return 0


if __name__ == "__main__":
    sys.exit(main())
