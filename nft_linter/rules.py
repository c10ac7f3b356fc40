"""
Content rule engine.

Rules are regular expressions loaded from a JSON rule file and matched line
by line against the text of a file. Every match is reported as a finding with
its 1-based line and column.
"""

import json
import re
from pathlib import Path
from typing import Iterable, List, NamedTuple, Protocol

from jsonschema import ValidationError, validate

DEFAULT_RULES_PATH = Path(__file__).with_name("rules.json")

RULE_FILE_SCHEMA = {
    "type": "object",
    "required": ["rules"],
    "properties": {
        "rules": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "pattern", "message"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "pattern": {"type": "string", "minLength": 1},
                    "message": {"type": "string"},
                    "ignore_case": {"type": "boolean"},
                },
                "additionalProperties": False,
            },
        }
    },
}


class RuleFileError(RuntimeError):
    pass


class Rule(NamedTuple):
    id: str
    pattern: re.Pattern
    message: str


class Finding(NamedTuple):
    rule: str
    line: int
    column: int
    message: str


class ContentRuleEngine(Protocol):
    """Anything that can lint a file on disk and report its findings."""

    def lint_file(self, path) -> List[Finding]: ...


class RuleEngine:
    def __init__(self, rules: Iterable[Rule]):
        self.rules = list(rules)

    @classmethod
    def from_file(cls, path) -> "RuleEngine":
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
            validate(instance=document, schema=RULE_FILE_SCHEMA)
            rules = [
                Rule(
                    id=entry["id"],
                    pattern=re.compile(
                        entry["pattern"], re.IGNORECASE if entry.get("ignore_case") else 0
                    ),
                    message=entry["message"],
                )
                for entry in document["rules"]
            ]
        except ValidationError as e:
            raise RuleFileError(f"Invalid rule file {path}: {e.message}") from e
        except (OSError, ValueError, re.error) as e:
            raise RuleFileError(f"Failed to load rule file {path}: {e}") from e
        return cls(rules)

    def lint_text(self, text: str) -> List[Finding]:
        findings = []
        for line_no, line in enumerate(text.split("\n"), start=1):
            for rule in self.rules:
                for match in rule.pattern.finditer(line):
                    findings.append(Finding(rule.id, line_no, match.start() + 1, rule.message))
        return findings

    def lint_file(self, path) -> List[Finding]:
        with open(path, "r", encoding="utf-8") as f:
            return self.lint_text(f.read())


def format_findings(findings: Iterable[Finding]) -> str:
    """One ``L<line>:<column> <message>`` entry per line, trailing period dropped."""
    return "\n".join(
        f"L{finding.line}:{finding.column} {finding.message.rstrip('.')}" for finding in findings
    )
