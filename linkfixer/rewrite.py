"""
Rewrite rules that turn social-media links into embed-friendly mirrors.

Rules run in table order and each one sees the output of the previous one.
Every domain is anchored right after the scheme (plus an optional subdomain
prefix), so an already fixed host such as ``fixupx.com`` can never match and
running the engine twice changes nothing.
"""
import logging
import re
from dataclasses import dataclass

from .errors import RuleApplicationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRule:
    name: str
    pattern: re.Pattern
    replacement: str
    # Defaults to one more than the length of the text being rewritten
    max_replacements: int | None = None

    def __post_init__(self):
        if self.pattern.fullmatch(''):
            raise ValueError(f'rule {self.name!r}: pattern matches the empty string')
        if self.pattern.search(self.replacement):
            raise ValueError(f'rule {self.name!r}: replacement is matched by its own pattern')

    def apply(self, text: str) -> tuple[str, list['Replacement']]:
        """
        Replace every match of the pattern. After each replacement the search
        resumes at the start of the replaced span, so the updated text is
        checked again there and abutting matches are still found.

        Raises RuleApplicationError when the rule stops making progress.
        """
        limit = self.max_replacements if self.max_replacements is not None else len(text) + 1
        replacements: list[Replacement] = []
        result = text
        pos = 0
        while True:
            match = self.pattern.search(result, pos)
            if match is None:
                return result, replacements
            if len(replacements) >= limit:
                raise RuleApplicationError(f'rule {self.name!r} exceeded {limit} replacements')

            start, end = match.span()
            logger.info('Found match %s, replacing with %s', match.group(0), self.replacement)
            updated = result[:start] + self.replacement + result[end:]
            if updated[start:start + len(self.replacement)] == result[start:end]:
                raise RuleApplicationError(f'rule {self.name!r} made no progress at {start}')

            replacements.append(Replacement(self.name, match.group(0), self.replacement))
            result = updated
            pos = start


@dataclass(frozen=True)
class Replacement:
    rule: str
    original: str
    replacement: str


def _rule(name, pattern, replacement):
    return RewriteRule(name, re.compile(pattern, re.IGNORECASE), replacement)


# Order matters: each rule receives the previous rule's output.
DEFAULT_RULES: tuple[RewriteRule, ...] = (
    _rule('twitter', r'https?://(?:www\.|mobile\.)?(?:twitter|x)\.com(?![\w-])', 'https://fixupx.com'),
    _rule('instagram', r'https?://(?:www\.)?instagram\.com(?![\w-])', 'https://ddinstagram.com'),
    _rule('tiktok', r'https?://(?:www\.)?tiktok\.com(?![\w-])', 'https://fixuptiktok.com'),
)


class RewriteEngine:
    """Applies an ordered list of rewrite rules to clipboard text."""

    def __init__(self, rules=DEFAULT_RULES):
        self.rules: tuple[RewriteRule, ...] = tuple(rules)

    @classmethod
    def with_defaults(cls, disabled=()):
        disabled = {name.lower() for name in disabled}
        unknown = disabled - {rule.name for rule in DEFAULT_RULES}
        if unknown:
            logger.warning('Ignoring unknown rule names: %s', ', '.join(sorted(unknown)))
        return cls(rule for rule in DEFAULT_RULES if rule.name not in disabled)

    def apply(self, text: str) -> str:
        return self.apply_with_report(text)[0]

    def apply_with_report(self, text: str) -> tuple[str, list[Replacement]]:
        if not text:
            return text, []

        result = text
        report: list[Replacement] = []
        for rule in self.rules:
            try:
                result, replacements = rule.apply(result)
            except RuleApplicationError as e:
                # Keep the text as it was before this rule ran.
                logger.error('Skipping rule: %s', e)
                continue
            report.extend(replacements)
        return result, report
