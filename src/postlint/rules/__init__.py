"""
Lint rules.

Importing this package registers every built-in rule with ``RuleRegistry``.
"""

from postlint.rules.base import CorpusRule, PostRule, Rule, RuleRegistry
from postlint.rules.corpus import DuplicateTitleRule, UnreadablePostRule
from postlint.rules.front_matter import (
    DateMismatchRule,
    DuplicateFrontMatterRule,
    FieldTypeRule,
    FilenameFormatRule,
    FrontMatterInvalidRule,
    FrontMatterMissingRule,
    FrontMatterUnterminatedRule,
    RequiredFieldRule,
    UnknownLayoutRule,
)
from postlint.rules.links import BrokenPostLinkRule, ExternalLinkRule, MissingLocalAssetRule
from postlint.rules.markdown import (
    ExcerptSeparatorRule,
    MixedCodeStylesRule,
    StrayLiquidEndRule,
    UnclosedFenceRule,
    UnclosedLiquidBlockRule,
)

__all__ = [
    "Rule",
    "PostRule",
    "CorpusRule",
    "RuleRegistry",
    "FilenameFormatRule",
    "FrontMatterMissingRule",
    "FrontMatterUnterminatedRule",
    "FrontMatterInvalidRule",
    "RequiredFieldRule",
    "FieldTypeRule",
    "DuplicateFrontMatterRule",
    "DateMismatchRule",
    "UnknownLayoutRule",
    "UnclosedFenceRule",
    "UnclosedLiquidBlockRule",
    "StrayLiquidEndRule",
    "MixedCodeStylesRule",
    "ExcerptSeparatorRule",
    "BrokenPostLinkRule",
    "MissingLocalAssetRule",
    "ExternalLinkRule",
    "DuplicateTitleRule",
    "UnreadablePostRule",
]
