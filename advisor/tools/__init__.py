from advisor.tools.categorize import CategoryClassifier, guess_category_by_prefix
from advisor.tools.completion import CompletionError, CompletionInput, call_completion

__all__ = [
    "CategoryClassifier",
    "CompletionError",
    "CompletionInput",
    "call_completion",
    "guess_category_by_prefix",
]
