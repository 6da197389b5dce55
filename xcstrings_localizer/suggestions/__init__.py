"""Review of existing translations."""

from .workflow import (
    ConfidenceDecisions,
    Decision,
    DecisionSource,
    PromptDecisions,
    ReviewOutcome,
    ScriptedDecisions,
    SuggestionWorkflow,
    WorkflowState,
)

__all__ = [
    "ConfidenceDecisions",
    "Decision",
    "DecisionSource",
    "PromptDecisions",
    "ReviewOutcome",
    "ScriptedDecisions",
    "SuggestionWorkflow",
    "WorkflowState",
]
