"""Retrospective (learning) records written after a phase with insights."""

import re

from tandem.config import DEFAULT_DOCS_DIR, DOCUMENT_SUFFIX, LEARNINGS_DIR

from .outcome import PhaseOutcome

_UNSAFE_PATH_CHARS = re.compile(r"[\s/\\]+")


def learning_filename(timestamp: str, phase: str, feature: str) -> str:
    safe_feature = _UNSAFE_PATH_CHARS.sub("-", feature.strip())
    return f"Learning_{timestamp}_{phase}_{safe_feature}{DOCUMENT_SUFFIX}"


def learnings_dir(docs_dir: str = DEFAULT_DOCS_DIR) -> str:
    return f"{docs_dir.rstrip('/')}/{LEARNINGS_DIR}"


def render_learning_record(
    timestamp: str, phase: str, feature: str, role: str, outcome: PhaseOutcome
) -> str:
    """Markdown body of a learning record."""
    challenges = outcome.challenges or "None recorded"
    solutions = outcome.solutions or "None recorded"
    return f"""# {learning_filename(timestamp, phase, feature)}

## Learning
**Date**: {timestamp}
**Topic**: {phase} phase insights
**Context**: tandem workflow execution
**Role**: {role}

## Insights
{outcome.insights or "Workflow execution completed successfully"}

## Challenges
{challenges}

## Solutions
{solutions}

## Code Example
```
{outcome.code_example or "// Generated during workflow execution"}
```

## Applies To
- {phase} phase optimization
- Role coordination improvements

## Constraints
{outcome.constraints or "Standard workflow constraints apply"}

## Impact
- **Phase**: {phase}
- **Feature**: {feature}
- **Duration**: {outcome.duration or "N/A"}

## Tags
#{phase} #{_UNSAFE_PATH_CHARS.sub("-", feature.strip())} #tandem

---
*Recorded by: {role}*
"""
