# scoring.py
# Guess scoring and raw per-provider counters.
#
# Scoring is lenient on purpose: wildcard providers and substituted results
# count as correct whatever the guess was.

from __future__ import annotations
from collections import Counter
from typing import Optional

from models import COPY_MARKER, FALLBACK_MARKER, GuessResult, ItineraryResult, ModelStats, Provenance

FAMILY_A = "openai"
FAMILY_B = "anthropic"

# rule 1: provider name marker (case-insensitive)
FAMILY_MARKERS = {
    FAMILY_A: "openai",
    FAMILY_B: "anthropic",
}
# rule 2: model name tokens
FAMILY_TOKENS = {
    FAMILY_A: ("GPT",),
    FAMILY_B: ("Claude",),
}

# first slot is family A, second slot family B
SIDE_FAMILY = {"first": FAMILY_A, "second": FAMILY_B}
FAMILY_SIDE = {v: k for k, v in SIDE_FAMILY.items()}


def _belongs_to(family: str, label: str) -> bool:
    return FAMILY_MARKERS[family] in label.lower() or any(tok in label for tok in FAMILY_TOKENS[family])


def score(guess: str, actual_model_label: str, provenance: Optional[Provenance] = None) -> bool:
    """
    Rules, first match wins:
      1. label carries the guessed family's provider marker
      2. label carries one of the guessed family's model tokens
      3. label belongs to neither family (wildcard provider)
      4. label (or provenance) shows a fallback or copy substitution
    Pure function of its arguments.
    """
    if guess not in FAMILY_MARKERS:
        raise ValueError(f"unknown guess family: {guess!r}")
    label = actual_model_label or ""

    if FAMILY_MARKERS[guess] in label.lower():
        return True
    if any(tok in label for tok in FAMILY_TOKENS[guess]):
        return True
    if not any(_belongs_to(f, label) for f in FAMILY_MARKERS):
        return True
    if FALLBACK_MARKER in label or COPY_MARKER in label:
        return True
    if provenance is not None and (provenance.substituted or provenance.duplicated):
        return True
    return False


def record_guess(stored, guess: str) -> GuessResult:
    """
    `stored` is anything with `first` and `second` ItineraryResults (a
    ComparisonRecord or a ComparisonResult). `guess` is a side ('first' /
    'second') or a family label ('openai' / 'anthropic').
    """
    if guess in SIDE_FAMILY:
        side = guess
    elif guess in FAMILY_SIDE:
        side = FAMILY_SIDE[guess]
    else:
        raise ValueError(f"invalid guess: {guess!r}")

    result: ItineraryResult = getattr(stored, side)
    provenance = result.provenance
    return GuessResult(
        correct=score(SIDE_FAMILY[side], result.model, provenance),
        actual_model_label=result.model,
        chosen_side=side,
        actual_provider=provenance.actual_provider if provenance else None,
    )


class ScoreTally:
    """Raw selection / correct-guess counters per provider (per-process)."""

    def __init__(self):
        self._selections: Counter[str] = Counter()
        self._correct: Counter[str] = Counter()

    def add(self, outcome: GuessResult) -> None:
        key = outcome.actual_provider or outcome.actual_model_label
        self._selections[key] += 1
        if outcome.correct:
            self._correct[key] += 1

    def stats(self) -> list[ModelStats]:
        out = []
        for name, total in self._selections.most_common():
            correct = self._correct[name]
            out.append(ModelStats(
                modelName=name,
                totalSelections=total,
                correctGuesses=correct,
                percentageCorrect=round(100.0 * correct / total, 1),
            ))
        return out
