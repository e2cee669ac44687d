from __future__ import annotations

import random
from typing import Sequence

from prompt_formats import (
    CATEGORIES,
    PICTURE,
    QUOTE,
    ImageCandidate,
    PromptItem,
    PromptPair,
    QuoteCandidate,
)

ITEMS_PER_PAIR = 2
QUOTE_PAIRING_SPLIT = "split"
QUOTE_PAIRING_SINGLE = "single"
QUOTE_PAIRINGS = (QUOTE_PAIRING_SPLIT, QUOTE_PAIRING_SINGLE)


def generate_prompts(
    count: int,
    images: Sequence[ImageCandidate],
    quotes: Sequence[QuoteCandidate],
    *,
    rng: random.Random | None = None,
    quote_pairing: str = QUOTE_PAIRING_SPLIT,
) -> list[PromptPair]:
    """Build ``count`` prompt pairs by drawing from the fetched supplies.

    Candidates are popped from the end of each supply so no source item fills
    two slots. A slot whose chosen category has run dry stays unfilled.

    With ``quote_pairing="split"`` a quote slot takes its author from one
    candidate and its text from the next one. ``"single"`` reads both from the
    same candidate.
    """
    if quote_pairing not in QUOTE_PAIRINGS:
        raise ValueError(f"Unknown quote pairing policy: {quote_pairing!r}")
    rng = rng or random
    image_supply = list(images)
    quote_supply = list(quotes)

    prompts = []
    for _ in range(max(0, int(count))):
        items = []
        for _ in range(ITEMS_PER_PAIR):
            category = rng.choice(CATEGORIES)
            if category == PICTURE and image_supply:
                items.append(PromptItem.picture(image_supply.pop().url))
            elif category == QUOTE and quote_supply:
                items.append(_draw_quote(quote_supply, quote_pairing))
            else:
                items.append(PromptItem())
        prompts.append(PromptPair(items=items))
    return prompts


def _draw_quote(supply: list[QuoteCandidate], quote_pairing: str) -> PromptItem:
    author_source = supply.pop()
    if quote_pairing == QUOTE_PAIRING_SPLIT and supply:
        body_source = supply.pop()
    else:
        body_source = author_source
    return PromptItem.quote(author_source.author, body_source.body)
