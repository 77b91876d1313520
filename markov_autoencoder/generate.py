#
# GENERATION LOOP
#
# Prompt-оор контекстыг бэлдээд, алхам бүрт:
#   1) feature авах
#   2) бүх autoencoder-ийн reconstruction loss-ийг тооцох (сургахгүй)
#   3) score_i = max(loss) - loss_i, бага loss-той тэмдэгт илүү магадлалтай
#   4) inverse-CDF аргаар дараагийн тэмдэгтийг сонгох
#

import numpy as np

from .config import SEED, GEN_STEPS


def candidate_scores(losses):
    losses = np.asarray(losses, dtype=np.float64)
    return losses.max() - losses


def sample_candidate(scores, u):
    """
    First index whose cumulative normalized score exceeds `u`.

    Falls back to the last index when the scores sum to zero (or are not
    finite), and when rounding leaves `u` above the final cumulative value.
    """
    scores = np.asarray(scores, dtype=np.float64)
    last   = len(scores) - 1
    total  = scores.sum()
    if not np.isfinite(total) or total <= 0:
        return last

    cumulative = 0.0
    for i, score in enumerate(scores):
        cumulative += score / total
        if u < cumulative:
            return i
    return last


def generate(model, ensemble, prompt, steps=GEN_STEPS, rng=None):
    if isinstance(prompt, str):
        prompt = prompt.encode("utf-8")
    if rng is None:
        rng = np.random.default_rng(SEED)

    # Prompt-оор контекстыг бэлдэх, энэ үед сургалт хийхгүй
    output  = bytearray(prompt)
    context = model.context()
    for value in output:
        context.advance(value)

    # Үнэлгээний үед жингүүд өөрчлөгдөхгүй тул нэг л удаа stack хийнэ
    stacked = ensemble.stacked()

    for _ in range(steps):
        feature = model.feature(context)
        if feature is None:
            selected = int(rng.integers(ensemble.symbols))
        else:
            losses   = ensemble.evaluate_all(feature, stacked)
            selected = sample_candidate(candidate_scores(losses), rng.random())
        output.append(selected)
        context.advance(selected)
    return bytes(output)
