#
# MAIN EXECUTION
#
#   python -m markov_autoencoder --books-dir books --train-bytes 262144 --steps 33
#

import sys
import argparse

import numpy as np

from . import config
from .corpus      import DEFAULT_BOOKS, load_corpora
from .autoencoder import AutoencoderEnsemble
from .train       import Trainer, NumericalDivergence
from .generate    import generate


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="markov-autoencoder")
    parser.add_argument("--books-dir"  , type=str, default=config.BOOKS_DIR  )
    parser.add_argument("--book"       , type=str, action="append", default=None)
    parser.add_argument("--train-bytes", type=int, default=config.TRAIN_BYTES)
    parser.add_argument("--order"      , type=int, default=config.ORDER      )
    parser.add_argument("--hidden"     , type=int, default=None              )
    parser.add_argument("--feature"    , type=str, default="markov", choices=["markov", "histogram"])
    parser.add_argument("--seed"       , type=int, default=config.SEED       )
    parser.add_argument("--prompt"     , type=str, default=config.PROMPT     )
    parser.add_argument("--steps"      , type=int, default=config.GEN_STEPS  )
    parser.add_argument("--log-every"  , type=int, default=config.LOG_EVERY  )
    return parser.parse_args(argv)


def main(argv=None):
    args  = parse_args(argv)
    books = args.book or DEFAULT_BOOKS

    # Өгөгдлийг уншиж, ном бүрт context model бэлдэх
    try:
        corpora = load_corpora(books, root=args.books_dir, order=args.order, feature=args.feature)
    except (OSError, EOFError) as e:
        print(f"Corpus load failed: {e}")
        return 1
    corpus = corpora[0]

    print("\n" + "="*60)
    print("  MARKOV AUTOENCODER - ONLINE TRAINING")
    print(f"  Corpus: {corpus.name} | Bytes: {min(len(corpus.data), args.train_bytes)} | Feature: {args.feature}")
    print(f"  Order: {args.order} | Hidden: {args.hidden or config.SYMBOLS} | Seed: {args.seed}")
    print("="*60 + "\n")

    ensemble = AutoencoderEnsemble(hidden=args.hidden, seed=args.seed)
    trainer  = Trainer(corpus.model, ensemble, log_every=args.log_every)

    # Сургах давталт
    try:
        trainer.train(corpus.data, limit=args.train_bytes)
    except NumericalDivergence as e:
        print(f"Training aborted at iteration {e.iteration}, loss {e.loss}")
        return 1

    # Текст үүсгэх
    rng  = np.random.default_rng(args.seed)
    text = generate(corpus.model, ensemble, args.prompt, steps=args.steps, rng=rng)
    print(text.decode("utf-8", errors="replace"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
