#
# CORPUS LOADER
#
# Project Gutenberg-ийн bz2 номнуудыг уншиж, ном бүрт тусдаа context model бэлдэнэ.
# Файл олдохгүй эсвэл задлах үед алдаа гарвал шууд дээш нь дамжуулна (хагас өгөгдөл буцаахгүй).
#

import os
import bz2

from .config import BOOKS_DIR, ORDER, SYMBOLS, HISTOGRAM_SIZE
from .markov import make_feature_model


DEFAULT_BOOKS = [
    "10.txt.utf-8.bz2",
    "pg74.txt.bz2",
    "76.txt.utf-8.bz2",
    "84.txt.utf-8.bz2",
    "100.txt.utf-8.bz2",
    "1837.txt.utf-8.bz2",
    "2701.txt.utf-8.bz2",
    "3176.txt.utf-8.bz2",
]


def load(source, root=BOOKS_DIR):
    path = os.path.join(root, source)
    if source.endswith(".bz2"):
        with bz2.open(path, "rb") as f:
            return f.read()
    with open(path, "rb") as f:
        return f.read()


class Corpus:
    def __init__(self, name, data, model):
        self.name  = name
        self.data  = data
        self.model = model


def load_corpora(names=DEFAULT_BOOKS, root=BOOKS_DIR, order=ORDER, feature="markov",
                 symbols=SYMBOLS, size=HISTOGRAM_SIZE):
    corpora = []
    for name in names:
        data  = load(name, root)
        model = make_feature_model(feature, order=order, symbols=symbols, size=size).ingest(data)
        corpora.append(Corpus(name, data, model))
        print(name)
    return corpora
