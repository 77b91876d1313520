#
# CONTEXT FEATURES
#
# Autoencoder-уудын оролт болон reconstruction target болох магадлалын вектор бэлдэнэ.
#
#   1) MarkovModel    : order 0..ORDER-1 хүртэлх frequency table, урт контекстоос эхлэн backoff хийнэ.
#   2) HistogramModel : сүүлийн HISTOGRAM_SIZE тэмдэгтийн histogram (нэмэлт feature).
#
# Хоёулаа ижил интерфэйстэй:
#   model.ingest(data)      -> table бэлдэх
#   model.context()         -> шинэ (тэг) контекст
#   model.feature(context)  -> магадлалын вектор эсвэл None
#   context.advance(symbol) -> контекстыг нэг тэмдэгтээр урагшлуулах
#

import numpy as np

from .config import ORDER, SYMBOLS, HISTOGRAM_SIZE


class MarkovContext:
    """
    Order бүр өөрийн гэсэн k+1 урттай цонхтой, хамгийн сүүлийн тэмдэгт нь эхэнд байна.
    """
    def __init__(self, order=ORDER):
        self.order   = order
        self.windows = [[0] * (k + 1) for k in range(order)]

    def reset(self):
        for window in self.windows:
            window[:] = [0] * len(window)

    def advance(self, symbol):
        # Шинэ тэмдэгтийг урд нь оруулж, хамгийн хуучин тэмдэгтийг хаях
        for window in self.windows:
            window[1:] = window[:-1]
            window[0]  = symbol

    def key(self, k):
        return tuple(self.windows[k])

    def copy(self):
        other         = MarkovContext(self.order)
        other.windows = [list(window) for window in self.windows]
        return other


class MarkovModel:
    """
    Backoff Markov context model.

    tables[k] maps a length k+1 context tuple to a count vector over the
    alphabet. Tables are filled once by ingest() and only read afterwards.
    """
    def __init__(self, order=ORDER, symbols=SYMBOLS):
        self.order   = order
        self.symbols = symbols
        self.tables  = [{} for _ in range(order)]

    def context(self):
        return MarkovContext(self.order)

    def ingest(self, data):
        # Зөвхөн зүүн талын (өмнөх) контекст харна, lookahead байхгүй
        context = self.context()
        for value in data:
            if not 0 <= value < self.symbols:
                raise ValueError(f"symbol {value} is outside the alphabet [0, {self.symbols})")
            for k, table in enumerate(self.tables):
                key    = context.key(k)
                vector = table.get(key)
                if vector is None:
                    vector     = np.zeros(self.symbols, dtype=np.uint32)
                    table[key] = vector
                vector[value] += 1
            context.advance(value)
        return self

    def table(self, k):
        return self.tables[k]

    def count(self, k, key):
        return self.tables[k].get(tuple(key))

    def feature(self, context):
        # Хамгийн урт order-оос эхэлж хайна, эхний олдсон нь хариу болно
        for k in reversed(range(self.order)):
            vector = self.tables[k].get(context.key(k))
            if vector is not None:
                return (vector / vector.sum()).astype(np.float32)
        return None


class SymbolHistogram:
    """Buffered histogram of the last `size` symbols."""
    def __init__(self, size=HISTOGRAM_SIZE, symbols=SYMBOLS):
        self.size   = size
        self.vector = np.zeros(symbols, dtype=np.uint32)
        self.buffer = [0] * size
        self.index  = 0

    def advance(self, symbol):
        index   = (self.index + 1) % self.size
        evicted = self.buffer[index]
        if self.vector[evicted] > 0:
            self.vector[evicted] -= 1
        self.buffer[index]   = symbol
        self.vector[symbol] += 1
        self.index           = index


class HistogramModel:
    def __init__(self, size=HISTOGRAM_SIZE, symbols=SYMBOLS):
        self.size    = size
        self.symbols = symbols

    def context(self):
        return SymbolHistogram(self.size, self.symbols)

    def ingest(self, data):
        return self

    def feature(self, histogram):
        total = histogram.vector.sum()
        if total == 0:
            return None
        return (histogram.vector / total).astype(np.float32)


def make_feature_model(kind="markov", order=ORDER, symbols=SYMBOLS, size=HISTOGRAM_SIZE):
    if kind == "markov":
        return MarkovModel(order=order, symbols=symbols)
    if kind == "histogram":
        return HistogramModel(size=size, symbols=symbols)
    raise ValueError(f"unknown feature model: {kind}")
