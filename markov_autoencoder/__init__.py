import os
# JAX ийн санах ойн хуваарилалтыг хязгаарлах буюу OOM алдаанаас сэргийлэх тохиргоо
os.environ.setdefault("XLA_PYTHON_CLIENT_PREALLOCATE", "false")
os.environ.setdefault("XLA_PYTHON_CLIENT_ALLOCATOR"  , "platform")

from .markov      import MarkovContext, MarkovModel, SymbolHistogram, HistogramModel, make_feature_model
from .optimizer   import make_optimizer, scale_by_guarded_adam, step_count
from .autoencoder import AutoencoderEnsemble, SplitReluAutoencoder, split_relu, reconstruction_loss
from .train       import Trainer, NumericalDivergence
from .generate    import generate, candidate_scores, sample_candidate
from .corpus      import Corpus, DEFAULT_BOOKS, load, load_corpora

__version__ = "0.1.0"
