# HYPERPARAMETERS & CONFIG

SEED           = 1

# Markov контекстын тохиргоо
ORDER          = 4      # Хамгийн урт контекстын урт
SYMBOLS        = 256    # Байт бүрт нэг autoencoder
HISTOGRAM_SIZE = 33     # Histogram feature-ийн цонхны урт

# Adam оптимизаторын тохиргоо
B1             = 0.8    # First moment-ийн decay
B2             = 0.89   # Second moment-ийн decay
ETA            = 1e-3   # Learning rate
EPS            = 1e-8
MAX_GRAD_NORM  = 1.0

# Сургалтын тохиргоо
TRAIN_BYTES    = 256 * 1024
LOG_EVERY      = 1024   # Loss хэвлэх давтамж

# Текст үүсгэх тохиргоо
PROMPT         = "What is the meaning of life?"
GEN_STEPS      = 33

# Өгөгдлийн тохиргоо
BOOKS_DIR      = "books"
