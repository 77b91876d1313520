#
# AUTOENCODER ENSEMBLE
#
# Тэмдэгт бүрт нэг жижиг autoencoder, нийт SYMBOLS ширхэг.
# Сүлжээ бүр өөрийн оролтын магадлалын векторыг bottleneck-ээр дамжуулж сэргээнэ:
#
#   hidden = split_relu(input @ l1 + b1)     (hidden -> 2*hidden суваг)
#   output = hidden @ l2 + b2
#   loss   = sum((output - input)^2)
#
# Сургах үед зөвхөн сонгогдсон сүлжээ шинэчлэгдэнэ, текст үүсгэх үед бүх сүлжээг
# vmap ашиглан зэрэг үнэлнэ.
#

import jax
import optax
import numpy      as np
import flax.linen as nn
from   jax        import numpy as jnp

from .config    import SEED, SYMBOLS, B1, B2, ETA, MAX_GRAD_NORM
from .optimizer import make_optimizer, step_count


# He-scaled Gaussian, std = sqrt(2/fan_in)
he_normal = nn.initializers.variance_scaling(2.0, "fan_in", "normal")


def split_relu(x):
    # Эерэг хэсэг болон сөрөг хэсгийг хоёр тусдаа суваг болгох
    return jnp.concatenate([nn.relu(x), nn.relu(-x)], axis=-1)


def reconstruction_loss(output, target):
    return jnp.sum(jnp.square(output - target))


class SplitReluAutoencoder(nn.Module):
    features: int
    hidden  : int

    @nn.compact
    def __call__(self, x):
        l1 = self.param("l1", he_normal, (self.features, self.hidden))
        b1 = self.param("b1", nn.initializers.zeros, (self.hidden,))
        l2 = self.param("l2", he_normal, (2 * self.hidden, self.features))
        b2 = self.param("b2", nn.initializers.zeros, (self.features,))

        h = split_relu(jnp.dot(x, l1) + b1)
        return jnp.dot(h, l2) + b2


class AutoencoderEnsemble:
    """
    A fixed collection of independently owned autoencoders, one per symbol,
    each paired with its own optimizer state.
    """
    def __init__(
            self,
            symbols       = SYMBOLS,
            hidden        = None,
            seed          = SEED,
            learning_rate = ETA,
            b1            = B1,
            b2            = B2,
            max_grad_norm = MAX_GRAD_NORM,
            ):
        self.symbols   = symbols
        self.hidden    = hidden or symbols
        self.module    = SplitReluAutoencoder(features=symbols, hidden=self.hidden)
        self.optimizer = make_optimizer(learning_rate=learning_rate, b1=b1, b2=b2, max_grad_norm=max_grad_norm)

        # Сүлжээ бүрт тусдаа PRNG key, ижил seed -> ижил жингүүд
        dummy_input     = jnp.zeros((symbols,), dtype=jnp.float32)
        init_fn         = jax.jit(self.module.init)
        keys            = jax.random.split(jax.random.PRNGKey(seed), symbols)
        self.params     = [init_fn(key, dummy_input)["params"] for key in keys]
        self.opt_states = [self.optimizer.init(p) for p in self.params]

        module    = self.module
        optimizer = self.optimizer

        def loss_fn(params, feature):
            # Feature бол тогтмол, түүн рүү градиент урсахгүй
            feature = jax.lax.stop_gradient(feature)
            output  = module.apply({"params": params}, feature)
            return reconstruction_loss(output, feature)

        def apply_update(params, opt_state, gradients):
            updates, new_opt_state = optimizer.update(gradients, opt_state, params)
            return optax.apply_updates(params, updates), new_opt_state

        self._loss_and_grads = jax.jit(jax.value_and_grad(loss_fn))
        self._loss           = jax.jit(loss_fn)
        self._loss_all       = jax.jit(jax.vmap(loss_fn, in_axes=(0, None)))
        self._apply_update   = jax.jit(apply_update)

    def __len__(self):
        return self.symbols

    def _check_index(self, index):
        if not 0 <= index < self.symbols:
            raise ValueError(f"autoencoder index {index} is outside [0, {self.symbols})")

    def forward_and_loss(self, index, feature):
        self._check_index(index)
        loss, gradients = self._loss_and_grads(self.params[index], jnp.asarray(feature, dtype=jnp.float32))
        return float(loss), gradients

    def evaluate(self, index, feature):
        self._check_index(index)
        return float(self._loss(self.params[index], jnp.asarray(feature, dtype=jnp.float32)))

    def stacked(self):
        return jax.tree_util.tree_map(lambda *xs: jnp.stack(xs), *self.params)

    def evaluate_all(self, feature, stacked=None):
        """Reconstruction loss of `feature` under every autoencoder, in index order."""
        if stacked is None:
            stacked = self.stacked()
        losses = self._loss_all(stacked, jnp.asarray(feature, dtype=jnp.float32))
        return np.asarray(losses, dtype=np.float64)

    def update(self, index, gradients):
        self._check_index(index)
        self.params[index], self.opt_states[index] = self._apply_update(
                self.params[index],
                self.opt_states[index],
                gradients
                )

    def step_count(self, index):
        self._check_index(index)
        return step_count(self.opt_states[index])
