#
# ONLINE OPTIMIZER
#
# Autoencoder бүр өөрийн гэсэн optimizer state-тэй (moment-ууд болон алхамын тоолуур).
# Ховор тэмдэгтийн сүлжээ цөөн алхам хийсэн тул bias correction-ий экспонент нь бага хэвээр
# үлдэж, үр дүнтэй алхамын хэмжээ нь том байна.
#
#   clip_by_global_norm(1.0) -> scale_by_guarded_adam -> scale(-ETA)
#

from typing import NamedTuple

import jax
import optax
from jax import numpy as jnp

from .config import B1, B2, ETA, EPS, MAX_GRAD_NORM


class ScaleByGuardedAdamState(NamedTuple):
    count: jnp.ndarray
    mu   : optax.Updates
    nu   : optax.Updates


def _finite_or_zero(x):
    return jnp.where(jnp.isfinite(x), x, 0.0)


def scale_by_guarded_adam(b1=B1, b2=B2, eps=EPS):
    """
    Adam direction with guarded bias correction.

    B^(count+1) is replaced by 0 when it is not finite, and the corrected
    second moment is clamped at 0 before the square root.
    """
    def init_fn(params):
        mu = jax.tree_util.tree_map(jnp.zeros_like, params)
        nu = jax.tree_util.tree_map(jnp.zeros_like, params)
        return ScaleByGuardedAdamState(count=jnp.zeros([], jnp.int32), mu=mu, nu=nu)

    def update_fn(updates, state, params=None):
        del params
        mu = jax.tree_util.tree_map(lambda g, m: b1 * m + (1 - b1) * g, updates, state.mu)
        nu = jax.tree_util.tree_map(lambda g, v: b2 * v + (1 - b2) * jnp.square(g), updates, state.nu)

        exponent = (state.count + 1).astype(jnp.float32)
        b1t      = _finite_or_zero(jnp.power(b1, exponent))
        b2t      = _finite_or_zero(jnp.power(b2, exponent))

        def direction(m, v):
            mhat = m / (1 - b1t)
            vhat = jnp.maximum(v / (1 - b2t), 0.0)
            return mhat / (jnp.sqrt(vhat) + eps)

        updates = jax.tree_util.tree_map(direction, mu, nu)
        return updates, ScaleByGuardedAdamState(count=state.count + 1, mu=mu, nu=nu)

    return optax.GradientTransformation(init_fn, update_fn)


def make_optimizer(learning_rate=ETA, b1=B1, b2=B2, eps=EPS, max_grad_norm=MAX_GRAD_NORM):
    return optax.chain(
        optax.clip_by_global_norm(max_grad_norm),
        scale_by_guarded_adam(b1=b1, b2=b2, eps=eps),
        optax.scale(-learning_rate),
    )


def adam_state(opt_state):
    for state in opt_state:
        if isinstance(state, ScaleByGuardedAdamState):
            return state
    raise ValueError("optimizer state has no ScaleByGuardedAdamState")


def step_count(opt_state):
    return int(adam_state(opt_state).count)
