#
# TRAINING LOOP
#
# Байт бүр дээр:
#   1) одоогийн контекстоос feature авах (байхгүй бол алгасна)
#   2) тухайн байтын утгаар сонгогдсон autoencoder-ийг feature дээр сургах
#   3) контекстыг уг байтаар урагшлуулах
#

import math

from .config import LOG_EVERY


class NumericalDivergence(RuntimeError):
    def __init__(self, iteration, loss):
        super().__init__(f"loss diverged at iteration {iteration}: {loss}")
        self.iteration = iteration
        self.loss      = loss


class Trainer:
    """
    Online trainer over one byte stream.

    `iteration` counts the updates applied across every train() call,
    `position` counts the bytes consumed from the current stream.
    """
    def __init__(self, model, ensemble, log_every=LOG_EVERY, verbose=True):
        self.model     = model
        self.ensemble  = ensemble
        self.log_every = log_every
        self.verbose   = verbose
        self.iteration = 0
        self.position  = 0

    def train(self, data, limit=None):
        if limit is not None:
            data = data[:limit]

        context       = self.model.context()
        losses        = []
        self.position = 0

        for value in data:
            feature = self.model.feature(context)
            if feature is not None:
                losses.append(self.step(value, feature))
            context.advance(value)
            self.position += 1
        return losses

    def step(self, value, feature):
        loss, gradients = self.ensemble.forward_and_loss(value, feature)
        if math.isnan(loss) or math.isinf(loss):
            raise NumericalDivergence(self.iteration, loss)

        self.ensemble.update(value, gradients)
        self.iteration += 1

        # Эхний log_every алхамд бүгдийг, дараа нь log_every тутамд хэвлэнэ
        if self.verbose and (self.iteration < self.log_every or self.iteration % self.log_every == 0):
            print(f"Step {self.iteration:7d} | Loss: {loss:.6f}")
        return loss
