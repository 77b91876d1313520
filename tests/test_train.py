import numpy as np
import pytest

from markov_autoencoder.autoencoder import AutoencoderEnsemble
from markov_autoencoder.markov import MarkovModel
from markov_autoencoder.train import NumericalDivergence, Trainer


SYMBOLS = 4


def toy_corpus(length, seed=0):
    rng = np.random.default_rng(seed)
    return bytes(rng.integers(0, SYMBOLS, size=length).tolist())


def make_trainer(data, seed=0, **kwargs):
    model    = MarkovModel(order=2, symbols=SYMBOLS).ingest(data)
    ensemble = AutoencoderEnsemble(symbols=SYMBOLS, hidden=SYMBOLS, seed=seed)
    return Trainer(model, ensemble, verbose=False, **kwargs)


def test_loss_trajectory_is_deterministic():
    data   = toy_corpus(1100)
    first  = make_trainer(data).train(data)
    second = make_trainer(data).train(data)
    assert len(first) == 1100
    assert first == second


def test_only_the_autoencoder_of_the_current_byte_is_trained():
    data    = bytes([2] * 50)
    trainer = make_trainer(data)
    before  = [np.asarray(p["l1"]).copy() for p in trainer.ensemble.params]

    trainer.train(data)

    assert trainer.iteration == 50
    assert trainer.position == 50
    assert [trainer.ensemble.step_count(i) for i in range(SYMBOLS)] == [0, 0, 50, 0]
    for index in (0, 1, 3):
        np.testing.assert_array_equal(before[index], trainer.ensemble.params[index]["l1"])


def test_step_counters_follow_symbol_frequencies():
    data    = bytes([0, 1, 0, 3, 0, 1])
    trainer = make_trainer(data)
    trainer.train(data)
    assert [trainer.ensemble.step_count(i) for i in range(SYMBOLS)] == [3, 2, 0, 1]


def test_positions_without_a_feature_are_skipped():
    model    = MarkovModel(order=2, symbols=SYMBOLS).ingest(bytes([0, 1]))
    ensemble = AutoencoderEnsemble(symbols=SYMBOLS, hidden=SYMBOLS, seed=0)
    trainer  = Trainer(model, ensemble, verbose=False)

    # Only the all-zero start context is known to the model.
    losses = trainer.train(bytes([3, 3, 3, 3]))
    assert len(losses) == 1
    assert trainer.iteration == 1
    assert trainer.position == 4


def test_limit_truncates_the_stream():
    data    = toy_corpus(40)
    trainer = make_trainer(data)
    assert len(trainer.train(data, limit=10)) == 10
    assert trainer.position == 10


def test_divergent_loss_aborts_before_update(monkeypatch):
    data    = toy_corpus(20)
    trainer = make_trainer(data)
    before  = [np.asarray(p["b2"]).copy() for p in trainer.ensemble.params]

    real_forward = trainer.ensemble.forward_and_loss

    def diverging(index, feature):
        _, grads = real_forward(index, feature)
        return float("nan"), grads

    monkeypatch.setattr(trainer.ensemble, "forward_and_loss", diverging)

    with pytest.raises(NumericalDivergence) as excinfo:
        trainer.train(data)
    assert excinfo.value.iteration == 0
    assert np.isnan(excinfo.value.loss)
    assert trainer.iteration == 0
    for b, p in zip(before, trainer.ensemble.params):
        np.testing.assert_array_equal(b, p["b2"])


def test_infinite_loss_is_divergent(monkeypatch):
    data    = toy_corpus(5)
    trainer = make_trainer(data)
    monkeypatch.setattr(trainer.ensemble, "forward_and_loss", lambda index, feature: (float("inf"), None))
    with pytest.raises(NumericalDivergence):
        trainer.train(data)


def test_progress_is_printed_densely_then_every_log_every(capsys):
    data    = toy_corpus(10)
    trainer = make_trainer(data, log_every=4)
    trainer.verbose = True
    trainer.train(data)

    lines = capsys.readouterr().out.strip().splitlines()
    steps = [int(line.split("|")[0].split()[1]) for line in lines]
    assert steps == [1, 2, 3, 4, 8]
