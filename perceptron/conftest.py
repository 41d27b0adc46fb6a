import logging
import random

import pytest

from perceptron.activation import sigmoid, sigmoid_derivative, weighted_sum
from perceptron.app import app, reset_state
from perceptron.neuron import Neuron
from perceptron.value import Value


@pytest.fixture(autouse=True)
def quiet_logging():
    logging.getLogger("perceptron").setLevel(logging.WARNING)
    yield
    logging.getLogger("perceptron").setLevel(logging.NOTSET)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def two_input_neuron():
    """Neuron wired to inputs 1 and 2 with weights 0.5 and -0.5, bias 0."""
    neuron = Neuron(weighted_sum, sigmoid, sigmoid_derivative)
    sources = [Value(1.0), Value(2.0)]
    neuron.add_connection(sources[0], 0.5)
    neuron.add_connection(sources[1], -0.5)
    return neuron, sources


@pytest.fixture
def client():
    reset_state()
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
    reset_state()
