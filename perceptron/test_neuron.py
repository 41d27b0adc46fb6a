import pytest

from perceptron.activation import sigmoid, sigmoid_derivative, weighted_sum
from perceptron.errors import IndexOutOfRangeError, InvalidArgumentError
from perceptron.neuron import Neuron
from perceptron.value import Value


def test_new_neuron_has_only_bias():
    neuron = Neuron(weighted_sum, sigmoid, sigmoid_derivative, bias=0.75)
    assert neuron.input_count == 0
    assert neuron.weights == [0.75]
    assert neuron.weight(0) == 0.75
    assert neuron.output_value == 0.0


@pytest.mark.parametrize("position", range(3))
def test_missing_function_is_rejected(position):
    fns = [weighted_sum, sigmoid, sigmoid_derivative]
    fns[position] = None
    with pytest.raises(InvalidArgumentError):
        Neuron(*fns)


def test_non_callable_function_is_rejected():
    with pytest.raises(InvalidArgumentError):
        Neuron(weighted_sum, 3.0, sigmoid_derivative)


def test_add_connection_keeps_bias_last():
    neuron = Neuron(bias=0.1)
    neuron.add_connection(Value(1.0), 0.5)
    neuron.add_connection(Value(2.0), -0.5)

    assert neuron.input_count == 2
    assert neuron.weights == [0.5, -0.5, 0.1]
    assert neuron.input_value(0) == 1.0
    assert neuron.input_value(1) == 2.0
    assert neuron.bias == 0.1


def test_add_connection_requires_value():
    neuron = Neuron()
    with pytest.raises(InvalidArgumentError):
        neuron.add_connection(1.0, 0.5)


def test_known_forward_values(two_input_neuron):
    neuron, _ = two_input_neuron
    neuron.evaluate()

    assert neuron.net_input() == pytest.approx(-0.5)
    assert neuron.output_value == pytest.approx(0.37754, abs=1e-4)
    assert neuron.derivative_output() == pytest.approx(0.23500, abs=1e-4)


def test_inputs_are_read_through(two_input_neuron):
    neuron, sources = two_input_neuron
    neuron.evaluate()
    before = neuron.output_value

    sources[1].data = 1.0
    # nothing changes until the neuron is evaluated again
    assert neuron.output_value == before
    neuron.evaluate()
    assert neuron.output_value == pytest.approx(sigmoid(0.0))


def test_bias_pairs_with_constant_one(two_input_neuron):
    neuron, _ = two_input_neuron
    neuron.set_bias(0.5)
    neuron.evaluate()
    assert neuron.net_input() == pytest.approx(0.0)
    assert neuron.output_value == pytest.approx(0.5)
    assert neuron.weight(2) == 0.5


def test_set_weight(two_input_neuron):
    neuron, _ = two_input_neuron
    neuron.set_weight(1, -1.0)
    assert neuron.weight(1) == -1.0
    assert neuron.weights == [0.5, -1.0, 0.0]


@pytest.mark.parametrize("index", [-1, 2, 3, True])
def test_set_weight_out_of_range(two_input_neuron, index):
    neuron, _ = two_input_neuron
    with pytest.raises(IndexOutOfRangeError):
        neuron.set_weight(index, 1.0)
    assert neuron.weights == [0.5, -0.5, 0.0]


@pytest.mark.parametrize("index", [-1, 3, False])
def test_weight_reader_bounds(two_input_neuron, index):
    neuron, _ = two_input_neuron
    with pytest.raises(IndexOutOfRangeError):
        neuron.weight(index)


@pytest.mark.parametrize("index", [-1, 2])
def test_input_value_bounds(two_input_neuron, index):
    neuron, _ = two_input_neuron
    with pytest.raises(IndexOutOfRangeError):
        neuron.input_value(index)


def test_clear_connections_keeps_bias(two_input_neuron):
    neuron, _ = two_input_neuron
    neuron.set_bias(0.3)
    neuron.clear_connections()

    assert neuron.input_count == 0
    assert neuron.weights == [0.3]
    with pytest.raises(IndexOutOfRangeError):
        neuron.input_value(0)

    neuron.add_connection(Value(4.0), 0.25)
    neuron.evaluate()
    assert neuron.net_input() == pytest.approx(1.3)


def test_derivative_is_recomputed(two_input_neuron):
    neuron, sources = two_input_neuron
    neuron.evaluate()
    sources[0].data = 2.0
    # derivative follows the current inputs even without evaluate
    assert neuron.derivative_output() == pytest.approx(sigmoid_derivative(0.0))


def test_custom_math_functions():
    neuron = Neuron(lambda inputs, weights: sum(inputs), lambda x: 2 * x, lambda x: 2.0)
    neuron.add_connection(Value(3.0), 100.0)
    neuron.add_connection(Value(4.0), 100.0)
    neuron.evaluate()
    assert neuron.output_value == 14.0
    assert neuron.derivative_output() == 2.0


def test_output_is_shared():
    upstream = Neuron(bias=0.0)
    downstream = Neuron()
    downstream.add_connection(upstream.output, 1.0)

    upstream.evaluate()
    assert downstream.input_value(0) == pytest.approx(0.5)
    upstream.set_bias(100.0)
    upstream.evaluate()
    assert downstream.input_value(0) == pytest.approx(1.0)


def test_sigmoid_saturates_on_large_inputs():
    assert sigmoid(-1000.0) == 0.0
    assert sigmoid(1000.0) == 1.0
    assert sigmoid_derivative(-1000.0) == 0.0
    assert sigmoid(-0.5) == pytest.approx(0.37754, abs=1e-4)
