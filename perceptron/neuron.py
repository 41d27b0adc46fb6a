from perceptron.activation import sigmoid, sigmoid_derivative, weighted_sum
from perceptron.errors import IndexOutOfRangeError, InvalidArgumentError
from perceptron.value import Value


class Neuron:
    """Single neuron: a net input function composed with an activation.

    The weight list carries one weight per connection, in the order the
    connections were added, followed by the bias weight.
    """

    def __init__(self, net_input_fn=weighted_sum, activation_fn=sigmoid,
                 derivative_fn=sigmoid_derivative, bias=0.0):
        for name, fn in (("net_input_fn", net_input_fn),
                         ("activation_fn", activation_fn),
                         ("derivative_fn", derivative_fn)):
            if fn is None or not callable(fn):
                raise InvalidArgumentError(f"{name} must be a callable")

        self.net_input_fn = net_input_fn
        self.activation_fn = activation_fn
        self.derivative_fn = derivative_fn

        self.output = Value()
        self.inputs = []
        self.weights = [float(bias)]

    @property
    def input_count(self):
        return len(self.inputs)

    @property
    def output_value(self):
        return self.output.data

    @property
    def bias(self):
        return self.weights[-1]

    def add_connection(self, source, weight):
        if not isinstance(source, Value):
            raise InvalidArgumentError(f"connection source must be a Value, got {type(source).__name__}")
        self.inputs.append(source)
        # keep the bias last
        self.weights.insert(len(self.weights) - 1, float(weight))

    def clear_connections(self):
        """Drop every connection, keeping only the bias weight."""
        self.inputs = []
        self.weights = self.weights[-1:]

    def set_weight(self, index, value):
        self._check_index(index, self.input_count, "weight")
        self.weights[index] = float(value)

    def set_bias(self, value):
        self.weights[-1] = float(value)

    def input_value(self, index):
        self._check_index(index, self.input_count, "input")
        return self.inputs[index].data

    def weight(self, index):
        # the bias is addressable here at index == input_count
        self._check_index(index, self.input_count + 1, "weight")
        return self.weights[index]

    def net_input(self):
        return self.net_input_fn([source.data for source in self.inputs], self.weights)

    def evaluate(self):
        """Recompute the output from the current input values."""
        self.output.data = self.activation_fn(self.net_input())

    def derivative_output(self):
        return self.derivative_fn(self.net_input())

    @staticmethod
    def _check_index(index, bound, kind):
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < bound:
            raise IndexOutOfRangeError(f"{kind} index {index} out of range [0, {bound})")

    def __repr__(self):
        return f"Neuron(inputs={self.input_count}, bias={self.bias:.4f}, output={self.output_value:.4f})"
