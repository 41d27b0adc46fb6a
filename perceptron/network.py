import logging
import random

from perceptron import config
from perceptron.activation import sigmoid, sigmoid_derivative, weighted_sum
from perceptron.errors import DimensionMismatchError, IndexOutOfRangeError, InvalidArgumentError
from perceptron.neuron import Neuron
from perceptron.value import Value

logger = logging.getLogger(__name__)


def _is_count(n):
    return isinstance(n, int) and not isinstance(n, bool) and n >= 1


def _is_index(i, bound):
    return isinstance(i, int) and not isinstance(i, bool) and 0 <= i < bound


class Network:
    """Fully-connected feed-forward network of sigmoid neurons.

    Layer 0 reads the network inputs, every later layer reads the outputs
    of the layer before it. Outputs are recomputed eagerly after every
    mutation, so ``output()`` always reflects the current inputs and weights.

    Example::

        net = Network(2, [4, 1], seed=7)
        net.learn([0.2, 0.9], [1.0], learning_rate=0.5)
        net.output(0)
    """

    def __init__(self, input_width, layer_sizes=None, weight_range=None, rng=None, seed=None,
                 preserve_downstream_weights=False, net_input_fn=weighted_sum,
                 activation_fn=sigmoid, derivative_fn=sigmoid_derivative):
        if not _is_count(input_width):
            raise InvalidArgumentError(f"input width must be a positive integer, got {input_width!r}")

        weight_range = tuple(weight_range if weight_range is not None else config.WEIGHT_RANGE)
        if len(weight_range) != 2:
            raise InvalidArgumentError(f"weight range must be a (min, max) pair, got {weight_range!r}")
        low, high = weight_range
        if low > high:
            raise InvalidArgumentError(f"invalid weight range ({low}, {high})")
        self.weight_range = (float(low), float(high))

        sizes = list(layer_sizes or [])
        for size in sizes:
            if not _is_count(size):
                raise InvalidArgumentError(f"layer size must be a positive integer, got {size!r}")

        self.rng = rng if rng is not None else random.Random(seed)
        self.preserve_downstream_weights = preserve_downstream_weights
        self._neuron_fns = (net_input_fn, activation_fn, derivative_fn)

        self.inputs = [Value() for _ in range(input_width)]
        self.layers = []
        self._layer_sizes = []
        self.outputs = []

        for size in sizes:
            self._add_layer(size, len(self.layers))
        self.evaluate()

    @property
    def input_width(self):
        return len(self.inputs)

    @property
    def layer_count(self):
        return len(self.layers)

    @property
    def layer_sizes(self):
        return list(self._layer_sizes)

    @property
    def output_width(self):
        return len(self.outputs)

    def _draw(self):
        return self.rng.uniform(*self.weight_range)

    def _add_layer(self, neuron_count, index, preserve=False):
        layer = [Neuron(*self._neuron_fns, bias=self._draw()) for _ in range(neuron_count)]

        if index == 0:
            sources = self.inputs
        else:
            sources = [neuron.output for neuron in self.layers[index - 1]]
        for neuron in layer:
            for source in sources:
                neuron.add_connection(source, self._draw())

        if index < len(self.layers):
            self._rewire(self.layers[index], layer, preserve)

        self.layers.insert(index, layer)
        self._layer_sizes.insert(index, neuron_count)
        self.outputs = [neuron.output for neuron in self.layers[-1]]

    def _rewire(self, downstream, upstream, requested):
        """Reconnect ``downstream`` to every neuron of ``upstream``.

        Trained weights are discarded unless the preservation policy is on
        and the fan-in of the downstream layer does not change.
        """
        preserve = requested and all(
            neuron.input_count == len(upstream) for neuron in downstream
        )
        if requested and not preserve:
            logger.warning(
                "Cannot preserve downstream weights: fan-in changes from %d to %d",
                downstream[0].input_count,
                len(upstream),
            )

        for neuron in downstream:
            kept = neuron.weights[:-1]
            neuron.clear_connections()
            for i, source in enumerate(upstream):
                weight = kept[i] if preserve else self._draw()
                neuron.add_connection(source.output, weight)

    def insert_layer(self, neuron_count, index=None, preserve_downstream_weights=None):
        """Insert a layer of ``neuron_count`` fresh neurons at ``index``.

        ``None`` or a negative index inserts just before the output layer
        (or at 0 on an empty network). ``index == layer_count`` appends.
        The layer that followed the insertion point is rewired to the new
        layer.
        ``preserve_downstream_weights`` overrides the network policy for this
        call only.
        """
        if not _is_count(neuron_count):
            raise InvalidArgumentError(f"neuron count must be a positive integer, got {neuron_count!r}")

        count = len(self.layers)
        if index is not None and (not isinstance(index, int) or isinstance(index, bool)):
            raise IndexOutOfRangeError(f"layer index must be an integer, got {index!r}")
        if index is None or index < 0:
            index = max(count - 1, 0)
        elif index > count:
            raise IndexOutOfRangeError(f"layer index {index} out of range [0, {count}]")

        if preserve_downstream_weights is None:
            preserve_downstream_weights = self.preserve_downstream_weights
        self._add_layer(neuron_count, index, preserve_downstream_weights)
        logger.debug("Inserted %d neurons at layer %d, layer sizes %s", neuron_count, index, self._layer_sizes)
        self.evaluate()

    def evaluate(self):
        for layer in self.layers:
            for neuron in layer:
                neuron.evaluate()

    def set_input(self, values):
        values = [float(x) for x in values]
        if len(values) != self.input_width:
            raise DimensionMismatchError(f"expected {self.input_width} inputs, got {len(values)}")
        for slot, x in zip(self.inputs, values):
            slot.data = x
        self.evaluate()

    def output(self, index):
        if not _is_index(index, self.output_width):
            raise IndexOutOfRangeError(f"output index {index} out of range [0, {self.output_width})")
        return self.outputs[index].data

    def output_values(self):
        return [slot.data for slot in self.outputs]

    def neuron(self, layer_index, neuron_index):
        if not _is_index(layer_index, self.layer_count):
            raise IndexOutOfRangeError(f"layer index {layer_index} out of range [0, {self.layer_count})")
        layer = self.layers[layer_index]
        if not _is_index(neuron_index, len(layer)):
            raise IndexOutOfRangeError(f"neuron index {neuron_index} out of range [0, {len(layer)})")
        return layer[neuron_index]

    def set_weight(self, layer_index, neuron_index, weight_index, value):
        self.neuron(layer_index, neuron_index).set_weight(weight_index, value)
        self.evaluate()

    def set_bias(self, layer_index, neuron_index, value):
        self.neuron(layer_index, neuron_index).set_bias(value)
        self.evaluate()

    def learn(self, inputs, expected, learning_rate):
        """Run one step of online gradient descent on a single sample.

        Returns the loss ``0.5 * sum((output - expected) ** 2)`` measured
        before the weights were updated. Bias weights are not trained.
        """
        inputs = list(inputs)
        expected = [float(target) for target in expected]
        if not self.layers:
            raise InvalidArgumentError("cannot train a network without layers")
        if len(inputs) != self.input_width:
            raise DimensionMismatchError(f"expected {self.input_width} inputs, got {len(inputs)}")
        if len(expected) != self.output_width:
            raise DimensionMismatchError(f"expected {self.output_width} target values, got {len(expected)}")

        self.set_input(inputs)

        last = self.layers[-1]
        loss = 0.5 * sum((neuron.output_value - target) ** 2 for neuron, target in zip(last, expected))

        # errors[l][j] belongs to neuron j of layer l, all computed before any update
        errors = [None] * len(self.layers)
        errors[-1] = [
            neuron.derivative_output() * (neuron.output_value - target)
            for neuron, target in zip(last, expected)
        ]
        for l in range(len(self.layers) - 2, -1, -1):
            downstream = list(zip(self.layers[l + 1], errors[l + 1]))
            errors[l] = [
                neuron.derivative_output() * sum(consumer.weight(j) * error for consumer, error in downstream)
                for j, neuron in enumerate(self.layers[l])
            ]

        for layer, layer_errors in zip(self.layers, errors):
            for neuron, error in zip(layer, layer_errors):
                for i in range(neuron.input_count):
                    neuron.set_weight(i, neuron.weight(i) - learning_rate * error * neuron.input_value(i))

        self.evaluate()
        return loss

    def describe(self):
        lines = [f"Network: {self.input_width} inputs, layers {self._layer_sizes}"]
        lines.append("Inputs: " + ", ".join(f"{slot.data:.4f}" for slot in self.inputs))
        for l, layer in enumerate(self.layers):
            lines.append(f"Layer {l} ({len(layer)} neurons)")
            for j, neuron in enumerate(layer):
                weights = ", ".join(f"{w:.4f}" for w in neuron.weights[:-1])
                lines.append(
                    f"  Neuron {j}: weights [{weights}] bias {neuron.bias:.4f} output {neuron.output_value:.4f}"
                )
        lines.append("Outputs: " + ", ".join(f"{x:.4f}" for x in self.output_values()))
        return "\n".join(lines)

    def print(self):
        print(self.describe())

    def __repr__(self):
        return f"Network(input_width={self.input_width}, layer_sizes={self._layer_sizes})"
