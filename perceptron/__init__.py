from perceptron.errors import DimensionMismatchError, IndexOutOfRangeError, InvalidArgumentError, NetworkError
from perceptron.network import Network
from perceptron.neuron import Neuron
from perceptron.value import Value

__all__ = [
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "Network",
    "NetworkError",
    "Neuron",
    "Value",
]
