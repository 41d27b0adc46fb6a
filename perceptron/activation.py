import math


def weighted_sum(inputs, weights):
    """Weighted sum of the inputs plus the bias.

    ``weights`` holds one entry per input followed by the bias weight,
    which is paired with a constant input of 1.
    """
    total = sum(x * w for x, w in zip(inputs, weights))
    return total + 1.0 * weights[-1]


def sigmoid(x):
    # exp only ever sees a non-positive argument, so large |x| saturates to 0 or 1
    if x >= 0:
        return 1 / (1 + math.exp(-x))
    e = math.exp(x)
    return e / (1 + e)


def sigmoid_derivative(x):
    s = sigmoid(x)
    return s * (1 - s)
