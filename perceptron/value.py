class Value:
    """A scalar slot shared by reference between a writer and its readers.

    Network inputs and neuron outputs are stored in Values. Downstream
    neurons keep the Value itself, so they always read the latest data.
    """

    def __init__(self, data=0.0):
        self.data = float(data)

    def __float__(self):
        return self.data

    def __repr__(self):
        return f"Value(data={self.data})"
