def trace(network):
    """Collect the nodes and weighted edges of a network's wiring."""
    nodes, edges = [], []
    ids = {}

    for i, slot in enumerate(network.inputs):
        ids[id(slot)] = f"input{i}"
        nodes.append((f"input{i}", "input", slot.data, None))

    for l, layer in enumerate(network.layers):
        for j, neuron in enumerate(layer):
            uid = f"L{l}N{j}"
            ids[id(neuron.output)] = uid
            nodes.append((uid, "neuron", neuron.output_value, neuron.bias))
            for k, source in enumerate(neuron.inputs):
                edges.append((ids[id(source)], uid, neuron.weights[k]))

    return nodes, edges


def get_graph_json(network):
    nodes, edges = trace(network)
    data = {
        "layer_sizes": network.layer_sizes,
        "nodes": [],
        "edges": [],
    }

    for uid, kind, output, bias in nodes:
        node = {"id": uid, "kind": kind, "label": f"data: {output:.4f}", "output": output}
        if bias is not None:
            node["bias"] = bias
        data["nodes"].append(node)

    for source, target, weight in edges:
        data["edges"].append({"source": source, "target": target, "weight": weight})

    return data
