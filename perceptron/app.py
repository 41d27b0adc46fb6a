import logging
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS

from perceptron import config
from perceptron.errors import NetworkError
from perceptron.graph import get_graph_json
from perceptron.pipeline import run_experiment

app = Flask(__name__)
CORS(app)

# one network per process, trained through /api/train and held in memory
STATE = {"network": None, "metrics": {}, "summary": {}}
_lock = threading.Lock()


def reset_state():
    with _lock:
        STATE["network"] = None
        STATE["metrics"] = {}
        STATE["summary"] = {}


def no_network():
    return jsonify({"status": "error", "message": "No network trained"}), 400


def bad_request(exc):
    return jsonify({"status": "error", "message": str(exc)}), 400


def internal_error(action):
    logging.exception("Error while %s", action)
    return (
        jsonify(
            {
                "status": "error",
                "message": f"An internal error occurred while {action}.",
            }
        ),
        500,
    )


@app.route("/api/status", methods=["GET"])
def status():
    """Return current network status."""
    with _lock:
        network = STATE["network"]
        return jsonify(
            {
                "network_loaded": network is not None,
                "layer_sizes": network.layer_sizes if network is not None else [],
                "metrics": STATE["metrics"],
                "summary": STATE["summary"],
            }
        )


@app.route("/api/train", methods=["POST"])
def train():
    """Train a new circle classifier with the requested parameters."""
    try:
        payload = request.get_json(silent=True) or {}
        hidden_layers = payload.get("hidden_layers", config.HIDDEN_LAYERS)
        dataset_size = int(payload.get("dataset_size", config.DATASET_SIZE))
        iterations = int(payload.get("iterations", config.ITERATIONS))
        learning_rate = float(payload.get("learning_rate", config.LEARNING_RATE))
        seed = int(payload.get("seed", config.SEED))
        train_ratio = float(payload.get("train_ratio", config.TRAIN_RATIO))

        network, metrics, summary = run_experiment(
            hidden_layers=hidden_layers,
            dataset_size=dataset_size,
            iterations=iterations,
            learning_rate=learning_rate,
            seed=seed,
            train_ratio=train_ratio,
            verbose=False,
        )

        with _lock:
            STATE["network"] = network
            STATE["metrics"] = metrics
            STATE["summary"] = summary

        return jsonify(
            {
                "status": "success",
                "message": f"Training complete. Accuracy: {metrics['accuracy']:.3f}",
                "metrics": metrics,
                "summary": summary,
            }
        )

    except (NetworkError, TypeError, ValueError) as exc:
        return bad_request(exc)
    except Exception:
        return internal_error("training the network")


@app.route("/api/infer", methods=["POST"])
def infer():
    """Run the held network on the provided inputs."""
    try:
        payload = request.get_json(silent=True) or {}
        inputs = [float(x) for x in payload.get("inputs", [])]

        with _lock:
            network = STATE["network"]
            if network is None:
                return no_network()
            network.set_input(inputs)
            outputs = network.output_values()

        return jsonify({"status": "success", "outputs": outputs})

    except (NetworkError, TypeError, ValueError) as exc:
        return bad_request(exc)
    except Exception:
        return internal_error("running inference")


@app.route("/api/learn", methods=["POST"])
def learn():
    """Apply one gradient-descent step to the held network."""
    try:
        payload = request.get_json(silent=True) or {}
        inputs = [float(x) for x in payload.get("inputs", [])]
        expected = [float(x) for x in payload.get("expected", [])]
        learning_rate = float(payload.get("learning_rate", config.LEARNING_RATE))

        with _lock:
            network = STATE["network"]
            if network is None:
                return no_network()
            loss = network.learn(inputs, expected, learning_rate)
            outputs = network.output_values()

        return jsonify({"status": "success", "loss": loss, "outputs": outputs})

    except (NetworkError, TypeError, ValueError) as exc:
        return bad_request(exc)
    except Exception:
        return internal_error("training on a sample")


@app.route("/api/layers", methods=["POST"])
def insert_layer():
    """Insert a layer into the held network."""
    try:
        payload = request.get_json(silent=True) or {}
        neuron_count = payload.get("neuron_count", 1)
        index = payload.get("index")
        preserve = payload.get("preserve_downstream_weights")
        if preserve is not None:
            preserve = bool(preserve)

        with _lock:
            network = STATE["network"]
            if network is None:
                return no_network()
            network.insert_layer(neuron_count, index, preserve_downstream_weights=preserve)
            layer_sizes = network.layer_sizes

        return jsonify({"status": "success", "layer_sizes": layer_sizes})

    except (NetworkError, TypeError, ValueError) as exc:
        return bad_request(exc)
    except Exception:
        return internal_error("inserting a layer")


@app.route("/api/network", methods=["GET"])
def get_network():
    """Return the wiring of the held network as nodes and weighted edges."""
    with _lock:
        network = STATE["network"]
        if network is None:
            return no_network()
        return jsonify({"status": "success", "graph": get_graph_json(network)})


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app.run(debug=config.FLASK_DEBUG, port=config.PORT, host="127.0.0.1")


if __name__ == "__main__":
    main()
