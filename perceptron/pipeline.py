import argparse
import json
import logging
import random
from datetime import datetime, timezone
from pathlib import Path

from perceptron import config
from perceptron.errors import InvalidArgumentError
from perceptron.network import Network

logger = logging.getLogger(__name__)

FEATURES = ["x", "y"]
CIRCLE_CENTER = (0.5, 0.5)
CIRCLE_RADIUS = 0.5

# 2-2-2 network with hand-set weights, one row per neuron: connection weights then bias
EXAMPLE_WEIGHTS = [
    [[0.3, -0.4, 0.25], [0.2, 0.6, 0.45]],
    [[0.7, -0.5, 0.15], [-0.3, -0.1, 0.35]],
]
EXAMPLE_INPUT = [2.0, 3.0]


def inside_circle(x, y):
    cx, cy = CIRCLE_CENTER
    return (x - cx) ** 2 + (y - cy) ** 2 <= CIRCLE_RADIUS ** 2


def generate_points(count, seed=config.SEED, low=config.SAMPLE_LOW, high=config.SAMPLE_HIGH):
    """Uniform points in the square [low, high]^2, labelled inside/outside the circle."""
    rng = random.Random(seed)
    records = []

    for _ in range(count):
        x = rng.uniform(low, high)
        y = rng.uniform(low, high)
        records.append({"x": x, "y": y, "inside": inside_circle(x, y)})

    return records


def split_dataset(records, train_ratio=config.TRAIN_RATIO, seed=config.SEED):
    rng = random.Random(seed)
    shuffled = records[:]
    rng.shuffle(shuffled)
    cutoff = int(len(shuffled) * train_ratio)
    return shuffled[:cutoff], shuffled[cutoff:]


def record_inputs(record):
    return [record[feature] for feature in FEATURES]


def record_target(record):
    return [1.0 if record["inside"] else 0.0]


def train_network(network, records, iterations=config.ITERATIONS, learning_rate=config.LEARNING_RATE,
                  seed=config.SEED, verbose=True):
    """Online training on samples drawn at random from ``records``.

    Returns the mean loss over the last logging window.
    """
    if not records:
        raise InvalidArgumentError("cannot train on an empty dataset")

    rng = random.Random(seed)
    log_interval = max(1, iterations // 5)
    window_loss = 0.0
    window = 0
    mean_loss = 0.0

    for step in range(1, iterations + 1):
        record = rng.choice(records)
        window_loss += network.learn(record_inputs(record), record_target(record), learning_rate)
        window += 1

        if step % log_interval == 0 or step == iterations:
            mean_loss = window_loss / window
            if verbose:
                logger.info("Iteration %05d | mean loss %.4f", step, mean_loss)
            window_loss = 0.0
            window = 0

    return mean_loss


def score_records(network, records):
    scores = []
    for record in records:
        network.set_input(record_inputs(record))
        scores.append(network.output(0))
    return scores


def compute_auc(scores, labels):
    positives = [score for score, label in zip(scores, labels) if label == 1]
    negatives = [score for score, label in zip(scores, labels) if label == 0]
    if not positives or not negatives:
        return 0.5

    wins = 0.0
    for pos in positives:
        for neg in negatives:
            if pos > neg:
                wins += 1.0
            elif pos == neg:
                wins += 0.5
    return wins / (len(positives) * len(negatives))


def compute_metrics(scores, labels, threshold=0.5):
    predictions = [1 if score >= threshold else 0 for score in scores]

    tp = sum(1 for p, y in zip(predictions, labels) if p == 1 and y == 1)
    tn = sum(1 for p, y in zip(predictions, labels) if p == 0 and y == 0)
    fp = sum(1 for p, y in zip(predictions, labels) if p == 1 and y == 0)
    fn = sum(1 for p, y in zip(predictions, labels) if p == 0 and y == 1)

    precision = tp / (tp + fp) if (tp + fp) else 0.0
    recall = tp / (tp + fn) if (tp + fn) else 0.0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) else 0.0

    return {
        "accuracy": (tp + tn) / max(1, len(labels)),
        "precision": precision,
        "recall": recall,
        "f1": f1,
        "auc": compute_auc(scores, labels),
        "confusion": {"tp": tp, "tn": tn, "fp": fp, "fn": fn},
    }


def rate(network, records):
    """Classification rate in percent: 100 is the best score, 0 the worst."""
    labels = [1 if record["inside"] else 0 for record in records]
    metrics = compute_metrics(score_records(network, records), labels)
    return 100.0 * metrics["accuracy"]


def run_experiment(hidden_layers=None, dataset_size=config.DATASET_SIZE, iterations=config.ITERATIONS,
                   learning_rate=config.LEARNING_RATE, seed=config.SEED, train_ratio=config.TRAIN_RATIO,
                   verbose=True):
    """Build, train and evaluate a circle classifier.

    Returns ``(network, metrics, summary)``; ``summary`` also carries the
    accuracy of the untrained network for comparison.
    """
    hidden_layers = list(config.HIDDEN_LAYERS if hidden_layers is None else hidden_layers)

    records = generate_points(dataset_size, seed=seed)
    train_records, eval_records = split_dataset(records, train_ratio=train_ratio, seed=seed)
    labels = [1 if record["inside"] else 0 for record in eval_records]

    network = Network(len(FEATURES), hidden_layers + [1], seed=seed)
    baseline = compute_metrics(score_records(network, eval_records), labels)

    final_loss = train_network(
        network, train_records, iterations=iterations, learning_rate=learning_rate, seed=seed, verbose=verbose
    )
    metrics = compute_metrics(score_records(network, eval_records), labels)

    summary = {
        "layer_sizes": network.layer_sizes,
        "train_size": len(train_records),
        "eval_size": len(eval_records),
        "inside_rate": sum(1 for record in records if record["inside"]) / max(1, len(records)),
        "seed": seed,
        "iterations": iterations,
        "learning_rate": learning_rate,
        "final_loss": final_loss,
        "baseline_accuracy": baseline["accuracy"],
    }
    return network, metrics, summary


def export_report(metrics, summary, report_dir=None):
    report_dir = Path(report_dir) if report_dir is not None else config.REPORT_DIR
    report_dir.mkdir(parents=True, exist_ok=True)

    payload = {
        "accuracy": round(metrics["accuracy"], 3),
        "precision": round(metrics["precision"], 3),
        "recall": round(metrics["recall"], 3),
        "f1": round(metrics["f1"], 3),
        "auc": round(metrics["auc"], 3),
        "confusion": metrics["confusion"],
        "summary": summary,
    }
    (report_dir / "metrics.json").write_text(json.dumps(payload, indent=2))

    report_lines = [
        "# Circle Classifier Summary",
        "",
        f"Run timestamp (UTC): {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "## Dataset",
        f"- Train split: {summary['train_size']}",
        f"- Eval split: {summary['eval_size']}",
        f"- Inside rate: {summary['inside_rate']:.3f}",
        f"- Seed: {summary['seed']}",
        "",
        "## Network",
        f"- Layer sizes: {'x'.join(str(size) for size in summary['layer_sizes'])}",
        f"- Iterations: {summary['iterations']}",
        f"- Learning rate: {summary['learning_rate']}",
        f"- Final mean loss: {summary['final_loss']:.4f}",
        "",
        "## Evaluation",
        f"- Untrained accuracy: {summary['baseline_accuracy']:.3f}",
        f"- Accuracy: {metrics['accuracy']:.3f}",
        f"- AUC: {metrics['auc']:.3f}",
        f"- Precision: {metrics['precision']:.3f}",
        f"- Recall: {metrics['recall']:.3f}",
        f"- F1: {metrics['f1']:.3f}",
    ]
    (report_dir / "summary.md").write_text("\n".join(report_lines))
    return report_dir


def build_weights_example():
    """Two inputs, a hidden layer of two and an output layer of two, all weights set by hand."""
    network = Network(len(EXAMPLE_INPUT), [len(EXAMPLE_WEIGHTS[-1])])
    # the hidden layer goes in front of the output layer
    network.insert_layer(len(EXAMPLE_WEIGHTS[0]))

    for l, layer in enumerate(EXAMPLE_WEIGHTS):
        for j, row in enumerate(layer):
            *weights, bias = row
            for i, weight in enumerate(weights):
                network.set_weight(l, j, i, weight)
            network.set_bias(l, j, bias)

    network.set_input(EXAMPLE_INPUT)
    return network


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Train a from-scratch perceptron to recognise points inside a circle."
    )
    parser.add_argument(
        "--hidden",
        type=int,
        nargs="+",
        default=config.HIDDEN_LAYERS,
        help=f"Hidden layer sizes (default: {' '.join(map(str, config.HIDDEN_LAYERS))})",
    )
    parser.add_argument(
        "--dataset-size",
        type=int,
        default=config.DATASET_SIZE,
        help=f"Total number of points to generate (default: {config.DATASET_SIZE})",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=config.ITERATIONS,
        help=f"Number of single-sample training steps (default: {config.ITERATIONS})",
    )
    parser.add_argument(
        "--learning-rate",
        type=float,
        default=config.LEARNING_RATE,
        help=f"Learning rate for gradient descent (default: {config.LEARNING_RATE})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.SEED,
        help=f"Random seed for reproducibility (default: {config.SEED})",
    )
    parser.add_argument(
        "--train-ratio",
        type=float,
        default=config.TRAIN_RATIO,
        help=f"Fraction of data for training (default: {config.TRAIN_RATIO})",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        default=None,
        help="Directory for metrics.json and summary.md (default: $PERCEPTRON_REPORT_DIR or ./reports)",
    )
    parser.add_argument(
        "--weights-example",
        action="store_true",
        help="Print the hand-weighted 2-2-2 example network and exit",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress training progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.weights_example:
        build_weights_example().print()
        return 0

    network, metrics, summary = run_experiment(
        hidden_layers=args.hidden,
        dataset_size=args.dataset_size,
        iterations=args.iterations,
        learning_rate=args.learning_rate,
        seed=args.seed,
        train_ratio=args.train_ratio,
        verbose=not args.quiet,
    )
    report_dir = export_report(metrics, summary, args.report_dir)

    print(f"\nReports exported to {report_dir}")
    print(f"Untrained accuracy: {summary['baseline_accuracy']:.3f} | Trained accuracy: {metrics['accuracy']:.3f}")
    print(f"Eval AUC: {metrics['auc']:.3f} | F1: {metrics['f1']:.3f}")
    print(
        f"\nConfig: {network.layer_sizes} layers, {args.dataset_size} samples, "
        f"{args.iterations} iterations, lr={args.learning_rate}, seed={args.seed}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
