import os
from pathlib import Path

WEIGHT_RANGE = (-2.0, 2.0)

# circle classifier defaults, shared by the CLI and the HTTP service
HIDDEN_LAYERS = [6]
LEARNING_RATE = 0.5
ITERATIONS = 20000
SEED = 7
DATASET_SIZE = 1200
TRAIN_RATIO = 0.8
SAMPLE_LOW = -0.25
SAMPLE_HIGH = 1.25

REPORT_DIR = Path(
    os.getenv(
        "PERCEPTRON_REPORT_DIR",
        Path(__file__).resolve().parent.parent / "reports",
    )
)
LOG_LEVEL = os.getenv("PERCEPTRON_LOG_LEVEL", "INFO").upper()
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "0") == "1"
PORT = int(os.getenv("PERCEPTRON_PORT", "5000"))
