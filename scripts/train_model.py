import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent.resolve()))

from flight_delay.config import (
    MODEL_PATH,
    RESULTS_DIR,
    SEED,
    TRAIN_DATA_PATH,
    TRAIN_FRAC,
    read_config,
)
from flight_delay.problem import ArrivalDelay


def main(data: str, model_path: str, results_dir: str, config_path=None, seed: int = SEED, train_frac: float = TRAIN_FRAC):

    config = read_config(config_path)
    problem = ArrivalDelay(config=config, data_path=data, seed=seed, train_frac=train_frac)
    _, evaluation = problem.solve_using(model_path=model_path, results_dir=results_dir)

    print(f"Run {problem.run_name} done, test RMSE {evaluation['rmse(test)']:.2f} min")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Train the arrival delay model on historical flights"
    )
    parser.add_argument("-d", "--data", default=str(TRAIN_DATA_PATH), help="Historical flights CSV")
    parser.add_argument("-m", "--model-path", default=str(MODEL_PATH), help="Where to write the trained model")
    parser.add_argument("-r", "--results", default=str(RESULTS_DIR), help="Directory of the run records")
    parser.add_argument("-c", "--config", default=None, help="JSON run config, the default one when omitted")
    parser.add_argument("-s", "--seed", default=SEED, type=int)
    parser.add_argument("--train-frac", default=TRAIN_FRAC, type=float)
    args = parser.parse_args()

    main(
        data=args.data,
        model_path=args.model_path,
        results_dir=args.results,
        config_path=args.config,
        seed=args.seed,
        train_frac=args.train_frac,
    )
