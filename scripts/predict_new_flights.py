import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent.resolve()))

from flight_delay.config import MODEL_PATH, PREDICTIONS_PATH, UPCOMING_DATA_PATH
from flight_delay.exceptions import MissingArtifactError
from flight_delay.problem import UpcomingFlights


def main(data: str, model_path: str, output: str):
    UpcomingFlights(data_path=data).predict_with(model_path=model_path, output_path=output)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Predict the arrival delay of upcoming flights with the trained model"
    )
    parser.add_argument("-d", "--data", default=str(UPCOMING_DATA_PATH), help="Upcoming flights CSV")
    parser.add_argument("-m", "--model-path", default=str(MODEL_PATH), help="Trained model to use")
    parser.add_argument("-o", "--output", default=str(PREDICTIONS_PATH), help="Where to write the predictions")
    args = parser.parse_args()

    try:
        main(data=args.data, model_path=args.model_path, output=args.output)
    except MissingArtifactError as exception:
        print(exception, file=sys.stderr)
        sys.exit(1)
