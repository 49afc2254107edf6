import datetime
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Dict

from sklearn.metrics import mean_absolute_error, r2_score, root_mean_squared_error

from ..config import MODEL_PATH, RESULTS_DIR, TARGET_COLUMN
from ..data.assets import get_FlightRecords
from ..exceptions import EmptyTrainingSetError
from ..model import ArrivalDelayArtifact, save_artifact
from ..utils import load_objects_from_config, show_feature_importance, split_train_test


class ArrivalDelay(object):
    """Training side: learn the arrival delay in minutes of historical flights."""

    def __init__(
        self,
        config: Dict,
        data_path=None,
        seed: int = 42,
        train_frac: float = 0.8,
        FlightRecords=None,
    ):
        self.config = config
        self.seed = seed

        # config holds the string version of the run, loaded_config its instantiated counterpart
        self.loaded_config = self.load_config(config)

        if FlightRecords is None:
            print("Loading historical flights...")
            FlightRecords = get_FlightRecords(variant="train", path=data_path)
        print(f"Loaded {len(FlightRecords)} flights.")

        for cleaning_step in self.loaded_config["cleaning"]:
            print(f"Applying on the data the cleaning {cleaning_step.__class__.__name__}.")
            FlightRecords = cleaning_step(FlightRecords)

        if len(FlightRecords) == 0:
            raise EmptyTrainingSetError(
                "No flight left to train on after cleaning (all cancelled, diverted or without a computable delay)."
            )
        if TARGET_COLUMN not in FlightRecords.columns:
            raise ValueError(f"No cleaning step produced the target column {TARGET_COLUMN!r}.")

        (
            self.train_FlightRecords_X,
            self.test_FlightRecords_X,
            self.train_FlightRecords_Y,
            self.test_FlightRecords_Y,
        ) = split_train_test(
            train_frac=train_frac,
            X=FlightRecords.drop(columns=[TARGET_COLUMN]),
            y=FlightRecords[TARGET_COLUMN],
            seed=seed,
        )
        print(
            f"Split into {len(self.train_FlightRecords_X)} train and {len(self.test_FlightRecords_X)} test flights."
        )

        self.column_functions = {
            "timestamp": ["ScheduledDeparture", "ScheduledArrival", "ActualArrival"],
            "flag": ["Cancelled", "Diverted"],
            "numerical": ["Distance"],
            "categorical": ["Airline", "Origin", "Destination", "AircraftType"],
        }
        declared_columns = sum(self.column_functions.values(), [])
        self.column_functions["other"] = [
            column
            for column in self.train_FlightRecords_X.columns
            if column not in declared_columns
        ]

    @classmethod
    def load_config(cls, config: Dict) -> Dict:
        return load_objects_from_config(config)

    def run_feature_engineering(self, FlightRecords_X, column_functions):

        for feature_engineering_step in self.loaded_config["feature_engineering"]:
            print(f"Processing the data with {feature_engineering_step.__class__.__name__}.")
            FlightRecords_X, column_functions = feature_engineering_step(
                FlightRecords_X, column_functions
            )

            # Checks
            declared_columns = []
            for feature_type, columns in column_functions.items():
                declared_columns += columns
            ## Checking the last feature engineering step didn't produce a double in column_functions
            if len(declared_columns) != len(set(declared_columns)):
                duplicates = [
                    column_name
                    for column_name, count in Counter(declared_columns).items()
                    if count > 1
                ]
                raise Exception(f"{feature_engineering_step.__class__.__name__} seems to have added to column_functions some columns which were already there: {duplicates}.")
            ## Checking the feature engineering step didn't produce a feature not declared in column_functions
            undeclared_columns = [
                column_name
                for column_name in FlightRecords_X.columns
                if column_name not in declared_columns
            ]
            if len(undeclared_columns) > 0:
                raise Exception(f"{feature_engineering_step.__class__.__name__} seems to have created a new columns without declaring it in column_functions: {undeclared_columns}")

        return FlightRecords_X, column_functions

    def solve_using(self, model_path=MODEL_PATH, results_dir=RESULTS_DIR):

        run_timestamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        model = self.config["model"][0]
        self.run_name = f"{self.seed}_{run_timestamp}_{model}"
        run_dir = Path(results_dir) / self.run_name

        print("Available features before any processing:")
        print(self.train_FlightRecords_X.dtypes)
        print()

        train_X, self.column_functions = self.run_feature_engineering(
            self.train_FlightRecords_X, self.column_functions
        )

        print("Available features after feature engineering:")
        print(train_X.dtypes)
        print()

        print("Starting training...")
        self.loaded_config["model"].fit(
            train_X, self.train_FlightRecords_Y, self.column_functions
        )
        print("Finished training.")

        self.artifact = ArrivalDelayArtifact(
            feature_engineering=tuple(self.loaded_config["feature_engineering"]),
            column_functions=self.column_functions,
            pipeline=self.loaded_config["model"].pipeline,
        )

        print("Starting test evaluation...")
        evaluation = self.evaluate(self.artifact)
        print("Finished test evaluation.")
        print(json.dumps(evaluation, indent=4))

        save_artifact(self.artifact, model_path)
        print(f"Model saved to {model_path}")

        run_dir.mkdir(parents=True, exist_ok=True)
        with open(run_dir / "config.json", "w") as fp:
            json.dump(self.config, fp, indent=4)
        with open(run_dir / "evaluation.json", "w") as fp:
            json.dump(evaluation, fp, indent=4)
        cv_results = getattr(self.loaded_config["model"], "cv_results", None)
        if cv_results is not None:
            cv_results.to_csv(run_dir / "cv_results.csv", index=False)

        try:
            show_feature_importance(
                self.artifact.pipeline,
                num_features=15,
                save_to=run_dir / "feature_importance.png",
            )
        except Exception as exception:
            print(f"Warning: could not compute the feature importance ({exception!r}).", file=sys.stderr)

        return self.artifact, evaluation

    def evaluate(self, artifact):

        metrics = {}

        # Train RMSE
        y_pred = artifact.predict(self.train_FlightRecords_X)
        y_true = self.train_FlightRecords_Y
        metrics["rmse(train)"] = float(root_mean_squared_error(y_pred=y_pred, y_true=y_true))

        # Test metrics, features are derived again from the raw test flights
        y_pred = artifact.predict(self.test_FlightRecords_X)
        y_true = self.test_FlightRecords_Y
        metrics["rmse(test)"] = float(root_mean_squared_error(y_pred=y_pred, y_true=y_true))
        metrics["mae(test)"] = float(mean_absolute_error(y_pred=y_pred, y_true=y_true))
        metrics["rsq(test)"] = float(r2_score(y_pred=y_pred, y_true=y_true))

        return metrics
