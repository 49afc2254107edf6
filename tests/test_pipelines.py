import importlib
import json

import numpy as np
import pandas as pd
import pytest

from flight_delay import EmptyTrainingSetError, MissingArtifactError
from flight_delay.config import PREDICTION_COLUMN
from flight_delay.model import ArrivalDelayArtifact, load_artifact
from flight_delay.problem import ArrivalDelay, UpcomingFlights

from conftest import make_flights


@pytest.fixture
def trained(tmp_path, flights, small_config):
    flights.loc[:9, "Cancelled"] = True
    model_path = tmp_path / "models" / "model.joblib"

    problem = ArrivalDelay(config=small_config, FlightRecords=flights, seed=42)
    artifact, evaluation = problem.solve_using(
        model_path=model_path, results_dir=tmp_path / "results"
    )
    return problem, artifact, evaluation, model_path


def upcoming_flights(n=25, seed=1):
    return make_flights(n=n, seed=seed).drop(columns=["ActualArrival", "Cancelled", "Diverted"])


def test_training_excludes_cancelled_flights(trained):
    problem, _, _, _ = trained

    used = set(problem.train_FlightRecords_X.index) | set(problem.test_FlightRecords_X.index)
    assert used.isdisjoint(range(10))
    assert len(used) == 190
    assert len(problem.test_FlightRecords_X) == 38


def test_training_writes_artifact_and_run_records(trained, tmp_path):
    problem, artifact, evaluation, model_path = trained

    assert model_path.exists()
    assert isinstance(artifact, ArrivalDelayArtifact)
    assert set(evaluation) == {"rmse(train)", "rmse(test)", "mae(test)", "rsq(test)"}

    run_dir = tmp_path / "results" / problem.run_name
    assert json.loads((run_dir / "config.json").read_text())["model"][1]["grid_size"] == 2
    assert json.loads((run_dir / "evaluation.json").read_text()) == evaluation

    cv_results = pd.read_csv(run_dir / "cv_results.csv")
    assert len(cv_results) == 2
    assert {"n_estimators", "max_depth", "learning_rate", "gamma", "min_child_weight", "mtry", "rmse", "mae", "rsq"} <= set(cv_results.columns)
    assert cv_results["rmse"].is_monotonic_increasing


def test_selected_candidate_has_lowest_cv_rmse(trained):
    problem, _, _, _ = trained
    model = problem.loaded_config["model"]

    best = model.cv_results.iloc[0]
    assert model.best_params["n_estimators"] == best["n_estimators"]
    assert 1 <= model.best_params["mtry"]


def test_saved_artifact_predicts_single_row(trained):
    _, _, _, model_path = trained
    artifact = load_artifact(model_path)

    prediction = artifact.predict(upcoming_flights(n=1))

    assert prediction.shape == (1,)
    assert np.isfinite(prediction[0])


def test_inference_keeps_rows_and_order(trained, tmp_path):
    _, _, _, model_path = trained
    flights = upcoming_flights().sample(frac=1, random_state=3)
    flights.loc[flights.index[0], "Airline"] = "NEVER_SEEN"
    flights.loc[flights.index[1], "ScheduledDeparture"] = "not a date"
    output_path = tmp_path / "predictions.csv"

    result = UpcomingFlights(FlightRecords=flights).predict_with(
        model_path=model_path, output_path=output_path
    )
    written = pd.read_csv(output_path)

    assert len(written) == len(flights)
    assert written["FlightNumber"].tolist() == flights["FlightNumber"].tolist()
    assert list(written.columns) == list(flights.columns) + [PREDICTION_COLUMN]
    assert written[PREDICTION_COLUMN].dtype == np.int64
    assert result[PREDICTION_COLUMN].tolist() == written[PREDICTION_COLUMN].tolist()


def test_inference_without_model(tmp_path):
    output_path = tmp_path / "predictions.csv"

    with pytest.raises(MissingArtifactError, match="Trained model not found"):
        UpcomingFlights(FlightRecords=upcoming_flights()).predict_with(
            model_path=tmp_path / "missing.joblib", output_path=output_path
        )
    assert not output_path.exists()


def test_empty_training_set(tmp_path, flights, small_config):
    flights["Diverted"] = True

    with pytest.raises(EmptyTrainingSetError):
        ArrivalDelay(config=small_config, FlightRecords=flights)


def test_training_from_csv(tmp_path, small_config):
    data_path = tmp_path / "flight_delays.csv"
    make_flights(n=120, seed=5).to_csv(data_path, index=False)
    model_path = tmp_path / "model.joblib"

    problem = ArrivalDelay(config=small_config, data_path=data_path)
    problem.solve_using(model_path=model_path, results_dir=tmp_path / "results")

    upcoming_path = tmp_path / "upcoming_flights.csv"
    upcoming_flights(n=7).to_csv(upcoming_path, index=False)
    result = UpcomingFlights(data_path=upcoming_path).predict_with(
        model_path=model_path, output_path=tmp_path / "predictions.csv"
    )
    assert len(result) == 7


def test_training_with_bracketed_labels(tmp_path, flights, small_config):
    flights["Airline"] = np.where(np.arange(len(flights)) % 2 == 0, "AA[1]", "DL<2")
    model_path = tmp_path / "model.joblib"

    problem = ArrivalDelay(config=small_config, FlightRecords=flights)
    problem.solve_using(model_path=model_path, results_dir=tmp_path / "results")

    prediction = load_artifact(model_path).predict(
        upcoming_flights(n=2).assign(Airline=["AA[1]", "DL<2"])
    )
    assert prediction.shape == (2,)


def test_feature_importance_is_plotted(trained, tmp_path):
    problem, _, _, _ = trained

    assert (tmp_path / "results" / problem.run_name / "feature_importance.png").exists()


def test_feature_importance_failure_is_not_fatal(tmp_path, flights, small_config, monkeypatch, capsys):
    def broken(*args, **kwargs):
        raise RuntimeError("no importance for you")

    monkeypatch.setattr(
        importlib.import_module("flight_delay.problem.ArrivalDelay"), "show_feature_importance", broken
    )
    model_path = tmp_path / "model.joblib"

    problem = ArrivalDelay(config=small_config, FlightRecords=flights)
    artifact, evaluation = problem.solve_using(model_path=model_path, results_dir=tmp_path / "results")

    assert model_path.exists()
    assert "rmse(test)" in evaluation
    assert load_artifact(model_path).predict(upcoming_flights(n=3)).shape == (3,)
    assert "no importance for you" in capsys.readouterr().err


def test_reloaded_artifact_pools_rare_levels(tmp_path, flights, small_config):
    # One flight out of 200 on a rare airline, below the 1% threshold
    flights.loc[0, "Airline"] = "RARE"
    model_path = tmp_path / "model.joblib"

    problem = ArrivalDelay(config=small_config, FlightRecords=flights)
    problem.solve_using(model_path=model_path, results_dir=tmp_path / "results")
    artifact = load_artifact(model_path)

    preprocessing = artifact.pipeline[:-1]
    columns = list(preprocessing.get_feature_names_out())
    assert "Airline_RARE" not in columns

    upcoming = upcoming_flights(n=3).assign(Airline=["RARE", "NEVER_SEEN", "AA"])
    features = artifact.features(upcoming)

    collapser = (
        preprocessing.named_steps["preprocessing"]
        .named_steps["encoding"]
        .named_transformers_["categorical"]
        .named_steps["other"]
    )
    pooled = collapser.transform(features[["Airline", "Origin", "Destination", "AircraftType"]])
    assert pooled["Airline"].tolist() == ["OTHER", "OTHER", "AA"]

    encoded = preprocessing.transform(features)
    airline_columns = [
        column for column in columns if column.startswith("Airline_") and column != "Airline_OTHER"
    ]
    assert encoded["Airline_AA"].tolist() == [0.0, 0.0, 1.0]
    assert encoded[airline_columns].iloc[:2].to_numpy().sum() == 0
