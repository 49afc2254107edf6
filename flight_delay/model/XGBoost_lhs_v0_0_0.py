import sys

import numpy as np
import optuna
import pandas as pd
from scipy.stats import qmc
from sklearn.model_selection import KFold, StratifiedKFold, cross_validate
from sklearn.pipeline import Pipeline
from xgboost import XGBRegressor

from ..utils.split_dataset import make_strata
from .preprocessing import build_preprocessing

optuna.logging.set_verbosity(optuna.logging.WARNING)

# name: (low, high, log scale, integer)
SEARCH_SPACE = {
    "n_estimators": (1, 2000, False, True),
    "max_depth": (1, 15, False, True),
    "learning_rate": (0.01, 0.3, True, False),
    "gamma": (1e-10, 10**1.5, True, False),
    "min_child_weight": (2, 40, False, True),
    "mtry": (1, None, False, True),
}


def latin_hypercube_grid(space, size, seed):
    """``size`` space-filling candidates over ``space`` (every bound resolved)."""

    sampler = qmc.LatinHypercube(d=len(space), seed=seed)
    unit = sampler.random(n=size)

    grid = []
    for row in unit:
        candidate = {}
        for position, (name, (low, high, log, integer)) in zip(row, space.items()):
            if integer:
                value = low + int(np.floor(position * (high - low + 1)))
                candidate[name] = int(min(value, high))
            elif log:
                value = np.exp(np.log(low) + position * (np.log(high) - np.log(low)))
                candidate[name] = float(min(max(value, low), high))
            else:
                candidate[name] = float(low + position * (high - low))
        grid.append(candidate)
    return grid


class XGBoost_lhs_v0_0_0(object):
    """
    XGBoost regressor tuned over a latin hypercube grid, every candidate
    scored by stratified k-fold cross-validation of the whole
    preprocessing + model pipeline.
    """

    def __init__(self, **kwargs):
        """
        kwargs:
            grid_size (int): Number of candidate configurations.
            n_folds (int): Number of cross-validation folds.
            strata_bins (int): Quantile bins of the target used as strata.
            rare_threshold (float): Share under which a category level is pooled into OTHER.
            seed (int): Seed of the grid, the folds and the booster.
            n_jobs (int): Threads given to XGBoost.
            storage (str): Optuna database URL, in memory when omitted.
        """
        self.kwargs = kwargs
        self.pipeline = None
        self.best_params = None
        self.cv_results = None

        self.grid_size = kwargs.get("grid_size", 20)
        self.n_folds = kwargs.get("n_folds", 5)
        self.strata_bins = kwargs.get("strata_bins", 4)
        self.rare_threshold = kwargs.get("rare_threshold", 0.01)
        self.seed = kwargs.get("seed", 42)
        self.n_jobs = kwargs.get("n_jobs", None)
        self.storage = kwargs.get("storage", None)

    def _build_pipeline(self, column_functions, params, n_columns):
        params = dict(params)
        mtry = params.pop("mtry")

        model = XGBRegressor(
            **params,
            colsample_bytree=min(1.0, mtry / n_columns),
            objective="reg:squarederror",
            tree_method="hist",
            random_state=self.seed,
            n_jobs=self.n_jobs,
        )

        return Pipeline(
            steps=[
                ("preprocessing", build_preprocessing(column_functions, self.rare_threshold)),
                ("model", model),
            ]
        )

    def fit(self, X, y, column_functions):

        # The feature count bounds mtry, as in the final fit
        print("Preprocessing data to size the search space...")
        preprocessing = build_preprocessing(column_functions, self.rare_threshold)
        n_columns = preprocessing.fit_transform(X, y).shape[1]
        print(f"{n_columns} encoded columns after preprocessing.")

        space = dict(SEARCH_SPACE)
        space["mtry"] = (1, n_columns, False, True)

        self.best_params = self._run_optuna(X, y, column_functions, space, n_columns)

        print("\nFitting final model with best parameters...")
        print(self.best_params)
        self.pipeline = self._build_pipeline(column_functions, self.best_params, n_columns)
        self.pipeline.fit(X, y)

        return self

    def predict(self, X):
        return self.pipeline.predict(X)

    def _folds(self, X, y):
        strata = make_strata(y, n_bins=self.strata_bins, min_count=self.n_folds)
        if strata is None:
            print(
                "Warning: target too small to stratify the folds. Falling back to random folds.",
                file=sys.stderr,
            )
            splitter = KFold(n_splits=self.n_folds, shuffle=True, random_state=self.seed)
            return list(splitter.split(X))
        splitter = StratifiedKFold(n_splits=self.n_folds, shuffle=True, random_state=self.seed)
        return list(splitter.split(X, strata))

    def _run_optuna(self, X, y, column_functions, space, n_columns):
        """
        Internal method to run the grid through an Optuna study, each trial
        being one enqueued latin hypercube candidate.
        """
        folds = self._folds(X, y)
        grid = latin_hypercube_grid(space, self.grid_size, self.seed)

        def objective(trial):
            params = {}
            for name, (low, high, log, integer) in space.items():
                if integer:
                    params[name] = trial.suggest_int(name, low, high)
                else:
                    params[name] = trial.suggest_float(name, low, high, log=log)

            scores = cross_validate(
                self._build_pipeline(column_functions, params, n_columns),
                X,
                y,
                cv=folds,
                scoring={
                    "rmse": "neg_root_mean_squared_error",
                    "mae": "neg_mean_absolute_error",
                    "rsq": "r2",
                },
                error_score="raise",
            )

            trial.set_user_attr("mae", float(-np.mean(scores["test_mae"])))
            trial.set_user_attr("rsq", float(np.mean(scores["test_rsq"])))
            return float(-np.mean(scores["test_rmse"]))

        print(
            f"\n--- Starting grid search ({self.grid_size} candidates, {self.n_folds}-fold CV) ---"
        )

        study = optuna.create_study(
            direction="minimize",
            storage=self.storage,
            sampler=optuna.samplers.RandomSampler(seed=self.seed),
        )
        for candidate in grid:
            study.enqueue_trial(candidate)

        study.optimize(objective, n_trials=len(grid), show_progress_bar=True)

        print("\nGrid search finished.")
        print(f"Best cross-validated RMSE: {study.best_value:.4f}")

        self.cv_results = pd.DataFrame(
            [
                {
                    **trial.params,
                    "rmse": trial.value,
                    "mae": trial.user_attrs.get("mae"),
                    "rsq": trial.user_attrs.get("rsq"),
                }
                for trial in study.trials
                if trial.state == optuna.trial.TrialState.COMPLETE
            ]
        ).sort_values("rmse", ignore_index=True)

        return dict(study.best_params)
