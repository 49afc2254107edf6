import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.compose import ColumnTransformer
from sklearn.feature_selection import VarianceThreshold
from sklearn.impute import SimpleImputer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder
from sklearn.utils.validation import check_is_fitted

OTHER = "OTHER"

# XGBoost refuses these in feature names
FORBIDDEN_NAME_CHARACTERS = str.maketrans({"[": "(", "]": ")", "<": "lt"})


def one_hot_feature_name(feature, category):
    return f"{feature}_{category}".translate(FORBIDDEN_NAME_CHARACTERS)


class CollapseRareCategories(TransformerMixin, BaseEstimator):
    """Pools the levels seen in less than ``threshold`` of the training rows
    into a single ``other`` level.

    The fitted ``mapping_`` is an explicit table from every training level to
    its output level; any value missing from the table (including levels never
    seen during fit) maps to ``other``.
    """

    def __init__(self, threshold=0.01, other=OTHER):
        self.threshold = threshold
        self.other = other

    def fit(self, X, y=None):
        X = pd.DataFrame(X)
        self.feature_names_in_ = np.asarray(X.columns, dtype=object)
        self.n_features_in_ = X.shape[1]
        self.mapping_ = {}
        for column in X.columns:
            frequencies = X[column].value_counts(normalize=True, dropna=True)
            self.mapping_[column] = {
                level: (level if frequency >= self.threshold else self.other)
                for level, frequency in frequencies.items()
            }
        return self

    def transform(self, X):
        check_is_fitted(self, "mapping_")
        X = pd.DataFrame(X, columns=self.feature_names_in_).copy()
        for column, mapping in self.mapping_.items():
            X[column] = X[column].map(lambda value: mapping.get(value, self.other)).astype(object)
        return X

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, "mapping_")
        return self.feature_names_in_.copy()


def build_preprocessing(column_functions, rare_threshold=0.01):
    """Imputation, rare level pooling, one-hot encoding and zero variance filtering.

    Numerical columns get median imputation; categorical columns get mode
    imputation, then levels rarer than ``rare_threshold`` are pooled into
    OTHER before one-hot encoding. Constant output columns are dropped.
    """

    encoding = ColumnTransformer(
        [
            (
                "numerical",
                SimpleImputer(strategy="median"),
                column_functions["numerical"],
            ),
            (
                "categorical",
                Pipeline(
                    [
                        ("imputer", SimpleImputer(strategy="most_frequent")),
                        ("other", CollapseRareCategories(threshold=rare_threshold)),
                        (
                            "one_hot",
                            OneHotEncoder(
                                handle_unknown="ignore",
                                sparse_output=False,
                                feature_name_combiner=one_hot_feature_name,
                            ),
                        ),
                    ]
                ),
                column_functions["categorical"],
            ),
        ],
        remainder="drop",
        verbose_feature_names_out=False,
    )

    return Pipeline(
        steps=[
            ("encoding", encoding),
            ("zero_variance", VarianceThreshold(threshold=0.0)),
        ]
    ).set_output(transform="pandas")
