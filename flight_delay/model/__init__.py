from .artifact import ArrivalDelayArtifact, load_artifact, save_artifact
from .preprocessing import CollapseRareCategories, build_preprocessing, one_hot_feature_name
from .XGBoost_lhs_v0_0_0 import XGBoost_lhs_v0_0_0
