from .load_objects_from_config import load_object, load_objects_from_config
from .show_feature_importance import show_feature_importance
from .split_dataset import make_strata, split_train_test
