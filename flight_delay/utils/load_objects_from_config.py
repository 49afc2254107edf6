import importlib


def load_object(role: str, object_name: str):
    """Find the class ``object_name`` exported by ``flight_delay.<role>``."""

    module = importlib.import_module(f"flight_delay.{role}")
    try:
        return getattr(module, object_name)
    except AttributeError:
        raise ValueError(f"flight_delay.{role} has no {object_name!r}.") from None


def load_objects_from_config(config):
    """Instantiate every step of a run config.

    Args:
        config (Dict): {"cleaning": [[name, kwargs], ...],
            "feature_engineering": [[name, kwargs], ...], "model": [name, kwargs]}

    Returns:
        Dict: the same keys, holding instances instead of names.
    """

    return {
        "cleaning": [
            load_object("cleaning", approach[0])(**approach[1])
            for approach in config["cleaning"]
        ],
        "feature_engineering": [
            load_object("feature_engineering", approach[0])(**approach[1])
            for approach in config["feature_engineering"]
        ],
        "model": load_object("model", config["model"][0])(**config["model"][1]),
    }
