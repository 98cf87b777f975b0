# The registry of target-area footprint builders
TARGET_SHAPE_REGISTRY = {}


def register_target_shape(kind: str):
    def deco(fn):
        TARGET_SHAPE_REGISTRY[kind] = fn
        return fn
    return deco


def get_target_shape_builder(kind: str):
    if kind not in TARGET_SHAPE_REGISTRY:
        raise KeyError(
            f"Unknown target shape '{kind}'. Available: {sorted(TARGET_SHAPE_REGISTRY)}"
        )
    return TARGET_SHAPE_REGISTRY[kind]
