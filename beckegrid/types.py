import dataclasses
from typing import TypeAlias

import jax
from jax import numpy as jnp
import numpy as np

# Dynamic data
Array: TypeAlias = np.ndarray | jax.Array

# Static metadata
StaticArray: TypeAlias = np.ndarray


def promote_dataclass_fields(obj):
    """Converts all Array/StaticArray fields to jax/numpy arrays."""
    for field in dataclasses.fields(obj):
        value = getattr(obj, field.name)

        # Skip jax sentinels and tracers produced by tree_unflatten.
        if type(value) is object:
            continue

        if field.type == Array:
            setattr(obj, field.name, jnp.asarray(value))
        elif field.type == StaticArray:
            setattr(obj, field.name, np.asarray(value))


def as_points(points: Array) -> np.ndarray:
    """Converts an array of Cartesian points to a float64 numpy array.

    Raises:
        ValueError: If the trailing dimension is not 3.
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim == 0 or points.shape[-1] != 3:
        raise ValueError(
            f"Expected points with shape (..., 3). Got {points.shape}"
        )
    return points
