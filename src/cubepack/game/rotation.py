"""
Cube rotation group (Rot24) and its action on polycube block sets.
"""

import logging
from collections import deque
from typing import Iterable, List, Sequence

import numpy as np

from cubepack.core.base import Vec3, to_vec3_list

logger = logging.getLogger(__name__)


# 90 degree rotation about the X axis
RX90 = np.array([
    [1, 0, 0],
    [0, 0, -1],
    [0, 1, 0]
], dtype=int)

# 90 degree rotation about the Y axis
RY90 = np.array([
    [0, 0, 1],
    [0, 1, 0],
    [-1, 0, 0]
], dtype=int)

# 90 degree rotation about the Z axis
RZ90 = np.array([
    [0, -1, 0],
    [1, 0, 0],
    [0, 0, 1]
], dtype=int)


def generate_24_rotations() -> List[np.ndarray]:
    """
    Generate the 24 proper rotations of the cube.

    Breadth-first closure over the three quarter-turn generators, starting
    from the identity and deduplicating by matrix content.
    """
    identity = np.eye(3, dtype=int)
    rotations = [identity]
    seen = {identity.tobytes()}
    queue = deque([identity])

    while queue:
        current = queue.popleft()
        for generator in (RX90, RY90, RZ90):
            candidate = generator @ current
            key = candidate.tobytes()
            if key not in seen:
                seen.add(key)
                rotations.append(candidate)
                queue.append(candidate)

    if len(rotations) != 24:
        raise RuntimeError(f"Rotation closure produced {len(rotations)} matrices, expected 24")
    return rotations


# Precomputed for the lifetime of the process; read-only
ROTATION_MATRICES = generate_24_rotations()


def get_rotation_matrix(rot_index: int) -> np.ndarray:
    """
    Get a rotation matrix.
    rot_index: 0-23
    """
    if not 0 <= rot_index < len(ROTATION_MATRICES):
        raise ValueError(f"Rotation index must be 0-23, got {rot_index}")
    return ROTATION_MATRICES[rot_index]


def apply_rotation(rot_matrix: np.ndarray, point: Vec3) -> Vec3:
    """Apply a rotation matrix to a single point."""
    rotated = rot_matrix @ np.array([point.x, point.y, point.z])
    return Vec3(int(rotated[0]), int(rotated[1]), int(rotated[2]))


def normalize_points(points: Iterable[Vec3]) -> List[Vec3]:
    """
    Normalize a point set: shift the minimum on every axis to 0, then sort
    by (x, y, z).
    """
    points = to_vec3_list(points)
    if not points:
        return []

    min_x = min(p.x for p in points)
    min_y = min(p.y for p in points)
    min_z = min(p.z for p in points)

    return sorted(Vec3(p.x - min_x, p.y - min_y, p.z - min_z) for p in points)


def points_to_signature(points: Iterable[Vec3]) -> str:
    """Signature string of the normalized point set."""
    return ";".join(f"{p.x},{p.y},{p.z}" for p in normalize_points(points))


def _rotate_normalized(points: Sequence[Vec3], rot_matrix: np.ndarray) -> List[Vec3]:
    if not points:
        return []
    coords = np.array([p.to_tuple() for p in points], dtype=int)
    rotated = coords @ rot_matrix.T
    rotated -= rotated.min(axis=0)
    return sorted(Vec3(int(x), int(y), int(z)) for x, y, z in rotated)


def rotate_piece(blocks: Iterable[Vec3], rot_index: int,
                 rotations: Sequence[np.ndarray] = ROTATION_MATRICES) -> List[Vec3]:
    """
    Rotate a block set and normalize the result.

    An out-of-range index leaves the blocks as given.
    """
    blocks = to_vec3_list(blocks)
    if not 0 <= rot_index < len(rotations):
        logger.debug("Ignoring out-of-range rotation index %s", rot_index)
        return blocks
    return _rotate_normalized(blocks, rotations[rot_index])


def get_unique_rotations(blocks: Iterable[Vec3],
                         rotations: Sequence[np.ndarray] = ROTATION_MATRICES) -> List[int]:
    """
    Indices of the rotations that produce distinct shapes.

    For each distinct normalized result only the first index producing it is
    kept, so symmetric orientations are tried once.
    """
    blocks = to_vec3_list(blocks)
    unique = []
    seen = set()
    for index, matrix in enumerate(rotations):
        shape = tuple(_rotate_normalized(blocks, matrix))
        if shape not in seen:
            seen.add(shape)
            unique.append(index)
    return unique


def get_canonical_form(blocks: Iterable[Vec3],
                       rotations: Sequence[np.ndarray] = ROTATION_MATRICES) -> List[Vec3]:
    """Lexicographically smallest normalized form over all rotations."""
    blocks = to_vec3_list(blocks)
    if not blocks:
        return []
    return min(_rotate_normalized(blocks, matrix) for matrix in rotations)


def find_rotation_index(rot_matrix: np.ndarray,
                        rotations: Sequence[np.ndarray] = ROTATION_MATRICES) -> int:
    """Index of a matrix in the rotation table, or -1 if absent."""
    for i, candidate in enumerate(rotations):
        if np.array_equal(candidate, rot_matrix):
            return i
    return -1


def compose_rotations(first: int, second: int,
                      rotations: Sequence[np.ndarray] = ROTATION_MATRICES) -> int:
    """Index of the rotation applying `first` and then `second`."""
    return find_rotation_index(rotations[second] @ rotations[first], rotations)


def find_inverse_rotation(rot_index: int,
                          rotations: Sequence[np.ndarray] = ROTATION_MATRICES) -> int:
    """
    Index j such that rotation j undoes rotation rot_index.

    Returns:
        Rotation index (0-23), or -1 if rot_index is out of range
    """
    if not 0 <= rot_index < len(rotations):
        return -1
    identity = np.eye(3, dtype=int)
    for j, candidate in enumerate(rotations):
        if np.array_equal(candidate @ rotations[rot_index], identity):
            return j
    return -1
